"""Authentication endpoints: login, refresh, logout and the current principal."""

from __future__ import annotations

from flask import Blueprint, request

from chirp.api.deps import (
    current_claims,
    extract_bearer_token,
    json_response,
    missing_token_error,
    require_auth,
    timing,
)
from chirp.core.security import get_auth_service
from chirp.schemas import LoginSchema, RefreshSchema, TokenPairSchema, WhoAmISchema
from chirp.services._shared.errors import ServiceError
from chirp.services.auth.dto import LoginIn, LogoutIn, RefreshIn
from chirp.services.identity.service import IdentityService

bp = Blueprint("auth", __name__, url_prefix="/auth")

login_schema = LoginSchema()
refresh_schema = RefreshSchema()
token_pair_schema = TokenPairSchema()
whoami_schema = WhoAmISchema()


@bp.post("/login")
@timing
def login():
    """Exchange a username/email and password for a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    try:
        pair = service.login(LoginIn(identifier=data["identifier"], password=data["password"]))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response(token_pair_schema.dump(pair))


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a brand-new token pair."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    try:
        pair = service.refresh(RefreshIn(refresh_token=data["refresh_token"]))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response(token_pair_schema.dump(pair))


@bp.post("/logout")
@timing
def logout():
    """Revoke the presented access token.

    Succeeds for tokens that are already expired, invalid or revoked; only a
    missing or non-bearer header is rejected.
    """

    token = extract_bearer_token()
    if token is None:
        raise missing_token_error()
    service = get_auth_service()
    try:
        service.logout(LogoutIn(access_token=token))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"message": "Logged out successfully"})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the account of the authenticated user."""

    service = IdentityService()
    try:
        user = service.get_user(current_claims().principal_id)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response(whoami_schema.dump({"user": user}))
