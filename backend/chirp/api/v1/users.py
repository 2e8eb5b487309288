"""User endpoints: registration, profiles and follow edges."""

from __future__ import annotations

from flask import Blueprint, request

from chirp.api.deps import (
    current_claims,
    current_claims_or_none,
    json_response,
    optional_auth,
    parse_cursor,
    require_auth,
    service_context,
    timing,
)
from chirp.schemas import (
    FollowSchema,
    FollowStatusSchema,
    UserPrivateSchema,
    UserProfileSchema,
    UserRegisterSchema,
    UserUpdateSchema,
    build_cursor_meta,
)
from chirp.services._shared.errors import ServiceError
from chirp.services.follows.service import FollowService
from chirp.services.identity.dto import UserRegisterIn, UserUpdateIn
from chirp.services.identity.service import IdentityService

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserPrivateSchema()
profile_schema = UserProfileSchema()
register_schema = UserRegisterSchema()
update_schema = UserUpdateSchema()
follow_list_schema = FollowSchema(many=True)
follow_status_schema = FollowStatusSchema()


@bp.post("/register")
@timing
def register():
    """Create an account and return its private projection."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    service = IdentityService()
    try:
        user = service.register_user(UserRegisterIn(**payload))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.patch("/me")
@require_auth
@timing
def update_me():
    """Update the authenticated user's profile."""

    payload = update_schema.load(request.get_json(silent=True) or {})
    service = IdentityService(ctx=service_context())
    try:
        user = service.update_profile(current_claims().principal_id, UserUpdateIn(**payload))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": user_schema.dump(user)})


@bp.get("/<string:username>")
@optional_auth
@timing
def get_profile(username: str):
    """Public profile; ``is_following`` reflects the caller when authenticated."""

    claims = current_claims_or_none()
    service = IdentityService(ctx=service_context())
    try:
        profile = service.get_profile(
            username, viewer_id=claims.principal_id if claims else None
        )
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": profile_schema.dump(profile)})


@bp.get("/<string:username>/followers")
@timing
def list_followers(username: str):
    """Users following ``username``, keyset-paginated."""

    page = parse_cursor()
    service = FollowService()
    try:
        result = service.followers(username, page)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    meta = build_cursor_meta(has_more=result.has_more, next_cursor=result.next_cursor)
    return json_response({"data": follow_list_schema.dump(result.items), "meta": meta})


@bp.get("/<string:username>/following")
@timing
def list_following(username: str):
    """Users followed by ``username``, keyset-paginated."""

    page = parse_cursor()
    service = FollowService()
    try:
        result = service.following(username, page)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    meta = build_cursor_meta(has_more=result.has_more, next_cursor=result.next_cursor)
    return json_response({"data": follow_list_schema.dump(result.items), "meta": meta})


@bp.post("/<string:username>/follow")
@require_auth
@timing
def follow(username: str):
    """Follow ``username``."""

    service = FollowService(ctx=service_context())
    try:
        status = service.follow(current_claims().principal_id, username)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": follow_status_schema.dump(status)}, status=201)


@bp.delete("/<string:username>/follow")
@require_auth
@timing
def unfollow(username: str):
    """Stop following ``username``."""

    service = FollowService(ctx=service_context())
    try:
        service.unfollow(current_claims().principal_id, username)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"message": f"Unfollowed {username}"})


@bp.get("/<string:username>/follow")
@require_auth
@timing
def follow_status(username: str):
    """Whether the caller follows ``username``."""

    service = FollowService(ctx=service_context())
    try:
        following = service.is_following(current_claims().principal_id, username)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"is_following": following})
