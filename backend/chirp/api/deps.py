"""Shared API helpers for request parsing, authentication and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from chirp.core.errors import Forbidden, Unauthorized
from chirp.core.logger import ensure_request_id
from chirp.core.security import get_auth_service
from chirp.models.user import Role
from chirp.repositories.base import Pagination
from chirp.schemas.common import CursorQuerySchema, PaginationQuerySchema
from chirp.services._shared.base import ServiceContext
from chirp.services._shared.dto import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, CursorPageIn
from chirp.services._shared.errors import AuthError, AuthErrorKind
from chirp.services._shared.ports.token_codec import AccessClaims

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "

_cursor_schema = CursorQuerySchema()


# ------------------------------ Pagination ---------------------------------


def parse_pagination(
    default_limit: int = DEFAULT_PAGE_LIMIT, max_limit: int = MAX_PAGE_LIMIT
) -> Pagination:
    """Parse offset pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return Pagination(page=data["page"], limit=data["limit"], sort=data["sort"])


def parse_cursor() -> CursorPageIn:
    """Parse ``limit``/``cursor`` keyset parameters from ``request.args``."""

    data = _cursor_schema.load(request.args)
    return CursorPageIn(limit=data["limit"], cursor=data["cursor"])


# ---------------------------- Authentication --------------------------------


def extract_bearer_token() -> str | None:
    """Return the token from ``Authorization: Bearer <token>`` or ``None``."""

    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def _authenticate(token: str) -> AccessClaims:
    service = get_auth_service()
    try:
        return service.authenticate(token)
    except AuthError as exc:
        raise service.translate_exceptions(exc) from exc


def missing_token_error() -> Unauthorized:
    return Unauthorized("Access token required", code=AuthErrorKind.INVALID_TOKEN.value)


def require_auth(func: F) -> F:
    """Reject the request unless it carries a valid, non-revoked access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_bearer_token()
        if token is None:
            raise missing_token_error()
        g.claims = _authenticate(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Authenticate when a bearer token is present; anonymous requests pass."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_bearer_token()
        g.claims = _authenticate(token) if token is not None else None
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_admin(func: F) -> F:
    """Like :func:`require_auth`, additionally requiring the ``ADMIN`` role."""

    @require_auth
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        if current_claims().role is not Role.ADMIN:
            raise Forbidden("Administrator role required")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_claims() -> AccessClaims:
    """Claims stored by :func:`require_auth` for the current request."""

    claims = getattr(g, "claims", None)
    if claims is None:
        raise missing_token_error()
    return claims


def current_claims_or_none() -> AccessClaims | None:
    return getattr(g, "claims", None)


def service_context() -> ServiceContext:
    """Build a :class:`ServiceContext` from the authenticated request."""

    claims = current_claims_or_none()
    return ServiceContext(
        actor_id=claims.principal_id if claims else None,
        is_admin=bool(claims and claims.role is Role.ADMIN),
        request_id=ensure_request_id(),
    )


# ------------------------------- Responses ----------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
