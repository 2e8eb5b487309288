"""Base class and request context shared by application services."""

from __future__ import annotations

from dataclasses import dataclass

from chirp.core import errors as api_errors
from chirp.repositories.base import Pagination
from chirp.services._shared.errors import (
    AuthError,
    AuthErrorKind,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceError,
)
from chirp.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (actor, request id).

    :param actor_id: Authenticated user identifier, if any.
    :param is_admin: Whether the actor holds the ``ADMIN`` role.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    is_admin: bool = False
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize translation of service errors into API errors.
    * Offer shared validation helpers (pagination, ownership).

    Notes
    -----
    Services never touch the global session directly; they always go through a
    Unit of Work.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work (commit on success)."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-only Unit of Work (flushes blocked, never commits)."""
        return SQLAlchemyUnitOfWork(read_only=True)

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(self, *, page: int, limit: int, sort: list[str] | None = None) -> Pagination:
        """Build a :class:`Pagination` with basic clamping."""
        return Pagination(page=max(1, int(page)), limit=max(1, int(limit)), sort=list(sort or []))

    def ensure_owner(self, actor_id: int | None, owner_id: int, *, msg: str | None = None) -> None:
        """
        Ensure the actor owns the resource unless the context is an admin.

        :raises AuthorizationError: If actor is neither owner nor admin.
        """
        if self.ctx.is_admin:
            return
        if actor_id is None or int(actor_id) != int(owner_id):
            raise AuthorizationError(msg or "You can only modify your own resources.")

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, AuthError):
            # INTERNAL → 500, every other auth failure → 401
            if exc.kind is AuthErrorKind.INTERNAL_ERROR:
                return api_errors.InternalError(exc.message, code=exc.kind.value)
            return api_errors.Unauthorized(exc.message, code=exc.kind.value)

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(exc.detail, code=exc.code)

        if isinstance(exc, AuthorizationError):
            return api_errors.Forbidden(str(exc) or "Forbidden")

        # Any other ServiceError → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code=getattr(exc, "code", "bad_request"),
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
