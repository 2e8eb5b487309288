"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never depend on Flask or
HTTP. They serve as stable contracts between repositories, adapters and
application services.

The translation to HTTP responses (RFC 7807) is handled by
``chirp/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the offending
    ``table.column`` list, so callers may pass either form.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint name or ``table.column`` fragment.
    :returns: ``True`` if the error message mentions ``constraint_name``.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - A plain ``ServiceError`` maps to ``400 Bad Request``; ``code`` refines the
      machine-readable problem code.
    """

    def __init__(self, message: str = "", *, code: str = "bad_request") -> None:
        super().__init__(message)
        self.code = code


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    :param code: Machine-readable code for the problem body.
    :type code: str
    """

    entity: str
    detail: str
    code: str = "conflict"

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AuthorizationError(ServiceError):
    """Raised when the actor is authenticated but not allowed to act."""


class LedgerError(ServiceError):
    """Raised by revocation ledger adapters when the backing store fails."""


class AuthErrorKind(str, Enum):
    """Stable failure kinds of the session core."""

    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_EXPIRED = "token_expired"
    INVALID_TOKEN = "invalid_token"
    REFRESH_TOKEN_EXPIRED = "refresh_token_expired"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    USER_NOT_FOUND = "user_not_found"
    INTERNAL_ERROR = "internal_error"


class AuthError(ServiceError):
    """
    Failure of login, refresh, logout or request authentication.

    :param kind: One of :class:`AuthErrorKind`.
    :param message: Client-safe explanation.
    """

    def __init__(self, kind: AuthErrorKind, message: str) -> None:
        super().__init__(message, code=kind.value)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind.name}, message={self.message!r})"
