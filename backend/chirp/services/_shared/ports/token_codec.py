from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol

from chirp.models.user import Role


class TokenFailure(str, Enum):
    """Why a token was refused. Expiry is the only failure reported apart."""

    EXPIRED = "expired"
    INVALID = "invalid"


class TokenVerificationError(Exception):
    """Raised by a :class:`TokenCodec` when a token cannot be accepted."""

    def __init__(self, failure: TokenFailure, message: str = "") -> None:
        super().__init__(message or f"Token {failure.value}")
        self.failure = failure


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """
    Signing configuration resolved once at startup.

    :param access_secret: HMAC secret for access tokens.
    :param refresh_secret: HMAC secret for refresh tokens.
    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime.
    :param algorithm: JWS algorithm name.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=7)
    algorithm: str = "HS256"

    def __repr__(self) -> str:
        return (
            f"TokenConfig(access_expires={self.access_expires}, "
            f"refresh_expires={self.refresh_expires}, algorithm={self.algorithm!r})"
        )


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Identity carried by an access token.

    ``issued_at``/``expires_at`` are filled on verification and ignored when
    issuing.
    """

    principal_id: int
    username: str
    role: Role
    issued_at: datetime | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """Identity carried by a refresh token: the principal id only."""

    principal_id: int
    issued_at: datetime | None = None
    expires_at: datetime | None = None


class TokenCodec(Protocol):
    """Port for minting and verifying signed access/refresh tokens."""

    def issue_access_token(self, claims: AccessClaims) -> str: ...

    def issue_refresh_token(self, principal_id: int) -> str: ...

    def verify_access_token(self, token: str) -> AccessClaims: ...

    def verify_refresh_token(self, token: str) -> RefreshClaims: ...
