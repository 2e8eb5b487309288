"""PyJWT-backed implementation of the token codec port."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import jwt
from jwt.exceptions import PyJWTError

from chirp.models.user import Role
from chirp.services._shared.ports.token_codec import (
    AccessClaims,
    RefreshClaims,
    TokenConfig,
    TokenFailure,
    TokenVerificationError,
)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _from_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=UTC)


class JWTTokenCodec:
    """
    Mint and verify HS256 JWTs with separate access and refresh secrets.

    Every token carries ``sub`` (string principal id), ``iat``, ``exp``,
    ``type`` and a random ``jti`` so two tokens issued in the same second are
    still distinct strings. Access tokens add ``username`` and ``role``.

    :param config: Secrets, lifetimes and algorithm.
    :param clock: Source of "now" used for ``iat``/``exp`` when issuing.
    """

    def __init__(self, config: TokenConfig, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self.config = config
        self._clock = clock

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_access_token(self, claims: AccessClaims) -> str:
        """
        Sign an access token for ``claims``.

        ``claims.issued_at``/``claims.expires_at`` are ignored; the lifetime is
        always ``config.access_expires`` from now.
        """
        now = self._clock()
        payload = {
            "sub": str(claims.principal_id),
            "username": claims.username,
            "role": Role(claims.role).value,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.config.access_expires,
            "jti": uuid4().hex,
        }
        return self._encode(payload, self.config.access_secret)

    def issue_refresh_token(self, principal_id: int) -> str:
        """Sign a refresh token that identifies ``principal_id`` only."""
        now = self._clock()
        payload = {
            "sub": str(principal_id),
            "type": REFRESH_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.config.refresh_expires,
            "jti": uuid4().hex,
        }
        return self._encode(payload, self.config.refresh_secret)

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify_access_token(self, token: str) -> AccessClaims:
        """
        Verify signature, expiry and shape of an access token.

        :raises TokenVerificationError: ``EXPIRED`` for an intact but expired
            token, ``INVALID`` for anything else.
        """
        payload = self._decode(token, self.config.access_secret, ACCESS_TOKEN_TYPE)
        try:
            return AccessClaims(
                principal_id=int(payload["sub"]),
                username=str(payload["username"]),
                role=Role(payload["role"]),
                issued_at=_from_timestamp(payload.get("iat")),
                expires_at=_from_timestamp(payload.get("exp")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenVerificationError(TokenFailure.INVALID, "Malformed access token") from exc

    def verify_refresh_token(self, token: str) -> RefreshClaims:
        """
        Verify signature, expiry and shape of a refresh token.

        :raises TokenVerificationError: ``EXPIRED`` or ``INVALID``.
        """
        payload = self._decode(token, self.config.refresh_secret, REFRESH_TOKEN_TYPE)
        try:
            return RefreshClaims(
                principal_id=int(payload["sub"]),
                issued_at=_from_timestamp(payload.get("iat")),
                expires_at=_from_timestamp(payload.get("exp")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenVerificationError(TokenFailure.INVALID, "Malformed refresh token") from exc

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _encode(self, payload: dict[str, Any], secret: str) -> str:
        # PyJWT 2.x returns str; older type stubs may declare bytes
        return str(jwt.encode(payload, secret, algorithm=self.config.algorithm))

    def _decode(self, token: str, secret: str, expected_type: str) -> dict[str, Any]:
        if not token or not isinstance(token, str):
            raise TokenVerificationError(TokenFailure.INVALID, "Token is empty")
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                options={"require": ["sub", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenVerificationError(TokenFailure.EXPIRED, "Token has expired") from exc
        except PyJWTError as exc:
            raise TokenVerificationError(TokenFailure.INVALID, "Invalid token") from exc
        if payload.get("type") != expected_type:
            raise TokenVerificationError(TokenFailure.INVALID, f"Expected a {expected_type} token")
        return payload
