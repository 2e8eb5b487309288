# chirp/services/auth/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from chirp.repositories.user import UserRepository
from chirp.services._shared.base import BaseService, ServiceContext
from chirp.services._shared.errors import AuthError, AuthErrorKind, LedgerError
from chirp.services._shared.ports.revocation_ledger import RevocationLedger
from chirp.services._shared.ports.token_codec import (
    AccessClaims,
    TokenCodec,
    TokenFailure,
    TokenVerificationError,
)
from chirp.services.auth.dto import LoginIn, LogoutIn, RefreshIn, TokenPairOut
from chirp.services.identity.dto import UserPrivateOut

log = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username/email or password"

# Ledger lifetime for a token that somehow carries no ``exp``
FALLBACK_REVOCATION_TTL = timedelta(hours=1)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return generate_password_hash("chirp-timing-equalizer")


class AuthService(BaseService):
    """
    Session core: login, refresh, logout and per-request authentication.

    Tokens are stateless; logout is made effective by recording the exact
    access token in a :class:`RevocationLedger` until its own expiry, and every
    authentication checks that ledger after the signature check.

    Every failure leaves the service as :class:`AuthError` with a stable
    :class:`AuthErrorKind`; store failures become ``INTERNAL_ERROR``.
    """

    def __init__(
        self,
        *,
        token_codec: TokenCodec,
        ledger: RevocationLedger,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param token_codec: Adapter minting/verifying access and refresh tokens.
        :param ledger: Denylist consulted on every authentication.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_codec
        self.ledger = ledger

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Verify credentials and mint a token pair.

        Unknown identifier, wrong password and disabled account all raise the
        same ``INVALID_CREDENTIALS`` error with the same message.

        :param dto: Identifier (username or email) and password.
        :returns: Access/refresh tokens and the account projection.
        :raises AuthError: ``INVALID_CREDENTIALS`` or ``INTERNAL_ERROR``.
        """
        try:
            with self.ro_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.find_by_identifier(dto.identifier)
                if user is None:
                    # Spend the same hashing time as a real comparison
                    check_password_hash(_dummy_password_hash(), dto.password)
                    raise self._invalid_credentials()
                if not user.verify_password(dto.password) or not user.is_active:
                    raise self._invalid_credentials()
                principal = UserPrivateOut.from_model(user)
        except SQLAlchemyError as exc:
            log.error("auth.login.store_failed", exc_info=True)
            raise AuthError(AuthErrorKind.INTERNAL_ERROR, "Login failed") from exc

        log.info("auth.login.succeeded", extra={"principal_id": principal.id})
        return self._issue_pair(principal)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a valid refresh token for a brand-new pair.

        The presented refresh token is left usable until it expires or is
        revoked.

        :raises AuthError: ``REFRESH_TOKEN_EXPIRED``, ``INVALID_REFRESH_TOKEN``,
            ``USER_NOT_FOUND`` or ``INTERNAL_ERROR``.
        """
        try:
            claims = self.tokens.verify_refresh_token(dto.refresh_token)
        except TokenVerificationError as exc:
            if exc.failure is TokenFailure.EXPIRED:
                raise AuthError(
                    AuthErrorKind.REFRESH_TOKEN_EXPIRED, "Refresh token has expired"
                ) from exc
            raise AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN, "Invalid refresh token") from exc

        if self._is_revoked(dto.refresh_token):
            raise AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN, "Refresh token has been revoked")

        try:
            with self.ro_uow() as uow:
                user = uow.users.get(claims.principal_id)
                if user is None or not user.is_active:
                    raise AuthError(AuthErrorKind.USER_NOT_FOUND, "User not found")
                principal = UserPrivateOut.from_model(user)
        except SQLAlchemyError as exc:
            log.error("auth.refresh.store_failed", exc_info=True)
            raise AuthError(AuthErrorKind.INTERNAL_ERROR, "Token refresh failed") from exc

        return self._issue_pair(principal)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Revoke an access token until its natural expiry.

        A token that no longer authenticates (expired, invalid or already
        revoked) means the client is already logged out; the call succeeds
        without writing to the ledger.

        :raises AuthError: ``INTERNAL_ERROR`` when the ledger fails.
        """
        try:
            claims = self.authenticate(dto.access_token)
        except AuthError as exc:
            if exc.kind is AuthErrorKind.INTERNAL_ERROR:
                raise
            log.info("auth.logout.noop", extra={"error_kind": exc.kind.value})
            return

        expires_at = claims.expires_at or (self._now() + FALLBACK_REVOCATION_TTL)
        try:
            self.ledger.record(dto.access_token, expires_at)
        except LedgerError as exc:
            raise AuthError(AuthErrorKind.INTERNAL_ERROR, "Logout failed") from exc
        log.info("auth.logout.revoked", extra={"principal_id": claims.principal_id})

    # ------------------------------------------------------------------ #
    # Request authentication
    # ------------------------------------------------------------------ #

    def authenticate(self, access_token: str) -> AccessClaims:
        """
        Accept a bearer token only if it verifies AND is not revoked.

        :returns: Claims of the authenticated principal.
        :raises AuthError: ``TOKEN_EXPIRED``, ``INVALID_TOKEN`` or
            ``INTERNAL_ERROR``.
        """
        try:
            claims = self.tokens.verify_access_token(access_token)
        except TokenVerificationError as exc:
            if exc.failure is TokenFailure.EXPIRED:
                raise AuthError(AuthErrorKind.TOKEN_EXPIRED, "Token has expired") from exc
            raise AuthError(AuthErrorKind.INVALID_TOKEN, "Invalid token") from exc

        if self._is_revoked(access_token):
            raise AuthError(AuthErrorKind.INVALID_TOKEN, "Token has been revoked")
        return claims

    # ------------------------------------------------------------------ #
    # Maintenance
    # ------------------------------------------------------------------ #

    def sweep_expired(self) -> int:
        """
        Drop ledger entries whose tokens have expired anyway.

        :returns: Number of removed entries.
        :raises AuthError: ``INTERNAL_ERROR`` when the ledger fails.
        """
        try:
            removed = self.ledger.sweep_expired()
        except LedgerError as exc:
            raise AuthError(AuthErrorKind.INTERNAL_ERROR, "Revocation sweep failed") from exc
        log.info("auth.revocations.swept", extra={"removed": removed})
        return removed

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, principal: UserPrivateOut) -> TokenPairOut:
        access = self.tokens.issue_access_token(
            AccessClaims(
                principal_id=principal.id,
                username=principal.username,
                role=principal.role,
            )
        )
        refresh = self.tokens.issue_refresh_token(principal.id)
        return TokenPairOut(access_token=access, refresh_token=refresh, user=principal)

    def _is_revoked(self, token: str) -> bool:
        try:
            return self.ledger.is_revoked(token)
        except LedgerError as exc:
            raise AuthError(AuthErrorKind.INTERNAL_ERROR, "Token verification failed") from exc

    @staticmethod
    def _invalid_credentials() -> AuthError:
        log.info("auth.login.failed", extra={"error_kind": AuthErrorKind.INVALID_CREDENTIALS.value})
        return AuthError(AuthErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)
