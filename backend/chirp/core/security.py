"""Token codec, revocation ledger and auth service wiring for the app."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Mapping
from typing import Any

from flask import Flask, current_app

from chirp.core.config import parse_duration
from chirp.infra.jwt.jwt_token_codec import JWTTokenCodec
from chirp.infra.redis.redis_revocation_ledger import RedisRevocationLedger
from chirp.infra.sqlalchemy.sqlalchemy_revocation_ledger import SQLAlchemyRevocationLedger
from chirp.services._shared.ports.revocation_ledger import RevocationLedger
from chirp.services._shared.ports.token_codec import TokenConfig
from chirp.services.auth.service import AuthService

log = logging.getLogger(__name__)

EXTENSION_KEY = "auth_service"


def _secret_or_random(config: Mapping[str, Any], key: str) -> str:
    value = config.get(key)
    if value:
        return str(value)
    # Tokens signed with a random secret die with the process
    log.warning(
        "%s is not set; using a random per-process secret. Issued tokens will "
        "stop verifying after a restart.",
        key,
    )
    return secrets.token_hex(32)


def resolve_token_config(config: Mapping[str, Any]) -> TokenConfig:
    """Build a :class:`TokenConfig` from Flask configuration values.

    :param config: ``app.config`` or any mapping with the same keys.
    :returns: Frozen token settings.
    :raises ValueError: When a lifetime cannot be parsed.
    """
    return TokenConfig(
        access_secret=_secret_or_random(config, "ACCESS_TOKEN_SECRET"),
        refresh_secret=_secret_or_random(config, "REFRESH_TOKEN_SECRET"),
        access_expires=parse_duration(config.get("ACCESS_TOKEN_EXPIRES_IN", "15m")),
        refresh_expires=parse_duration(config.get("REFRESH_TOKEN_EXPIRES_IN", "7d")),
        algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
    )


def build_ledger(config: Mapping[str, Any]) -> RevocationLedger:
    """Select the revocation ledger named by ``REVOCATION_BACKEND``.

    :raises ValueError: For an unknown backend name.
    :raises RuntimeError: For ``redis`` when no Redis client is configured.
    """
    backend = str(config.get("REVOCATION_BACKEND", "database")).strip().lower()
    if backend == "database":
        return SQLAlchemyRevocationLedger()
    if backend == "redis":
        from chirp.core.extensions import get_redis

        return RedisRevocationLedger(get_redis())
    raise ValueError(f"Unknown REVOCATION_BACKEND: {backend!r}")


def init_app(app: Flask) -> None:
    """Create the codec and ledger once and expose an :class:`AuthService`."""
    codec = JWTTokenCodec(resolve_token_config(app.config))
    ledger = build_ledger(app.config)
    app.extensions[EXTENSION_KEY] = AuthService(token_codec=codec, ledger=ledger)
    log.info(
        "auth.configured",
        extra={"backend": str(app.config.get("REVOCATION_BACKEND", "database"))},
    )


def get_auth_service() -> AuthService:
    """Return the :class:`AuthService` bound to the current application."""
    return current_app.extensions[EXTENSION_KEY]
