"""
chirp.services._shared.ports
============================

*Ports* (hexagonal interfaces) that decouple the session core from concrete
token and revocation infrastructure.

Modules
-------
- :mod:`token_codec`:
    :class:`~.TokenCodec` with its claim DTOs, :class:`~.TokenConfig` and the
    two-variant :class:`~.TokenFailure` taxonomy.

- :mod:`revocation_ledger`:
    :class:`~.RevocationLedger` and the :class:`~.InMemoryRevocationLedger`
    double.

Concrete adapters (PyJWT, SQLAlchemy, Redis) live under ``chirp.infra``.
"""

from __future__ import annotations

from .revocation_ledger import InMemoryRevocationLedger, RevocationLedger
from .token_codec import (
    AccessClaims,
    RefreshClaims,
    TokenCodec,
    TokenConfig,
    TokenFailure,
    TokenVerificationError,
)

__all__ = [
    "AccessClaims",
    "InMemoryRevocationLedger",
    "RefreshClaims",
    "RevocationLedger",
    "TokenCodec",
    "TokenConfig",
    "TokenFailure",
    "TokenVerificationError",
]
