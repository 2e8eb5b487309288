from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from chirp.services._shared.errors import LedgerError


class RevocationLedger(Protocol):
    """
    Denylist of exact token strings, each kept until the token's own expiry.

    Implementations raise :class:`~chirp.services._shared.errors.LedgerError`
    when the backing store fails or when the same token is recorded twice.
    """

    def record(self, token: str, expires_at: datetime) -> None: ...
    def is_revoked(self, token: str) -> bool: ...
    def sweep_expired(self) -> int: ...


class InMemoryRevocationLedger(RevocationLedger):
    """Process-local ledger used by unit tests."""

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._entries: dict[str, datetime] = {}
        self._clock = clock or (lambda: datetime.now(UTC))

    def record(self, token: str, expires_at: datetime) -> None:
        if token in self._entries:
            raise LedgerError("Token already revoked")
        self._entries[token] = expires_at

    def is_revoked(self, token: str) -> bool:
        return token in self._entries

    def sweep_expired(self) -> int:
        now = self._clock()
        expired = [tok for tok, exp in self._entries.items() if exp < now]
        for tok in expired:
            del self._entries[tok]
        return len(expired)

    def expiry_of(self, token: str) -> datetime | None:
        return self._entries.get(token)
