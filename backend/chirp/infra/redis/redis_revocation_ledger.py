from __future__ import annotations

import hashlib
import logging
import math
from collections.abc import Callable
from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from chirp.services._shared.errors import LedgerError

log = logging.getLogger(__name__)


class RedisRevocationLedger:
    """
    Revocation ledger keyed by the SHA-256 of each token.

    Layout
    ------
    ``{prefix}:tok:{digest}``
        Marker written with ``SET NX`` and a TTL equal to the token's
        remaining lifetime, so lookups never see expired entries.
    ``{prefix}:exp``
        Sorted set ``digest -> expires_at`` used by :meth:`sweep_expired` to
        report and drop entries whose expiry has passed.
    """

    def __init__(
        self,
        r: redis.Redis,
        *,
        prefix: str = "revoked",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.r = r
        self.prefix = prefix
        self._clock = clock or (lambda: datetime.now(UTC))

    @staticmethod
    def _digest(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def _k(self, digest: str) -> str:
        return f"{self.prefix}:tok:{digest}"

    @property
    def _index(self) -> str:
        return f"{self.prefix}:exp"

    def record(self, token: str, expires_at: datetime) -> None:
        digest = self._digest(token)
        # Rounded up so the marker never expires before the token does
        ttl = max(1, math.ceil(expires_at.timestamp() - self._clock().timestamp()))
        try:
            created = self.r.set(self._k(digest), "1", ex=ttl, nx=True)
            if not created:
                raise LedgerError("Token already revoked")
            self.r.zadd(self._index, {digest: expires_at.timestamp()})
        except RedisError as exc:
            log.error("revocation.record_failed", exc_info=True)
            raise LedgerError("Failed to record token revocation") from exc

    def is_revoked(self, token: str) -> bool:
        try:
            return cast(int, self.r.exists(self._k(self._digest(token)))) == 1
        except RedisError as exc:
            log.error("revocation.lookup_failed", exc_info=True)
            raise LedgerError("Failed to check token revocation") from exc

    def sweep_expired(self) -> int:
        now = self._clock().timestamp()
        try:
            # "(" makes the bound exclusive: only expiry strictly before now
            digests = self.r.zrangebyscore(self._index, "-inf", f"({now}")
            if not digests:
                removed = 0
            else:
                pipe = self.r.pipeline()
                pipe.delete(*[self._k(d.decode() if isinstance(d, bytes) else d) for d in digests])
                pipe.zrem(self._index, *digests)
                pipe.execute()
                removed = len(digests)
        except RedisError as exc:
            log.error("revocation.sweep_failed", exc_info=True)
            raise LedgerError("Failed to sweep expired revocations") from exc
        log.info("revocation.sweep", extra={"removed": removed, "backend": "redis"})
        return removed
