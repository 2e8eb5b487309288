"""Relational revocation ledger backed by the ``token_blacklist`` table."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from chirp.models.revoked_token import RevokedToken
from chirp.services._shared.errors import LedgerError
from chirp.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class SQLAlchemyRevocationLedger:
    """
    Record, look up and sweep revoked tokens through a unit of work.

    Each call runs in its own transaction. A duplicate ``record`` hits the
    unique index on ``token`` and is reported as :class:`LedgerError`, like any
    other database failure.

    :param uow_factory: Builds units of work; accepts ``read_only=``.
    :param clock: Source of "now" for the sweep.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[..., SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    def record(self, token: str, expires_at: datetime) -> None:
        try:
            with self._uow_factory() as uow:
                uow.revoked_tokens.add(RevokedToken(token=token, expires_at=expires_at))
        except SQLAlchemyError as exc:
            log.error("revocation.record_failed", exc_info=True)
            raise LedgerError("Failed to record token revocation") from exc

    def is_revoked(self, token: str) -> bool:
        try:
            with self._uow_factory(read_only=True) as uow:
                return uow.revoked_tokens.exists_token(token)
        except SQLAlchemyError as exc:
            log.error("revocation.lookup_failed", exc_info=True)
            raise LedgerError("Failed to check token revocation") from exc

    def sweep_expired(self) -> int:
        now = self._clock()
        try:
            with self._uow_factory() as uow:
                removed = uow.revoked_tokens.delete_expired(now)
        except SQLAlchemyError as exc:
            log.error("revocation.sweep_failed", exc_info=True)
            raise LedgerError("Failed to sweep expired revocations") from exc
        log.info("revocation.sweep", extra={"removed": removed, "backend": "database"})
        return removed
