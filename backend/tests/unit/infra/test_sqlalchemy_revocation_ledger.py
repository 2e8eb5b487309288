"""Unit tests for the database-backed revocation ledger."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from chirp.infra.sqlalchemy.sqlalchemy_revocation_ledger import SQLAlchemyRevocationLedger
from chirp.models.revoked_token import RevokedToken
from chirp.services._shared.errors import LedgerError
from tests.factories.revoked_token import RevokedTokenFactory


@pytest.fixture()
def ledger() -> SQLAlchemyRevocationLedger:
    return SQLAlchemyRevocationLedger()


def test_record_then_is_revoked(ledger, session):
    ledger.record("tok-a", datetime.now(UTC) + timedelta(minutes=10))

    assert ledger.is_revoked("tok-a")
    assert not ledger.is_revoked("tok-b")
    rows = session.execute(select(RevokedToken)).scalars().all()
    assert [r.token for r in rows] == ["tok-a"]


def test_duplicate_record_raises_ledger_error(ledger, session):
    expires = datetime.now(UTC) + timedelta(minutes=10)
    ledger.record("dup", expires)

    with pytest.raises(LedgerError):
        ledger.record("dup", expires)
    assert ledger.is_revoked("dup")


def test_sweep_removes_only_expired_rows(session):
    now = datetime.now(UTC)
    RevokedTokenFactory(token="old-1", expires_at=now - timedelta(hours=2))
    RevokedTokenFactory(token="old-2", expires_at=now - timedelta(seconds=5))
    RevokedTokenFactory(token="live", expires_at=now + timedelta(hours=1))
    session.commit()

    removed = SQLAlchemyRevocationLedger(clock=lambda: now).sweep_expired()

    assert removed == 2
    remaining = session.execute(select(RevokedToken.token)).scalars().all()
    assert remaining == ["live"]


def test_sweep_on_empty_ledger_returns_zero(ledger):
    assert ledger.sweep_expired() == 0


def test_store_failure_surfaces_as_ledger_error():
    class _BrokenUoW:
        def __init__(self, **_):
            pass

        def __enter__(self):
            raise OperationalError("SELECT 1", {}, Exception("database is gone"))

        def __exit__(self, *exc):
            return False

    ledger = SQLAlchemyRevocationLedger(uow_factory=_BrokenUoW)

    with pytest.raises(LedgerError):
        ledger.is_revoked("anything")
    with pytest.raises(LedgerError):
        ledger.record("anything", datetime.now(UTC))
    with pytest.raises(LedgerError):
        ledger.sweep_expired()
