"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session

from chirp.core.extensions import db
from chirp.repositories import (
    FollowRepository,
    RevokedTokenRepository,
    TweetRepository,
    UserRepository,
)
from chirp.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class ReadOnlyViolation(RuntimeError):
    """Raised when a read-only unit of work attempts to write."""


class SQLAlchemyUnitOfWork(UnitOfWork):
    """
    UoW over the Flask-scoped session; every repository shares that session.

    Parameters
    ----------
    read_only:
        When ``True`` the scope blocks ORM flushes and raw DML, refuses
        ``commit()`` and rolls back on exit if it started the transaction
        itself. A scope that joins an already running transaction leaves it
        open but discards the pending changes made inside the scope.
    """

    # Leading SQL keywords rejected by the cursor-level guard
    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
        "grant",
        "revoke",
    )

    def __init__(self, *, read_only: bool = False, session: Session | None = None) -> None:
        self.read_only = read_only
        self.session: Session = session if session is not None else db.session
        self.users = UserRepository(session=self.session)
        self.tweets = TweetRepository(session=self.session)
        self.follows = FollowRepository(session=self.session)
        self.revoked_tokens = RevokedTokenRepository(session=self.session)
        self._owns_transaction = False
        self._guard_installed = False
        self._conn: Connection | None = None
        self._pending_on_enter: set[int] = set()

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        if not self.read_only:
            # No-op: the session is lazily started on the first write.
            return self

        try:
            self.session.begin()
            self._owns_transaction = True
        except InvalidRequestError:
            # Already inside a transaction (autobegin or an outer scope)
            self._owns_transaction = False

        target = self._guard_target()
        self._pending_on_enter = {id(obj) for obj in self._pending(target)}
        self._conn = target.connection()
        self._install_guard()
        if self._owns_transaction and self._conn.dialect.name in ("postgresql", "mysql", "mariadb"):
            try:
                target.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                log.warning("uow.read_only_directive_failed", extra={"error": str(exc)})
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self.read_only:
                if self._owns_transaction:
                    self.session.rollback()
                else:
                    self._discard_pending()
            elif exc_type is None:
                try:
                    self.commit()
                except Exception:
                    self.rollback()
                    raise
            else:
                self.rollback()
        finally:
            self._remove_guard()
            self._owns_transaction = False
            self._conn = None

    def commit(self) -> None:
        if self.read_only:
            raise ReadOnlyViolation("Read-only UnitOfWork does not allow commit().")
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guard ---------------------------------

    @staticmethod
    def _pending(session: Session) -> list[object]:
        return [*session.new, *session.dirty, *session.deleted]

    def _discard_pending(self) -> None:
        """Undo ORM changes staged inside this scope without ending the transaction."""
        session = self._guard_target()
        for obj in [*session.new, *session.deleted]:
            if id(obj) not in self._pending_on_enter:
                session.expunge(obj)
        for obj in list(session.dirty):
            if id(obj) not in self._pending_on_enter:
                # Reloaded from the database on next access
                session.expire(obj)
        self._pending_on_enter = set()

    def _before_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise ReadOnlyViolation(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
        if first_token.startswith(self._WRITE_PREFIXES):
            raise ReadOnlyViolation(
                f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
            )

    def _guard_target(self) -> Session:
        # A scoped registry would forward the listener to its whole factory.
        if isinstance(self.session, scoped_session):
            return self.session()
        return self.session

    def _install_guard(self) -> None:
        if not self._guard_installed:
            self._guarded = self._guard_target()
            event.listen(self._guarded, "before_flush", self._before_flush)
            event.listen(self._conn, "before_cursor_execute", self._before_cursor_execute)
            self._guarded_conn = self._conn
            self._guard_installed = True

    def _remove_guard(self) -> None:
        if self._guard_installed:
            event.remove(self._guarded, "before_flush", self._before_flush)
            if event.contains(
                self._guarded_conn, "before_cursor_execute", self._before_cursor_execute
            ):
                event.remove(
                    self._guarded_conn, "before_cursor_execute", self._before_cursor_execute
                )
            self._guard_installed = False
