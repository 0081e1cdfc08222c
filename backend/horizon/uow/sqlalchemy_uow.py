"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from horizon.core.extensions import db
from horizon.repositories import (
    BookmarkRepository,
    FollowRepository,
    LikeRepository,
    NotificationRepository,
    PostRepository,
    UserRepository,
)
from horizon.services._shared.errors import InternalError
from horizon.uow.base import UnitOfWork

logger = logging.getLogger(__name__)


def _apply_statement_timeout(session: Session, timeout_ms: int | None) -> None:
    """Bound every statement of the current transaction (PostgreSQL only)."""
    if not timeout_ms or timeout_ms <= 0:
        return
    conn = session.connection()
    if conn.dialect.name != "postgresql":
        return
    session.execute(text(f"SET LOCAL statement_timeout = {int(timeout_ms)}"))


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.posts = PostRepository(session=self.session)
        self.likes = LikeRepository(session=self.session)
        self.bookmarks = BookmarkRepository(session=self.session)
        self.follows = FollowRepository(session=self.session)
        self.notifications = NotificationRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW over the Flask-scoped session.

    Commits on a clean exit and rolls back when the block raises. Store
    failures (``SQLAlchemyError``) leave the block as
    :class:`~horizon.services._shared.errors.InternalError` with the driver
    error chained; domain errors propagate unchanged.

    :param statement_timeout_ms: Per-statement ceiling applied with
        ``SET LOCAL`` on PostgreSQL. ``None`` or ``0`` disables it.
    :type statement_timeout_ms: int | None
    """

    def __init__(self, *, statement_timeout_ms: int | None = None) -> None:
        super().__init__(session=db.session)
        self.statement_timeout_ms = statement_timeout_ms

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        try:
            _apply_statement_timeout(self.session, self.statement_timeout_ms)
        except SQLAlchemyError as exc:
            self.rollback()
            raise InternalError() from exc
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except SQLAlchemyError as commit_exc:
                self.rollback()
                logger.error(
                    "uow.commit_failed",
                    extra={"error": commit_exc.__class__.__name__},
                )
                raise InternalError() from commit_exc
            except Exception:
                self.rollback()
                raise
            return

        self.rollback()
        if isinstance(exc, SQLAlchemyError):
            logger.error("uow.store_error", extra={"error": exc_type.__name__})
            raise InternalError() from exc

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    - Sets the isolation level and ``READ ONLY`` on engines that support it
      (PostgreSQL, MySQL/MariaDB) when it owns the transaction.
    - Installs write guards on the session and the connection, so SQLite
      gets the same protection without the database-level flag.
    - Always rolls back on exit; ``commit()`` is refused.

    Parameters
    ----------
    isolation_level:
        ``"READ COMMITTED"`` (default), ``"REPEATABLE READ"``... or ``None``
        to keep the connection default.
    enforce_db_readonly:
        Issue ``SET TRANSACTION READ ONLY`` where supported.
    statement_timeout_ms:
        Per-statement ceiling applied with ``SET LOCAL`` on PostgreSQL.
    """

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
    _TXN_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
        statement_timeout_ms: int | None = None,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self.statement_timeout_ms = statement_timeout_ms

        self._conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None
        self._listeners_installed = False

    # ----------------------------- Context Manager -----------------------------

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Open (or join) a transaction and install the write guards.

        When the session already has a transaction (test fixtures, a caller
        that read before entering) the scope attaches to it: guards still
        apply but no ``SET TRANSACTION`` directive is issued.
        """
        self._txn_ctx = None
        self._conn = None

        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            pass

        self._conn = self.session.connection()
        dialect = self._conn.dialect.name

        if self._txn_ctx is not None and dialect in self._TXN_DIALECTS:
            try:
                if self.isolation_level:
                    iso = self.isolation_level.upper().strip()
                    if iso not in (
                        "READ COMMITTED",
                        "REPEATABLE READ",
                        "SERIALIZABLE",
                        "READ UNCOMMITTED",
                    ):
                        logger.warning("uow.unknown_isolation", extra={"isolation": iso})
                    self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
                if self.enforce_db_readonly:
                    self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                logger.warning(
                    "uow.set_transaction_failed", extra={"error": exc.__class__.__name__}
                )

        # SET LOCAL must run before the guards; it is not a write.
        try:
            _apply_statement_timeout(self.session, self.statement_timeout_ms)
        except SQLAlchemyError as exc:
            logger.warning("uow.statement_timeout_failed", extra={"error": exc.__class__.__name__})

        self._install_listeners()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        """Remove guards; roll back only when this scope owns the transaction."""
        try:
            if self._txn_ctx is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_listeners()
            self._conn = None

        if isinstance(exc, SQLAlchemyError):
            raise InternalError() from exc

    # ----------------------------- Public API ---------------------------------

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards & Listeners --------------------------

    def _install_listeners(self) -> None:
        """Block ORM flushes and raw DML/DDL for the lifetime of the scope."""
        if self._listeners_installed:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError(
                    "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
                )

        event.listen(self.session, "before_flush", _before_flush)

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        target = self._conn if self._conn is not None else self.session.get_bind()
        event.listen(target, "before_cursor_execute", _before_cursor_execute)

        self._ro__before_flush = _before_flush
        self._ro__before_cursor_execute = _before_cursor_execute
        self._listeners_installed = True

    def _remove_listeners(self) -> None:
        if not self._listeners_installed:
            return

        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._ro__before_flush)

        with suppress(InvalidRequestError):
            target = self._conn if self._conn is not None else self.session.get_bind()
            event.remove(target, "before_cursor_execute", self._ro__before_cursor_execute)

        self._listeners_installed = False
