"""
pgcompat Database - PostgreSQL-style queries on an embedded SQLite file.

``Database`` is the single object application code talks to. The startup
routine builds one from settings, calls :meth:`Database.bootstrap` once,
and hands the instance to every collaborator that issues statements.

Architecture:
    ::

        db.query("INSERT INTO videos (title) VALUES ($1) RETURNING *", ["Demo"])
              │
              ▼
        ┌─────────────┐   ┌──────────────┐   ┌──────────────┐
        │ translate() │──►│  classify()  │──►│  execute()   │──► QueryResult
        │ $N → ?N     │   │ INSERT/...   │   │ + rowid read │
        │ NOW()       │   │ table name   │   │              │
        │ RETURNING   │   └──────────────┘   └──────┬───────┘
        └─────────────┘                             │
                                                    ▼
                                     ConnectionManager (one WAL handle)

Examples:
    >>> db = Database.from_path(":memory:")
    >>> db.query("CREATE TABLE videos (id INTEGER PRIMARY KEY, title TEXT)").rows
    []
    >>> db.query("INSERT INTO videos (title) VALUES ($1) RETURNING *", ["Demo"]).rows
    [{'id': 1, 'title': 'Demo'}]

Guardrails:
    ❌ DON'T: Open ad-hoc sqlite3 connections to the application database
    ✅ DO: Pass the Database instance around, use get_connection() for raw access

    ❌ DON'T: Rely on RETURNING column lists - the whole row comes back
    ✅ DO: Pick the columns you need from the returned row

Tags:
    database, sqlite, postgresql-compat, facade, pgcompat
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pgcompat.core.connection import ConnectionInfo, ConnectionManager
from pgcompat.core.dialect import translate
from pgcompat.core.errors import EngineError, PgCompatError
from pgcompat.core.executor import execute
from pgcompat.core.logging import LogContext, get_logger
from pgcompat.core.result import QueryResult
from pgcompat.core.schema_loader import (
    BootstrapReport,
    bootstrap_schema,
    list_objects,
    read_schema,
)
from pgcompat.core.settings import PgCompatSettings
from pgcompat.core.statements import (
    ReturningRequest,
    Statement,
    StatementKind,
    classify,
    extract_table_name,
)

logger = get_logger(__name__)


class Database:
    """Query facade over one shared SQLite handle.

    Safe to call from several threads: each statement, together with the
    row count and rowid reads that shape its result, runs under the
    manager's statement lock.

    Events (``query.failed``, ``bootstrap.*``) go to stdlib loggers named
    after the ``pgcompat.core`` modules; call
    :func:`~pgcompat.core.logging.configure_logging` to render them on
    stderr, or attach handlers to the ``pgcompat`` logger.

    Args:
        manager: Connection manager owning the handle.
        schema_path: Default script for :meth:`bootstrap`.
    """

    def __init__(self, manager: ConnectionManager, *, schema_path: str | Path | None = None):
        self._manager = manager
        self._schema_path = Path(schema_path) if schema_path is not None else None

    @classmethod
    def from_settings(cls, settings: PgCompatSettings | None = None) -> Database:
        settings = settings or PgCompatSettings()
        manager = ConnectionManager(
            settings.db_path,
            journal_mode=settings.journal_mode,
            timeout=settings.busy_timeout,
        )
        return cls(manager, schema_path=settings.schema_path)

    @classmethod
    def from_path(cls, path: str | Path, *, schema_path: str | Path | None = None) -> Database:
        return cls(ConnectionManager(path), schema_path=schema_path)

    @property
    def manager(self) -> ConnectionManager:
        return self._manager

    @property
    def info(self) -> ConnectionInfo | None:
        return self._manager.info

    def get_connection(self) -> sqlite3.Connection:
        """Raw engine handle for statements outside the translation contract.

        Callers sharing it across threads hold ``manager.statement_lock``
        around each statement, as :meth:`query` does.
        """
        return self._manager.get_connection()

    # -- Statement contract ---------------------------------------------------

    def query(self, text: str, params: Sequence[Any] | None = None) -> QueryResult:
        """Run one PostgreSQL-style statement.

        Raises:
            UnsupportedStatementError: an INSERT whose table cannot be isolated.
            EngineError: anything the engine rejects; the message is SQLite's.
        """
        statement = Statement.of(text, params)
        translation = translate(statement.text)
        kind = classify(translation.text)

        try:
            table = None
            returning = None
            if kind is StatementKind.INSERT:
                table = extract_table_name(translation.text)
                if translation.is_returning:
                    returning = ReturningRequest(columns=translation.returning)
            elif translation.is_returning:
                logger.debug("query.returning_ignored", kind=kind.value)

            conn = self.get_connection()
            with self._manager.statement_lock:
                return execute(
                    conn,
                    kind,
                    translation.text,
                    statement.params,
                    returning=returning,
                    table=table,
                )
        except PgCompatError as exc:
            logger.error("query.failed", kind=kind.value, **exc.to_dict())
            raise

    # -- Schema -----------------------------------------------------------------

    def bootstrap(self, schema_path: str | Path | None = None) -> BootstrapReport:
        """Apply the schema script statement by statement.

        A missing script is a logged skip. Failing statements (typically
        ``CREATE`` on objects that already exist) are logged and collected
        in the report; they never raise.
        """
        path = Path(schema_path) if schema_path is not None else self._schema_path
        if path is None:
            logger.warning("bootstrap.skipped", reason="no schema path configured")
            return BootstrapReport(skipped=True)

        with LogContext(schema=str(path)):
            script = read_schema(path)
            if script is None:
                logger.warning("bootstrap.skipped", reason="schema file not found")
                return BootstrapReport(source=str(path), skipped=True)
            logger.info("bootstrap.loading")
            conn = self.get_connection()
            with self._manager.statement_lock:
                return bootstrap_schema(conn, script, source=str(path))

    # -- Diagnostics ----------------------------------------------------------

    def check_connection(self) -> str:
        """Return the engine's current time, proving the database answers."""
        try:
            conn = self.get_connection()
            with self._manager.statement_lock:
                row = conn.execute("SELECT datetime('now') AS now").fetchone()
        except sqlite3.Error as exc:
            logger.error("connection.check_failed", error=str(exc))
            raise EngineError.from_sqlite(exc) from exc
        now = row["now"]
        logger.info("connection.check_ok", now=now)
        return now

    def list_tables(self) -> list[str]:
        return self._list("table")

    def list_indexes(self) -> list[str]:
        return self._list("index")

    def _list(self, object_type: str) -> list[str]:
        conn = self.get_connection()
        with self._manager.statement_lock:
            return list_objects(conn, object_type)

    def __repr__(self) -> str:
        return f"Database(path={self._manager.path!r}, state={self._manager.state.value})"


__all__ = ["Database"]
