"""Connection lifecycle — one lazily opened SQLite handle per manager.

The application's startup routine constructs a :class:`ConnectionManager`
(usually through :class:`~pgcompat.core.database.Database`) and passes it to
whoever needs the database. The first ``get_connection()`` call opens the
file, switches it to write-ahead logging and keeps the handle for the rest
of the process; later calls return the same handle.

State machine::

    UNINITIALIZED ──get_connection()──► OPEN   (terminal)

Concurrent first callers race on a lock: exactly one of them opens the
database, the others block until it is done and receive the same handle.

Threads share the handle, but ``rowcount`` and ``lastrowid`` are
connection-wide in SQLite: a statement and the reads that depend on its
outcome must run under :attr:`ConnectionManager.statement_lock`.

Usage::

    manager = ConnectionManager("data/autoshorts.db")
    conn = manager.get_connection()
    conn.execute("SELECT 1")
    print(manager.info)
    # ConnectionInfo(path='/abs/data/autoshorts.db', journal_mode='wal')
"""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pgcompat.core.errors import DatabaseConnectionError
from pgcompat.core.logging import get_logger

logger = get_logger(__name__)

MEMORY_PATH = ":memory:"


class ConnectionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    OPEN = "open"


@dataclass(frozen=True)
class ConnectionInfo:
    """Metadata about an open connection."""

    url: str
    """The path the manager was created with."""

    resolved_path: str | None
    """Absolute file path, ``None`` for in-memory databases."""

    journal_mode: str
    """Journal mode reported by SQLite after configuration."""

    def __repr__(self) -> str:
        where = f"path={self.resolved_path!r}" if self.resolved_path else f"url={self.url!r}"
        return f"ConnectionInfo({where}, journal_mode={self.journal_mode!r})"

    @property
    def persistent(self) -> bool:
        return self.resolved_path is not None


class ConnectionManager:
    """Owns the single persistent SQLite handle.

    The handle is opened with ``check_same_thread=False`` so threads can
    share it, in autocommit mode so every statement is its own transaction,
    and with ``sqlite3.Row`` rows.
    """

    def __init__(
        self,
        path: str | Path = MEMORY_PATH,
        *,
        journal_mode: str = "wal",
        timeout: float = 5.0,
    ):
        self._path = str(path)
        self._journal_mode = journal_mode
        self._timeout = timeout
        self._lock = threading.Lock()
        # Serializes statements on the shared handle
        self._statement_lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None
        self._info: ConnectionInfo | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.OPEN if self._conn is not None else ConnectionState.UNINITIALIZED

    @property
    def statement_lock(self) -> threading.Lock:
        """Held for the duration of one statement and its follow-up reads."""
        return self._statement_lock

    @property
    def info(self) -> ConnectionInfo | None:
        """Connection metadata, ``None`` until the handle is opened."""
        return self._info

    def get_connection(self) -> sqlite3.Connection:
        """Return the shared handle, opening it on first use."""
        conn = self._conn
        if conn is not None:
            return conn
        with self._lock:
            if self._conn is None:
                self._conn = self._open()
            return self._conn

    def _open(self) -> sqlite3.Connection:
        resolved: str | None = None
        target = self._path
        try:
            if self._path != MEMORY_PATH:
                path = Path(self._path)
                path.parent.mkdir(parents=True, exist_ok=True)
                resolved = str(path.resolve())
                target = resolved

            conn = sqlite3.connect(
                target,
                timeout=self._timeout,
                check_same_thread=False,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row
            row = conn.execute(f"PRAGMA journal_mode = {self._journal_mode}").fetchone()
        except (sqlite3.Error, OSError) as e:
            raise DatabaseConnectionError(
                f"Failed to open SQLite database at {target}: {e}",
                cause=e,
            ).with_context(path=target) from e

        journal_mode = str(row[0]) if row is not None else self._journal_mode
        self._info = ConnectionInfo(url=self._path, resolved_path=resolved, journal_mode=journal_mode)
        logger.info("connection.opened", path=target, journal_mode=journal_mode)
        return conn


__all__ = [
    "MEMORY_PATH",
    "ConnectionInfo",
    "ConnectionManager",
    "ConnectionState",
]
