"""Schema bootstrap and rebuild.

Two ways to apply a schema script to a database:

- :func:`bootstrap_schema` runs statement by statement on the shared handle
  and never fails on an individual statement, so it can be re-run on every
  start against a database that already has the schema.
- :func:`rebuild_database` deletes the database file, creates a fresh one
  and applies the whole script at once, failing on the first error. It is
  meant for the ``pgcompat db reset`` command, not for application startup.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from pathlib import Path

from pgcompat.core.errors import (
    BootstrapStatementError,
    SchemaError,
    SchemaFileNotFoundError,
)
from pgcompat.core.logging import get_logger

logger = get_logger(__name__)

STATEMENT_DELIMITER = ";"
_SIDE_FILE_SUFFIXES = ("-wal", "-shm", "-journal")


@dataclass
class BootstrapReport:
    """Outcome of a bootstrap run."""

    source: str | None = None
    executed: int = 0
    failures: list[BootstrapStatementError] = field(default_factory=list)
    skipped: bool = False

    @property
    def total(self) -> int:
        return self.executed + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.skipped and not self.failures


@dataclass(frozen=True)
class RebuildReport:
    """Objects present in a freshly rebuilt database."""

    path: str
    tables: list[str]
    indexes: list[str]


def split_statements(script: str) -> list[str]:
    """Split a schema script on ``;``, trimming and dropping empty fragments.

    The split is purely textual: a semicolon inside a string literal or a
    trigger body ends the fragment.
    """
    fragments = (part.strip() for part in script.split(STATEMENT_DELIMITER))
    return [fragment for fragment in fragments if fragment]


def bootstrap_schema(
    conn: sqlite3.Connection,
    script: str,
    *,
    source: str | None = None,
) -> BootstrapReport:
    """Apply ``script`` statement by statement, in order.

    A failing statement is logged as a warning and recorded in the report;
    the remaining statements still run. ``CREATE TABLE`` on an existing
    table fails this way on every re-run.
    """
    statements = split_statements(script)
    report = BootstrapReport(source=source)
    logger.info("bootstrap.started", statements=len(statements))

    for index, statement in enumerate(statements, start=1):
        try:
            conn.executescript(statement)
        except sqlite3.Error as exc:
            failure = BootstrapStatementError(
                str(exc), statement=statement, index=index, cause=exc
            )
            report.failures.append(failure)
            logger.warning(
                "bootstrap.statement_failed",
                index=index,
                total=len(statements),
                error=str(exc),
            )
            continue
        report.executed += 1
        logger.debug("bootstrap.statement_executed", index=index, total=len(statements))

    logger.info(
        "bootstrap.completed",
        executed=report.executed,
        failed=len(report.failures),
    )
    return report


def read_schema(path: str | Path) -> str | None:
    """Read a schema script, or return ``None`` if the file does not exist."""
    schema_path = Path(path)
    if not schema_path.is_file():
        return None
    return schema_path.read_text(encoding="utf-8")


def list_objects(conn: sqlite3.Connection, object_type: str) -> list[str]:
    """Names of user ``table``/``index`` objects, in creation order."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = ? AND name NOT LIKE 'sqlite_%'",
        (object_type,),
    )
    return [row[0] for row in cursor.fetchall()]


def _remove_database_files(db_path: Path) -> None:
    for candidate in [db_path, *(Path(f"{db_path}{suffix}") for suffix in _SIDE_FILE_SUFFIXES)]:
        if candidate.exists():
            candidate.unlink()
            logger.info("schema.file_removed", path=str(candidate))


def rebuild_database(
    db_path: str | Path,
    schema_path: str | Path,
    *,
    journal_mode: str = "wal",
) -> RebuildReport:
    """Recreate ``db_path`` from scratch and apply ``schema_path`` in one go.

    Uses its own short-lived connection; do not call it while a
    :class:`~pgcompat.core.connection.ConnectionManager` holds the same file.

    Raises:
        SchemaFileNotFoundError: ``schema_path`` does not exist.
        SchemaError: the script failed; the partially built file is left
            in place for inspection.
    """
    script = read_schema(schema_path)
    if script is None:
        raise SchemaFileNotFoundError(str(schema_path))

    target = Path(db_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    _remove_database_files(target)

    conn = sqlite3.connect(str(target), isolation_level=None)
    try:
        conn.execute(f"PRAGMA journal_mode = {journal_mode}")
        try:
            conn.executescript(script)
        except sqlite3.Error as exc:
            raise SchemaError(
                f"Error executing schema {schema_path}: {exc}", cause=exc
            ).with_context(path=str(schema_path)) from exc
        tables = list_objects(conn, "table")
        indexes = list_objects(conn, "index")
    finally:
        conn.close()

    logger.info("schema.rebuilt", path=str(target), tables=len(tables), indexes=len(indexes))
    return RebuildReport(path=str(target), tables=tables, indexes=indexes)


__all__ = [
    "STATEMENT_DELIMITER",
    "BootstrapReport",
    "RebuildReport",
    "bootstrap_schema",
    "list_objects",
    "read_schema",
    "rebuild_database",
    "split_statements",
]
