"""Statement execution and result normalization.

Runs an already translated statement against a SQLite connection and
shapes the outcome into a :class:`~pgcompat.core.result.QueryResult`:

=======================  =======================================  ==============
Kind                     rows                                     row_count
=======================  =======================================  ==============
INSERT                   ``[{"id": <rowid>}]``                    changes
INSERT + RETURNING       the inserted row, re-read by ``rowid``   changes
UPDATE / DELETE          ``[]``                                   changes
READ                     every result row                         ``len(rows)``
=======================  =======================================  ==============

Any ``sqlite3.Error`` is re-raised as :class:`~pgcompat.core.errors.EngineError`
with the engine message untouched.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any

from pgcompat.core.errors import EngineError, UnsupportedStatementError
from pgcompat.core.logging import get_logger
from pgcompat.core.result import QueryResult, Row
from pgcompat.core.statements import ReturningRequest, StatementKind

logger = get_logger(__name__)


def _rows(cursor: sqlite3.Cursor) -> list[Row]:
    # description is None for statements that produce no result set (DDL, PRAGMA x = y)
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


def _fetch_inserted_row(conn: sqlite3.Connection, table: str, row_id: int) -> Row | None:
    cursor = conn.execute(f"SELECT * FROM {table} WHERE rowid = ?", (row_id,))
    rows = _rows(cursor)
    if not rows:
        return None
    row = rows[0]
    if row.get("id") is None:
        row["id"] = row_id
    return row


def _execute_insert(
    conn: sqlite3.Connection,
    text: str,
    params: tuple[Any, ...],
    returning: ReturningRequest | None,
    table: str | None,
) -> QueryResult:
    cursor = conn.execute(text, params)
    changes = cursor.rowcount
    row_id = cursor.lastrowid

    if returning is None:
        return QueryResult(rows=[{"id": row_id}], row_count=changes)

    if table is None:
        raise UnsupportedStatementError(
            "RETURNING emulation requires the insert target table"
        ).with_context(statement=text)

    # lastrowid is stale when nothing was inserted (INSERT OR IGNORE)
    if changes <= 0 or row_id is None:
        return QueryResult(rows=[], row_count=changes)

    row = _fetch_inserted_row(conn, table, row_id)
    return QueryResult(rows=[row] if row is not None else [], row_count=changes)


def execute(
    conn: sqlite3.Connection,
    kind: StatementKind,
    text: str,
    params: Sequence[Any] = (),
    returning: ReturningRequest | None = None,
    table: str | None = None,
) -> QueryResult:
    """Execute a translated statement and normalize its outcome.

    Args:
        conn: Open SQLite connection (autocommit mode).
        kind: Classification of ``text``.
        text: Translated statement text.
        params: Positional parameter values.
        returning: Present for inserts that carried a RETURNING clause.
        table: Insert target table, required when ``returning`` is set.

    Raises:
        EngineError: The engine rejected the statement.
        UnsupportedStatementError: RETURNING requested without a table.
    """
    bound = tuple(params)
    try:
        if kind is StatementKind.INSERT:
            result = _execute_insert(conn, text, bound, returning, table)
        elif kind in (StatementKind.UPDATE, StatementKind.DELETE):
            cursor = conn.execute(text, bound)
            result = QueryResult.changes(cursor.rowcount)
        else:
            cursor = conn.execute(text, bound)
            result = QueryResult.from_rows(_rows(cursor))
    except (sqlite3.Error, sqlite3.Warning) as exc:
        raise EngineError.from_sqlite(exc).with_context(
            statement=text,
            kind=kind.value,
            table=table,
            param_count=len(bound),
        ) from exc

    logger.debug("query.executed", kind=kind.value, row_count=result.row_count)
    return result


__all__ = ["execute"]
