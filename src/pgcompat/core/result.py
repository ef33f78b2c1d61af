"""Uniform query result.

Every statement executed through the shim yields a :class:`QueryResult`
with the same two fields a PostgreSQL driver result exposes: ``rows`` and
``row_count``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

Row = dict[str, Any]


@dataclass(frozen=True)
class QueryResult:
    """Rows plus the engine-reported row count.

    For UPDATE/DELETE ``rows`` is empty and ``row_count`` is the number of
    modified rows; for reads ``row_count == len(rows)``.
    """

    rows: list[Row] = field(default_factory=list)
    row_count: int = 0

    @classmethod
    def from_rows(cls, rows: list[Row]) -> QueryResult:
        return cls(rows=rows, row_count=len(rows))

    @classmethod
    def changes(cls, row_count: int) -> QueryResult:
        return cls(rows=[], row_count=row_count)

    def first(self) -> Row | None:
        """First row, or ``None`` when the result is empty."""
        return self.rows[0] if self.rows else None

    def to_dict(self) -> dict[str, Any]:
        return {"rows": self.rows, "row_count": self.row_count}

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)


__all__ = ["QueryResult", "Row"]
