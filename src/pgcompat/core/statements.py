"""Statement classification.

Classification looks at the leading keyword of the *translated* text only:

==========  ==========
Keyword     Kind
==========  ==========
INSERT      ``INSERT``
UPDATE      ``UPDATE``
DELETE      ``DELETE``
(other)     ``READ``
==========  ==========

Everything that is not INSERT/UPDATE/DELETE, including ``CREATE``,
``PRAGMA`` and ``WITH ... INSERT``, is executed on the read path.

Insert table extraction supports exactly one unqualified, unquoted
identifier after ``INSERT [OR <conflict>] INTO``; anything else raises
:class:`~pgcompat.core.errors.UnsupportedStatementError` instead of
guessing.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pgcompat.core.errors import UnsupportedStatementError

_LEADING_KEYWORD_RE = re.compile(r"\s*([A-Za-z]+)")
_INSERT_TABLE_RE = re.compile(
    r"^\s*INSERT\s+(?:OR\s+(?:ROLLBACK|ABORT|REPLACE|FAIL|IGNORE)\s+)?INTO\s+"
    r"(?P<table>[A-Za-z_][A-Za-z0-9_]*)(?![\w.$])",
    re.IGNORECASE,
)


class StatementKind(str, Enum):
    """DML category that selects the execution and result-shaping strategy."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    READ = "READ"


@dataclass(frozen=True)
class ReturningRequest:
    """A RETURNING clause stripped from an insert.

    ``columns`` is the raw column-list text; the executor always re-fetches
    the whole row regardless of its content.
    """

    columns: str


@dataclass(frozen=True)
class Statement:
    """Statement text plus its ordered parameter values."""

    text: str
    params: tuple[Any, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, text: str, params: Sequence[Any] | None = None) -> Statement:
        return cls(text=text, params=tuple(params or ()))


def classify(text: str) -> StatementKind:
    """Classify a statement by its leading keyword."""
    match = _LEADING_KEYWORD_RE.match(text)
    if match is None:
        return StatementKind.READ
    keyword = match.group(1).upper()
    if keyword == "INSERT":
        return StatementKind.INSERT
    if keyword == "UPDATE":
        return StatementKind.UPDATE
    if keyword == "DELETE":
        return StatementKind.DELETE
    return StatementKind.READ


def extract_table_name(text: str) -> str:
    """Return the target table of a single-table ``INSERT``.

    Raises:
        UnsupportedStatementError: no plain table name follows ``INTO``
            (schema-qualified or quoted names, malformed statements).
    """
    match = _INSERT_TABLE_RE.match(text)
    if match is None:
        raise UnsupportedStatementError(
            "Could not extract table name from INSERT statement"
        ).with_context(statement=text)
    return match.group("table")


__all__ = [
    "ReturningRequest",
    "Statement",
    "StatementKind",
    "classify",
    "extract_table_name",
]
