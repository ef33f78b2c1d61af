"""PostgreSQL-to-SQLite statement translation.

Application code is written against PostgreSQL conventions (``$1``
placeholders, ``NOW()``, ``INSERT ... RETURNING``). ``translate()`` rewrites
a statement so SQLite can execute it, and reports whether a trailing
RETURNING clause was removed so the executor can emulate it.

Architecture::

    INSERT INTO videos (title, created_at) VALUES ($1, NOW()) RETURNING *
                              │
                              ▼  translate()
    ┌──────────────────────────────────────────────────────────────────┐
    │ text      = INSERT INTO videos (title, created_at)               │
    │             VALUES (?1, datetime('now'))                         │
    │ returning = "*"                                                  │
    └──────────────────────────────────────────────────────────────────┘

The rewrite is purely textual: occurrences inside string literals are
rewritten too, and parameters are never checked against placeholders.

Examples:
    >>> t = translate("SELECT * FROM videos WHERE id = $1 AND ts < NOW()")
    >>> t.text
    "SELECT * FROM videos WHERE id = ?1 AND ts < datetime('now')"
    >>> t.is_returning
    False

Tags:
    dialect, sql, translation, postgresql, sqlite, pgcompat
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")
_NOW_RE = re.compile(r"\bNOW\(\)", re.IGNORECASE)
_DOUBLE_QUOTED_NOW_RE = re.compile(r"""datetime\("now"\)""", re.IGNORECASE)
# Greedy body so only the last RETURNING keyword counts.
_RETURNING_RE = re.compile(
    r"^(?P<body>.*)\bRETURNING\s+(?P<columns>[^;]+?)\s*;?\s*\Z",
    re.IGNORECASE | re.DOTALL,
)


class SQLiteDialect:
    """Target dialect fragments — ``?N`` placeholders, ``datetime('now')``."""

    @property
    def name(self) -> str:
        return "sqlite"

    def placeholder(self, number: int) -> str:
        """Numbered positional marker; ``number`` is 1-based like ``$N``.

        SQLite binds ``?N`` to the N-th entry of a parameter sequence, so
        ``$N`` keeps pointing at the same parameter whatever the digit width.
        """
        return f"?{number}"

    def now(self) -> str:
        return "datetime('now')"


@dataclass(frozen=True)
class Translation:
    """Result of translating one statement.

    ``returning`` holds the raw column list of a stripped RETURNING clause
    (``"*"``, ``"id, title"``); it is never parsed into columns.
    """

    text: str
    returning: str | None = None

    @property
    def is_returning(self) -> bool:
        return self.returning is not None


def rewrite_placeholders(text: str, dialect: SQLiteDialect | None = None) -> str:
    """Replace every ``$N`` with the dialect's positional marker."""
    dialect = dialect or SQLiteDialect()
    return _PLACEHOLDER_RE.sub(lambda m: dialect.placeholder(int(m.group(1))), text)


def rewrite_timestamps(text: str, dialect: SQLiteDialect | None = None) -> str:
    """Replace ``NOW()`` (any case) and ``datetime("now")`` with the native expression."""
    dialect = dialect or SQLiteDialect()
    text = _NOW_RE.sub(lambda _: dialect.now(), text)
    return _DOUBLE_QUOTED_NOW_RE.sub(lambda _: dialect.now(), text)


def split_returning(text: str) -> tuple[str, str | None]:
    """Strip a trailing RETURNING clause.

    Returns ``(text_without_clause, column_list)``; ``column_list`` is
    ``None`` when the statement does not end with RETURNING.
    """
    match = _RETURNING_RE.match(text)
    if match is None:
        return text, None
    return match.group("body").rstrip(), match.group("columns").strip()


def translate(text: str, dialect: SQLiteDialect | None = None) -> Translation:
    """Translate a PostgreSQL-style statement for execution on SQLite."""
    dialect = dialect or SQLiteDialect()
    body, returning = split_returning(text)
    body = rewrite_placeholders(body, dialect)
    body = rewrite_timestamps(body, dialect)
    return Translation(text=body, returning=returning)


__all__ = [
    "SQLiteDialect",
    "Translation",
    "rewrite_placeholders",
    "rewrite_timestamps",
    "split_returning",
    "translate",
]
