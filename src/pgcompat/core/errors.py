"""
Structured error types for pgcompat.

Every failure the shim surfaces is a ``PgCompatError`` carrying a category,
a retry hint, structured context and the chained underlying exception.
Engine failures keep the original sqlite3 message verbatim so call sites
can log the real cause.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure mode of the shim
    - **Never mask the engine:** ``str(EngineError)`` is the sqlite3 message
    - **Rich Context:** Errors carry the statement and table they concern
    - **Error Chaining:** The sqlite3 exception is kept as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        PgCompatError                          │
        │        (category, retryable, context, cause)                  │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  DatabaseError             ConfigError                        │
        │  (DATABASE)                (CONFIG)                           │
        │     │                         │                               │
        │  EngineError               SchemaFileNotFoundError            │
        │     └─ IntegrityError                                         │
        │  UnsupportedStatementError DatabaseConnectionError            │
        │  BootstrapStatementError   (DATABASE, retryable)              │
        │  SchemaError                                                  │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = EngineError("no such table: videos")
    >>> str(error)
    'no such table: videos'
    >>> error.category
    <ErrorCategory.DATABASE: 'DATABASE'>

Tags:
    error-handling, exception-hierarchy, sqlite, pgcompat
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    DATABASE = "DATABASE"         # Engine failures, connection problems
    VALIDATION = "VALIDATION"     # Statements the shim refuses to handle
    CONFIG = "CONFIG"             # Missing files, invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only fields that are set end up in ``to_dict()``, so the context can be
    handed straight to a structured logger.

    Attributes:
        statement: Statement text (translated) that was being executed
        table: Target table, for inserts
        kind: Statement kind name (``INSERT``, ``READ``, ...)
        param_count: Number of parameters supplied with the statement
        statement_index: 1-based position inside a schema script
        path: File involved (database or schema script)
        metadata: Additional key-value pairs
    """

    statement: str | None = None
    table: str | None = None
    kind: str | None = None
    param_count: int | None = None
    statement_index: int | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["statement", "table", "kind", "param_count", "statement_index", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class PgCompatError(Exception):
    """
    Base exception for all pgcompat errors.

    Subclasses set ``default_category`` and ``default_retryable``; callers
    may override both per instance.

    Examples:
        >>> error = PgCompatError("Something went wrong")
        >>> error.retryable
        False
        >>> error.with_context(table="videos").context.table
        'videos'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> PgCompatError:
        """
        Add context to this error (fluent API).

        Usage:
            raise EngineError.from_sqlite(exc).with_context(table="videos")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(PgCompatError):
    """Database statement or schema error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = False


class EngineError(DatabaseError):
    """
    Failure reported by the SQLite engine.

    Raised for syntax errors, unknown tables or columns, parameter count
    mismatches and type errors. The message is the engine's own message;
    ``code`` is the SQLite error name when the interpreter exposes it
    (e.g. ``SQLITE_CONSTRAINT_UNIQUE``).
    """

    def __init__(self, message: str, *, code: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.code = code

    @classmethod
    def from_sqlite(cls, exc: sqlite3.Error | sqlite3.Warning) -> EngineError:
        """Wrap a sqlite3 exception, picking the most specific subclass."""
        error_cls = IntegrityError if isinstance(exc, sqlite3.IntegrityError) else cls
        return error_cls(
            str(exc),
            code=getattr(exc, "sqlite_errorname", None),
            cause=exc,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.code:
            result["code"] = self.code
        return result


class IntegrityError(EngineError):
    """Constraint violation (UNIQUE, NOT NULL, FOREIGN KEY, CHECK)."""

    pass


class UnsupportedStatementError(DatabaseError):
    """
    Statement shape the shim refuses to guess about.

    Raised when no plain table name can be isolated from an ``INSERT``
    (schema-qualified names, quoted identifiers, malformed syntax).
    """

    default_category = ErrorCategory.VALIDATION


class BootstrapStatementError(DatabaseError):
    """One statement of a schema script failed during bootstrap.

    Never raised to bootstrap callers: it is logged and collected in the
    bootstrap report.
    """

    def __init__(self, message: str, *, statement: str, index: int, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.statement = statement
        self.index = index
        self.context.statement = statement
        self.context.statement_index = index


class SchemaError(DatabaseError):
    """A schema script failed as a whole during a rebuild."""

    pass


class DatabaseConnectionError(DatabaseError):
    """The SQLite database could not be opened or configured."""

    default_retryable = True


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(PgCompatError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class SchemaFileNotFoundError(ConfigError):
    """The schema script required for a rebuild does not exist."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Schema file not found: {path}")
        self.context.path = path


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "PgCompatError",
    "DatabaseError",
    "EngineError",
    "IntegrityError",
    "UnsupportedStatementError",
    "BootstrapStatementError",
    "SchemaError",
    "DatabaseConnectionError",
    "ConfigError",
    "SchemaFileNotFoundError",
]
