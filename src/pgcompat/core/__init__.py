"""pgcompat core -- PostgreSQL-style statements on an embedded SQLite file.

Architecture::

    Layer 1 -- Types & Errors
        errors.py          Error hierarchy (EngineError, UnsupportedStatementError)
        result.py          QueryResult (rows + row_count)
        settings.py        PgCompatSettings (pydantic-settings, PGCOMPAT_ env)
        logging.py         structlog configuration

    Layer 2 -- Translation
        dialect.py         $N -> ?N, NOW() -> datetime('now'), RETURNING strip
        statements.py      StatementKind classification, insert table name

    Layer 3 -- Execution & Lifecycle
        executor.py        Execution + result normalization, RETURNING emulation
        connection.py      ConnectionManager (lazy, locked, WAL)
        schema_loader.py   Bootstrap (per statement) and rebuild (whole script)
        database.py        Database facade (query / bootstrap / get_connection)
"""

from pgcompat.core.connection import ConnectionInfo, ConnectionManager, ConnectionState
from pgcompat.core.database import Database
from pgcompat.core.dialect import Translation, translate
from pgcompat.core.errors import (
    BootstrapStatementError,
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    EngineError,
    IntegrityError,
    PgCompatError,
    SchemaError,
    SchemaFileNotFoundError,
    UnsupportedStatementError,
)
from pgcompat.core.result import QueryResult
from pgcompat.core.schema_loader import BootstrapReport, RebuildReport, rebuild_database
from pgcompat.core.settings import PgCompatSettings
from pgcompat.core.statements import StatementKind, classify, extract_table_name

__all__ = [
    "BootstrapReport",
    "BootstrapStatementError",
    "ConfigError",
    "ConnectionInfo",
    "ConnectionManager",
    "ConnectionState",
    "Database",
    "DatabaseConnectionError",
    "DatabaseError",
    "EngineError",
    "IntegrityError",
    "PgCompatError",
    "PgCompatSettings",
    "QueryResult",
    "RebuildReport",
    "SchemaError",
    "SchemaFileNotFoundError",
    "StatementKind",
    "Translation",
    "UnsupportedStatementError",
    "classify",
    "extract_table_name",
    "rebuild_database",
    "translate",
]
