"""Settings for the pgcompat shim.

Configuration is read from ``PGCOMPAT_``-prefixed environment variables and
an optional ``.env`` file in the working directory, so the same values the
host application keeps in its dotenv file drive the database location.

Examples:
    >>> settings = PgCompatSettings(db_path="data/app.db")
    >>> settings.journal_mode
    'wal'

Tags:
    settings, configuration, pydantic, environment, pgcompat
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_FILENAME = "autoshorts.db"
DEFAULT_SCHEMA_PATH = Path("migrations") / "001_initial_schema.sql"

_JOURNAL_MODES = {"delete", "truncate", "persist", "memory", "wal", "off"}


class PgCompatSettings(BaseSettings):
    """Database and logging settings.

    Fields
    ──────
    db_path       : SQLite data file (``:memory:`` for an ephemeral database)
    schema_path   : Schema script applied by ``bootstrap``
    journal_mode  : SQLite journal mode set on first connect
    busy_timeout  : Seconds a statement waits on a locked database
    log_level     : Structlog log level
    log_json      : JSON log lines (None = auto-detect from the terminal)
    """

    model_config = SettingsConfigDict(
        env_prefix="PGCOMPAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    db_path: Path = Field(
        default_factory=lambda: Path.cwd() / DEFAULT_DB_FILENAME,
        description="SQLite data file",
    )
    schema_path: Path = Field(
        default_factory=lambda: Path.cwd() / DEFAULT_SCHEMA_PATH,
        description="Schema script applied at startup",
    )
    journal_mode: str = "wal"
    busy_timeout: float = Field(default=5.0, gt=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @field_validator("journal_mode")
    @classmethod
    def _check_journal_mode(cls, value: str) -> str:
        mode = value.strip().lower()
        if mode not in _JOURNAL_MODES:
            raise ValueError(f"unsupported journal mode: {value!r}")
        return mode

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unsupported log level: {value!r}")
        return level


__all__ = [
    "DEFAULT_DB_FILENAME",
    "DEFAULT_SCHEMA_PATH",
    "PgCompatSettings",
]
