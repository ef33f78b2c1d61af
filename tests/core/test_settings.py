"""Tests for PgCompatSettings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from pgcompat.core.settings import DEFAULT_SCHEMA_PATH, PgCompatSettings


class TestDefaults:
    def test_paths_relative_to_working_directory(self, isolated_env: Path) -> None:
        settings = PgCompatSettings()
        assert settings.db_path == isolated_env / "autoshorts.db"
        assert settings.schema_path == isolated_env / DEFAULT_SCHEMA_PATH

    def test_engine_and_logging_defaults(self) -> None:
        settings = PgCompatSettings()
        assert settings.journal_mode == "wal"
        assert settings.busy_timeout == 5.0
        assert settings.log_level == "INFO"
        assert settings.log_json is None


class TestEnvironment:
    def test_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGCOMPAT_DB_PATH", "/srv/app.db")
        monkeypatch.setenv("PGCOMPAT_JOURNAL_MODE", "DELETE")
        monkeypatch.setenv("PGCOMPAT_LOG_LEVEL", "debug")
        monkeypatch.setenv("PGCOMPAT_LOG_JSON", "true")

        settings = PgCompatSettings()

        assert settings.db_path == Path("/srv/app.db")
        assert settings.journal_mode == "delete"
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True

    def test_dotenv_file(self, isolated_env: Path) -> None:
        (isolated_env / ".env").write_text("PGCOMPAT_BUSY_TIMEOUT=1.5\nOTHER_SETTING=x\n")
        assert PgCompatSettings().busy_timeout == 1.5

    def test_explicit_values_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGCOMPAT_DB_PATH", "/srv/app.db")
        assert PgCompatSettings(db_path="local.db").db_path == Path("local.db")


class TestValidation:
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("journal_mode", "sideways"),
            ("log_level", "LOUD"),
            ("busy_timeout", 0),
        ],
    )
    def test_rejects_invalid_values(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError):
            PgCompatSettings(**{field: value})
