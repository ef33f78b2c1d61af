"""
Shared pytest fixtures for pgcompat tests.

This module provides:
- An isolated working directory and environment per test
- A small ``videos`` / ``tags`` schema script on disk
- A bootstrapped file-backed ``Database``
"""

import os
import sqlite3
import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure pgcompat package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pgcompat.core.database import Database
from pgcompat.core.logging import configure_logging

SCHEMA_SQL = """
-- Videos produced by the pipeline
CREATE TABLE videos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'draft',
    created_at TEXT,
    updated_at TEXT
);

CREATE INDEX idx_videos_status ON videos (status);

CREATE TABLE tags (
    name TEXT NOT NULL UNIQUE
);
"""


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def structured_logging() -> None:
    """Route structlog output through stdlib logging so ``caplog`` sees it."""
    configure_logging(level="DEBUG", json_format=True)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test in its own directory with no PGCOMPAT_ variables set."""
    for key in list(os.environ):
        if key.startswith("PGCOMPAT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def schema_sql() -> str:
    return SCHEMA_SQL


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "migrations" / "001_initial_schema.sql"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SCHEMA_SQL, encoding="utf-8")
    return path


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "test.db"


@pytest.fixture
def db(db_path: Path, schema_file: Path) -> Generator[Database, None, None]:
    """File-backed database with the test schema applied."""
    database = Database.from_path(db_path, schema_path=schema_file)
    database.bootstrap()
    yield database
    database.get_connection().close()


@pytest.fixture
def memory_conn() -> Generator[sqlite3.Connection, None, None]:
    """Bare autocommit in-memory connection with the test schema."""
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.executescript(SCHEMA_SQL)
    yield conn
    conn.close()
