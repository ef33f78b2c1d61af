"""Tests for statement classification and insert table extraction."""

from __future__ import annotations

import pytest

from pgcompat.core.errors import ErrorCategory, UnsupportedStatementError
from pgcompat.core.statements import (
    ReturningRequest,
    Statement,
    StatementKind,
    classify,
    extract_table_name,
)


class TestClassify:
    @pytest.mark.parametrize(
        ("sql", "kind"),
        [
            ("INSERT INTO t VALUES (1)", StatementKind.INSERT),
            ("insert into t values (1)", StatementKind.INSERT),
            ("   \n\tINSERT INTO t VALUES (1)", StatementKind.INSERT),
            ("UPDATE t SET a = 1", StatementKind.UPDATE),
            ("update t set a = 1", StatementKind.UPDATE),
            ("DELETE FROM t", StatementKind.DELETE),
            ("Delete from t", StatementKind.DELETE),
            ("SELECT * FROM t", StatementKind.READ),
        ],
    )
    def test_leading_keyword(self, sql: str, kind: StatementKind) -> None:
        assert classify(sql) is kind

    @pytest.mark.parametrize(
        "sql",
        [
            "CREATE TABLE t (a INTEGER)",
            "DROP TABLE t",
            "PRAGMA journal_mode",
            "WITH x AS (SELECT 1) INSERT INTO t SELECT * FROM x",
            "",
            "   ",
            "(SELECT 1)",
        ],
    )
    def test_everything_else_reads(self, sql: str) -> None:
        assert classify(sql) is StatementKind.READ

    def test_keyword_prefix_is_not_enough(self) -> None:
        assert classify("INSERTED_ROWS") is StatementKind.READ

    def test_kind_values(self) -> None:
        assert [k.value for k in StatementKind] == ["INSERT", "UPDATE", "DELETE", "READ"]


class TestExtractTableName:
    @pytest.mark.parametrize(
        ("sql", "table"),
        [
            ("INSERT INTO videos (title) VALUES (?1)", "videos"),
            ("insert into videos(title) values (?1)", "videos"),
            ("INSERT INTO social_posts\n  (video_id) VALUES (?1)", "social_posts"),
            ("INSERT OR IGNORE INTO tags (name) VALUES (?1)", "tags"),
            ("INSERT OR REPLACE INTO t2 VALUES (1)", "t2"),
            ("INSERT INTO _private DEFAULT VALUES", "_private"),
        ],
    )
    def test_plain_identifier(self, sql: str, table: str) -> None:
        assert extract_table_name(sql) == table

    @pytest.mark.parametrize(
        "sql",
        [
            "INSERT INTO main.videos (title) VALUES (?1)",
            'INSERT INTO "videos" (title) VALUES (?1)',
            "INSERT INTO [videos] (title) VALUES (?1)",
            "INSERT videos (title) VALUES (?1)",
            "INSERT INTO (title) VALUES (?1)",
            "SELECT * FROM videos",
        ],
    )
    def test_unsupported_shapes_fail_fast(self, sql: str) -> None:
        with pytest.raises(UnsupportedStatementError) as exc_info:
            extract_table_name(sql)
        assert exc_info.value.category is ErrorCategory.VALIDATION
        assert exc_info.value.context.statement == sql


class TestStatement:
    def test_of_normalizes_params(self) -> None:
        assert Statement.of("SELECT 1").params == ()
        assert Statement.of("SELECT $1", [1]).params == (1,)

    def test_returning_request_keeps_raw_columns(self) -> None:
        assert ReturningRequest(columns="id, title").columns == "id, title"
