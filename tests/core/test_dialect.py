"""Tests for PostgreSQL-to-SQLite statement translation."""

from __future__ import annotations

import pytest

from pgcompat.core.dialect import (
    SQLiteDialect,
    Translation,
    rewrite_placeholders,
    rewrite_timestamps,
    split_returning,
    translate,
)


@pytest.fixture
def sqlite() -> SQLiteDialect:
    return SQLiteDialect()


# =========================================================================
# Dialect fragments
# =========================================================================


class TestSQLiteDialect:
    def test_name(self, sqlite: SQLiteDialect) -> None:
        assert sqlite.name == "sqlite"

    def test_placeholder_is_numbered(self, sqlite: SQLiteDialect) -> None:
        assert sqlite.placeholder(1) == "?1"
        assert sqlite.placeholder(12) == "?12"

    def test_now(self, sqlite: SQLiteDialect) -> None:
        assert sqlite.now() == "datetime('now')"


# =========================================================================
# Placeholders
# =========================================================================


class TestPlaceholders:
    def test_single_placeholder(self) -> None:
        assert rewrite_placeholders("SELECT * FROM t WHERE id = $1") == "SELECT * FROM t WHERE id = ?1"

    def test_multi_digit_placeholders_keep_their_number(self) -> None:
        sql = "VALUES (" + ", ".join(f"${n}" for n in range(1, 12)) + ")"
        expected = "VALUES (" + ", ".join(f"?{n}" for n in range(1, 12)) + ")"
        assert rewrite_placeholders(sql) == expected

    def test_out_of_order_placeholders_are_not_renumbered(self) -> None:
        assert rewrite_placeholders("VALUES ($2, $1)") == "VALUES (?2, ?1)"

    def test_repeated_placeholder(self) -> None:
        assert rewrite_placeholders("a = $1 OR b = $1") == "a = ?1 OR b = ?1"

    def test_no_placeholders_unchanged(self) -> None:
        assert rewrite_placeholders("SELECT 1") == "SELECT 1"

    def test_dollar_without_digits_untouched(self) -> None:
        assert rewrite_placeholders("SELECT '$' || price") == "SELECT '$' || price"


# =========================================================================
# Timestamps
# =========================================================================


class TestTimestamps:
    @pytest.mark.parametrize("call", ["NOW()", "now()", "Now()"])
    def test_now_any_case(self, call: str) -> None:
        assert rewrite_timestamps(f"SET updated_at = {call}") == "SET updated_at = datetime('now')"

    def test_double_quoted_datetime_now(self) -> None:
        assert rewrite_timestamps('SET ts = datetime("now")') == "SET ts = datetime('now')"

    def test_identifier_ending_in_now_untouched(self) -> None:
        assert rewrite_timestamps("SELECT know() FROM t") == "SELECT know() FROM t"


# =========================================================================
# RETURNING
# =========================================================================


class TestReturning:
    def test_star(self) -> None:
        body, columns = split_returning("INSERT INTO t (a) VALUES ($1) RETURNING *")
        assert body == "INSERT INTO t (a) VALUES ($1)"
        assert columns == "*"

    def test_column_list_kept_raw(self) -> None:
        _, columns = split_returning("INSERT INTO t (a) VALUES ($1) returning id, a")
        assert columns == "id, a"

    def test_multiline_with_trailing_whitespace_and_semicolon(self) -> None:
        sql = """
            INSERT INTO users (email)
            VALUES ($1)
            RETURNING id, email, created_at;
        """
        body, columns = split_returning(sql)
        assert body.rstrip().endswith("VALUES ($1)")
        assert columns == "id, email, created_at"

    def test_no_returning(self) -> None:
        sql = "INSERT INTO t (a) VALUES ($1)"
        assert split_returning(sql) == (sql, None)

    def test_last_returning_wins(self) -> None:
        sql = "INSERT INTO t (note) VALUES ('returning soon') RETURNING id"
        body, columns = split_returning(sql)
        assert body == "INSERT INTO t (note) VALUES ('returning soon')"
        assert columns == "id"


# =========================================================================
# translate()
# =========================================================================


class TestTranslate:
    def test_full_insert(self) -> None:
        result = translate(
            "INSERT INTO videos (title, created_at) VALUES ($1, NOW()) RETURNING *"
        )
        assert result == Translation(
            text="INSERT INTO videos (title, created_at) VALUES (?1, datetime('now'))",
            returning="*",
        )
        assert result.is_returning

    def test_select_is_not_returning(self) -> None:
        result = translate("SELECT * FROM videos WHERE id = $1")
        assert result.text == "SELECT * FROM videos WHERE id = ?1"
        assert result.returning is None
        assert not result.is_returning

    def test_update_returning_is_stripped(self) -> None:
        result = translate("UPDATE videos SET title = $1 WHERE id = $2 RETURNING *")
        assert result.text == "UPDATE videos SET title = ?1 WHERE id = ?2"
        assert result.is_returning

    def test_pure_function(self) -> None:
        sql = "SELECT $1"
        assert translate(sql) == translate(sql)
