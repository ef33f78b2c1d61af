"""
CLI: ``pgcompat query`` — run one statement through the shim.
"""

from __future__ import annotations

import typer

from pgcompat.cli.utils import fail, make_database, output_result, parse_param
from pgcompat.core.errors import PgCompatError


def query(
    sql: str = typer.Argument(..., help="Statement using $1, $2, ... placeholders"),
    params: list[str] | None = typer.Option(
        None, "--param", "-p", help="Parameter value (repeatable, JSON-decoded)"
    ),
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Run a PostgreSQL-style statement and print rows and row count."""
    db = make_database(database)
    values = [parse_param(p) for p in params or []]
    try:
        result = db.query(sql, values)
    except PgCompatError as exc:
        raise fail(exc) from exc
    output_result(result, as_json=json_out)
