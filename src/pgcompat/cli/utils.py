"""
CLI utility helpers — settings, database construction and output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pgcompat.core.database import Database
from pgcompat.core.errors import ConfigError, PgCompatError
from pgcompat.core.result import QueryResult
from pgcompat.core.settings import PgCompatSettings

console = Console()
err_console = Console(stderr=True)


# ── Settings / database helpers ──────────────────────────────────────────


def load_settings(
    database: str | None = None,
    schema: str | None = None,
) -> PgCompatSettings:
    """Settings from the environment, with command-line overrides applied.

    Raises:
        ConfigError: a ``PGCOMPAT_`` variable or ``.env`` entry is invalid.
    """
    overrides: dict[str, Any] = {}
    if database:
        overrides["db_path"] = Path(database)
    if schema:
        overrides["schema_path"] = Path(schema)
    try:
        return PgCompatSettings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(f"Invalid settings: {problems}", cause=exc) from exc


def make_database(database: str | None = None, schema: str | None = None) -> Database:
    return Database.from_settings(load_settings(database, schema))


def parse_param(value: str) -> Any:
    """Decode a ``--param`` value as JSON, falling back to the raw string.

    ``1`` binds an integer, ``null`` binds NULL, ``Demo`` binds ``'Demo'``.
    """
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


# ── Output helpers ───────────────────────────────────────────────────────


def fail(exc: PgCompatError) -> typer.Exit:
    """Print a pgcompat error to stderr and return the exit to raise."""
    err_console.print(f"[bold red]Error[/bold red] ({exc.__class__.__name__}): {escape(exc.message)}")
    if exc.retryable:
        err_console.print("[yellow]This error is retryable; run the command again.[/yellow]")
    return typer.Exit(code=1)


def output_result(result: QueryResult, *, as_json: bool = False, title: str = "") -> None:
    """Render a ``QueryResult`` to the terminal."""
    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
        return

    if result.rows:
        _print_table(result.rows, title=title)
    else:
        console.print("[dim]No rows.[/dim]")
    console.print(f"[dim]row_count: {result.row_count}[/dim]")


def output_names(names: list[str], *, as_json: bool = False, title: str = "") -> None:
    """Render a list of object names."""
    if as_json:
        console.print_json(json.dumps(names))
        return
    if title:
        console.print(f"[bold]{title}[/bold]")
    if not names:
        console.print("[dim]No items.[/dim]")
        return
    for name in names:
        console.print(f"  - {name}")


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render row dicts as a Rich table."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)
