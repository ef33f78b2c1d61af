"""
CLI: ``pgcompat db`` — database management commands.
"""

from __future__ import annotations

import typer

from pgcompat.cli.utils import (
    console,
    err_console,
    fail,
    load_settings,
    make_database,
    output_names,
)
from pgcompat.core.errors import PgCompatError
from pgcompat.core.schema_loader import rebuild_database

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
    schema: str | None = typer.Option(None, "--schema", "-s", help="Schema script"),
) -> None:
    """Apply the schema script (safe to re-run on an initialised database)."""
    db = make_database(database, schema)
    try:
        report = db.bootstrap()
    except PgCompatError as exc:
        raise fail(exc) from exc

    if report.skipped:
        err_console.print(f"[yellow]Schema file not found, skipping:[/yellow] {report.source}")
        return
    console.print(f"[green]✓[/green] Schema applied from {report.source}")
    console.print(f"  executed: {report.executed}/{report.total}")
    for failure in report.failures:
        console.print(f"  [yellow]statement {failure.index} failed[/yellow]: {failure.message}")


@app.command()
def reset(
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
    schema: str | None = typer.Option(None, "--schema", "-s", help="Schema script"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete the database file and rebuild it from the schema script."""
    settings = load_settings(database, schema)
    if not yes:
        typer.confirm(f"Delete {settings.db_path} and rebuild it?", abort=True)

    try:
        report = rebuild_database(
            settings.db_path,
            settings.schema_path,
            journal_mode=settings.journal_mode,
        )
    except PgCompatError as exc:
        raise fail(exc) from exc

    console.print(f"[green]✓[/green] Database rebuilt at {report.path}")
    output_names(report.tables, title="Created tables:")
    output_names(report.indexes, title="Created indexes:")


@app.command()
def check(
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
) -> None:
    """Check that the database answers; prints the engine's current time."""
    db = make_database(database)
    try:
        now = db.check_connection()
    except PgCompatError as exc:
        raise fail(exc) from exc
    console.print(f"[green]✓[/green] Database connection successful. Current time: {now}")


@app.command()
def tables(
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """List tables."""
    db = make_database(database)
    try:
        names = db.list_tables()
    except PgCompatError as exc:
        raise fail(exc) from exc
    output_names(names, as_json=json_out, title="Tables:")
