"""
Root Typer application for the pgcompat CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from pgcompat.cli.utils import fail, load_settings
from pgcompat.core.errors import ConfigError
from pgcompat.core.logging import configure_logging

app = Typer(
    name="pgcompat",
    help="pgcompat — PostgreSQL-style queries on an embedded SQLite database.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("pgcompat")
        except PackageNotFoundError:
            from pgcompat import __version__ as v
        typer.echo(f"pgcompat {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """pgcompat CLI — bootstrap, inspect and query the database."""
    try:
        settings = load_settings()
    except ConfigError as exc:
        raise fail(exc) from exc
    configure_logging(level=settings.log_level, json_format=settings.log_json)


# ── Sub-command registration ─────────────────────────────────────────────

from pgcompat.cli.db import app as db_app  # noqa: E402
from pgcompat.cli.query import query  # noqa: E402

app.add_typer(db_app, name="db", help="Database operations.")
app.command(name="query")(query)
