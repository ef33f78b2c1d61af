"""
CLI layer for pgcompat.

A Typer application whose commands delegate to :mod:`pgcompat.core`; this
package only parses arguments and renders output.

Entry point::

    pgcompat --help
"""

from pgcompat.cli.app import app

__all__ = ["app"]
