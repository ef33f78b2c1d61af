"""
pgcompat logging - structlog events delivered through stdlib ``logging``.

Every module logs dotted event names with key/value fields::

    logger = get_logger(__name__)
    logger.warning("bootstrap.statement_failed", index=3, error="...")

structlog builds and renders the event; the rendered line goes to
``logging.getLogger(name)``. Nothing is ever printed to stdout, so query
output from the CLI and the host application's own stdout stay clean.

Two configurations exist:

- On import, if the host application has not configured structlog itself,
  a library default is installed: events go to stdlib loggers without
  touching handlers or levels. With no handlers configured, Python's
  last-resort handler prints warnings and errors to stderr.
- :func:`configure_logging` is for applications and the CLI: it sets the
  level, picks JSON or console rendering and installs a stderr handler.

Tags:
    logging, structlog, pgcompat
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

_BASE_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
]


def configure_library_logging() -> None:
    """Route events to stdlib loggers, leaving handlers and levels alone."""
    structlog.configure(
        processors=[*_BASE_PROCESSORS, structlog.processors.KeyValueRenderer(key_order=["event"])],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def configure_logging(level: str = "INFO", json_format: bool | None = None) -> None:
    """Configure logging for an application entry point.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        json_format: JSON lines when true, colored console output when
            false; ``None`` picks JSON unless stderr is a terminal.
    """
    numeric_level = getattr(logging, level.upper())
    if json_format is None:
        json_format = not sys.stderr.isatty()

    renderer: Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*_BASE_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)
    logging.getLogger().setLevel(numeric_level)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Bind fields to every event logged inside the ``with`` block.

    Example:
        with LogContext(schema="migrations/001_initial_schema.sql"):
            logger.info("bootstrap.loading")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())


if not structlog.is_configured():
    configure_library_logging()


__all__ = [
    "LogContext",
    "bind_context",
    "configure_library_logging",
    "configure_logging",
    "get_logger",
    "unbind_context",
]
