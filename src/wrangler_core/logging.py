"""Structured logging setup.

The engine only ever calls ``structlog.get_logger``; applications (the CLI,
a build script) decide how events are rendered by calling
:func:`configure_logging` once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for wrangler output.

    Args:
        level: Minimum level name to emit (DEBUG, INFO, WARNING, ERROR).
        json_output: Render events as JSON lines instead of console text.
        stream: Destination stream. Defaults to stderr so build output on
            stdout stays clean.

    Raises:
        ValueError: If ``level`` is not a known level name.

    Example:
        >>> configure_logging("DEBUG")
        >>> configure_logging(json_output=True)
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {LOG_LEVELS}")
    level_no = logging.getLevelName(level_name)

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )

    # Stdlib loggers (config resolution) follow the same threshold.
    logging.basicConfig(level=level_no, stream=stream or sys.stderr, format="%(message)s")
    logging.getLogger("wrangler_core").setLevel(level_no)
