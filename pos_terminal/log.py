from __future__ import annotations

import sys

import structlog

from pos_terminal.config import parse_log_format, parse_log_level


def configure_logging(level: str = "WARNING", fmt: str = "console") -> None:
    """Send structured logs to stderr, keeping stdout for command output."""
    min_level = parse_log_level(level)
    if parse_log_format(fmt) == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
