"""Structured logging configuration using ``structlog``.

Call :func:`setup_logging` once at application startup.  Library code
only ever does ``structlog.get_logger(__name__)`` and logs snake_case
event names with key/value context, e.g.::

    logger.warning("directory_read_failed", path=str(directory), error=str(exc))
"""

from __future__ import annotations

import logging
import sys

import structlog

# Per-request access lines drown out graph build events below DEBUG.
_NOISY_LOGGERS = ("uvicorn.access", "httpx")


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure ``structlog`` and the stdlib root logger.

    Args:
        log_level: Minimum severity level (e.g. ``"DEBUG"``, ``"INFO"``).
        json_logs: Emit one JSON object per line instead of the coloured
            console format.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            *([structlog.processors.format_exc_info] if json_logs else []),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
