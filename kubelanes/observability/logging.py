"""Structured logging configuration using structlog.

Logs always go to stderr so that command output on stdout stays valid JSON.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOG_LEVELS = ("debug", "info", "warning", "error")
LOG_FORMATS = ("json", "console")


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def setup_logging(level: str = "info", fmt: str = "json", stream: TextIO | None = None) -> None:
    """Configure structlog for the given level and output format.

    Args:
        level:  One of debug, info, warning, error.
        fmt:    ``json`` for machine-readable lines, ``console`` for humans.
        stream: Destination; defaults to the current ``sys.stderr``.
    """
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Invalid log format: {fmt}. Must be one of {LOG_FORMATS}")
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            _renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
