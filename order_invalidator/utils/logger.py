"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_MASK_VISIBLE_CHARS = 4


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog to render through stdlib logging on stderr.

    Command output on stdout stays machine readable.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to the given module name."""
    return structlog.get_logger(name)


def mask_secret(value: str | None) -> str:
    """Mask a token or secret so only a short prefix is ever logged."""
    if not value:
        return "<empty>"
    if len(value) <= _MASK_VISIBLE_CHARS:
        return "*" * len(value)
    return value[:_MASK_VISIBLE_CHARS] + "*" * 8
