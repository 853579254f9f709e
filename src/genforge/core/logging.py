"""
genforge.core.logging - structlog Setup
=========================================

Every GenForge module logs through ``structlog.get_logger()`` and binds its
own context (component, role, run id). The library never configures logging
on import; applications call ``configure_logging()`` once at startup.

Output Formats:
    dev  (json_logs=False): colored key/value console lines
    prod (json_logs=True):  one JSON object per line for log aggregation

Usage:
    >>> config = load_config()
    >>> configure_logging(config.log_level, json_logs=config.json_logs)
"""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: str = "INFO", *, json_logs: bool = False) -> None:
    """Configure structlog processors and the minimum log level.

    Args:
        level: Standard logging level name (case-insensitive).
        json_logs: Render JSON lines instead of console output.

    Raises:
        ValueError: If ``level`` is not a known logging level name.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    renderer: structlog.typing.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
