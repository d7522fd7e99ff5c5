"""
Logging configuration for pclconvert.

This module configures structlog on top of stdlib logging. Library modules log
through ``logging.getLogger(__name__)``; the CLI calls ``configure_logging`` once.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from .settings import settings


def shorten_paths(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Render Path values as plain strings so both renderers print them the same way."""
    for key, value in list(event_dict.items()):
        if hasattr(value, "__fspath__"):
            event_dict[key] = str(value)
    return event_dict


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog and the stdlib root handler."""
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json_output is None else json_output

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            shorten_paths,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a configured logger with service context."""
    logger = structlog.get_logger(name)
    return logger.bind(
        service="pclconvert",
        env=settings.env,
    )
