"""Structured logging setup."""

import logging
import sys
from typing import Optional

import structlog

_LOGGING_CONFIGURED = False


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; only the first call takes effect.

    Args:
        level: Log level name (defaults to settings.log_level)
        json_logs: Render JSON lines instead of console output (defaults to settings.log_json)
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    from pr_reviewer.core.config import settings

    level_name = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.log_json

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _LOGGING_CONFIGURED = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to a module name."""
    return structlog.get_logger(name)
