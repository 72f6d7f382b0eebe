"""
Structured Logging

structlog configuration shared by the API gateway and CLI entry points.
"""

import logging

import structlog

from ..config import get_config


def setup_logging() -> None:
    """
    Configure structlog for the application.

    - Context variable merging for request-scoped fields
    - Log level filtering based on ``log_level``
    - Console output locally, JSON lines everywhere else
    """
    config = get_config()
    log_level = logging.getLevelName(config.log_level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.is_local
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
