"""structlog setup.

Learn: structlog's default pipeline already merges contextvars, which is
what makes the request_id bound by RequestIdMiddleware show up on every
line. We only pick the level and the renderer: colored console output
for development, one JSON object per line for log shippers.
"""

import logging

import structlog

from odyssey.config import settings


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """Configure structlog once at startup."""
    level_name = (level or settings.log_level).upper()
    use_json = settings.log_json if json is None else json

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        cache_logger_on_first_use=True,
    )
