"""structlog configuration.

Learn: Modules just call structlog.get_logger() and log dotted event
names with keyword context (logger.info("events.created", event_id=3)).
This module decides how those entries are rendered — coloured console
lines in development, one JSON object per line when log_json is set.
RequestIdMiddleware binds request_id into contextvars, and
merge_contextvars copies it onto every entry.
"""

import logging

import structlog


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structlog once at startup."""
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
