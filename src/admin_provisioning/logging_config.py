"""Structlog configuration.

JSON output for deployed functions, colored console output for local
development.
"""

import os
import sys

import structlog


def configure_logging(json: bool | None = None) -> None:
    """
    Configure structlog processors.

    Args:
        json: Force JSON (True) or console (False) rendering. When None,
            console output is used on a TTY or when FORCE_COLOR is set.
    """
    if json is None:
        force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
        json = not (force_color or sys.stdout.isatty())

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
