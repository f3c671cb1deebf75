"""structlog setup shared by both process generations."""

import logging
import sys

import structlog

from apidump.core.settings import AppConfig


def configure_logging(config: AppConfig) -> None:
    """Route structlog output to stderr at the configured level.

    stdout is left to the success message so callers can capture it.
    """
    renderer: structlog.types.Processor
    if config.is_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
