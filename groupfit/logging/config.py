"""
Logging setup for groupfit.

Events are emitted through structlog with group keys and counts as key/value
pairs; stdlib logging is the transport so library users keep control of
handlers and levels.
"""
import logging
import sys

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(level: str = "INFO", format_json: bool = False) -> None:
    """Route structlog through stdlib logging at *level*, as JSON lines or console text."""
    logging.basicConfig(level=getattr(logging, level.upper()), stream=sys.stdout, format="%(message)s")

    renderer = structlog.processors.JSONRenderer() if format_json else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger(name)
