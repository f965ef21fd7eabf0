"""
Structured logging configuration using structlog.

Provides JSON-structured logs that are queryable and include:
- Timestamp
- Log level
- Logger name
- Event name plus key/value context

The value types log registry activity (currencies, exchanges, asset types)
and fallbacks at debug level, so they stay silent unless configured otherwise.
"""

import logging
import sys
from typing import Optional, TextIO

import structlog


def configure_structlog(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure structlog for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output, stdout when omitted
    """
    stream: TextIO = sys.stdout if not log_file else open(log_file, "a")

    # Set up standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    # Configure structlog
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
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
