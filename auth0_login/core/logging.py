"""
Logging configuration for the Auth0 login service.

Structured JSON logs for staging/production, a readable format when DEBUG
is on.
"""

import json
import logging
import sys
from typing import Optional

from auth0_login.core.config import settings

# Attributes every LogRecord carries; anything else arrived via ``extra=``
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with single-line exception traces."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            exception_text = self.formatException(record.exc_info)
            log_data["exception"] = exception_text.replace("\n", "\\n")
            exc_type_name: str | None = (
                record.exc_info[0].__name__ if record.exc_info[0] else None
            )
            if exc_type_name:
                log_data["exc_type"] = exc_type_name

        if record.stack_info:
            log_data["stack_info"] = record.stack_info.replace("\n", "\\n")

        # Context passed with logger.info(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(log_level: Optional[str] = None) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                  If None, uses settings.LOG_LEVEL
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO")

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if settings.DEBUG:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = JSONFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Quieten noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy").setLevel(logging.ERROR)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.ERROR)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.info(f"Logging configured with level: {log_level.upper()}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
