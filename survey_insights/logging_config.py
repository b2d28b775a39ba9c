"""Logging configuration for the Survey Insights service.

This module sets up structured logging with JSON formatting for production
and human-readable formatting for development. Records emitted by the
statistics engine carry company_id / survey_id context so failures can be
traced back to the tenant whose dashboard fell back to an empty report.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from survey_insights.config import get_settings

# Attributes present on every LogRecord; anything else was passed via ``extra``
_RESERVED_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
})

# Context fields shown inline by the development formatter
_CONTEXT_FIELDS = ("request_id", "company_id", "survey_id")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production.

    Formats log records as JSON objects with timestamp, level, message,
    and additional context fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add any custom extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development.

    Formats log records with color coding and clear structure for
    easier reading during development.
    """

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors for development.

        Args:
            record: Log record to format

        Returns:
            Colored, formatted log string
        """
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        formatted = (
            f"{color}[{record.levelname:8}]{reset} "
            f"{record.name:30} - {record.getMessage()}"
        )

        context = [
            f"{field}={getattr(record, field)}"
            for field in _CONTEXT_FIELDS
            if hasattr(record, field)
        ]
        if context:
            formatted += f" [{' '.join(context)}]"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def setup_logging() -> None:
    """Configure application logging based on environment.

    In production, uses JSON formatting for structured logs.
    In development, uses colored human-readable formatting.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.log_level)

    if settings.is_production:
        formatter = JSONFormatter()
    else:
        formatter = DevelopmentFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Set log levels for third-party libraries
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured - Environment: {settings.environment}, "
        f"Level: {settings.log_level}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
