"""Structured logging for ravenlite."""
import logging
import json
import time
from typing import Optional
from contextlib import contextmanager
import os

# Parent of every module logger in the package. Silent until the
# application configures logging.
logger = logging.getLogger("ravenlite")
logger.addHandler(logging.NullHandler())


# JSON formatter for structured logging
class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(level: Optional[str] = None) -> logging.Handler:
    """
    Attach a JSON console handler to the ravenlite logger.

    The library never calls this itself; applications (and the ravenlite-test
    command) opt in. Calling it again replaces the previous handler.

    Args:
        level: Log level name (default: RAVEN_LOG_LEVEL or INFO)

    Returns:
        logging.Handler: The installed handler
    """
    level_name = (level or os.getenv("RAVEN_LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    for existing in list(logger.handlers):
        if isinstance(existing.formatter, JSONFormatter):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    return handler


def log_capture(event_id: str, transport: str, level: str, duration_ms: float):
    """Log a delivered event with structured data."""
    logger.info(f"Captured event {event_id}", extra={
        "extra_fields": {
            "event_id": event_id,
            "transport": transport,
            "event_level": level,
            "duration_ms": round(duration_ms, 2),
            "is_slow": duration_ms > 1000,  # Flag slow sends (>1s)
        }
    })


def log_error(event_id: str, error_type: str, error_message: str, **context):
    """Log a failed capture with context."""
    logger.error(f"Failed to capture event {event_id}: {error_message}", extra={
        "extra_fields": {
            "event_id": event_id,
            "error_type": error_type,
            "error_message": error_message[:500],  # Truncate long errors
            **context
        }
    })


@contextmanager
def track_duration():
    """Context manager to track operation duration."""
    start_time = time.perf_counter()
    yield lambda: (time.perf_counter() - start_time) * 1000  # Return duration in ms
