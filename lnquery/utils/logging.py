"""
Structured logging configuration using structlog.

- JSON logging for production
- Correlation IDs for per-query tracking
- Sensitive data filtering (node credentials never reach a log line)
- Performance metrics
"""

import logging
import sys
import time
import uuid
from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor

from lnquery.utils.sanitize import (
    REDACTED,
    is_sensitive_field,
    sanitize_error_message,
    sanitize_for_logging,
)

# Context variable for tracking correlation IDs across async boundaries
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Keys whose string values are run through the message sanitizer
_MESSAGE_KEYS = ("error", "message", "reason", "detail")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: Custom correlation ID. If None, generates a new UUID.

    Returns:
        The correlation ID that was set.
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID from context."""
    _correlation_id_var.set(None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add correlation ID to all log entries.

    Each query gets its own id, so every line logged while answering it
    (classification, alias lookups, formatting) can be grouped.
    """
    correlation_id = get_correlation_id()
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def filter_sensitive_data(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Filter sensitive data from logs (macaroons, certificates, pairing phrases, ...).

    Keys that look sensitive are replaced outright; free-text values such as
    ``error`` go through the message sanitizer so embedded paths are redacted.
    """
    for key in list(event_dict.keys()):
        if key == "event":
            continue
        if is_sensitive_field(key):
            event_dict[key] = REDACTED
        elif key in _MESSAGE_KEYS and isinstance(event_dict[key], str):
            event_dict[key] = sanitize_error_message(event_dict[key])
        elif isinstance(event_dict[key], Mapping):
            event_dict[key] = sanitize_for_logging(event_dict[key])

    # Also check nested event dict
    if isinstance(event_dict.get("event"), Mapping):
        event_dict["event"] = sanitize_for_logging(event_dict["event"])

    return event_dict


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to every log entry."""
    from lnquery import __version__

    event_dict["app"] = "lnquery"
    event_dict["version"] = __version__
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    dev_mode: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to output JSON logs (recommended for production)
        dev_mode: Whether to use development-friendly output
    """
    # Shared processors for all configurations
    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_correlation_id,
        add_app_context,
        filter_sensitive_data,
    ]

    if dev_mode:
        # Development: colorful console output
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    elif json_logs:
        # Production: JSON output for log aggregation
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # Simple production: key-value pairs
        processors = shared_processors + [
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr; stdout carries query answers (``lnquery query --json``).
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("intent_parsed", operation="liquidity", has_attributes=True)
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


class LogPerformance:
    """
    Context manager for logging performance metrics.

    Usage:
        with LogPerformance("alias_enrichment", logger):
            # ... expensive operation
            pass
    """

    def __init__(self, operation: str, logger: structlog.stdlib.BoundLogger):
        self.operation = operation
        self.logger = logger
        self.start_time: float = 0

    def __enter__(self) -> "LogPerformance":
        self.start_time = time.perf_counter()
        self.logger.debug(f"{self.operation}_started")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        duration = time.perf_counter() - self.start_time

        if exc_type is None:
            self.logger.info(
                f"{self.operation}_completed",
                duration_ms=round(duration * 1000, 2),
                operation=self.operation,
            )
        else:
            self.logger.error(
                f"{self.operation}_failed",
                duration_ms=round(duration * 1000, 2),
                operation=self.operation,
                error=str(exc_val),
                error_type=exc_type.__name__ if exc_type else None,
            )


# Initialize logging on module import
configure_logging()
