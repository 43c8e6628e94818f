"""Logging and observability configuration using Pydantic Logfire.

All modules should use Python's standard logging library (logging.getLogger(__name__)),
and Logfire captures and enriches these logs once configured.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Task completed", task_id="gratitude", xp=10)
"""

import logging

import logfire

from habitforge import __version__
from habitforge.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment.

    Without a token nothing leaves the process; spans still run locally.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name="habitforge",
        service_version=__version__,
        environment=settings.environment,
        send_to_logfire="if-token-present",
        console=False,
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def span(name: str) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Usage:
        with span("session_service.complete_task"):
            # Your service logic here
            pass
    """
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (task_id, date, operation, etc.)

    Usage:
        log_with_context(logger, "info", "Streak updated", current_streak=3, operation="update_streak")
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)
