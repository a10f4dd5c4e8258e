"""
Structured logging configuration for services using the error core.

This module configures `structlog` on top of the standard library so that
every entry is a structured event enriched with the service name and the
current correlation ID. It also provides `log_translated_error`, the logging
side of the error boundary: the translator itself never logs, so the
transport layer hands each translated failure to this function.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

from errorcore.api.schemas.responses import ErrorResponse
from errorcore.core.config import get_settings
from errorcore.errors.exceptions import StructuredError

# Context variable to hold the correlation ID for the current request context.
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def setup_structured_logging() -> None:
    """Configures structured logging for the application.

    Entries are rendered as JSON unless ``json_logs`` is disabled in the
    settings, in which case the human-friendly console renderer is used.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level, logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_logs
        else structlog.dev.ConsoleRenderer()
    )

    shared_processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _add_request_context,
        renderer,
    ]

    structlog.configure(
        processors=shared_processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_request_context(
    logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Adds the service name and the current correlation ID to an entry."""
    event_dict.setdefault("service", get_settings().service_name)

    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)

    return event_dict


def log_translated_error(logger, raised: BaseException, response: ErrorResponse) -> None:
    """Logs a failure that was translated into an error response.

    Client errors (4xx) are logged at warning level with the single-line
    diagnostic of the structured error. Server errors (5xx) are logged at
    error level with the traceback. Both are keyed by the response's
    correlation ID so that a client report can be matched to the entry.

    Args:
        logger: The `structlog` logger instance to use.
        raised: The error that reached the boundary.
        response: The response produced for it by the translator.
    """
    log_data: Dict[str, Any] = {
        "error_id": response.correlation_id,
        "error_code": response.error.code,
        "http_status": response.status_code,
        "error_type": type(raised).__name__,
    }
    if isinstance(raised, StructuredError):
        log_data["diagnostic"] = raised.to_log_string()

    if response.status_code >= 500:
        logger.error("Request failed", exc_info=raised, **log_data)
    else:
        logger.warning("Request rejected", **log_data)


def set_correlation_id(correlation_id: str) -> None:
    """Sets the correlation ID for the current asynchronous context.

    The ID is stored in a `ContextVar`, so every entry logged while handling
    the same request or task carries it without being passed around.

    Args:
        correlation_id: The correlation ID to set for the current context.
    """
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Retrieves the correlation ID from the current asynchronous context.

    Returns:
        The current correlation ID, or `None` if it has not been set.
    """
    return correlation_id_var.get()


def generate_correlation_id() -> str:
    """Generates a new, unique correlation ID using UUID version 4."""
    return str(uuid.uuid4())


def clear_correlation_id() -> None:
    """Clears the correlation ID from the current asynchronous context.

    This should be called at the end of a request so that the ID does not
    leak into unrelated work scheduled on the same context.
    """
    correlation_id_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Retrieves a `structlog` logger instance.

    Args:
        name: The name of the logger, typically the module's `__name__`.

    Returns:
        A configured `structlog` logger instance.
    """
    return structlog.get_logger(name)
