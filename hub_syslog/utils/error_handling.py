"""
Error handling for the forwarder's message path and transports.

Provides error classification, drop tracking for messages that fail
mid-pipeline, and a decorator that turns transport exceptions into
structured forwarder errors.
"""

import asyncio
import json
from collections.abc import Callable
from datetime import UTC, datetime
from functools import wraps
from typing import Any

import aiohttp
from pydantic import ValidationError

from ..exceptions import (
    DatagramSendError,
    EventParseError,
    HubSyslogError,
    LogSocketConnectionError,
)
from .logging import get_logger, log_dropped_event

logger = get_logger(__name__)


class ErrorClassifier:
    """
    Classifies raw exceptions into structured forwarder errors.
    """

    @staticmethod
    def classify(error: Exception, context: dict[str, Any] | None = None) -> HubSyslogError:
        """
        Classify an exception into a HubSyslogError subclass.

        Args:
            error: The original exception
            context: Additional context information

        Returns:
            Appropriate HubSyslogError subclass
        """
        context = context or {}

        if isinstance(error, HubSyslogError):
            error.context.update(context)
            return error

        if isinstance(error, json.JSONDecodeError | ValidationError):
            return EventParseError(
                f"Malformed log event: {error}",
                original_error=error,
                context=context,
            )

        # Timeouts first: asyncio.TimeoutError is an OSError subclass on 3.11+
        if isinstance(error, asyncio.TimeoutError):
            return LogSocketConnectionError(
                "Timed out connecting to log socket",
                original_error=error,
                url=context.get("url"),
                context=context,
            )

        if isinstance(error, aiohttp.ClientError):
            return LogSocketConnectionError(
                f"Log socket connection failed: {error}",
                original_error=error,
                url=context.get("url"),
                context=context,
            )

        # With a url in context the failure came from the log socket
        if isinstance(error, OSError) and context.get("url"):
            return LogSocketConnectionError(
                f"Log socket connection failed: {error}",
                original_error=error,
                url=context.get("url"),
                context=context,
            )

        if isinstance(error, OSError):
            return DatagramSendError(
                f"Datagram send failed: {error}",
                original_error=error,
                destination=context.get("destination"),
                context=context,
            )

        return HubSyslogError(
            f"Unexpected error: {error}",
            original_error=error,
            context=context,
        )


class DropTracker:
    """
    Records messages dropped by the forwarder.

    Each drop is logged once as a structured warning and counted by error
    type so the health check can report it.
    """

    def __init__(self) -> None:
        self.classifier = ErrorClassifier()
        self.error_stats: dict[str, int] = {}

    def record(
        self,
        error: Exception,
        operation: str,
        context: dict[str, Any] | None = None,
    ) -> HubSyslogError:
        """
        Classify, count and log a dropped message.

        Args:
            error: Exception that caused the drop
            operation: Pipeline step that failed
            context: Additional context information

        Returns:
            The structured error that was logged
        """
        context = dict(context or {})
        context["operation"] = operation

        structured_error = self.classifier.classify(error, context)

        error_key = type(structured_error).__name__
        self.error_stats[error_key] = self.error_stats.get(error_key, 0) + 1

        log_dropped_event(operation, structured_error.to_dict())
        return structured_error

    @property
    def total(self) -> int:
        """Total drops recorded."""
        return sum(self.error_stats.values())

    def get_error_stats(self) -> dict[str, int]:
        """Get drop counts keyed by error type."""
        return self.error_stats.copy()

    def reset_error_stats(self) -> None:
        """Reset drop counts."""
        self.error_stats.clear()


def error_handler(operation: str) -> Callable[..., Callable[..., Any]]:
    """
    Decorator for async transport calls.

    Exceptions are classified, logged at ERROR and re-raised as the
    structured error.

    Args:
        operation: Name of the operation for logging
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                context = create_error_context(operation, function=func.__name__)
                owner = args[0] if args else None
                url = getattr(owner, "url", None)
                if url:
                    context["url"] = url

                structured_error = ErrorClassifier.classify(e, context)
                logger.error(
                    f"Error in {operation}: {structured_error.message}",
                    extra={"error_info": structured_error.to_dict()},
                )
                if structured_error is e:
                    raise
                raise structured_error from e

        return wrapper
    return decorator


def create_error_context(operation: str, **additional_context: Any) -> dict[str, Any]:
    """
    Create standardized error context for consistent logging.

    Args:
        operation: The operation being performed
        **additional_context: Additional context fields

    Returns:
        Standardized context dictionary
    """
    context = {
        "operation": operation,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    context.update(additional_context)
    return context
