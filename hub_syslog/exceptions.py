"""
Custom exceptions for the hub syslog forwarder.

Every failure on the message path is turned into one of these structured
errors so it can be logged with severity, category and context before the
message is dropped.
"""

from enum import Enum
from typing import Any


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling priorities."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification and recovery strategies."""

    PARSE = "parse"
    TIMESTAMP = "timestamp"
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class HubSyslogError(Exception):
    """
    Base exception for all forwarder errors.

    Carries severity, category, context and a recovery hint so callers can
    log the error as a single structured record.
    """

    def __init__(
        self,
        message: str,
        *,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        context: dict[str, Any] | None = None,
        recoverable: bool = False,
        recovery_hint: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.category = category
        self.context = context or {}
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
            "context": self.context,
            "original_error": str(self.original_error) if self.original_error else None,
        }


class EventParseError(HubSyslogError):
    """Raised when an inbound frame is not a valid JSON log event."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        raw_message: str | None = None,
        **kwargs: Any
    ) -> None:
        context = kwargs.pop('context', {})
        if raw_message is not None:
            # Frames can be large; keep enough to recognise the payload
            context["raw_message"] = raw_message[:256]

        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.PARSE,
            recoverable=False,
            recovery_hint="Message dropped; check the hub log socket payload format",
            original_error=original_error,
            context=context,
            **kwargs
        )


# Name used for the inbound parse failure in the protocol description
ParseError = EventParseError


class TimestampParseError(HubSyslogError):
    """Raised when an event's time field does not match the hub format."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        timestamp: str | None = None,
        expected_format: str | None = None,
        **kwargs: Any
    ) -> None:
        context = {
            "timestamp": timestamp,
            "expected_format": expected_format,
        }
        context = {k: v for k, v in context.items() if v is not None}

        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.TIMESTAMP,
            recoverable=False,
            recovery_hint="Message dropped; expected 'yyyy-MM-dd HH:mm:ss.SSS'",
            original_error=original_error,
            context=context,
            **kwargs
        )


class ConfigurationError(HubSyslogError):
    """Raised when forwarder settings are missing or invalid."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        field: str | None = None,
        value: Any | None = None,
        **kwargs: Any
    ) -> None:
        context = {}
        if field:
            context["field"] = field
        if value is not None:
            context["invalid_value"] = str(value)

        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.CONFIGURATION,
            recoverable=False,
            recovery_hint="Correct the SYSLOG_* / HUB_* settings or CLI flags",
            original_error=original_error,
            context=context,
            **kwargs
        )


class LogSocketConnectionError(HubSyslogError):
    """Raised when the hub log WebSocket cannot be opened."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        url: str | None = None,
        **kwargs: Any
    ) -> None:
        context = kwargs.pop('context', {})
        if url:
            context["url"] = url

        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.CONNECTION,
            recoverable=True,
            recovery_hint="Check that the hub is reachable; the connection will be retried",
            original_error=original_error,
            context=context,
            **kwargs
        )


class DatagramSendError(HubSyslogError):
    """Raised (or recorded) when a syslog datagram cannot be sent."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        destination: str | None = None,
        **kwargs: Any
    ) -> None:
        context = kwargs.pop('context', {})
        if destination:
            context["destination"] = destination

        super().__init__(
            message,
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.TRANSPORT,
            recoverable=True,
            recovery_hint="Check the syslog server address and local network",
            original_error=original_error,
            context=context,
            **kwargs
        )
