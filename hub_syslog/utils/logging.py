"""
Structured logging configuration for the hub syslog forwarder.

This module sets up stdlib logging with an optional JSON formatter and
configures structlog on top of it, plus helpers for per-event log lines.
"""

import json
import logging
import os
from datetime import UTC, datetime
from typing import Any, cast

import structlog

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "message",
})

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=UTC
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def configure_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    enable_console: bool = True,
    enable_file: bool = False,
    enable_json_logging: bool = False,
    verbose: bool = False,
) -> None:
    """
    Configure logging for the forwarder process.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (defaults to /tmp/hub-syslog.log)
        enable_console: Enable console logging
        enable_file: Enable file logging
        enable_json_logging: Emit one JSON object per record
        verbose: Force DEBUG level
    """
    if log_level is None:
        if verbose:
            log_level = "DEBUG"
        else:
            log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if log_file is None:
        log_file = "/tmp/hub-syslog.log"

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(numeric_level)

    formatter: logging.Formatter = (
        JSONFormatter() if enable_json_logging else logging.Formatter(PLAIN_FORMAT)
    )

    handlers: list[logging.Handler] = []

    if enable_console:
        handlers.append(logging.StreamHandler())

    if enable_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=cast(Any, processors),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_forwarded_event(destination: str, pri: int, line: str) -> None:
    """
    Log one forwarded syslog datagram at DEBUG.

    Args:
        destination: Collector host:port
        pri: PRI value of the message
        line: Rendered syslog line
    """
    logger = get_logger("hub_syslog.events")
    logger.debug(
        "Forwarded event",
        extra={
            "destination": destination,
            "pri": pri,
            "line": line,
            "event_type": "event_forwarded",
        },
    )


def log_dropped_event(reason: str, error: dict[str, Any] | None = None) -> None:
    """
    Log a message that was dropped before forwarding.

    Args:
        reason: Short machine-readable reason
        error: Structured error (HubSyslogError.to_dict()) if one caused the drop
    """
    logger = get_logger("hub_syslog.events")
    extra: dict[str, Any] = {
        "reason": reason,
        "event_type": "event_dropped",
    }

    if error:
        extra["error"] = error

    logger.warning(f"Dropped event: {reason}", extra=extra)
