"""Configuration for the hub syslog forwarder."""

from .settings import (
    DEFAULT_LOG_SOCKET_URL,
    DEFAULT_SYSLOG_PORT,
    ForwarderSettings,
    load_settings,
)

__all__ = [
    "ForwarderSettings",
    "load_settings",
    "DEFAULT_SYSLOG_PORT",
    "DEFAULT_LOG_SOCKET_URL",
]
