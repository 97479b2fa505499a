"""
Data models for the hub syslog forwarder.

This module contains the hub event model, the syslog facility and severity
tables, and the health check result.
"""

from .event import DEVICE_EVENT_TYPE, EVENT_TIME_FORMAT, HubEvent
from .health import ForwarderHealth, HealthStatus
from .syslog import (
    DEFAULT_FACILITY,
    DEFAULT_PRIORITY,
    LEVEL_PRIORITIES,
    SYSLOG_FACILITIES,
    Severity,
    SyslogStyle,
    compute_pri,
    facility_index,
    severity_to_priority,
)

__all__ = [
    # Event model
    "HubEvent",
    "EVENT_TIME_FORMAT",
    "DEVICE_EVENT_TYPE",
    # Syslog tables
    "SYSLOG_FACILITIES",
    "DEFAULT_FACILITY",
    "LEVEL_PRIORITIES",
    "DEFAULT_PRIORITY",
    "Severity",
    "SyslogStyle",
    "facility_index",
    "severity_to_priority",
    "compute_pri",
    # Health
    "ForwarderHealth",
    "HealthStatus",
]
