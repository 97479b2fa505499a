"""
Syslog protocol tables: facilities, severities and dialects.

The facility table is ordered; a facility's numeric code is its position,
matching the numbering in RFC 3164 section 4.1.1 and RFC 5424 section 6.2.1.
"""

from enum import Enum, IntEnum

SYSLOG_FACILITIES: tuple[str, ...] = (
    "kern",
    "user",
    "mail",
    "daemon",
    "auth",
    "syslog",
    "lpr",
    "news",
    "uucp",
    "cron",
    "authpriv",
    "ftp",
    "ntp",
    "security",
    "console",
    "clock daemon",
    "local0",
    "local1",
    "local2",
    "local3",
    "local4",
    "local5",
    "local6",
    "local7",
)

DEFAULT_FACILITY = "local0"


class Severity(IntEnum):
    """RFC 5424 severity codes."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7


class SyslogStyle(str, Enum):
    """Output dialect for forwarded messages."""

    BSD = "bsd"
    IETF = "ietf"


# Hub level names; matched exactly
LEVEL_PRIORITIES: dict[str, Severity] = {
    "error": Severity.ERROR,
    "warn": Severity.WARNING,
    "info": Severity.INFORMATIONAL,
    "debug": Severity.DEBUG,
    "trace": Severity.DEBUG,
}

DEFAULT_PRIORITY = Severity.INFORMATIONAL


def facility_index(facility: str) -> int:
    """
    Return the numeric syslog code for a facility name.

    Args:
        facility: One of the names in SYSLOG_FACILITIES

    Returns:
        Zero-based position of the facility in the table

    Raises:
        ValueError: If the facility is not in the table
    """
    try:
        return SYSLOG_FACILITIES.index(facility)
    except ValueError:
        raise ValueError(f"Unknown syslog facility: {facility!r}") from None


def severity_to_priority(level: str) -> int:
    """Map a hub level name to a syslog severity, defaulting to informational."""
    return int(LEVEL_PRIORITIES.get(level, DEFAULT_PRIORITY))


def compute_pri(facility: int, priority: int) -> int:
    """PRI value for the syslog header: facility * 8 + severity."""
    return (facility * 8) + priority
