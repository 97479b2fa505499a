"""
Syslog line renderers.

BSD output follows the RFC 3164 layout the hub's syslog drivers have always
produced. IETF output follows the RFC 5424 header grammar:

    <PRI>1 TIMESTAMP HOSTNAME APP-NAME PROCID MSGID STRUCTURED-DATA MSG

All functions here are pure; the same inputs always give the same line.
"""

from datetime import datetime

from ..models.syslog import SyslogStyle, compute_pri

# Fixed English abbreviations; strftime("%b") follows the process locale
BSD_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

NILVALUE = "-"
RFC5424_VERSION = 1

# RFC 5424 section 6 field limits
MAX_HOSTNAME_LENGTH = 255
MAX_APP_NAME_LENGTH = 48
MAX_PROCID_LENGTH = 128
MAX_MSGID_LENGTH = 32


def format_bsd_timestamp(dt: datetime) -> str:
    """Render 'MMM dd HH:mm:ss' with no year or zone."""
    return f"{BSD_MONTHS[dt.month - 1]} {dt.day:02d} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"


def format_ietf_timestamp(dt: datetime) -> str:
    """Render an RFC 3339 timestamp with milliseconds and offset; naive means local."""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.isoformat(timespec="milliseconds")


def _header_field(value: str | int | None, max_length: int) -> str:
    """Printable, space-free header token, or NILVALUE."""
    if value is None:
        return NILVALUE

    text = str(value).strip()
    if not text:
        return NILVALUE

    token = "".join(ch if 33 <= ord(ch) <= 126 else "_" for ch in text)
    return token[:max_length]


def bsd_formatter(
    facility: int,
    priority: int,
    timestamp: datetime,
    name: str,
    message: str,
    hub_ip: str,
    app_name: str = "hubitat",
) -> str:
    """
    Render a BSD-style syslog line.

    Args:
        facility: Facility code (0-23)
        priority: Severity code (0-7)
        timestamp: Event time
        name: Source label of the event
        message: Event message
        hub_ip: Address of the originating hub
        app_name: Tag written before the event name

    Returns:
        '<PRI>MMM dd HH:mm:ss HUBIP APP: NAME: MSG'
    """
    pri = compute_pri(facility, priority)
    return f"<{pri}>{format_bsd_timestamp(timestamp)} {hub_ip} {app_name}: {name}: {message}"


def ietf_formatter(
    facility: int,
    priority: int,
    timestamp: datetime,
    name: str,
    message: str,
    hub_ip: str,
    app_name: str = "hubitat",
    procid: str | int | None = None,
    msgid: str | None = None,
) -> str:
    """
    Render an RFC 5424 syslog line with no structured data.

    Args:
        facility: Facility code (0-23)
        priority: Severity code (0-7)
        timestamp: Event time; naive values are treated as local time
        name: Source label of the event, prefixed to the message
        message: Event message
        hub_ip: HOSTNAME field
        app_name: APP-NAME field
        procid: PROCID field (the hub uses the device or app id)
        msgid: MSGID field (the hub uses the event type)

    Returns:
        '<PRI>1 TIMESTAMP HOSTNAME APP-NAME PROCID MSGID - NAME: MSG'
    """
    pri = compute_pri(facility, priority)
    header = " ".join((
        f"<{pri}>{RFC5424_VERSION}",
        format_ietf_timestamp(timestamp),
        _header_field(hub_ip, MAX_HOSTNAME_LENGTH),
        _header_field(app_name, MAX_APP_NAME_LENGTH),
        _header_field(procid, MAX_PROCID_LENGTH),
        _header_field(msgid, MAX_MSGID_LENGTH),
        NILVALUE,
    ))
    return f"{header} {name}: {message}"


def format_syslog_message(
    style: SyslogStyle | str,
    facility: int,
    priority: int,
    timestamp: datetime,
    name: str,
    message: str,
    hub_ip: str,
    app_name: str = "hubitat",
    procid: str | int | None = None,
    msgid: str | None = None,
) -> str:
    """Render a line in the requested dialect."""
    style = SyslogStyle(style)
    if style is SyslogStyle.IETF:
        return ietf_formatter(
            facility, priority, timestamp, name, message, hub_ip,
            app_name=app_name, procid=procid, msgid=msgid,
        )
    return bsd_formatter(facility, priority, timestamp, name, message, hub_ip, app_name=app_name)
