"""
Health check result for the forwarder.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .syslog import SyslogStyle


class HealthStatus(str, Enum):
    """Overall forwarder health."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    DISCONNECTED = "disconnected"


class ForwarderHealth(BaseModel):
    """
    Snapshot of forwarder state and counters.
    """

    status: HealthStatus = Field(
        ...,
        description="Overall health status"
    )

    connected: bool = Field(
        ...,
        description="Whether the hub log socket is subscribed"
    )

    destination: str = Field(
        ...,
        description="Syslog collector as host:port",
        examples=["192.168.1.10:514"]
    )

    style: SyslogStyle = Field(
        ...,
        description="Output dialect"
    )

    facility: str = Field(
        ...,
        description="Facility applied to every forwarded message"
    )

    forwarded: int = Field(
        0,
        ge=0,
        description="Datagrams sent successfully"
    )

    dropped: int = Field(
        0,
        ge=0,
        description="Messages dropped because of parse or timestamp errors"
    )

    send_failures: int = Field(
        0,
        ge=0,
        description="Datagrams the socket refused to send"
    )

    error_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Drop counts keyed by error type"
    )

    last_forwarded_at: datetime | None = Field(
        None,
        description="When the last datagram was sent"
    )
