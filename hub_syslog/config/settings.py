"""
Forwarder configuration loaded from the environment.

Settings are read from environment variables (or a .env file) and can be
overridden field by field, which is how the CLI applies its flags.
"""

from ipaddress import AddressValueError, IPv4Address, IPv6Address
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError
from ..models.syslog import DEFAULT_FACILITY, SYSLOG_FACILITIES, SyslogStyle

DEFAULT_SYSLOG_PORT = 514
DEFAULT_LOG_SOCKET_URL = "ws://127.0.0.1:8080/logsocket"


class ForwarderSettings(BaseSettings):
    """Configuration for one event forwarder."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Syslog destination
    server: str = Field(..., alias="SYSLOG_SERVER")
    port: int = Field(default=DEFAULT_SYSLOG_PORT, ge=1, le=65535, alias="SYSLOG_PORT")
    facility: str = Field(default=DEFAULT_FACILITY, alias="SYSLOG_FACILITY")
    style: SyslogStyle = Field(default=SyslogStyle.BSD, alias="SYSLOG_STYLE")
    app_name: str = Field(default="hubitat", min_length=1, alias="SYSLOG_APP_NAME")

    # Forwarder identity
    device_id: int | None = Field(default=None, alias="FORWARDER_DEVICE_ID")
    hub_ip: str | None = Field(default=None, alias="HUB_IP")
    debug_logging: bool = Field(default=True, alias="DEBUG_LOGGING")

    # Hub log socket
    log_socket_url: str = Field(default=DEFAULT_LOG_SOCKET_URL, alias="HUB_LOG_SOCKET_URL")
    connect_timeout: float = Field(default=10.0, gt=0, alias="LOG_SOCKET_TIMEOUT")
    reconnect_delay: float = Field(default=5.0, ge=0, alias="LOG_SOCKET_RECONNECT_DELAY")

    @field_validator("server", mode="before")
    @classmethod
    def validate_server(cls, v: Any) -> str:
        """Reject blank server addresses."""
        server = str(v).strip() if v is not None else ""
        if not server:
            raise ValueError("Syslog server address cannot be empty")
        return server

    @field_validator("facility", mode="before")
    @classmethod
    def validate_facility(cls, v: Any) -> str:
        """Facility must be one of the fixed table entries."""
        facility = str(v).strip().lower()
        if facility not in SYSLOG_FACILITIES:
            raise ValueError(
                f"Invalid syslog facility: {v!r} (expected one of {', '.join(SYSLOG_FACILITIES)})"
            )
        return facility

    @field_validator("style", mode="before")
    @classmethod
    def normalize_style(cls, v: Any) -> Any:
        """Accept dialect names case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("hub_ip", mode="before")
    @classmethod
    def validate_hub_ip(cls, v: Any) -> str | None:
        """Empty means auto-detect; anything else must be an IP address."""
        if v is None:
            return None

        hub_ip = str(v).strip()
        if not hub_ip:
            return None

        try:
            return str(IPv4Address(hub_ip))
        except AddressValueError:
            try:
                return str(IPv6Address(hub_ip))
            except AddressValueError:
                raise ValueError(f"Invalid hub IP address: {hub_ip}")

    @property
    def destination(self) -> str:
        """Collector as host:port."""
        return f"{self.server}:{self.port}"


def load_settings(**overrides: Any) -> ForwarderSettings:
    """
    Build settings from the environment, applying non-None overrides.

    Args:
        **overrides: Field values that take precedence over the environment

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If a setting is missing or invalid
    """
    values = {key: value for key, value in overrides.items() if value is not None}

    try:
        return ForwarderSettings(**values)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigurationError(
            f"Invalid forwarder settings: {first['msg']} ({field})",
            original_error=e,
            field=field,
            value=first.get("input"),
        ) from e
