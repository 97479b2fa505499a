"""
Hub log event model.

One HubEvent is built per inbound WebSocket frame and consumed immediately;
events are never stored.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import EventParseError, TimestampParseError

# Hub timestamps look like "2020-05-01 12:00:00.000" (local time, no zone)
EVENT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

# Event type the hub uses for device log lines
DEVICE_EVENT_TYPE = "dev"


class HubEvent(BaseModel):
    """
    A single entry from the hub's log stream.
    """

    type: str = Field(
        ...,
        description="Source kind of the log line",
        examples=["dev", "app", "sys"]
    )

    id: int | str | None = Field(
        None,
        description="Identifier of the device or app that logged the line",
        examples=[42, 1337]
    )

    level: str = Field(
        "",
        description="Hub severity name",
        examples=["error", "warn", "info", "debug", "trace"]
    )

    time: str = Field(
        ...,
        description="Local timestamp in 'yyyy-MM-dd HH:mm:ss.SSS' form",
        examples=["2020-05-01 12:00:00.000"]
    )

    name: str = Field(
        "",
        description="Display name of the source",
        examples=["Motion Sensor", "Rule Machine"]
    )

    msg: str = Field(
        "",
        description="Log message text",
        examples=["triggered", "switch is on"]
    )

    model_config = {
        "extra": "ignore",
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "type": "dev",
                "id": 42,
                "level": "info",
                "time": "2020-05-01 12:00:00.000",
                "name": "Motion Sensor",
                "msg": "triggered",
            }
        }
    }

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> int | str | None:
        """Keep ids as sent; a string id never equals a numeric device id."""
        if isinstance(v, bool) or not isinstance(v, int | str):
            return None
        return v

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> str:
        """A missing or non-string level maps to the default priority."""
        return v if isinstance(v, str) else ""

    @classmethod
    def from_json(cls, raw: str | bytes) -> "HubEvent":
        """
        Parse one inbound frame.

        Args:
            raw: JSON text as received from the log socket

        Returns:
            Validated event

        Raises:
            EventParseError: If the frame is not a JSON object with the event fields
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else str(raw)
            raise EventParseError(
                f"Invalid log event: {e.error_count()} validation error(s)",
                original_error=e,
                raw_message=text,
                context={"errors": _summarize_errors(e)},
            ) from e

    def timestamp(self) -> datetime:
        """
        Parse the event time into a naive local datetime.

        Raises:
            TimestampParseError: If the time does not match EVENT_TIME_FORMAT
        """
        try:
            return datetime.strptime(self.time, EVENT_TIME_FORMAT)
        except ValueError as e:
            raise TimestampParseError(
                f"Unable to parse event time: {self.time!r}",
                original_error=e,
                timestamp=self.time,
                expected_format=EVENT_TIME_FORMAT,
            ) from e

    def is_self_originated(self, device_id: int | None) -> bool:
        """True when this line was logged by the forwarder's own device."""
        if device_id is None:
            return False
        return self.type == DEVICE_EVENT_TYPE and self.id == device_id


def _summarize_errors(error: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": ".".join(str(part) for part in err["loc"]), "type": err["type"]}
        for err in error.errors()
    ]
