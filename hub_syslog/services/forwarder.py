"""
Event forwarder: hub log events in, syslog datagrams out.

The forwarder owns one log socket subscription and one UDP sender. Each
inbound frame is handled to completion (parse, filter, map, format, send)
before the next one is read.
"""

from datetime import UTC, datetime

from ..config.settings import ForwarderSettings
from ..exceptions import EventParseError, TimestampParseError
from ..models.event import HubEvent
from ..models.health import ForwarderHealth, HealthStatus
from ..models.syslog import compute_pri, facility_index, severity_to_priority
from ..utils.error_handling import DropTracker
from ..utils.logging import get_logger, log_forwarded_event
from .formatter import format_syslog_message
from .log_socket import LogSocketClient
from .udp_sender import UDPSyslogSender

logger = get_logger(__name__)


class EventForwarder:
    """
    Forwards hub log events to a remote syslog collector.

    Connection state is a single flag scoped to this instance:
    Disconnected -> connect() -> Connected -> disconnect() -> Disconnected.
    Transport status lines from the log socket also move the flag.
    """

    def __init__(
        self,
        settings: ForwarderSettings,
        sender: UDPSyslogSender | None = None,
        log_socket: LogSocketClient | None = None,
    ):
        self._settings = settings
        self._sender = sender or UDPSyslogSender(settings.server, settings.port)
        self._log_socket = log_socket or LogSocketClient(
            settings.log_socket_url, timeout=settings.connect_timeout
        )
        self._log_socket.on_status = self.websocket_status

        self._connected = False
        self._hub_ip: str | None = settings.hub_ip
        self._drops = DropTracker()
        self._forwarded = 0
        self._last_forwarded_at: datetime | None = None
        self._last_send_ok: bool | None = None

    @property
    def settings(self) -> ForwarderSettings:
        return self._settings

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def hub_ip(self) -> str:
        """Address written as the syslog hostname; discovered once if not configured."""
        if self._hub_ip is None:
            self._hub_ip = self._sender.local_ip()
            self._log_debug(f"using {self._hub_ip} as hub address")
        return self._hub_ip

    def _log_debug(self, message: str) -> None:
        if self._settings.debug_logging:
            logger.debug(message)

    async def connect(self) -> None:
        """Subscribe to the hub log socket."""
        if self._connected:
            logger.warning("already connected to the log socket")
            return

        self._log_debug("connecting to log socket")
        await self._log_socket.open()
        self._connected = True

    async def disconnect(self) -> None:
        """Drop the log socket subscription."""
        if not self._connected:
            logger.warning("not connected to the log socket")
            return

        self._log_debug("disconnecting from log socket")
        await self._log_socket.close()
        self._connected = False

    async def initialize(self) -> None:
        """(Re)subscribe; always ends connected."""
        self._log_debug("initialize() called")

        if self._connected:
            await self.disconnect()
        await self.connect()

        settings = self._settings
        self._log_debug(
            f"sending {settings.style.value}-formatted events to {settings.destination} "
            f"using facility {settings.facility} ({facility_index(settings.facility)})"
        )

    async def refresh(self) -> None:
        """Disconnect and connect again."""
        await self.disconnect()
        await self.connect()

    async def update_settings(self, settings: ForwarderSettings) -> None:
        """
        Apply new settings and resubscribe.

        The UDP sender is rebuilt only when its address changes, the log
        socket only when its URL or connect timeout changes.
        """
        self._log_debug("updated() called")
        previous = self._settings
        self._settings = settings

        if (settings.server, settings.port) != (previous.server, previous.port):
            self._sender.close()
            self._sender = UDPSyslogSender(settings.server, settings.port)

        if (settings.log_socket_url, settings.connect_timeout) != (
            previous.log_socket_url,
            previous.connect_timeout,
        ):
            if self._connected:
                await self.disconnect()
            self._log_socket = LogSocketClient(
                settings.log_socket_url, timeout=settings.connect_timeout
            )
            self._log_socket.on_status = self.websocket_status

        self._hub_ip = settings.hub_ip

        await self.initialize()

    def handle(self, raw_message: str | bytes) -> str | None:
        """
        Forward one inbound frame.

        Args:
            raw_message: JSON text from the log socket

        Returns:
            The syslog line that was sent, or None if the message was dropped
        """
        if not self._connected:
            return None

        try:
            event = HubEvent.from_json(raw_message)
        except EventParseError as e:
            self._drops.record(e, "parse")
            return None

        # Our own log lines would come straight back through the socket
        if event.is_self_originated(self._settings.device_id):
            return None

        priority = severity_to_priority(event.level)
        facility = facility_index(self._settings.facility)

        try:
            timestamp = event.timestamp()
        except TimestampParseError as e:
            self._drops.record(e, "timestamp", {"source": event.name, "type": event.type})
            return None

        line = format_syslog_message(
            self._settings.style,
            facility,
            priority,
            timestamp,
            event.name,
            event.msg,
            self.hub_ip,
            app_name=self._settings.app_name,
            procid=event.id,
            msgid=event.type,
        )

        self._last_send_ok = self._sender.send(line)
        if not self._last_send_ok:
            return None

        self._forwarded += 1
        self._last_forwarded_at = datetime.now(UTC)
        if self._settings.debug_logging:
            log_forwarded_event(self._settings.destination, compute_pri(facility, priority), line)
        return line

    def websocket_status(self, status_line: str) -> None:
        """
        Track transport status lines such as 'status: open'.

        'open' marks the forwarder connected; 'closing' and 'closed' mark it
        disconnected so no further frames are forwarded.
        """
        status = status_line.split()
        if len(status) < 2:
            self._log_debug(f"log socket status: {status_line!r}")
            return

        self._log_debug(f"log socket status: {status[1]}")

        if status[1] == "open":
            self._connected = True
        elif status[1] in ("closing", "closed"):
            self._connected = False

    async def run(self) -> int:
        """
        Handle frames from the log socket until the stream ends.

        Returns:
            Number of frames received
        """
        received = 0
        async for raw_message in self._log_socket.messages():
            received += 1
            self.handle(raw_message)
        return received

    def health_check(self) -> ForwarderHealth:
        """Snapshot of connection state and counters."""
        if not self._connected:
            status = HealthStatus.DISCONNECTED
        elif self._last_send_ok is False:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.HEALTHY

        return ForwarderHealth(
            status=status,
            connected=self._connected,
            destination=self._settings.destination,
            style=self._settings.style,
            facility=self._settings.facility,
            forwarded=self._forwarded,
            dropped=self._drops.total,
            send_failures=getattr(self._sender, "send_failures", 0),
            error_counts=self._drops.get_error_stats(),
            last_forwarded_at=self._last_forwarded_at,
        )

    async def close(self) -> None:
        """Disconnect if needed and release the UDP socket."""
        if self._connected:
            await self.disconnect()
        else:
            await self._log_socket.close()
        self._sender.close()
