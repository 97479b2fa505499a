"""
Test fixtures and configuration for hub-syslog tests.

Unit tests run the forwarder against an in-memory log socket and a recording
UDP sender; network tests use loopback sockets and an in-process aiohttp
server.
"""

import socket
from collections.abc import Generator, Iterable

import pytest

from hub_syslog.config.settings import ForwarderSettings
from hub_syslog.services.forwarder import EventForwarder
from tests.factories import event_frames

SETTINGS_ENV_VARS = [
    "SYSLOG_SERVER",
    "SYSLOG_PORT",
    "SYSLOG_FACILITY",
    "SYSLOG_STYLE",
    "SYSLOG_APP_NAME",
    "FORWARDER_DEVICE_ID",
    "HUB_IP",
    "DEBUG_LOGGING",
    "HUB_LOG_SOCKET_URL",
    "LOG_SOCKET_TIMEOUT",
    "LOG_SOCKET_RECONNECT_DELAY",
]

FORWARDER_DEVICE_ID = 42
HUB_IP = "192.168.1.50"


class RecordingSender:
    """UDP sender stand-in that keeps every line it is asked to send."""

    def __init__(self, fail: bool = False, local_address: str = "10.0.0.5"):
        self.lines: list[str] = []
        self.fail = fail
        self.local_address = local_address
        self.send_failures = 0
        self.closed = False

    def send(self, line: str) -> bool:
        if self.fail:
            self.send_failures += 1
            return False
        self.lines.append(line)
        return True

    def local_ip(self) -> str:
        return self.local_address

    def close(self) -> None:
        self.closed = True


class FakeLogSocket:
    """In-memory log socket that replays a fixed list of frames."""

    def __init__(self, frames: Iterable[str] = ()):
        self.url = "ws://hub.test/logsocket"
        self.on_status = None
        self.frames = list(frames)
        self.is_open = False
        self.open_calls = 0
        self.close_calls = 0
        self.open_error: Exception | None = None

    def _status(self, status: str) -> None:
        if self.on_status is not None:
            self.on_status(f"status: {status}")

    async def open(self) -> None:
        self.open_calls += 1
        if self.open_error is not None:
            raise self.open_error
        self.is_open = True
        self._status("open")

    async def close(self) -> None:
        self.close_calls += 1
        if self.is_open:
            self.is_open = False
            self._status("closing")

    async def messages(self):
        for frame in self.frames:
            yield frame
        self.is_open = False
        self._status("closing")


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings under test."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def forwarder_settings() -> ForwarderSettings:
    """BSD settings pointing at a local collector."""
    return ForwarderSettings(
        server="127.0.0.1",
        port=5514,
        facility="local0",
        style="bsd",
        device_id=FORWARDER_DEVICE_ID,
        hub_ip=HUB_IP,
        debug_logging=True,
        reconnect_delay=0,
    )


@pytest.fixture
def ietf_settings(forwarder_settings: ForwarderSettings) -> ForwarderSettings:
    """Same settings in the IETF dialect."""
    return ForwarderSettings(**{**forwarder_settings.model_dump(), "style": "ietf"})


@pytest.fixture
def recording_sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def fake_log_socket() -> FakeLogSocket:
    return FakeLogSocket()


@pytest.fixture
def forwarder(
    forwarder_settings: ForwarderSettings,
    recording_sender: RecordingSender,
    fake_log_socket: FakeLogSocket,
) -> EventForwarder:
    """Disconnected forwarder wired to in-memory collaborators."""
    return EventForwarder(forwarder_settings, sender=recording_sender, log_socket=fake_log_socket)


@pytest.fixture
async def connected_forwarder(forwarder: EventForwarder) -> EventForwarder:
    await forwarder.initialize()
    return forwarder


@pytest.fixture
def sample_frames() -> list[str]:
    """A handful of app events that pass the self-origin filter."""
    return event_frames(5, type="app")


@pytest.fixture
def udp_collector() -> Generator[socket.socket, None, None]:
    """Loopback UDP socket standing in for a syslog server."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: Fast unit tests with minimal dependencies")
    config.addinivalue_line("markers", "network: Tests that open loopback sockets")
    config.addinivalue_line("markers", "error_handling: Error scenario tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location and fixtures."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "udp_collector" in item.fixturenames:
            item.add_marker(pytest.mark.network)
