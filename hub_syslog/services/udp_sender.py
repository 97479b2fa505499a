"""
Fire-and-forget UDP transport for syslog lines.
"""

import socket

from ..exceptions import DatagramSendError
from ..utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_LOCAL_IP = "127.0.0.1"


class UDPSyslogSender:
    """Sends one datagram per syslog line to a fixed collector."""

    def __init__(self, host: str, port: int, encoding: str = "utf-8"):
        self.host = host
        self.port = port
        self.encoding = encoding
        self.send_failures = 0
        self.last_error: DatagramSendError | None = None
        self._sock: socket.socket | None = None

    def __enter__(self) -> "UDPSyslogSender":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def destination(self) -> str:
        return f"{self.host}:{self.port}"

    def _socket(self) -> socket.socket:
        if self._sock is None:
            family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
            self._sock = socket.socket(family, socket.SOCK_DGRAM)
        return self._sock

    def send(self, line: str) -> bool:
        """
        Send a single syslog datagram.

        Nothing is read back and nothing is retried. Socket errors are logged
        and counted, never raised.

        Args:
            line: Rendered syslog message

        Returns:
            True if the OS accepted the datagram, False otherwise
        """
        payload = line.encode(self.encoding, errors="replace")
        try:
            self._socket().sendto(payload, (self.host, self.port))
        except OSError as e:
            self.send_failures += 1
            self.last_error = DatagramSendError(
                f"Failed to send syslog datagram to {self.destination}: {e}",
                original_error=e,
                destination=self.destination,
                context={"payload_bytes": len(payload)},
            )
            logger.error(
                self.last_error.message,
                extra={"error_info": self.last_error.to_dict()},
            )
            return False

        return True

    def local_ip(self) -> str:
        """
        Local address the OS routes to the collector from.

        Connecting a UDP socket sends no packets; it only picks a route.
        """
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        try:
            with socket.socket(family, socket.SOCK_DGRAM) as probe:
                probe.connect((self.host, self.port))
                return str(probe.getsockname()[0])
        except OSError as e:
            logger.warning(
                f"Could not determine local IP for {self.destination}: {e}; using {FALLBACK_LOCAL_IP}"
            )
            return FALLBACK_LOCAL_IP

    def close(self) -> None:
        """Close the underlying socket."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
