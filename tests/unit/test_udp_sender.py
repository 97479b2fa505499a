"""
Tests for the UDP syslog sender.
"""

import socket
from unittest.mock import MagicMock, patch

from hub_syslog.exceptions import DatagramSendError
from hub_syslog.services.udp_sender import FALLBACK_LOCAL_IP, UDPSyslogSender


class TestSend:
    """Tests for datagram delivery."""

    def test_one_datagram_per_line(self, udp_collector):
        host, port = udp_collector.getsockname()
        with UDPSyslogSender(host, port) as sender:
            assert sender.send("<131>May 01 12:00:00 192.168.1.50 hubitat: Motion Sensor: triggered")
            data, _ = udp_collector.recvfrom(65536)

        assert data == b"<131>May 01 12:00:00 192.168.1.50 hubitat: Motion Sensor: triggered"

    def test_lines_arrive_separately(self, udp_collector):
        host, port = udp_collector.getsockname()
        with UDPSyslogSender(host, port) as sender:
            sender.send("<134>first")
            sender.send("<134>second")
            received = [udp_collector.recvfrom(65536)[0] for _ in range(2)]

        assert received == [b"<134>first", b"<134>second"]

    def test_utf8_payload(self, udp_collector):
        host, port = udp_collector.getsockname()
        with UDPSyslogSender(host, port) as sender:
            sender.send("<134>temperature is 72°F")
            data, _ = udp_collector.recvfrom(65536)

        assert data.decode("utf-8") == "<134>temperature is 72°F"

    def test_send_failure_is_reported_not_raised(self):
        sender = UDPSyslogSender("192.0.2.1", 514)
        broken = MagicMock()
        broken.sendto.side_effect = OSError("Network is unreachable")
        sender._sock = broken

        assert sender.send("<134>lost") is False
        assert sender.send_failures == 1
        assert isinstance(sender.last_error, DatagramSendError)
        assert sender.last_error.context["destination"] == "192.0.2.1:514"
        assert "Network is unreachable" in sender.last_error.message

    def test_socket_created_lazily(self):
        sender = UDPSyslogSender("127.0.0.1", 514)
        assert sender._sock is None
        sender.close()
        assert sender._sock is None


class TestLocalIp:
    """Tests for hub address discovery."""

    def test_loopback_route(self):
        sender = UDPSyslogSender("127.0.0.1", 514)
        assert sender.local_ip() == "127.0.0.1"

    def test_fallback_when_route_lookup_fails(self):
        sender = UDPSyslogSender("192.0.2.1", 514)
        with patch("hub_syslog.services.udp_sender.socket.socket") as mock_socket:
            probe = mock_socket.return_value.__enter__.return_value
            probe.connect.side_effect = OSError("no route")
            assert sender.local_ip() == FALLBACK_LOCAL_IP


class TestLifecycle:
    def test_close_is_idempotent(self, udp_collector):
        host, port = udp_collector.getsockname()
        sender = UDPSyslogSender(host, port)
        sender.send("<134>x")
        sock = sender._sock
        sender.close()
        sender.close()
        assert sender._sock is None
        assert sock.fileno() == -1

    def test_destination(self):
        assert UDPSyslogSender("syslog.local", 1514).destination == "syslog.local:1514"

    def test_ipv4_host_uses_inet(self):
        sender = UDPSyslogSender("127.0.0.1", 514)
        try:
            assert sender._socket().family == socket.AF_INET
        finally:
            sender.close()
