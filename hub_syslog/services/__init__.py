"""
Service layer for the hub syslog forwarder.

This module contains the log socket client, the UDP sender, the syslog
renderers and the forwarder that ties them together.
"""

from .forwarder import EventForwarder
from .log_socket import LogSocketClient
from .udp_sender import UDPSyslogSender

__all__ = ["EventForwarder", "LogSocketClient", "UDPSyslogSender"]
