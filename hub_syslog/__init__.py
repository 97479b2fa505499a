"""
Hub Syslog - forwards a home automation hub's live log stream to syslog.

Events read from the hub's log WebSocket are rendered as BSD (RFC 3164) or
IETF (RFC 5424) syslog lines and sent to a remote collector over UDP.
"""

__version__ = "0.1.0"

from .server import create_forwarder
from .services.forwarder import EventForwarder

__all__ = ["create_forwarder", "EventForwarder", "__version__"]
