"""
Forwarder process setup and command line entry point.

This module builds the forwarder from settings and keeps it subscribed to
the hub log socket, reconnecting whenever the stream ends.
"""

import argparse
import asyncio
import contextlib
import signal
import sys

from dotenv import load_dotenv

from .config.settings import ForwarderSettings, load_settings
from .exceptions import ConfigurationError, LogSocketConnectionError
from .models.syslog import SYSLOG_FACILITIES, SyslogStyle
from .services.forwarder import EventForwarder
from .services.log_socket import LogSocketClient
from .services.udp_sender import UDPSyslogSender
from .utils.logging import configure_logging, get_logger


def create_forwarder(settings: ForwarderSettings | None = None) -> EventForwarder:
    """Create a forwarder with its UDP sender and log socket client."""
    if settings is None:
        settings = load_settings()

    sender = UDPSyslogSender(settings.server, settings.port)
    log_socket = LogSocketClient(settings.log_socket_url, timeout=settings.connect_timeout)
    return EventForwarder(settings, sender=sender, log_socket=log_socket)


async def run_forwarder(forwarder: EventForwarder, stop_event: asyncio.Event) -> None:
    """
    Keep the forwarder subscribed until stop_event is set.

    Each pass initializes the subscription and handles frames until the
    stream ends, then waits reconnect_delay seconds before the next pass.
    """
    logger = get_logger(__name__)

    try:
        while not stop_event.is_set():
            try:
                await forwarder.initialize()
            except LogSocketConnectionError as e:
                logger.warning(
                    f"Log socket unavailable, retrying in {forwarder.settings.reconnect_delay}s",
                    extra={"error_info": e.to_dict()},
                )
            else:
                logger.info(
                    f"Forwarding hub events to {forwarder.settings.destination} "
                    f"({forwarder.settings.style.value})"
                )
                run_task = asyncio.create_task(forwarder.run())
                stop_task = asyncio.create_task(stop_event.wait())
                await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

                for task in (run_task, stop_task):
                    if not task.done():
                        task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

                if stop_event.is_set():
                    break
                logger.warning("Hub log stream ended")

            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=forwarder.settings.reconnect_delay)
    finally:
        await forwarder.close()
        health = forwarder.health_check()
        logger.info(
            f"Forwarder stopped: {health.forwarded} forwarded, {health.dropped} dropped",
            extra={"health": health.model_dump(mode="json")},
        )


async def _serve(forwarder: EventForwarder) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(signum, stop_event.set)

    await run_forwarder(forwarder, stop_event)


def build_parser() -> argparse.ArgumentParser:
    """Command line flags; each one overrides its environment setting."""
    parser = argparse.ArgumentParser(
        prog="hub-syslog",
        description="Forward hub log events to a remote syslog server over UDP",
    )
    parser.add_argument("--server", help="Syslog server address (SYSLOG_SERVER)")
    parser.add_argument("--port", type=int, help="Syslog server port (SYSLOG_PORT, default: 514)")
    parser.add_argument(
        "--facility",
        choices=SYSLOG_FACILITIES,
        help="Syslog facility for all events (SYSLOG_FACILITY, default: local0)",
    )
    parser.add_argument(
        "--style",
        choices=[style.value for style in SyslogStyle],
        help="Syslog message format (SYSLOG_STYLE, default: bsd)",
    )
    parser.add_argument(
        "--device-id",
        type=int,
        help="This forwarder's own device id; its log lines are not forwarded (FORWARDER_DEVICE_ID)",
    )
    parser.add_argument("--hub-ip", help="Hostname field for messages (HUB_IP, default: auto-detect)")
    parser.add_argument("--log-socket-url", help="Hub log WebSocket URL (HUB_LOG_SOCKET_URL)")
    parser.add_argument(
        "--no-debug-logging",
        action="store_true",
        help="Suppress the forwarder's debug lines (DEBUG_LOGGING=false)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log records")
    return parser


def settings_from_args(args: argparse.Namespace) -> ForwarderSettings:
    """Merge parsed flags over environment settings."""
    return load_settings(
        server=args.server,
        port=args.port,
        facility=args.facility,
        style=args.style,
        device_id=args.device_id,
        hub_ip=args.hub_ip,
        log_socket_url=args.log_socket_url,
        debug_logging=False if args.no_debug_logging else None,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the forwarder."""
    load_dotenv()

    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, enable_json_logging=args.json_logs)
    logger = get_logger(__name__)

    try:
        settings = settings_from_args(args)
    except ConfigurationError as e:
        logger.error(e.message, extra={"error_info": e.to_dict()})
        return 2

    forwarder = create_forwarder(settings)
    try:
        asyncio.run(_serve(forwarder))
    except KeyboardInterrupt:
        logger.info("Forwarder stopped by user")

    return 0


if __name__ == "__main__":
    sys.exit(main())
