"""
WebSocket client for the hub's live log stream.
"""

import asyncio
from collections.abc import AsyncIterator, Callable

import aiohttp

from ..utils.error_handling import error_handler
from ..utils.logging import get_logger

logger = get_logger(__name__)

StatusCallback = Callable[[str], None]


class LogSocketClient:
    """
    Subscribes to the hub log socket and yields its text frames.

    Transport state changes are reported through ``on_status`` as
    ``"status: open"`` and ``"status: closing"`` lines.
    """

    def __init__(
        self,
        url: str,
        on_status: StatusCallback | None = None,
        timeout: float = 10.0,
    ):
        self.url = url
        self.on_status = on_status
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._closing_reported = False

    @property
    def is_open(self) -> bool:
        return self._ws is not None and not self._ws.closed

    def _emit_status(self, status: str) -> None:
        if status == "closing":
            if self._closing_reported:
                return
            self._closing_reported = True

        if self.on_status is not None:
            self.on_status(f"status: {status}")

    @error_handler("log_socket.open")
    async def open(self) -> None:
        """Open the WebSocket; no-op if already open."""
        if self.is_open:
            return

        # Release a socket the server already closed
        if self._ws is not None or self._session is not None:
            await self.close()

        self._session = aiohttp.ClientSession()
        try:
            self._ws = await asyncio.wait_for(
                self._session.ws_connect(self.url, heartbeat=30.0),
                timeout=self.timeout,
            )
        except BaseException:
            await self._session.close()
            self._session = None
            raise

        self._closing_reported = False
        logger.info(f"Connected to hub log socket at {self.url}")
        self._emit_status("open")

    async def messages(self) -> AsyncIterator[str]:
        """Yield text frames until the socket closes."""
        ws = self._ws
        if ws is None:
            return

        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    yield msg.data
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    yield msg.data.decode("utf-8", errors="replace")
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    logger.warning(f"Log socket error: {ws.exception()}")
                    break
        finally:
            self._emit_status("closing")

    async def close(self) -> None:
        """Close the socket and its session. Safe to call repeatedly."""
        ws, self._ws = self._ws, None
        session, self._session = self._session, None

        if ws is not None:
            await ws.close()
            self._emit_status("closing")
            logger.info("Closed hub log socket")

        if session is not None:
            await session.close()
