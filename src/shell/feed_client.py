"""WebSocket Feed Client - Imperative Shell.

This module holds the live socket for one push feed. It decodes each
message with the core decoder and forwards recognized records downstream.
All socket I/O is contained here; decoding is in the core module.

Reconnection is unconditional: after any disconnect the client waits a
fixed delay and connects again, forever, until stopped.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import websockets
from websockets.exceptions import WebSocketException

from src.core.frames import FeedKind, Frame, FrameDecodeError, decode_frame
from src.core.render import FeedStatus


logger = logging.getLogger(__name__)


# Fixed delay before reconnecting (seconds)
DEFAULT_RECONNECT_DELAY = 5.0

# Give up on a connection attempt after this long (seconds)
DEFAULT_OPEN_TIMEOUT = 10.0


FrameHandler = Callable[[Frame], None]
StatusHandler = Callable[[FeedKind, FeedStatus], None]


class FeedClient:
    """Client for one WebSocket push feed.

    This is part of the imperative shell - it handles socket I/O.
    """

    def __init__(
        self,
        kind: FeedKind,
        url: str,
        on_frame: FrameHandler,
        on_status: StatusHandler | None = None,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        open_timeout: float = DEFAULT_OPEN_TIMEOUT,
        connect: Callable[..., Any] = websockets.connect,
    ) -> None:
        """Initialize feed client.

        Args:
            kind: Which feed this is (selects the decoder)
            url: WebSocket URL
            on_frame: Called with each recognized record
            on_status: Called when the connection status changes
            reconnect_delay: Seconds to wait before reconnecting
            open_timeout: Seconds to wait for the handshake
            connect: WebSocket connect factory (injectable for tests)
        """
        self.kind = kind
        self.url = url
        self.reconnect_delay = reconnect_delay
        self.open_timeout = open_timeout
        self._on_frame = on_frame
        self._on_status = on_status
        self._connect = connect
        self._status = FeedStatus.DISCONNECTED
        self._task: asyncio.Task | None = None
        self.frames_received = 0
        self.frames_dropped = 0

    @property
    def status(self) -> FeedStatus:
        return self._status

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _set_status(self, status: FeedStatus) -> None:
        if status == self._status:
            return
        self._status = status
        if self._on_status is not None:
            self._on_status(self.kind, status)

    def handle_message(self, message: str | bytes) -> None:
        """Decode one message and forward it if recognized.

        Raises:
            FrameDecodeError: If the message is not a JSON object
        """
        self.frames_received += 1
        frame = decode_frame(self.kind, message)
        if frame is None:
            self.frames_dropped += 1
            logger.debug("Dropped unrecognized %s frame", self.kind.value)
            return
        self._on_frame(frame)

    async def _connect_once(self) -> None:
        """Hold one connection until it closes or a frame fails to decode."""
        async with self._connect(self.url, open_timeout=self.open_timeout) as ws:
            self._set_status(FeedStatus.CONNECTED)
            logger.info("Connected to %s feed at %s", self.kind.value, self.url)

            async for message in ws:
                self.handle_message(message)

    async def run(self) -> None:
        """Connect, consume, and reconnect until cancelled."""
        while True:
            try:
                await self._connect_once()
                logger.warning("%s feed closed by server", self.kind.value)
            except FrameDecodeError as e:
                logger.warning(
                    "Malformed %s frame, reconnecting: %s", self.kind.value, e,
                )
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.warning(
                    "%s feed connection failed: %s", self.kind.value, e,
                )
            except Exception:
                logger.exception("Unexpected error in %s feed", self.kind.value)
            finally:
                self._set_status(FeedStatus.DISCONNECTED)

            logger.info(
                "Reconnecting to %s feed in %.0fs",
                self.kind.value,
                self.reconnect_delay,
            )
            await asyncio.sleep(self.reconnect_delay)

    def start(self) -> None:
        """Start the connection loop as a background task."""
        if self.running:
            return
        self._task = asyncio.create_task(self.run(), name=f"feed-{self.kind.value}")

    async def stop(self) -> None:
        """Cancel the connection loop and close the socket."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._set_status(FeedStatus.DISCONNECTED)
