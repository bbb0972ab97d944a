"""Rendering Surfaces - Imperative Shell.

Adapters that receive RenderFrames from the orchestrator:
- LogSurface: logs what changed (headless runs)
- FrameBroadcaster: fans frames out to WebSocket subscribers (API)
- LogCueSink: logs notification cues
"""

import asyncio
import logging

from src.core.cues import Cue
from src.core.formatter import format_eew_summary, format_report_summary
from src.core.render import RenderFrame


logger = logging.getLogger(__name__)


class LogSurface:
    """Logs display changes instead of drawing them.

    Frames arrive many times a second while an alert is active, so only
    changes to the displayed state are logged.
    """

    def __init__(self) -> None:
        self._last_eew = None
        self._last_report_id: str | None = None
        self._last_feeds = None
        self.frames_rendered = 0

    def render(self, frame: RenderFrame) -> None:
        self.frames_rendered += 1

        if frame.eew != self._last_eew:
            self._last_eew = frame.eew
            logger.info("[%s] %s", frame.mode.value, format_eew_summary(frame.eew))

        report_id = frame.report.id if frame.report else None
        if report_id != self._last_report_id:
            self._last_report_id = report_id
            if frame.report is not None:
                logger.info("[%s] 地震情報 %s", frame.mode.value, format_report_summary(frame.report))

        feeds = (frame.report_feed, frame.eew_feed)
        if feeds != self._last_feeds:
            self._last_feeds = feeds
            logger.info(
                "Feeds: report=%s eew=%s",
                frame.report_feed.value,
                frame.eew_feed.value,
            )


class LogCueSink:
    """Logs cues instead of playing sounds."""

    def play(self, cue: Cue) -> None:
        logger.info("Cue: %s", cue.value)


class FrameBroadcaster:
    """Fans frames out to any number of async subscribers.

    Each subscriber gets a bounded queue; when a slow subscriber's queue is
    full its oldest frame is discarded, since only the latest frame matters.
    """

    def __init__(self, max_queue: int = 4) -> None:
        self.max_queue = max_queue
        self.latest: RenderFrame | None = None
        self._subscribers: set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue)
        if self.latest is not None:
            queue.put_nowait(self.latest)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    def render(self, frame: RenderFrame) -> None:
        self.latest = frame
        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(frame)
