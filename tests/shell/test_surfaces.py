"""Tests for the rendering surfaces."""

import logging
from datetime import datetime, timezone

import pytest

from src.core.cues import Cue
from src.core.eew import EEWState
from src.core.intensity import Intensity
from src.core.render import FeedStatus, RenderFrame, ViewMode
from src.core.report import Hypocenter, SeismicReport
from src.shell.surfaces import FrameBroadcaster, LogCueSink, LogSurface


NOW = datetime(2024, 1, 1, 7, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def report():
    return SeismicReport(
        id="R1",
        time=NOW,
        occurred_time=NOW,
        hypocenter=Hypocenter(name="石川県能登地方", latitude=37.5, longitude=137.2, depth_km=10, magnitude=7.6),
        max_intensity=Intensity.SCALE_7,
    )


@pytest.fixture
def active_eew():
    return EEWState(
        is_active=True,
        is_warning=True,
        event_id="E1",
        hypocenter_name="石川県能登地方",
        magnitude=7.4,
        max_intensity="7",
    )


class TestLogSurface:
    """Tests for LogSurface change logging."""

    def test_counts_frames(self):
        surface = LogSurface()

        surface.render(RenderFrame())
        surface.render(RenderFrame())

        assert surface.frames_rendered == 2

    def test_logs_only_changes(self, caplog, active_eew):
        surface = LogSurface()

        with caplog.at_level(logging.INFO, logger="src.shell.surfaces"):
            surface.render(RenderFrame())
            first = len(caplog.records)
            surface.render(RenderFrame())
            assert len(caplog.records) == first

            surface.render(RenderFrame(eew=active_eew))

        assert len(caplog.records) == first + 1
        assert "能登" in caplog.records[-1].getMessage()

    def test_logs_new_report(self, caplog, report):
        surface = LogSurface()

        with caplog.at_level(logging.INFO, logger="src.shell.surfaces"):
            surface.render(RenderFrame(report=report, mode=ViewMode.HISTORY))

        assert any("[history] 地震情報" in r.getMessage() for r in caplog.records)

    def test_logs_feed_changes(self, caplog):
        surface = LogSurface()
        surface.render(RenderFrame())

        with caplog.at_level(logging.INFO, logger="src.shell.surfaces"):
            surface.render(RenderFrame(eew_feed=FeedStatus.CONNECTED))

        assert caplog.records[-1].getMessage() == "Feeds: report=disconnected eew=connected"


class TestLogCueSink:
    def test_logs_cue(self, caplog):
        with caplog.at_level(logging.INFO, logger="src.shell.surfaces"):
            LogCueSink().play(Cue.ALARM_START)

        assert "Cue: alarm_start" in caplog.text


class TestFrameBroadcaster:
    """Tests for FrameBroadcaster fan-out."""

    @pytest.mark.asyncio
    async def test_fans_out_to_subscribers(self):
        broadcaster = FrameBroadcaster()
        first = broadcaster.subscribe()
        second = broadcaster.subscribe()
        frame = RenderFrame(mode=ViewMode.SIMULATION)

        broadcaster.render(frame)

        assert first.get_nowait() is frame
        assert second.get_nowait() is frame
        assert broadcaster.latest is frame

    @pytest.mark.asyncio
    async def test_new_subscriber_gets_latest(self):
        broadcaster = FrameBroadcaster()
        frame = RenderFrame()
        broadcaster.render(frame)

        queue = broadcaster.subscribe()

        assert queue.get_nowait() is frame

    @pytest.mark.asyncio
    async def test_slow_subscriber_drops_oldest(self):
        broadcaster = FrameBroadcaster(max_queue=2)
        queue = broadcaster.subscribe()
        frames = [RenderFrame(generated_at=NOW.replace(second=s)) for s in range(3)]

        for frame in frames:
            broadcaster.render(frame)

        assert queue.qsize() == 2
        assert queue.get_nowait() is frames[1]
        assert queue.get_nowait() is frames[2]

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        broadcaster = FrameBroadcaster()
        queue = broadcaster.subscribe()

        broadcaster.unsubscribe(queue)
        broadcaster.render(RenderFrame())

        assert broadcaster.subscriber_count == 0
        assert queue.empty()
