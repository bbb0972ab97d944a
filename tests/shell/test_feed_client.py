"""Tests for the WebSocket feed client.

The socket is replaced by an injected connect factory, so no network
access is needed.
"""

import asyncio
import json

import pytest
from unittest.mock import Mock

from src.core.eew import EEWAlert
from src.core.frames import FeedKind, FrameDecodeError
from src.core.render import FeedStatus
from src.shell.feed_client import FeedClient


EEW_MESSAGE = json.dumps({
    "Type": "jma_eew",
    "Title": "緊急地震速報（予報）",
    "EventID": "20240315091800",
    "Hypocenter": "福島県沖",
    "Magunitude": 5.6,
    "OriginTime": "2024/03/15 09:18:00",
})

HEARTBEAT_MESSAGE = json.dumps({"type": "heartbeat", "ver": "1.0"})


class FakeSocket:
    """Async context manager yielding scripted messages, then closing.

    With hang=True it never closes, like a quiet live connection.
    """

    def __init__(self, messages=(), hang=False):
        self.messages = list(messages)
        self.hang = hang

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message
        if self.hang:
            await asyncio.Event().wait()


class FakeConnect:
    """Connect factory that hands out scripted sockets in order."""

    def __init__(self, sockets):
        self.sockets = list(sockets)
        self.calls = []
        self.exhausted = asyncio.Event()

    def __call__(self, url, open_timeout=None):
        self.calls.append(url)
        if not self.sockets:
            self.exhausted.set()
            return FakeSocket(hang=True)
        socket = self.sockets.pop(0)
        if isinstance(socket, Exception):
            raise socket
        return socket


class TestHandleMessage:
    """Tests for FeedClient.handle_message()."""

    def test_forwards_recognized_frame(self):
        on_frame = Mock()
        client = FeedClient(FeedKind.EEW, "wss://example", on_frame)

        client.handle_message(EEW_MESSAGE)

        on_frame.assert_called_once()
        assert isinstance(on_frame.call_args[0][0], EEWAlert)
        assert client.frames_received == 1
        assert client.frames_dropped == 0

    def test_drops_unrecognized_frame(self):
        on_frame = Mock()
        client = FeedClient(FeedKind.EEW, "wss://example", on_frame)

        client.handle_message(HEARTBEAT_MESSAGE)

        on_frame.assert_not_called()
        assert client.frames_dropped == 1

    def test_malformed_frame_raises(self):
        client = FeedClient(FeedKind.REPORT, "wss://example", Mock())

        with pytest.raises(FrameDecodeError):
            client.handle_message("<html>")


class TestRun:
    """Tests for the connect/reconnect loop."""

    @pytest.mark.asyncio
    async def test_reconnects_after_close_and_bad_frame(self):
        on_frame = Mock()
        statuses = []
        connect = FakeConnect([
            FakeSocket([EEW_MESSAGE]),
            FakeSocket(["not json", EEW_MESSAGE]),
            OSError("connection refused"),
        ])
        client = FeedClient(
            FeedKind.EEW,
            "wss://example",
            on_frame,
            on_status=lambda kind, status: statuses.append((kind, status)),
            reconnect_delay=0,
            connect=connect,
        )

        client.start()
        await asyncio.wait_for(connect.exhausted.wait(), timeout=2)
        await asyncio.sleep(0)

        assert client.running
        assert client.status == FeedStatus.CONNECTED
        # The frame after the malformed one is never read
        assert on_frame.call_count == 1
        assert len(connect.calls) == 4
        assert [s for _, s in statuses] == [
            FeedStatus.CONNECTED,
            FeedStatus.DISCONNECTED,
            FeedStatus.CONNECTED,
            FeedStatus.DISCONNECTED,
            FeedStatus.CONNECTED,
        ]

        await client.stop()

        assert not client.running
        assert client.status == FeedStatus.DISCONNECTED

    @pytest.mark.asyncio
    async def test_waits_reconnect_delay(self):
        connect = FakeConnect([OSError("down")])
        client = FeedClient(
            FeedKind.REPORT, "wss://example", Mock(), reconnect_delay=30, connect=connect,
        )

        client.start()
        await asyncio.sleep(0.05)

        assert len(connect.calls) == 1
        assert client.status == FeedStatus.DISCONNECTED

        await client.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        client = FeedClient(FeedKind.REPORT, "wss://example", Mock())
        await client.stop()
        assert not client.running

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self):
        connect = FakeConnect([])
        client = FeedClient(FeedKind.REPORT, "wss://example", Mock(), connect=connect)

        client.start()
        client.start()
        await asyncio.wait_for(connect.exhausted.wait(), timeout=2)

        assert len(connect.calls) == 1
        await client.stop()
