"""Unit tests for inbound frame decoding.

Pure function tests - no mocks needed.
"""

import json

import pytest

from src.core.eew import EEWAlert
from src.core.frames import FeedKind, FrameDecodeError, decode_frame, load_payload
from src.core.report import SeismicReport


REPORT_FRAME = {
    "_id": "abc123",
    "code": 551,
    "time": "2024/03/15 09:21:30",
    "earthquake": {
        "time": "2024/03/15 09:18:00",
        "hypocenter": {"name": "福島県沖", "latitude": 37.4, "longitude": 141.6, "depth": 50, "magnitude": 5.8},
        "maxScale": 45,
        "domesticTsunami": "None",
    },
    "points": [{"pref": "福島県", "addr": "いわき市", "isArea": False, "scale": 45}],
}

EEW_FRAME = {
    "Type": "jma_eew",
    "Title": "緊急地震速報（予報）",
    "EventID": "20240315091800",
    "Hypocenter": "福島県沖",
    "Magunitude": 5.6,
    "Depth": 50,
    "MaxIntensity": "4",
    "AnnouncedTime": "2024/03/15 09:18:12",
    "OriginTime": "2024/03/15 09:18:00",
    "isTraining": False,
}


class TestLoadPayload:
    """Tests for load_payload()."""

    def test_object(self):
        assert load_payload('{"a": 1}') == {"a": 1}

    def test_bytes(self):
        assert load_payload(b'{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("raw", ["not json", "{", ""])
    def test_invalid_json_raises(self, raw):
        with pytest.raises(FrameDecodeError):
            load_payload(raw)

    @pytest.mark.parametrize("raw", ["[1, 2]", '"text"', "42", "null"])
    def test_non_object_raises(self, raw):
        with pytest.raises(FrameDecodeError):
            load_payload(raw)


class TestDecodeFrame:
    """Tests for decode_frame()."""

    def test_report_frame(self):
        frame = decode_frame(FeedKind.REPORT, json.dumps(REPORT_FRAME))

        assert isinstance(frame, SeismicReport)
        assert frame.id == "abc123"

    def test_eew_frame(self):
        frame = decode_frame(FeedKind.EEW, json.dumps(EEW_FRAME))

        assert isinstance(frame, EEWAlert)
        assert frame.event_id == "20240315091800"

    def test_other_report_codes_are_dropped(self):
        """Code 555 (peer areas) and friends are not forwarded."""
        assert decode_frame(FeedKind.REPORT, json.dumps({"code": 555, "_id": "x"})) is None

    def test_heartbeat_is_dropped(self):
        assert decode_frame(FeedKind.EEW, json.dumps({"type": "heartbeat", "ver": "1"})) is None
        assert decode_frame(FeedKind.EEW, json.dumps({"type": "pong"})) is None

    def test_training_frame_is_dropped(self):
        frame = dict(EEW_FRAME, isTraining=True)
        assert decode_frame(FeedKind.EEW, json.dumps(frame)) is None

    def test_feed_kind_selects_decoder(self):
        """An EEW payload on the report feed is not a report."""
        assert decode_frame(FeedKind.REPORT, json.dumps(EEW_FRAME)) is None
        assert decode_frame(FeedKind.EEW, json.dumps(REPORT_FRAME)) is None

    def test_invalid_record_is_dropped(self):
        frame = dict(REPORT_FRAME, time="garbage")
        assert decode_frame(FeedKind.REPORT, json.dumps(frame)) is None

    def test_malformed_text_raises(self):
        with pytest.raises(FrameDecodeError):
            decode_frame(FeedKind.EEW, "{not json")
