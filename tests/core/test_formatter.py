"""Unit tests for message formatting.

Pure function tests - no mocks needed.
"""

from datetime import datetime

import pytest

from src.core.eew import IDLE_STATE, EEWState
from src.core.formatter import (
    format_depth,
    format_eew_summary,
    format_magnitude,
    format_report_summary,
    format_tsunami,
)
from src.core.intensity import Intensity
from src.core.report import Hypocenter, SeismicReport, TsunamiLevel
from src.core.timeparse import JST


@pytest.fixture
def sample_report():
    return SeismicReport(
        id="r1",
        time=datetime(2024, 1, 1, 16, 12, tzinfo=JST),
        occurred_time=datetime(2024, 1, 1, 16, 10, tzinfo=JST),
        hypocenter=Hypocenter(name="石川県能登地方", latitude=37.5, longitude=137.3, depth_km=10, magnitude=7.6),
        max_intensity=Intensity.SCALE_7,
        domestic_tsunami=TsunamiLevel.MAJOR_WARNING,
    )


class TestFormatMagnitude:
    def test_known(self):
        assert format_magnitude(7.2) == "M7.2"
        assert format_magnitude(5) == "M5.0"

    def test_unknown(self):
        assert format_magnitude(None) == "M不明"


class TestFormatDepth:
    def test_known(self):
        assert format_depth(10) == "10km"

    def test_very_shallow(self):
        assert format_depth(0) == "ごく浅い"

    def test_unknown(self):
        assert format_depth(None) == "不明"


class TestFormatTsunami:
    def test_labels(self):
        assert format_tsunami(TsunamiLevel.NONE) == "津波の心配なし"
        assert format_tsunami(TsunamiLevel.MAJOR_WARNING) == "大津波警報"


class TestFormatEEWSummary:
    """Tests for format_eew_summary()."""

    def test_idle(self):
        assert format_eew_summary(IDLE_STATE) == "緊急地震速報なし"

    def test_warning(self):
        state = EEWState(
            is_active=True,
            is_warning=True,
            hypocenter_name="和歌山県北部",
            magnitude=7.2,
            depth_km=10,
            max_intensity="6+",
            areas=("和歌山県", "大阪府"),
        )
        summary = format_eew_summary(state)

        assert summary.startswith("緊急地震速報（警報） 和歌山県北部 M7.2 深さ10km")
        assert "最大震度6+" in summary
        assert "対象: 和歌山県 大阪府" in summary

    def test_forecast_with_unknowns(self):
        summary = format_eew_summary(EEWState(is_active=True))
        assert summary == "緊急地震速報（予報） 調査中 M不明 深さ不明"

    def test_final_marker(self):
        summary = format_eew_summary(EEWState(is_active=True, is_final=True))
        assert summary.endswith("最終報")


class TestFormatReportSummary:
    """Tests for format_report_summary()."""

    def test_summary(self, sample_report):
        summary = format_report_summary(sample_report)

        assert summary == (
            "2024-01-01 16:10 JST 石川県能登地方 M7.6 深さ10km 最大震度7 (大津波警報)"
        )

    def test_missing_hypocenter(self, sample_report):
        report = SeismicReport(
            id="r2",
            time=sample_report.time,
            occurred_time=None,
            hypocenter=None,
            max_intensity=Intensity.UNKNOWN,
        )
        summary = format_report_summary(report)

        assert summary.startswith("2024-01-01 16:12 JST 不明な地域 M不明")
        assert "最大震度不明" in summary
