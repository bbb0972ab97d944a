"""Finalized earthquake report models and parsing - Pure functions.

This module handles parsing P2P Quake "earthquake information" payloads
(code 551) into typed SeismicReport objects. All functions are pure with
no side effects.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from src.core.geo import Coordinate, is_valid_coordinate
from src.core.intensity import Intensity, intensity_from_code
from src.core.timeparse import parse_feed_time


# P2P Quake code for a finalized earthquake report
REPORT_CODE = 551

# The feed uses -1 for "unknown" numeric values
UNKNOWN_VALUE = -1


class TsunamiLevel(str, Enum):
    """Domestic tsunami advisory level attached to a report."""
    NONE = "None"
    UNKNOWN = "Unknown"
    CHECKING = "Checking"
    NON_EFFECTIVE = "NonEffective"
    WATCH = "Watch"
    WARNING = "Warning"
    MAJOR_WARNING = "MajorWarning"

    @classmethod
    def parse(cls, value: object) -> "TsunamiLevel":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Hypocenter:
    """Hypocenter of a finalized report.

    Attributes:
        name: Region name (e.g., "石川県能登地方")
        latitude: Latitude, None if unknown
        longitude: Longitude, None if unknown
        depth_km: Depth in kilometers, None if unknown (0 means very shallow)
        magnitude: Magnitude, None if unknown
    """
    name: str
    latitude: float | None = None
    longitude: float | None = None
    depth_km: float | None = None
    magnitude: float | None = None

    @property
    def coordinate(self) -> Coordinate | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class IntensityObservation:
    """Observed intensity at a single station or area.

    Attributes:
        prefecture: Prefecture name (e.g., "大阪府")
        name: Station or area name (e.g., "大阪市")
        intensity: Observed intensity
        is_area: True if the observation covers an area rather than a station
    """
    prefecture: str
    name: str
    intensity: Intensity
    is_area: bool = False


@dataclass(frozen=True)
class SeismicReport:
    """Immutable finalized earthquake report.

    Attributes:
        id: Unique feed record ID
        time: When the report was issued
        occurred_time: When the earthquake occurred
        hypocenter: Hypocenter details (None if not yet determined)
        max_intensity: Maximum observed intensity
        domestic_tsunami: Domestic tsunami advisory level
        points: Per-station observations, in feed order
        issue_type: Report type from the issuer (e.g., "ScalePrompt", "Detail")
    """
    id: str
    time: datetime
    occurred_time: datetime | None
    hypocenter: Hypocenter | None
    max_intensity: Intensity
    domestic_tsunami: TsunamiLevel = TsunamiLevel.UNKNOWN
    points: tuple[IntensityObservation, ...] = field(default_factory=tuple)
    issue_type: str = ""

    @property
    def epicenter(self) -> Coordinate | None:
        """Return the epicenter coordinate if the feed supplied one."""
        if self.hypocenter is None:
            return None
        return self.hypocenter.coordinate


def _optional_number(value: Any) -> float | None:
    """Convert a feed number to float, mapping the -1 sentinel to None."""
    if value is None:
        return None
    number = float(value)
    if number == UNKNOWN_VALUE:
        return None
    return number


def _parse_hypocenter(data: dict[str, Any] | None) -> Hypocenter | None:
    if not data:
        return None

    latitude = _optional_number(data.get("latitude"))
    longitude = _optional_number(data.get("longitude"))
    if latitude is None or longitude is None or not is_valid_coordinate(latitude, longitude):
        latitude = longitude = None

    return Hypocenter(
        name=data.get("name") or "",
        latitude=latitude,
        longitude=longitude,
        depth_km=_optional_number(data.get("depth")),
        magnitude=_optional_number(data.get("magnitude")),
    )


def _parse_point(data: dict[str, Any]) -> IntensityObservation | None:
    try:
        return IntensityObservation(
            prefecture=data.get("pref", ""),
            name=data.get("addr", ""),
            intensity=intensity_from_code(data.get("scale")),
            is_area=bool(data.get("isArea", False)),
        )
    except (AttributeError, TypeError):
        return None


def parse_report(payload: dict[str, Any]) -> SeismicReport | None:
    """Parse a P2P Quake code-551 payload into a SeismicReport.

    Pure function: takes raw dict, returns typed report or None if invalid.

    Args:
        payload: Decoded JSON object from the report feed

    Returns:
        SeismicReport or None if required fields are missing or malformed
    """
    try:
        if payload.get("code") != REPORT_CODE:
            return None

        report_id = payload.get("_id") or payload.get("id")
        if not report_id:
            return None

        earthquake = payload.get("earthquake") or {}
        issue = payload.get("issue") or {}

        time = parse_feed_time(payload.get("time")) or parse_feed_time(issue.get("time"))
        if time is None:
            return None

        points = []
        for raw_point in payload.get("points") or []:
            point = _parse_point(raw_point)
            if point is not None:
                points.append(point)

        return SeismicReport(
            id=str(report_id),
            time=time,
            occurred_time=parse_feed_time(earthquake.get("time")),
            hypocenter=_parse_hypocenter(earthquake.get("hypocenter")),
            max_intensity=intensity_from_code(earthquake.get("maxScale")),
            domestic_tsunami=TsunamiLevel.parse(earthquake.get("domesticTsunami")),
            points=tuple(points),
            issue_type=issue.get("type", ""),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None
