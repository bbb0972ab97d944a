"""Early-warning alert models and reconciliation - Pure functions.

Early-warning frames for the same earthquake arrive repeatedly as the
estimate is refined. Frames never say "this supersedes that"; the event ID
is the only correlation key. This module reduces the stream of frames into
a single authoritative EEWState.

State machine:

    IDLE --alert--> FORECASTING <--> WARNING --final--> FINAL
      ^                  |              |                 |
      +------ cancel / inactivity timeout ----------------+

All functions are pure. Time is passed in explicitly (monotonic seconds),
so callers control the clock.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from src.core.geo import Coordinate, is_valid_coordinate
from src.core.intensity import normalize_intensity_text
from src.core.timeparse import parse_feed_time


# Wolfx message type for JMA early warnings
EEW_MESSAGE_TYPE = "jma_eew"

# Title markers
CANCEL_MARKER = "取消"
WARNING_MARKERS = ("警報", "Warning")

# No update for this long while non-final means the alert was abandoned
DEFAULT_INACTIVITY_WINDOW_SECONDS = 20.0

# How long a final alert is kept as "last known" before it is retired
DEFAULT_FINAL_HOLD_SECONDS = 60.0

_DIGITS = re.compile(r"[^0-9]")


@dataclass(frozen=True)
class EEWAlert:
    """A raw early-warning frame, as decoded from the feed.

    Attributes:
        title: Frame title (e.g., "緊急地震速報（予報）")
        event_id: Correlation key shared by all frames of one earthquake
        hypocenter_name: Estimated hypocenter region name
        magnitude_text: Magnitude as sent (e.g., "4.5")
        depth_text: Depth as sent (e.g., "10km")
        max_intensity_text: Estimated maximum intensity (e.g., "5弱")
        announced_time: When this frame was announced
        origin_time: Estimated origin time, if the frame carries one
        latitude: Estimated epicenter latitude, if sent
        longitude: Estimated epicenter longitude, if sent
        serial: Report serial number within the event
        is_cancel: Explicit cancellation flag
        is_final: Explicit final-report flag
        is_warning_flag: Explicit warning flag, None if the frame has none
        is_training: Training/test transmission flag
        areas: Target area names carried by this frame (often empty)
    """
    title: str
    event_id: str
    hypocenter_name: str = ""
    magnitude_text: str = ""
    depth_text: str = ""
    max_intensity_text: str = ""
    announced_time: datetime | None = None
    origin_time: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    serial: int | None = None
    is_cancel: bool = False
    is_final: bool = False
    is_warning_flag: bool | None = None
    is_training: bool = False
    areas: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_cancellation(self) -> bool:
        """True for an explicit cancel flag or a cancel marker in the title."""
        return self.is_cancel or CANCEL_MARKER in self.title

    @property
    def is_warning(self) -> bool:
        """True for a warning (alarm), False for a forecast (advisory)."""
        if self.is_warning_flag is not None:
            return self.is_warning_flag
        return any(marker in self.title for marker in WARNING_MARKERS)

    @property
    def magnitude(self) -> float | None:
        try:
            return float(self.magnitude_text)
        except (TypeError, ValueError):
            return None

    @property
    def depth_km(self) -> float | None:
        digits = _DIGITS.sub("", self.depth_text or "")
        if not digits:
            return None
        return float(int(digits))

    @property
    def epicenter(self) -> Coordinate | None:
        if self.latitude is None or self.longitude is None:
            return None
        if not is_valid_coordinate(self.latitude, self.longitude):
            return None
        return Coordinate(self.latitude, self.longitude)


class EEWPhase(str, Enum):
    """Lifecycle phase of the live early-warning state."""
    IDLE = "idle"
    FORECASTING = "forecasting"
    WARNING = "warning"
    FINAL = "final"


@dataclass(frozen=True)
class EEWState:
    """Authoritative, derived early-warning state.

    At most one is live at a time. Instances are immutable; every
    transition produces a new one.

    Attributes:
        is_active: An alert is currently in effect
        is_warning: Warning (alarm) rather than forecast (advisory)
        is_final: No further updates are expected for this event
        event_id: Correlation key of the live event
        hypocenter_name: Estimated hypocenter region name
        epicenter: Estimated epicenter if the feed sent coordinates
        magnitude: Estimated magnitude
        depth_km: Estimated depth in kilometers
        max_intensity: Estimated maximum intensity label ("5-", "6+")
        areas: Target area names, de-duplicated
        occurred_time: Origin instant used for wave playback
        title: Title of the latest frame
        updated_at: Monotonic timestamp of the last applied frame
    """
    is_active: bool = False
    is_warning: bool = False
    is_final: bool = False
    event_id: str | None = None
    hypocenter_name: str | None = None
    epicenter: Coordinate | None = None
    magnitude: float | None = None
    depth_km: float | None = None
    max_intensity: str | None = None
    areas: tuple[str, ...] = field(default_factory=tuple)
    occurred_time: datetime | None = None
    title: str | None = None
    updated_at: float | None = None

    @property
    def phase(self) -> EEWPhase:
        if not self.is_active:
            return EEWPhase.IDLE
        if self.is_final:
            return EEWPhase.FINAL
        if self.is_warning:
            return EEWPhase.WARNING
        return EEWPhase.FORECASTING


IDLE_STATE = EEWState()


def _merge_areas(existing: tuple[str, ...], incoming: tuple[str, ...]) -> tuple[str, ...]:
    merged = list(existing)
    for area in incoming:
        if area and area not in merged:
            merged.append(area)
    return tuple(merged)


def _state_from_alert(alert: EEWAlert, now: float) -> EEWState:
    return EEWState(
        is_active=True,
        is_warning=alert.is_warning,
        is_final=alert.is_final,
        event_id=alert.event_id,
        hypocenter_name=alert.hypocenter_name or None,
        epicenter=alert.epicenter,
        magnitude=alert.magnitude,
        depth_km=alert.depth_km,
        max_intensity=normalize_intensity_text(alert.max_intensity_text),
        areas=_merge_areas((), alert.areas),
        occurred_time=alert.origin_time or alert.announced_time,
        title=alert.title,
        updated_at=now,
    )


def apply_alert(state: EEWState, alert: EEWAlert, now: float) -> EEWState:
    """Apply one early-warning frame to the live state.

    Pure function.

    - Cancellation → IDLE, regardless of prior state.
    - No live event, or a different event ID → full replace.
    - Same event ID → field overwrite; finality never regresses; target
      areas accumulate across frames.

    Args:
        state: Current live state
        alert: Incoming frame
        now: Monotonic timestamp of arrival

    Returns:
        New live state
    """
    if alert.is_cancellation:
        return IDLE_STATE

    if not state.is_active or state.event_id != alert.event_id:
        return _state_from_alert(alert, now)

    incoming = _state_from_alert(alert, now)
    return replace(
        incoming,
        is_final=state.is_final or alert.is_final,
        # Frames that omit a value keep the previous estimate
        hypocenter_name=incoming.hypocenter_name or state.hypocenter_name,
        epicenter=incoming.epicenter or state.epicenter,
        magnitude=incoming.magnitude if incoming.magnitude is not None else state.magnitude,
        depth_km=incoming.depth_km if incoming.depth_km is not None else state.depth_km,
        max_intensity=incoming.max_intensity or state.max_intensity,
        areas=_merge_areas(state.areas, alert.areas),
        occurred_time=incoming.occurred_time or state.occurred_time,
    )


def is_stale(
    state: EEWState,
    now: float,
    window: float = DEFAULT_INACTIVITY_WINDOW_SECONDS,
    final_hold: float = DEFAULT_FINAL_HOLD_SECONDS,
) -> bool:
    """Check whether an active state has gone quiet for too long.

    Pure function. Non-final states use the inactivity window; final states
    are held for final_hold before being retired.
    """
    if not state.is_active or state.updated_at is None:
        return False
    limit = final_hold if state.is_final else window
    return now - state.updated_at > limit


def check_staleness(
    state: EEWState,
    now: float,
    window: float = DEFAULT_INACTIVITY_WINDOW_SECONDS,
    final_hold: float = DEFAULT_FINAL_HOLD_SECONDS,
) -> EEWState:
    """Return IDLE if the state is stale, otherwise the state unchanged.

    Pure function.
    """
    if is_stale(state, now, window, final_hold):
        return IDLE_STATE
    return state


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


def _parse_areas(raw: Any) -> tuple[str, ...]:
    areas = []
    for item in raw or []:
        if isinstance(item, str):
            areas.append(item)
        elif isinstance(item, dict):
            name = item.get("Chiiki") or item.get("name")
            if name:
                areas.append(str(name))
    return tuple(areas)


def parse_eew_alert(payload: dict[str, Any]) -> EEWAlert | None:
    """Parse a Wolfx jma_eew payload into an EEWAlert.

    Pure function.

    Args:
        payload: Decoded JSON object from the early-warning feed

    Returns:
        EEWAlert or None if the payload is not an early warning or is
        missing its event ID
    """
    try:
        message_type = payload.get("Type") or payload.get("type")
        if message_type != EEW_MESSAGE_TYPE:
            return None

        event_id = payload.get("EventID")
        if event_id is None or event_id == "":
            return None

        # Wolfx spells the key "Magunitude"; older fixtures use "Magnitude"
        magnitude = payload.get("Magunitude", payload.get("Magnitude"))
        serial = payload.get("Serial")

        return EEWAlert(
            title=str(payload.get("Title") or ""),
            event_id=str(event_id),
            hypocenter_name=str(payload.get("Hypocenter") or ""),
            magnitude_text="" if magnitude is None else str(magnitude),
            depth_text="" if payload.get("Depth") is None else str(payload.get("Depth")),
            max_intensity_text=str(payload.get("MaxIntensity") or ""),
            announced_time=parse_feed_time(payload.get("AnnouncedTime")),
            origin_time=parse_feed_time(payload.get("OriginTime")),
            latitude=_optional_float(payload.get("Latitude")),
            longitude=_optional_float(payload.get("Longitude")),
            serial=None if serial is None else int(serial),
            is_cancel=bool(payload.get("isCancel", False)),
            is_final=bool(payload.get("isFinal", False)),
            is_warning_flag=_optional_bool(payload.get("isWarn")),
            is_training=bool(payload.get("isTraining", False)),
            areas=_parse_areas(payload.get("WarnArea")),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None
