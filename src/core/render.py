"""Rendering surface contract - Pure data structures.

The core never draws. Each update it hands the rendering surface an
immutable RenderFrame; how that is drawn is the surface's business.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol

from src.core.cues import Cue
from src.core.eew import IDLE_STATE, EEWState
from src.core.report import SeismicReport
from src.core.viewport import IDENTITY_TRANSFORM, ViewportTransform
from src.core.wave import WaveCircle


class ViewMode(str, Enum):
    """What the display is showing."""
    LIVE = "live"
    HISTORY = "history"
    SIMULATION = "simulation"


class FeedStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class AreaArrival:
    """Countdown until the S wave reaches a target area.

    Attributes:
        area: Target area name
        seconds: Seconds until arrival, 0 once the wave has passed
    """
    area: str
    seconds: float


@dataclass(frozen=True)
class RenderFrame:
    """Everything the rendering surface needs for one update.

    Attributes:
        transform: Current viewport transform (mid-transition if animating)
        waves: Wave-front circle descriptors (empty when idle)
        eew: Displayed early-warning state
        report: Displayed finalized report
        mode: Current view mode
        report_feed: Connection status of the report feed
        eew_feed: Connection status of the early-warning feed
        arrivals: S-wave countdowns for resolvable target areas
        generated_at: Wall-clock time the frame was built
    """
    transform: ViewportTransform = IDENTITY_TRANSFORM
    waves: tuple[WaveCircle, ...] = field(default_factory=tuple)
    eew: EEWState = IDLE_STATE
    report: SeismicReport | None = None
    mode: ViewMode = ViewMode.LIVE
    report_feed: FeedStatus = FeedStatus.DISCONNECTED
    eew_feed: FeedStatus = FeedStatus.DISCONNECTED
    arrivals: tuple[AreaArrival, ...] = field(default_factory=tuple)
    generated_at: datetime | None = None


class RenderSurface(Protocol):
    """Receives frames from the orchestrator."""

    def render(self, frame: RenderFrame) -> None:
        ...


class CueSink(Protocol):
    """Receives notification cues (e.g., a sound player)."""

    def play(self, cue: Cue) -> None:
        ...
