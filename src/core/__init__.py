"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Feed frame decoding (reports and early warnings)
- Early-warning reconciliation state machine
- Place-name geocoding
- Viewport fitting and wave propagation
- Notification cue decisions and message formatting

All functions here are deterministic and have no I/O.
"""

from src.core.eew import EEWAlert, EEWPhase, EEWState, IDLE_STATE, apply_alert, check_staleness
from src.core.frames import FeedKind, FrameDecodeError, decode_frame
from src.core.gazetteer import resolve_all, resolve_coordinate
from src.core.geo import Coordinate, calculate_distance
from src.core.report import SeismicReport, parse_report
from src.core.viewport import ViewportTransform, fit_bounds
from src.core.wave import WaveCircle, wave_circles

__all__ = [
    # Early warning
    "EEWAlert",
    "EEWPhase",
    "EEWState",
    "IDLE_STATE",
    "apply_alert",
    "check_staleness",
    # Frames
    "FeedKind",
    "FrameDecodeError",
    "decode_frame",
    # Geo
    "Coordinate",
    "calculate_distance",
    "resolve_all",
    "resolve_coordinate",
    # Reports
    "SeismicReport",
    "parse_report",
    # Viewport / waves
    "ViewportTransform",
    "fit_bounds",
    "WaveCircle",
    "wave_circles",
]
