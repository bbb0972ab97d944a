"""Message formatting - Pure functions.

This module formats reports and early warnings into short human-readable
lines for logs and text surfaces. All functions are pure with no side
effects.
"""

from src.core.eew import EEWState
from src.core.intensity import format_intensity_ja
from src.core.report import SeismicReport, TsunamiLevel
from src.core.timeparse import JST


_TSUNAMI_LABELS: dict[TsunamiLevel, str] = {
    TsunamiLevel.NONE: "津波の心配なし",
    TsunamiLevel.UNKNOWN: "津波情報不明",
    TsunamiLevel.CHECKING: "津波調査中",
    TsunamiLevel.NON_EFFECTIVE: "若干の海面変動",
    TsunamiLevel.WATCH: "津波注意報",
    TsunamiLevel.WARNING: "津波警報",
    TsunamiLevel.MAJOR_WARNING: "大津波警報",
}


def format_magnitude(magnitude: float | None) -> str:
    """Format a magnitude ("M7.2"), "M不明" if unknown.

    Pure function.
    """
    if magnitude is None:
        return "M不明"
    return f"M{magnitude:.1f}"


def format_depth(depth_km: float | None) -> str:
    """Format a depth ("10km"), "ごく浅い" for 0, "不明" if unknown.

    Pure function.
    """
    if depth_km is None:
        return "不明"
    if depth_km == 0:
        return "ごく浅い"
    return f"{depth_km:.0f}km"


def format_tsunami(level: TsunamiLevel) -> str:
    """Format a domestic tsunami level for display."""
    return _TSUNAMI_LABELS.get(level, level.value)


def format_eew_summary(state: EEWState) -> str:
    """Format a one-line summary of an early warning.

    Pure function.

    Args:
        state: Early-warning state

    Returns:
        One-line summary string
    """
    if not state.is_active:
        return "緊急地震速報なし"

    kind = "警報" if state.is_warning else "予報"
    parts = [
        f"緊急地震速報（{kind}）",
        state.hypocenter_name or "調査中",
        format_magnitude(state.magnitude),
        f"深さ{format_depth(state.depth_km)}",
    ]
    if state.max_intensity:
        parts.append(f"最大震度{state.max_intensity}")
    if state.is_final:
        parts.append("最終報")
    if state.areas:
        parts.append("対象: " + " ".join(state.areas))
    return " ".join(parts)


def format_report_summary(report: SeismicReport) -> str:
    """Format a one-line summary of a finalized report.

    Pure function.

    Args:
        report: Report to summarize

    Returns:
        One-line summary string
    """
    hypocenter = report.hypocenter
    name = hypocenter.name if hypocenter and hypocenter.name else "不明な地域"
    magnitude = hypocenter.magnitude if hypocenter else None
    depth = hypocenter.depth_km if hypocenter else None

    when = report.occurred_time or report.time
    time_str = when.astimezone(JST).strftime("%Y-%m-%d %H:%M JST")

    return (
        f"{time_str} {name} {format_magnitude(magnitude)} "
        f"深さ{format_depth(depth)} 最大震度{format_intensity_ja(report.max_intensity)} "
        f"({format_tsunami(report.domestic_tsunami)})"
    )
