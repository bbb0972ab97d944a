"""Notification cue decisions - Pure functions.

Decides which audible cues a display change calls for. Producing the
sounds is up to whoever receives the cues.
"""

from datetime import datetime, timedelta
from enum import Enum

from src.core.eew import EEWState
from src.core.report import SeismicReport


# A new report older than this is not announced (e.g., bootstrap data)
RECENT_REPORT_WINDOW = timedelta(minutes=10)


class Cue(str, Enum):
    ALARM_START = "alarm_start"
    ALARM_STOP = "alarm_stop"
    FORECAST = "forecast"
    FINAL = "final"
    QUAKE_INFO = "quake_info"


def alarm_should_sound(state: EEWState) -> bool:
    """The looping alarm plays for an active, non-final warning."""
    return state.is_active and state.is_warning and not state.is_final


def decide_cues(
    previous: EEWState,
    current: EEWState,
    previous_report_id: str | None,
    report: SeismicReport | None,
    now: datetime,
    simulated: bool = False,
) -> list[Cue]:
    """Decide cues for a change in the displayed state.

    Pure function.

    Args:
        previous: Displayed early-warning state before the change
        current: Displayed early-warning state after the change
        previous_report_id: ID of the report announced last
        report: Currently displayed report
        now: Wall-clock time, used to skip stale reports
        simulated: Announce reports regardless of age

    Returns:
        Cues in the order they should be issued
    """
    cues: list[Cue] = []

    was_alarming = alarm_should_sound(previous)
    is_alarming = alarm_should_sound(current)
    if is_alarming and not was_alarming:
        cues.append(Cue.ALARM_START)
    elif was_alarming and not is_alarming:
        cues.append(Cue.ALARM_STOP)

    if current.is_active and not previous.is_active and not current.is_warning:
        cues.append(Cue.FORECAST)

    if current.is_active and current.is_final and not previous.is_final:
        cues.append(Cue.FINAL)

    if report is not None and report.id != previous_report_id:
        if simulated or report.time > now - RECENT_REPORT_WINDOW:
            cues.append(Cue.QUAKE_INFO)

    return cues
