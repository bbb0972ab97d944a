"""Scripted simulation timeline - Pure functions.

A canned northern-Wakayama earthquake used to exercise the display
without live data: forecast, escalation to warning, final report,
finalized earthquake report, then reset.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from src.core.eew import IDLE_STATE, EEWState
from src.core.geo import Coordinate
from src.core.intensity import Intensity
from src.core.report import Hypocenter, IntensityObservation, SeismicReport, TsunamiLevel


SIMULATION_HYPOCENTER = "和歌山県北部"
SIMULATION_EPICENTER = Coordinate(34.23, 135.17)


@dataclass(frozen=True)
class SimulationStep:
    """One scheduled change to the displayed state.

    Attributes:
        delay: Seconds after the simulation starts
        eew: Early-warning state to display, if this step changes it
        report: Report to display, if this step changes it
        clear_report: Remove the displayed report
    """
    delay: float
    eew: EEWState | None = None
    report: SeismicReport | None = None
    clear_report: bool = False


def build_simulation(now: datetime) -> list[SimulationStep]:
    """Build the simulation timeline anchored at `now`.

    Pure function. The origin instant is two seconds before `now` so wave
    rings are already visible on the first frame.

    Args:
        now: Wall-clock start of the simulation (timezone-aware)

    Returns:
        Steps ordered by delay
    """
    origin_time = now - timedelta(seconds=2)

    forecast = EEWState(
        is_active=True,
        is_warning=False,
        is_final=False,
        event_id="simulation",
        hypocenter_name=SIMULATION_HYPOCENTER,
        magnitude=4.5,
        depth_km=10,
        max_intensity="3",
        areas=("和歌山県",),
        occurred_time=origin_time,
        title="緊急地震速報（予報）",
    )

    warning = replace(
        forecast,
        is_warning=True,
        magnitude=7.2,
        max_intensity="6+",
        areas=("和歌山県", "大阪府", "奈良県", "徳島県", "兵庫県"),
        title="緊急地震速報（警報）",
    )

    final = replace(warning, is_final=True)

    report_time = now + timedelta(seconds=15)
    report = SeismicReport(
        id=f"sim_{int(now.timestamp() * 1000)}",
        time=report_time,
        occurred_time=origin_time,
        hypocenter=Hypocenter(
            name=SIMULATION_HYPOCENTER,
            latitude=SIMULATION_EPICENTER.latitude,
            longitude=SIMULATION_EPICENTER.longitude,
            depth_km=10,
            magnitude=7.2,
        ),
        max_intensity=Intensity.SCALE_6_UPPER,
        domestic_tsunami=TsunamiLevel.CHECKING,
        points=(
            IntensityObservation("和歌山県", "和歌山市", Intensity.SCALE_6_UPPER),
            IntensityObservation("大阪府", "大阪市", Intensity.SCALE_6_LOWER),
            IntensityObservation("奈良県", "奈良市", Intensity.SCALE_5_UPPER),
            IntensityObservation("徳島県", "徳島市", Intensity.SCALE_5_LOWER),
        ),
        issue_type="Simulation",
    )

    return [
        SimulationStep(delay=0, eew=forecast, clear_report=True),
        SimulationStep(delay=6, eew=warning),
        SimulationStep(delay=12, eew=final),
        SimulationStep(delay=15, report=report),
        SimulationStep(delay=25, eew=IDLE_STATE),
    ]
