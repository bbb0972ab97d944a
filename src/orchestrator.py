"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. It's the "glue" that
makes the application work.

It is the single owner of mutable state: the live early-warning state,
the live report, what is currently displayed, the view mode, and every
background task (feeds, staleness checks, animation, simulation).
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.core.config import Config
from src.core.cues import decide_cues
from src.core.eew import IDLE_STATE, EEWAlert, EEWState, apply_alert, check_staleness
from src.core.formatter import format_eew_summary, format_report_summary
from src.core.frames import FeedKind, Frame
from src.core.gazetteer import resolve_coordinate
from src.core.projection import MercatorProjection, Viewport
from src.core.render import (
    AreaArrival,
    CueSink,
    FeedStatus,
    RenderFrame,
    RenderSurface,
    ViewMode,
)
from src.core.report import SeismicReport
from src.core.simulation import build_simulation
from src.core.viewport import (
    IDENTITY_TRANSFORM,
    ViewportTransform,
    ViewportTransition,
    eew_epicenter,
    fit_eew_view,
    fit_report_view,
    start_transition,
)
from src.core.wave import elapsed_seconds, seconds_until_arrival, wave_circles
from src.shell.feed_client import FeedClient
from src.shell.history_client import P2PHistoryClient


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MonitorSnapshot:
    """Immutable view of the orchestrator's state for readers.

    Attributes:
        mode: Current view mode
        live_eew: Latest early-warning state from the feed
        display_eew: Early-warning state being displayed
        live_report: Latest report from the feed
        display_report: Report being displayed
        feeds: Connection status per feed
        auto_zoom: Whether the viewport refits on new data
        transform: Current viewport transform
    """
    mode: ViewMode
    live_eew: EEWState
    display_eew: EEWState
    live_report: SeismicReport | None
    display_report: SeismicReport | None
    feeds: dict[FeedKind, FeedStatus] = field(default_factory=dict)
    auto_zoom: bool = True
    transform: ViewportTransform = IDENTITY_TRANSFORM


class Orchestrator:
    """Coordinates feed ingestion, state reconciliation and display.

    This class wires together:
    - Feed clients (WebSocket push feeds)
    - History client (bootstrap report over HTTP)
    - Core functions (reconciliation, fitting, waves, cues)
    - Rendering surface and cue sink (output)
    """

    def __init__(
        self,
        config: Config,
        surface: RenderSurface | None = None,
        cue_sink: CueSink | None = None,
        history_client: P2PHistoryClient | None = None,
        feed_factory: Callable[..., FeedClient] = FeedClient,
        clock: Callable[[], datetime] = _utc_now,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            surface: Receives render frames (none if not provided)
            cue_sink: Receives notification cues (none if not provided)
            history_client: History client (created if not provided)
            feed_factory: Builds feed clients (injectable for tests)
            clock: Wall-clock source, timezone-aware
            monotonic: Monotonic clock used for staleness and transitions
        """
        self.config = config
        self.surface = surface
        self.cue_sink = cue_sink
        self.history_client = history_client or P2PHistoryClient(config.history_url)
        self._clock = clock
        self._monotonic = monotonic

        self.viewport = Viewport(config.viewport.width, config.viewport.height)
        self.projection = MercatorProjection.for_viewport(self.viewport)

        self._mode = ViewMode.LIVE
        self._auto_zoom = config.auto_zoom
        self._live_eew = IDLE_STATE
        self._display_eew = IDLE_STATE
        self._live_report: SeismicReport | None = None
        self._display_report: SeismicReport | None = None
        self._announced_report_id: str | None = None
        self._feeds = {
            FeedKind.REPORT: FeedStatus.DISCONNECTED,
            FeedKind.EEW: FeedStatus.DISCONNECTED,
        }
        self._transition: ViewportTransition | None = None

        self._staleness_task: asyncio.Task | None = None
        self._animation_task: asyncio.Task | None = None
        self._simulation_task: asyncio.Task | None = None

        self.feed_clients = [
            feed_factory(
                FeedKind.REPORT,
                config.report_feed_url,
                self._on_frame,
                self._on_feed_status,
                reconnect_delay=config.reconnect_delay_seconds,
            ),
            feed_factory(
                FeedKind.EEW,
                config.eew_feed_url,
                self._on_frame,
                self._on_feed_status,
                reconnect_delay=config.reconnect_delay_seconds,
            ),
        ]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Bootstrap the latest report and open both feeds."""
        logger.info("Starting monitor")

        if self.config.bootstrap_history:
            report = await asyncio.to_thread(self.history_client.fetch_latest_report)
            if report is not None:
                logger.info("Bootstrapped report %s", report.id)
                self.handle_report(report)

        for client in self.feed_clients:
            client.start()

        self._publish()

    async def stop(self) -> None:
        """Cancel every task and close the feeds."""
        logger.info("Stopping monitor")

        tasks = [
            task for task in (self._simulation_task, self._staleness_task, self._animation_task)
            if task is not None
        ]
        self._cancel_simulation()
        self._cancel_staleness()
        self._cancel_animation()
        await asyncio.gather(*tasks, return_exceptions=True)

        for client in self.feed_clients:
            await client.stop()

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def _on_frame(self, frame: Frame) -> None:
        if isinstance(frame, SeismicReport):
            self.handle_report(frame)
        elif isinstance(frame, EEWAlert):
            self.handle_eew_alert(frame)

    def _on_feed_status(self, kind: FeedKind, status: FeedStatus) -> None:
        self._feeds[kind] = status
        self._publish()

    def handle_report(self, report: SeismicReport) -> None:
        """Accept a finalized report from the feed.

        A report with the ID already held is ignored. Reports never touch
        the early-warning state.
        """
        if self._live_report is not None and self._live_report.id == report.id:
            logger.debug("Ignoring repeated report %s", report.id)
            return

        logger.info("New report: %s", format_report_summary(report))
        self._live_report = report

        if self._mode == ViewMode.LIVE:
            self._show(self._display_eew, report)

    def handle_eew_alert(self, alert: EEWAlert) -> EEWState:
        """Reconcile an early-warning frame into the live state.

        Returns:
            The new live state
        """
        previous = self._live_eew
        current = apply_alert(previous, alert, self._monotonic())

        if current.phase != previous.phase or current.event_id != previous.event_id:
            logger.info(
                "EEW %s -> %s (event %s, serial %s)",
                previous.phase.value,
                current.phase.value,
                alert.event_id,
                alert.serial,
            )

        self._set_live_eew(current)
        return current

    def check_staleness(self) -> EEWState:
        """Retire the live early warning if it has gone quiet.

        Returns:
            The live state after the check
        """
        current = check_staleness(
            self._live_eew,
            self._monotonic(),
            self.config.inactivity_window_seconds,
            self.config.final_hold_seconds,
        )
        if current is not self._live_eew:
            logger.info(
                "EEW %s expired after inactivity",
                self._live_eew.event_id,
            )
            self._set_live_eew(current)
        return current

    def reset_eew(self) -> None:
        """Manually clear the live early warning."""
        logger.info("EEW reset")
        self._set_live_eew(IDLE_STATE)

    def _set_live_eew(self, state: EEWState) -> None:
        self._live_eew = state

        if state.is_active:
            self._ensure_staleness()
        else:
            self._cancel_staleness()

        if self._mode == ViewMode.LIVE:
            self._show(state, self._display_report)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def select_history(self, report: SeismicReport) -> None:
        """Display a past report; live data keeps updating in the background."""
        logger.info("Showing history report %s", report.id)
        self._cancel_simulation()
        # Staleness keeps running outside live mode; the live state still expires
        self._mode = ViewMode.HISTORY
        self._show(IDLE_STATE, report)

    def start_simulation(self) -> None:
        """Play the scripted demo earthquake."""
        logger.info("Starting simulation")
        self._cancel_simulation()
        self._mode = ViewMode.SIMULATION
        # The demo always announces from a clean slate
        self._show(IDLE_STATE, None)
        self._simulation_task = asyncio.create_task(
            self._run_simulation(self._clock()), name="simulation",
        )

    async def _run_simulation(self, started: datetime) -> None:
        elapsed = 0.0
        for step in build_simulation(started):
            await asyncio.sleep(step.delay - elapsed)
            elapsed = step.delay

            eew = step.eew if step.eew is not None else self._display_eew
            if step.report is not None:
                report = step.report
            elif step.clear_report:
                report = None
            else:
                report = self._display_report
            self._show(eew, report)

        logger.info("Simulation finished")

    def return_live(self) -> None:
        """Go back to live mode, re-promoting the latest live data."""
        logger.info("Returning to live")
        self._cancel_simulation()
        self._mode = ViewMode.LIVE
        self._show(self._live_eew, self._live_report)

    def set_auto_zoom(self, enabled: bool) -> None:
        self._auto_zoom = enabled
        logger.info("Auto zoom %s", "enabled" if enabled else "disabled")
        if enabled:
            self._refit()
            self._publish()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _show(self, eew: EEWState, report: SeismicReport | None) -> None:
        """Promote a state/report pair to the display."""
        previous = self._display_eew
        self._display_eew = eew
        self._display_report = report

        if eew != previous:
            logger.info("Display: %s", format_eew_summary(eew))

        cues = decide_cues(
            previous,
            eew,
            self._announced_report_id,
            report,
            self._clock(),
            simulated=self._mode == ViewMode.SIMULATION,
        )
        if report is not None:
            self._announced_report_id = report.id
        if self.cue_sink is not None:
            for cue in cues:
                self.cue_sink.play(cue)

        self._refit()

        if eew.is_active:
            self._ensure_animation()
        else:
            self._cancel_animation()
            if self._transition_running():
                self._ensure_animation()

        self._publish()

    def _refit(self) -> None:
        """Start a transition to the view that frames what is displayed."""
        if not self._auto_zoom:
            return

        current = self.current_transform()
        settings = self.config.viewport

        if self._display_eew.is_active:
            target = fit_eew_view(
                self._display_eew, self.projection, self.viewport, settings, current,
            )
        elif self._display_report is not None:
            target = fit_report_view(
                self._display_report, self.projection, self.viewport, settings, current,
            )
        else:
            return

        if self._transition is not None and self._transition.end == target:
            return
        if target == current:
            return

        self._transition = start_transition(
            current, target, self._monotonic(), settings.transition_seconds,
        )

    def current_transform(self) -> ViewportTransform:
        if self._transition is None:
            return IDENTITY_TRANSFORM
        return self._transition.at(self._monotonic())

    def _transition_running(self) -> bool:
        return self._transition is not None and not self._transition.done(self._monotonic())

    def _arrivals(self, now: datetime) -> tuple[AreaArrival, ...]:
        eew = self._display_eew
        epicenter = eew_epicenter(eew)
        if not eew.is_active or epicenter is None or eew.occurred_time is None:
            return ()

        elapsed = elapsed_seconds(eew.occurred_time, now)
        arrivals = []
        for area in eew.areas:
            target = resolve_coordinate(area)
            if target is None:
                logger.debug("No coordinate for target area %s", area)
                continue
            arrivals.append(AreaArrival(
                area=area,
                seconds=seconds_until_arrival(
                    epicenter, target, elapsed, self.config.waves.s_velocity_km_s,
                ),
            ))
        return tuple(arrivals)

    def current_frame(self) -> RenderFrame:
        """Build the frame for the current instant."""
        now = self._clock()
        eew = self._display_eew

        waves = ()
        epicenter = eew_epicenter(eew)
        if eew.is_active and epicenter is not None and eew.occurred_time is not None:
            waves = wave_circles(epicenter, eew.occurred_time, now, self.config.waves)

        return RenderFrame(
            transform=self.current_transform(),
            waves=waves,
            eew=eew,
            report=self._display_report,
            mode=self._mode,
            report_feed=self._feeds[FeedKind.REPORT],
            eew_feed=self._feeds[FeedKind.EEW],
            arrivals=self._arrivals(now),
            generated_at=now,
        )

    def snapshot(self) -> MonitorSnapshot:
        return MonitorSnapshot(
            mode=self._mode,
            live_eew=self._live_eew,
            display_eew=self._display_eew,
            live_report=self._live_report,
            display_report=self._display_report,
            feeds=dict(self._feeds),
            auto_zoom=self._auto_zoom,
            transform=self.current_transform(),
        )

    def _publish(self) -> None:
        if self.surface is not None:
            self.surface.render(self.current_frame())

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    @property
    def animating(self) -> bool:
        return self._animation_task is not None and not self._animation_task.done()

    @property
    def staleness_running(self) -> bool:
        return self._staleness_task is not None and not self._staleness_task.done()

    @property
    def simulating(self) -> bool:
        return self._simulation_task is not None and not self._simulation_task.done()

    async def _animate(self) -> None:
        """Publish frames until nothing on screen is moving."""
        try:
            while self._display_eew.is_active or self._transition_running():
                self._publish()
                await asyncio.sleep(self.config.frame_interval_seconds)
            self._publish()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Animation loop failed")

    async def _watch_staleness(self) -> None:
        try:
            while self._live_eew.is_active:
                await asyncio.sleep(self.config.staleness_check_interval_seconds)
                self.check_staleness()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Staleness check failed")

    def _ensure_animation(self) -> None:
        if not self.animating:
            self._animation_task = asyncio.create_task(self._animate(), name="animation")

    def _ensure_staleness(self) -> None:
        if not self.staleness_running:
            self._staleness_task = asyncio.create_task(
                self._watch_staleness(), name="eew-staleness",
            )

    def _cancel_animation(self) -> None:
        if self._animation_task is not None:
            self._animation_task.cancel()
            self._animation_task = None

    def _cancel_staleness(self) -> None:
        if self._staleness_task is None:
            return
        # check_staleness runs inside this task; don't cancel ourselves
        if self._staleness_task is not asyncio.current_task():
            self._staleness_task.cancel()
        self._staleness_task = None

    def _cancel_simulation(self) -> None:
        if self._simulation_task is None:
            return
        if self._simulation_task is not asyncio.current_task():
            self._simulation_task.cancel()
        self._simulation_task = None
