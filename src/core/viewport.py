"""Viewport fitting - Pure functions.

Computes the zoom/pan transform that frames a set of geographic points.
A transform maps a base-projected pixel (x, y) to the screen as
(k * x + tx, k * y + ty).
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from src.core.config import ViewportConfig
from src.core.eew import EEWState
from src.core.gazetteer import resolve_all, resolve_coordinate
from src.core.geo import Coordinate, is_far_from_japan
from src.core.projection import MercatorProjection, Viewport
from src.core.report import SeismicReport


@dataclass(frozen=True)
class ViewportTransform:
    """Zoom/pan transform applied on top of the base projection.

    Attributes:
        k: Scale factor
        tx: Horizontal translation in pixels
        ty: Vertical translation in pixels
    """
    k: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    def apply(self, x: float, y: float) -> tuple[float, float]:
        """Map a base pixel to a screen pixel."""
        return (self.k * x + self.tx, self.k * y + self.ty)

    def invert(self, x: float, y: float) -> tuple[float, float]:
        """Map a screen pixel back to a base pixel."""
        return ((x - self.tx) / self.k, (y - self.ty) / self.k)


IDENTITY_TRANSFORM = ViewportTransform()


def center_on(
    x: float,
    y: float,
    k: float,
    viewport: Viewport,
) -> ViewportTransform:
    """Transform that places base pixel (x, y) at the viewport centre at zoom k."""
    cx, cy = viewport.center
    return ViewportTransform(k=k, tx=cx - k * x, ty=cy - k * y)


def fit_bounds(
    points: Sequence[Coordinate],
    projection: MercatorProjection,
    viewport: Viewport,
    settings: ViewportConfig | None = None,
    previous: ViewportTransform = IDENTITY_TRANSFORM,
) -> ViewportTransform:
    """Compute a transform that frames all points.

    Pure function.

    - No points → previous transform, unchanged.
    - Zero-size box (one effective point) → fixed zoom centred on it.
    - Otherwise → the tighter of the horizontal/vertical fits after padding,
      clamped to the configured zoom range, centred on the box.

    Args:
        points: Geographic points to frame
        projection: Base projection
        viewport: Drawing area
        settings: Padding and zoom clamps (defaults if None)
        previous: Transform to keep when there is nothing to fit

    Returns:
        New transform (or previous)
    """
    settings = settings or ViewportConfig()

    projected = [projection.project(p) for p in points]
    projected = [(x, y) for x, y in projected if math.isfinite(x) and math.isfinite(y)]
    if not projected:
        return previous

    xs = [x for x, _ in projected]
    ys = [y for _, y in projected]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)

    bounds_width = max_x - min_x
    bounds_height = max_y - min_y

    if bounds_width == 0 and bounds_height == 0:
        return center_on(min_x, min_y, settings.single_point_zoom, viewport)

    usable = 1 - settings.padding * 2
    scale_x = viewport.width * usable / bounds_width if bounds_width else math.inf
    scale_y = viewport.height * usable / bounds_height if bounds_height else math.inf

    k = min(scale_x, scale_y)
    k = max(settings.min_zoom, min(settings.max_zoom, k))

    return center_on((min_x + max_x) / 2, (min_y + max_y) / 2, k, viewport)


def fit_points(
    points: Sequence[Coordinate],
    projection: MercatorProjection,
    viewport: Viewport,
    settings: ViewportConfig | None = None,
    previous: ViewportTransform = IDENTITY_TRANSFORM,
) -> ViewportTransform:
    """Fit points, showing a lone point outside Japan with world context.

    Pure function.
    """
    settings = settings or ViewportConfig()

    if len(points) == 1 and is_far_from_japan(points[0]):
        x, y = projection.project(points[0])
        return center_on(x, y, settings.far_away_zoom, viewport)

    return fit_bounds(points, projection, viewport, settings, previous)


def report_points(report: SeismicReport) -> list[Coordinate]:
    """Collect the epicenter and observation points of a report.

    Pure function. Names that can't be resolved are skipped.
    """
    points: list[Coordinate] = []

    if report.hypocenter is not None:
        epicenter = report.hypocenter.coordinate
        if epicenter is None and report.hypocenter.name:
            epicenter = resolve_coordinate(report.hypocenter.name)
        if epicenter is not None:
            points.append(epicenter)

    for point in report.points:
        coordinate = resolve_coordinate(point.name) or resolve_coordinate(point.prefecture)
        if coordinate is not None:
            points.append(coordinate)

    return points


def eew_epicenter(state: EEWState) -> Coordinate | None:
    """Resolve the epicenter of an early warning.

    Pure function. Explicit coordinates win over the hypocenter name.
    """
    if state.epicenter is not None:
        return state.epicenter
    if state.hypocenter_name:
        return resolve_coordinate(state.hypocenter_name)
    return None


def eew_points(state: EEWState) -> list[Coordinate]:
    """Collect the epicenter and target areas of an early warning.

    Pure function. Names that can't be resolved are skipped.
    """
    points: list[Coordinate] = []
    epicenter = eew_epicenter(state)
    if epicenter is not None:
        points.append(epicenter)
    points.extend(resolve_all(state.areas))
    return points


def fit_report_view(
    report: SeismicReport,
    projection: MercatorProjection,
    viewport: Viewport,
    settings: ViewportConfig | None = None,
    previous: ViewportTransform = IDENTITY_TRANSFORM,
) -> ViewportTransform:
    """Frame a finalized report (epicenter plus observing stations)."""
    return fit_points(report_points(report), projection, viewport, settings, previous)


def fit_eew_view(
    state: EEWState,
    projection: MercatorProjection,
    viewport: Viewport,
    settings: ViewportConfig | None = None,
    previous: ViewportTransform = IDENTITY_TRANSFORM,
) -> ViewportTransform:
    """Frame an early warning (epicenter plus target areas)."""
    return fit_bounds(eew_points(state), projection, viewport, settings, previous)


def ease_cubic_out(t: float) -> float:
    """Cubic ease-out: fast start, gentle stop."""
    t = max(0.0, min(1.0, t))
    return 1 - (1 - t) ** 3


@dataclass(frozen=True)
class ViewportTransition:
    """Smoothed move from one transform to another.

    Attributes:
        start: Transform at the beginning of the move
        end: Target transform
        started_at: Monotonic time the move began
        duration: Length of the move in seconds
    """
    start: ViewportTransform
    end: ViewportTransform
    started_at: float
    duration: float = 1.2

    def progress(self, now: float) -> float:
        if self.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.started_at) / self.duration))

    def done(self, now: float) -> bool:
        return self.progress(now) >= 1.0

    def at(self, now: float) -> ViewportTransform:
        """Interpolated transform at a monotonic instant."""
        t = self.progress(now)
        if t >= 1.0:
            return self.end
        eased = ease_cubic_out(t)
        return ViewportTransform(
            k=self.start.k + (self.end.k - self.start.k) * eased,
            tx=self.start.tx + (self.end.tx - self.start.tx) * eased,
            ty=self.start.ty + (self.end.ty - self.start.ty) * eased,
        )


def start_transition(
    current: ViewportTransform,
    target: ViewportTransform,
    now: float,
    duration: float,
) -> ViewportTransition:
    """Begin a smoothed move from the current transform to a target."""
    return ViewportTransition(start=current, end=target, started_at=now, duration=duration)
