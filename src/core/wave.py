"""Seismic wave propagation - Pure functions.

Coarse playback of the primary (P) and secondary (S) wave fronts expanding
from an epicenter. Velocities are constants, not a travel-time model.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from src.core.config import WaveConfig
from src.core.geo import Coordinate, distance_between


P_WAVE_VELOCITY_KM_S = 6.5
S_WAVE_VELOCITY_KM_S = 3.5

# 1 degree of arc is roughly 111 km
KM_PER_DEGREE = 111.32


class WaveKind(str, Enum):
    PRIMARY = "P"
    SECONDARY = "S"


@dataclass(frozen=True)
class WaveCircle:
    """Geographic circle descriptor for one wave front.

    The rendering surface draws it; nothing here is rasterized.

    Attributes:
        kind: Which wave this is
        center: Epicenter
        radius_km: Distance travelled
        radius_degrees: Same distance as degrees of arc
    """
    kind: WaveKind
    center: Coordinate
    radius_km: float
    radius_degrees: float


def elapsed_seconds(origin_time: datetime, now: datetime) -> float:
    """Seconds since the origin instant, clamped to zero.

    Pure function. An origin in the future (clock skew) yields 0.
    """
    return max(0.0, (now - origin_time).total_seconds())


def wave_radii_km(
    elapsed: float,
    p_velocity: float = P_WAVE_VELOCITY_KM_S,
    s_velocity: float = S_WAVE_VELOCITY_KM_S,
) -> tuple[float, float]:
    """Return (P radius, S radius) in kilometers after `elapsed` seconds.

    Pure function.
    """
    elapsed = max(0.0, elapsed)
    return (elapsed * p_velocity, elapsed * s_velocity)


def km_to_degrees(km: float, km_per_degree: float = KM_PER_DEGREE) -> float:
    """Convert a surface distance to degrees of arc."""
    return km / km_per_degree


def wave_circles(
    origin: Coordinate,
    origin_time: datetime,
    now: datetime,
    settings: WaveConfig | None = None,
) -> tuple[WaveCircle, ...]:
    """Compute both wave fronts at a wall-clock instant.

    Pure function.

    Args:
        origin: Epicenter
        origin_time: Origin instant of the earthquake
        now: Current wall-clock time
        settings: Wave velocities (defaults if None)

    Returns:
        (P circle, S circle), or an empty tuple while the origin instant is
        still in the future
    """
    settings = settings or WaveConfig()

    if now < origin_time:
        return ()

    elapsed = elapsed_seconds(origin_time, now)
    p_km, s_km = wave_radii_km(elapsed, settings.p_velocity_km_s, settings.s_velocity_km_s)

    return (
        WaveCircle(
            kind=WaveKind.PRIMARY,
            center=origin,
            radius_km=p_km,
            radius_degrees=km_to_degrees(p_km, settings.km_per_degree),
        ),
        WaveCircle(
            kind=WaveKind.SECONDARY,
            center=origin,
            radius_km=s_km,
            radius_degrees=km_to_degrees(s_km, settings.km_per_degree),
        ),
    )


def seconds_until_arrival(
    origin: Coordinate,
    target: Coordinate,
    elapsed: float,
    velocity: float = S_WAVE_VELOCITY_KM_S,
) -> float:
    """Seconds until a wave front reaches a location, 0 once it has passed.

    Pure function. Uses surface distance only (depth ignored).
    """
    travel = distance_between(origin, target) / velocity
    return max(0.0, travel - max(0.0, elapsed))
