"""Map projection - Pure functions.

Web-Mercator-style projection centred on Japan. Geographic coordinates are
projected to base pixel space; the viewport transform (zoom/pan) is applied
on top of that by the rendering surface.
"""

import math
from dataclasses import dataclass

from src.core.geo import Coordinate


# Map centre (longitude, latitude) used by the rendering surface
DEFAULT_CENTER = (137.0, 38.0)

# Mercator is undefined at the poles
_MAX_LATITUDE = 85.05112878


def _mercator_y(latitude: float) -> float:
    lat = max(-_MAX_LATITUDE, min(_MAX_LATITUDE, latitude))
    return math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))


@dataclass(frozen=True)
class Viewport:
    """On-screen drawing area in pixels."""
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)


@dataclass(frozen=True)
class MercatorProjection:
    """Mercator projection with a fixed centre, scale and translation.

    Attributes:
        center_lon: Longitude that projects to the translation point
        center_lat: Latitude that projects to the translation point
        scale: Pixels per radian
        translate_x: Pixel x of the centre point
        translate_y: Pixel y of the centre point
    """
    center_lon: float
    center_lat: float
    scale: float
    translate_x: float
    translate_y: float

    @classmethod
    def for_viewport(
        cls,
        viewport: Viewport,
        center: tuple[float, float] = DEFAULT_CENTER,
    ) -> "MercatorProjection":
        """Build the base projection for a viewport (scale = 2 x width)."""
        return cls(
            center_lon=center[0],
            center_lat=center[1],
            scale=viewport.width * 2,
            translate_x=viewport.width / 2,
            translate_y=viewport.height / 2,
        )

    def project(self, coordinate: Coordinate) -> tuple[float, float]:
        """Project a coordinate to base pixel space."""
        x = self.translate_x + self.scale * math.radians(coordinate.longitude - self.center_lon)
        y = self.translate_y - self.scale * (
            _mercator_y(coordinate.latitude) - _mercator_y(self.center_lat)
        )
        return (x, y)

    def invert(self, x: float, y: float) -> Coordinate:
        """Map a base pixel back to a coordinate."""
        longitude = self.center_lon + math.degrees((x - self.translate_x) / self.scale)
        merc = _mercator_y(self.center_lat) - (y - self.translate_y) / self.scale
        latitude = math.degrees(2 * math.atan(math.exp(merc)) - math.pi / 2)
        return Coordinate(latitude, longitude)
