"""Geographic primitives and calculations - Pure functions.

This module provides coordinates, bounding boxes and great-circle distance.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """A geographic point.

    Attributes:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
    """
    latitude: float
    longitude: float


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box.

    Attributes:
        min_latitude: Southern boundary
        max_latitude: Northern boundary
        min_longitude: Western boundary
        max_longitude: Eastern boundary
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within this bounding box."""
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


# Rough extent of the Japanese archipelago. Points outside it are shown
# with world context rather than fitted to prefectures.
JAPAN_BOUNDS = BoundingBox(
    min_latitude=20.0,
    max_latitude=50.0,
    min_longitude=120.0,
    max_longitude=155.0,
)


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    """Check that a latitude/longitude pair is on the globe.

    Pure function.
    """
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_between(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometers between two coordinates."""
    return calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def is_far_from_japan(coordinate: Coordinate) -> bool:
    """Check whether a point lies outside the Japan bounding box.

    Pure function.
    """
    return not JAPAN_BOUNDS.contains(coordinate.latitude, coordinate.longitude)
