"""Unit tests for geographic calculations.

Pure function tests - no mocks needed, fast execution.
"""

import pytest

from src.core.geo import (
    JAPAN_BOUNDS,
    BoundingBox,
    Coordinate,
    calculate_distance,
    distance_between,
    is_far_from_japan,
    is_valid_coordinate,
)


class TestCalculateDistance:
    """Tests for calculate_distance() Haversine implementation."""

    def test_same_point_returns_zero(self):
        """Distance from point to itself should be zero."""
        distance = calculate_distance(35.69, 139.69, 35.69, 139.69)
        assert distance == pytest.approx(0.0, abs=0.001)

    def test_known_distance_tokyo_to_osaka(self):
        """Tokyo to Osaka should be approximately 400 km."""
        distance = calculate_distance(35.69, 139.69, 34.69, 135.50)
        assert distance == pytest.approx(400, rel=0.03)

    def test_symmetric(self):
        """Distance should be the same in both directions."""
        d1 = calculate_distance(43.06, 141.35, 26.21, 127.68)
        d2 = calculate_distance(26.21, 127.68, 43.06, 141.35)

        assert d1 == pytest.approx(d2, rel=0.001)

    def test_distance_between_coordinates(self):
        a = Coordinate(35.69, 139.69)
        b = Coordinate(34.69, 135.50)
        assert distance_between(a, b) == pytest.approx(calculate_distance(35.69, 139.69, 34.69, 135.50))


class TestBoundingBox:
    """Tests for BoundingBox.contains()."""

    def test_contains_point_inside(self):
        box = BoundingBox(min_latitude=30, max_latitude=40, min_longitude=130, max_longitude=140)
        assert box.contains(35, 135)

    def test_edges_are_inside(self):
        box = BoundingBox(min_latitude=30, max_latitude=40, min_longitude=130, max_longitude=140)
        assert box.contains(30, 140)

    def test_outside(self):
        box = BoundingBox(min_latitude=30, max_latitude=40, min_longitude=130, max_longitude=140)
        assert not box.contains(41, 135)
        assert not box.contains(35, 129)


class TestJapanBounds:
    """Tests for is_far_from_japan()."""

    def test_tokyo_is_near(self):
        assert not is_far_from_japan(Coordinate(35.69, 139.69))

    def test_chile_is_far(self):
        assert is_far_from_japan(Coordinate(-33.4, -70.6))

    def test_bounds_values(self):
        assert JAPAN_BOUNDS.min_longitude == 120
        assert JAPAN_BOUNDS.max_longitude == 155
        assert JAPAN_BOUNDS.min_latitude == 20
        assert JAPAN_BOUNDS.max_latitude == 50


class TestIsValidCoordinate:
    """Tests for is_valid_coordinate()."""

    def test_valid(self):
        assert is_valid_coordinate(35.0, 139.0)
        assert is_valid_coordinate(-90, 180)

    def test_invalid(self):
        assert not is_valid_coordinate(91, 0)
        assert not is_valid_coordinate(0, -181)

