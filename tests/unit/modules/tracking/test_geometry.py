"""Unit tests for great-circle distance."""

import math

import pytest

from route_tracker.modules.Tracking.tracking_core.geometry import distance_meters, is_valid_coordinate
from route_tracker.modules.Tracking.tracking_core.types import Coordinate


class TestDistanceMeters:

    def test_identity_is_zero(self):
        point = Coordinate(48.1173, 11.5166)
        assert distance_meters(point, point) == 0.0

    def test_symmetric(self):
        a = Coordinate(37.78825, -122.4324)
        b = Coordinate(37.79, -122.43)
        assert distance_meters(a, b) == pytest.approx(distance_meters(b, a))

    def test_one_hundred_thousandth_degree_on_equator(self):
        # 1e-5 degrees of longitude at the equator is about 1.11 m
        d = distance_meters(Coordinate(0.0, 0.0), Coordinate(0.0, 0.00001))
        assert d == pytest.approx(6_371_000.0 * math.radians(0.00001))
        assert d == pytest.approx(1.1119, abs=1e-3)

    def test_quarter_meridian(self):
        d = distance_meters(Coordinate(0.0, 0.0), Coordinate(90.0, 0.0))
        assert d == pytest.approx(math.pi / 2 * 6_371_000.0, rel=1e-9)

    def test_antipodes(self):
        d = distance_meters(Coordinate(0.0, 0.0), Coordinate(0.0, 180.0))
        assert d == pytest.approx(math.pi * 6_371_000.0, rel=1e-9)

    @pytest.mark.parametrize("bad", [
        None,
        Coordinate(float("nan"), 0.0),
        Coordinate(0.0, float("inf")),
        Coordinate("48.1", 11.5),
    ])
    def test_invalid_input_is_zero(self, bad):
        good = Coordinate(10.0, 10.0)
        assert distance_meters(bad, good) == 0.0
        assert distance_meters(good, bad) == 0.0


class TestIsValidCoordinate:

    def test_accepts_finite_pairs(self):
        assert is_valid_coordinate(Coordinate(0, 0))
        assert is_valid_coordinate(Coordinate(-33.8688, 151.2093))

    def test_rejects_non_coordinates(self):
        assert not is_valid_coordinate((0.0, 0.0))
        assert not is_valid_coordinate(None)

    def test_rejects_bool_components(self):
        assert not is_valid_coordinate(Coordinate(True, 0.0))
