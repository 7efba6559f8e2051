"""Unit tests for the minimum-distance route filter."""

from route_tracker.modules.Tracking.tracking_core.route_filter import accept_sample
from route_tracker.modules.Tracking.tracking_core.types import Coordinate


ORIGIN = Coordinate(0.0, 0.0)


class TestAcceptSample:

    def test_first_sample_always_accepted(self):
        assert accept_sample((), ORIGIN) == (ORIGIN,)

    def test_close_sample_rejected(self):
        route = (ORIGIN,)
        near = Coordinate(0.0, 0.000001)  # ~0.11 m

        assert accept_sample(route, near) is route

    def test_far_sample_appended(self):
        far = Coordinate(0.0, 0.00001)  # ~1.11 m

        assert accept_sample((ORIGIN,), far) == (ORIGIN, far)

    def test_distance_measured_from_last_accepted_point(self):
        route = (ORIGIN, Coordinate(0.0, 0.00001))

        # 0.000011 is ~1.2 m from the origin but ~0.11 m from the last point
        assert accept_sample(route, Coordinate(0.0, 0.000011)) == route

    def test_custom_threshold(self):
        far = Coordinate(0.0, 0.00001)

        assert accept_sample((ORIGIN,), far, min_distance_m=5.0) == (ORIGIN,)
        assert accept_sample((ORIGIN,), far, min_distance_m=0.0) == (ORIGIN, far)

    def test_duplicate_allowed_with_zero_threshold(self):
        assert accept_sample((ORIGIN,), ORIGIN, min_distance_m=0.0) == (ORIGIN, ORIGIN)

    def test_invalid_sample_never_accepted(self):
        bad = Coordinate(float("nan"), 0.0)

        assert accept_sample((), bad) == ()
        assert accept_sample((ORIGIN,), bad) == (ORIGIN,)

    def test_input_not_modified(self):
        route = (ORIGIN,)
        accept_sample(route, Coordinate(1.0, 1.0))
        assert route == (ORIGIN,)
