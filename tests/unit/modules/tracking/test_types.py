"""Unit tests for tracking data types and errors."""

import pytest

from route_tracker.modules.Tracking.tracking_core.errors import (
    InvalidSampleError,
    LocationError,
    LocationTimeoutError,
    PermissionDeniedError,
    ProviderError,
    ServiceDisabledError,
    error_from_code,
)
from route_tracker.modules.Tracking.tracking_core.types import (
    Coordinate,
    ErrorKind,
    LocationSample,
    TrackingError,
)


class TestCoordinate:

    def test_parse_valid(self):
        coord = Coordinate.parse(48.1173, 11.5166)
        assert (coord.latitude, coord.longitude) == (48.1173, 11.5166)

    @pytest.mark.parametrize("lat,lon", [
        (float("nan"), 0.0),
        (0.0, float("-inf")),
        (None, 0.0),
        ("1.0", 2.0),
    ])
    def test_parse_invalid_raises(self, lat, lon):
        with pytest.raises(InvalidSampleError):
            Coordinate.parse(lat, lon)

    def test_is_hashable_and_comparable(self):
        assert Coordinate(1.0, 2.0) == Coordinate(1.0, 2.0)
        assert len({Coordinate(1.0, 2.0), Coordinate(1.0, 2.0)}) == 1


class TestLocationSample:

    def test_at_builds_coordinate(self):
        sample = LocationSample.at(1.5, 2.5, accuracy_m=4.0)
        assert sample.coordinate == Coordinate(1.5, 2.5)
        assert sample.accuracy_m == 4.0
        assert sample.has_valid_coordinate()

    def test_missing_coordinate_is_invalid(self):
        assert not LocationSample(coordinate=None).has_valid_coordinate()


class TestErrors:

    def test_codes(self):
        assert PermissionDeniedError().code == 1
        assert ServiceDisabledError().code == 2
        assert LocationTimeoutError("late").code == 3
        assert ProviderError("boom").code == 0

    def test_default_messages(self):
        assert PermissionDeniedError().message == "Location permission denied."
        assert ServiceDisabledError().message == "Location services disabled."

    def test_hierarchy(self):
        assert issubclass(LocationTimeoutError, ProviderError)
        assert issubclass(ProviderError, LocationError)
        assert issubclass(InvalidSampleError, ValueError)

    @pytest.mark.parametrize("code,expected", [
        (1, PermissionDeniedError),
        (2, ServiceDisabledError),
        (3, LocationTimeoutError),
        (99, ProviderError),
    ])
    def test_error_from_code(self, code, expected):
        error = error_from_code(code, "")
        assert type(error) is expected

    def test_error_from_unknown_code_keeps_code_and_message(self):
        error = error_from_code(42, "gnss chip reset")
        assert error.code == 42
        assert str(error) == "gnss chip reset"

    def test_tracking_error_str_is_message(self):
        assert str(TrackingError(ErrorKind.PROVIDER_ERROR, "timeout")) == "timeout"
