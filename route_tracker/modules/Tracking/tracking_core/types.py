"""Tracking data types and structures."""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Optional, Tuple

from .constants import (
    DEFAULT_DISTANCE_FILTER_M,
    DEFAULT_FASTEST_INTERVAL_MS,
    DEFAULT_INTERVAL_MS,
    DEFAULT_ZOOM_DELTA,
)
from .errors import InvalidSampleError


def _finite(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        """Return True if both components are finite numbers."""
        return _finite(self.latitude) and _finite(self.longitude)

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> "Coordinate":
        """Build a coordinate, raising InvalidSampleError for unusable input."""
        coord = cls(latitude, longitude)
        if not coord.is_valid():
            raise InvalidSampleError(f"Invalid coordinate: ({latitude!r}, {longitude!r})")
        return coord


Route = Tuple[Coordinate, ...]


@dataclass(frozen=True, slots=True)
class LocationSample:
    """One raw reading from a location provider, prior to filtering."""

    coordinate: Optional[Coordinate]
    accuracy_m: Optional[float] = None
    altitude_m: Optional[float] = None
    speed_mps: Optional[float] = None
    heading_deg: Optional[float] = None
    timestamp: Optional[dt.datetime] = None

    @classmethod
    def at(cls, latitude: Any, longitude: Any, **metadata: Any) -> "LocationSample":
        """Shorthand for a sample at the given position (not validated)."""
        return cls(coordinate=Coordinate(latitude, longitude), **metadata)

    def has_valid_coordinate(self) -> bool:
        return self.coordinate is not None and self.coordinate.is_valid()


class SessionState(Enum):
    """Lifecycle states of a tracking session."""
    IDLE = "idle"
    AWAITING_PERMISSION = "awaiting_permission"
    TRACKING = "tracking"
    STOPPED = "stopped"


class ErrorKind(Enum):
    """Categories of problems a session can report."""
    PERMISSION_DENIED = "permission_denied"
    SERVICE_DISABLED = "service_disabled"
    PROVIDER_ERROR = "provider_error"
    INVALID_SAMPLE = "invalid_sample"


@dataclass(frozen=True, slots=True)
class TrackingError:
    """Last error reported by a session, suitable for display."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


class PermissionResult(Enum):
    GRANTED = "granted"
    DENIED = "denied"


class AppState(Enum):
    """Application foreground/background states."""
    ACTIVE = "active"
    BACKGROUND = "background"
    INACTIVE = "inactive"


class AccuracyTier(Enum):
    HIGH = "high"
    BALANCED = "balanced"
    LOW = "low"


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Request parameters passed to a location provider.

    ``distance_filter_m`` of 0 disables provider-side distance filtering and
    leaves jitter suppression to the route filter.
    """

    accuracy: AccuracyTier = AccuracyTier.HIGH
    distance_filter_m: float = DEFAULT_DISTANCE_FILTER_M
    interval_ms: int = DEFAULT_INTERVAL_MS
    fastest_interval_ms: int = DEFAULT_FASTEST_INTERVAL_MS


@dataclass(frozen=True, slots=True)
class ZoomSpan:
    """Visible latitude/longitude extent requested when recentering."""

    latitude_delta: float = DEFAULT_ZOOM_DELTA
    longitude_delta: float = DEFAULT_ZOOM_DELTA


@dataclass(frozen=True, slots=True)
class Region:
    """A map region: a center plus a zoom span."""

    center: Coordinate
    span: ZoomSpan


__all__ = [
    "Coordinate",
    "Route",
    "LocationSample",
    "SessionState",
    "ErrorKind",
    "TrackingError",
    "PermissionResult",
    "AppState",
    "AccuracyTier",
    "ProviderConfig",
    "ZoomSpan",
    "Region",
]
