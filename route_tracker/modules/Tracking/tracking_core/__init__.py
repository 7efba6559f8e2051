"""Tracking core package - filtering, smoothing and provider components."""

from .constants import (
    EARTH_RADIUS_M,
    DEFAULT_MIN_DISTANCE_M,
    DEFAULT_ANIMATION_DURATION_MS,
    DEFAULT_POLYLINE_MIN_POINTS,
    DEFAULT_BAUD_RATE,
)
from .errors import (
    LocationError,
    PermissionDeniedError,
    ServiceDisabledError,
    ProviderError,
    LocationTimeoutError,
    InvalidSampleError,
    error_from_code,
)
from .types import (
    Coordinate,
    Route,
    LocationSample,
    SessionState,
    ErrorKind,
    TrackingError,
    PermissionResult,
    AppState,
    AccuracyTier,
    ProviderConfig,
    ZoomSpan,
    Region,
)
from .geometry import distance_meters, is_valid_coordinate
from .route_filter import accept_sample
from .smoother import AnimatedPosition, InterpolationHandle, PositionSmoother
from .viewport import ViewportFollowController
from .lifecycle import LifecycleMonitor
from .interfaces import (
    AppLifecycleSource,
    LoggingPrompter,
    MapSurface,
    NullSurface,
    PermissionSubsystem,
    RemediationPrompter,
)
from .permission_gate import PermissionGate
from .parsers import NMEAPositionParser
from .transports import BaseLineTransport, SerialTransport
from .providers import (
    LocationProvider,
    SubscriptionHandle,
    NMEALocationProvider,
    ReplayLocationProvider,
)

__all__ = [
    # Constants
    "EARTH_RADIUS_M",
    "DEFAULT_MIN_DISTANCE_M",
    "DEFAULT_ANIMATION_DURATION_MS",
    "DEFAULT_POLYLINE_MIN_POINTS",
    "DEFAULT_BAUD_RATE",
    # Errors
    "LocationError",
    "PermissionDeniedError",
    "ServiceDisabledError",
    "ProviderError",
    "LocationTimeoutError",
    "InvalidSampleError",
    "error_from_code",
    # Types
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
    # Geometry and filtering
    "distance_meters",
    "is_valid_coordinate",
    "accept_sample",
    # Smoothing and viewport
    "AnimatedPosition",
    "InterpolationHandle",
    "PositionSmoother",
    "ViewportFollowController",
    "LifecycleMonitor",
    # Collaborators
    "AppLifecycleSource",
    "LoggingPrompter",
    "MapSurface",
    "NullSurface",
    "PermissionSubsystem",
    "RemediationPrompter",
    "PermissionGate",
    # Providers
    "NMEAPositionParser",
    "BaseLineTransport",
    "SerialTransport",
    "LocationProvider",
    "SubscriptionHandle",
    "NMEALocationProvider",
    "ReplayLocationProvider",
]
