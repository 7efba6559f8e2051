"""Tracking module: permission-gated location tracking sessions.

    from route_tracker.modules.Tracking import TrackingSession, TrackingConfig
"""

from .config import TrackingConfig
from .session import TrackingSession
from .tracking_core import (
    Coordinate,
    ErrorKind,
    LocationSample,
    PermissionGate,
    ReplayLocationProvider,
    NMEALocationProvider,
    SessionState,
)

__all__ = [
    "TrackingConfig",
    "TrackingSession",
    "Coordinate",
    "ErrorKind",
    "LocationSample",
    "PermissionGate",
    "ReplayLocationProvider",
    "NMEALocationProvider",
    "SessionState",
]
