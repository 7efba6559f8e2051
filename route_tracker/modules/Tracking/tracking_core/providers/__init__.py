"""Location provider implementations."""

from .base_provider import ErrorCallback, LocationProvider, SampleCallback, SubscriptionHandle
from .nmea_provider import NMEALocationProvider
from .replay_provider import ReplayLocationProvider

__all__ = [
    "ErrorCallback",
    "LocationProvider",
    "SampleCallback",
    "SubscriptionHandle",
    "NMEALocationProvider",
    "ReplayLocationProvider",
]
