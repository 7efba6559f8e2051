"""Error types raised or reported by the tracking core."""

from __future__ import annotations

from typing import Optional

from .constants import (
    ERROR_PERMISSION_DENIED,
    ERROR_POSITION_UNAVAILABLE,
    ERROR_TIMEOUT,
    MSG_PERMISSION_DENIED,
    MSG_SERVICE_DISABLED,
)


class LocationError(RuntimeError):
    """Base error delivered by location providers through ``on_error``."""

    code: int = 0

    def __init__(self, message: str = "", code: Optional[int] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        return str(self)


class PermissionDeniedError(LocationError):
    """The platform refused access to location data."""

    code = ERROR_PERMISSION_DENIED

    def __init__(self, message: str = MSG_PERMISSION_DENIED, code: Optional[int] = None) -> None:
        super().__init__(message, code)


class ServiceDisabledError(LocationError):
    """Location services are switched off (or the receiver is unreachable)."""

    code = ERROR_POSITION_UNAVAILABLE

    def __init__(self, message: str = MSG_SERVICE_DISABLED, code: Optional[int] = None) -> None:
        super().__init__(message, code)


class ProviderError(LocationError):
    """Generic, usually transient, provider failure."""


class LocationTimeoutError(ProviderError):
    """No fix arrived within the requested time."""

    code = ERROR_TIMEOUT


class InvalidSampleError(ValueError):
    """A sample carried a missing or non-finite coordinate."""


def error_from_code(code: int, message: str) -> LocationError:
    """Build the matching error type for a provider error code."""
    if code == ERROR_PERMISSION_DENIED:
        return PermissionDeniedError(message or MSG_PERMISSION_DENIED)
    if code == ERROR_POSITION_UNAVAILABLE:
        return ServiceDisabledError(message or MSG_SERVICE_DISABLED)
    if code == ERROR_TIMEOUT:
        return LocationTimeoutError(message)
    return ProviderError(message, code)


__all__ = [
    "LocationError",
    "PermissionDeniedError",
    "ServiceDisabledError",
    "ProviderError",
    "LocationTimeoutError",
    "InvalidSampleError",
    "error_from_code",
]
