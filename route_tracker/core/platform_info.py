"""
Platform detection for Route Tracker.

Detection runs once and is cached. The tracking module only needs to know
whether the host gates location access behind a run-time permission request.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from typing import Optional

from route_tracker.core.logging_utils import get_module_logger

logger = get_module_logger("PlatformInfo")


@dataclass(frozen=True)
class PlatformInfo:
    """Immutable platform information detected at startup.

    Attributes:
        platform: ``sys.platform`` value ('linux', 'darwin', 'android', 'ios', ...)
        architecture: CPU architecture ('x86_64', 'arm64', 'aarch64', ...)
        is_android: True when running under an Android interpreter
        python_version: Python version string
    """

    platform: str
    architecture: str
    is_android: bool
    python_version: str

    @property
    def has_runtime_permissions(self) -> bool:
        """True if location access must be requested from the user at run time.

        iOS prompts on first use by itself, desktops have no such gate;
        only Android expects the application to ask explicitly.
        """
        return self.is_android

    def __str__(self) -> str:
        suffix = " [runtime permissions]" if self.has_runtime_permissions else ""
        return f"{self.platform} ({self.architecture}){suffix}"


def _detect_android() -> bool:
    if sys.platform == "android":
        return True
    return hasattr(sys, "getandroidapilevel")


def detect_platform() -> PlatformInfo:
    """Detect current platform information (uncached)."""
    info = PlatformInfo(
        platform=sys.platform,
        architecture=platform.machine(),
        is_android=_detect_android(),
        python_version=platform.python_version(),
    )
    logger.info("Platform detected: %s", info)
    return info


_platform_info: Optional[PlatformInfo] = None


def get_platform_info() -> PlatformInfo:
    """Return cached platform information, detecting it on first call."""
    global _platform_info
    if _platform_info is None:
        _platform_info = detect_platform()
    return _platform_info


def reset_platform_info() -> None:
    """Reset the cached platform info (for testing only)."""
    global _platform_info
    _platform_info = None


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "get_platform_info",
    "reset_platform_info",
]
