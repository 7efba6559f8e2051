"""Shared plumbing (logging, platform detection) for Route Tracker."""

from .logging_config import configure_logging
from .logging_utils import StructuredLogger, get_module_logger
from .platform_info import PlatformInfo, get_platform_info

__all__ = [
    "configure_logging",
    "StructuredLogger",
    "get_module_logger",
    "PlatformInfo",
    "get_platform_info",
]
