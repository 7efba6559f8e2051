"""
Base module utilities shared by Route Tracker modules.

    from route_tracker.modules.base import ConfigLoader, get_pref_float
"""

from .config_loader import ConfigLoader
from .typed_config import (
    get_pref_bool,
    get_pref_choice,
    get_pref_float,
    get_pref_int,
    get_pref_str,
)

__all__ = [
    "ConfigLoader",
    "get_pref_bool",
    "get_pref_choice",
    "get_pref_float",
    "get_pref_int",
    "get_pref_str",
]
