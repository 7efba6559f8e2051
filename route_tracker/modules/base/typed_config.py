"""Coercion helpers for building typed module configs from raw preference values.

Values usually arrive as strings from ``config.txt`` or as already-typed
values from CLI overrides. Anything that cannot be coerced, or that falls
below a given ``minimum``, is replaced by the default and logged.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional

from route_tracker.core.logging_utils import get_module_logger

logger = get_module_logger("TypedConfig")

TRUE_WORDS = frozenset({"true", "1", "yes", "on"})


def _rejected(key: str, val: Any, default: Any, reason: str) -> Any:
    logger.warning("Ignoring %s=%r (%s); using %r", key, val, reason, default)
    return default


def get_pref_str(prefs: Mapping[str, Any], key: str, default: str) -> str:
    val = prefs.get(key)
    return str(val) if val is not None else default


def get_pref_int(
    prefs: Mapping[str, Any],
    key: str,
    default: int,
    *,
    minimum: Optional[int] = None,
) -> int:
    val = prefs.get(key)
    if val is None:
        return default
    try:
        number = int(val)
    except (ValueError, TypeError):
        return _rejected(key, val, default, "not an integer")
    if minimum is not None and number < minimum:
        return _rejected(key, val, default, f"below {minimum}")
    return number


def get_pref_float(
    prefs: Mapping[str, Any],
    key: str,
    default: float,
    *,
    minimum: Optional[float] = None,
) -> float:
    """Coerce ``prefs[key]`` to a finite float."""
    val = prefs.get(key)
    if val is None:
        return default
    try:
        number = float(val)
    except (ValueError, TypeError):
        return _rejected(key, val, default, "not a number")
    if not math.isfinite(number):
        return _rejected(key, val, default, "not finite")
    if minimum is not None and number < minimum:
        return _rejected(key, val, default, f"below {minimum}")
    return number


def get_pref_bool(prefs: Mapping[str, Any], key: str, default: bool) -> bool:
    val = prefs.get(key)
    if val is None:
        return default
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in TRUE_WORDS


def get_pref_choice(
    prefs: Mapping[str, Any],
    key: str,
    choices: Iterable[str],
    default: str,
) -> str:
    """Lower-cased ``prefs[key]`` if it is one of ``choices``, else ``default``."""
    val = prefs.get(key)
    if val is None:
        return default
    text = str(val).strip().lower()
    allowed = {str(choice).lower() for choice in choices}
    if text not in allowed:
        return _rejected(key, val, default, "expected one of " + ", ".join(sorted(allowed)))
    return text


__all__ = [
    "TRUE_WORDS",
    "get_pref_str",
    "get_pref_int",
    "get_pref_float",
    "get_pref_bool",
    "get_pref_choice",
]
