"""Great-circle distance between coordinates."""

from __future__ import annotations

import math
from typing import Any, Optional

from .constants import EARTH_RADIUS_M
from .types import Coordinate


def is_valid_coordinate(value: Any) -> bool:
    """Return True if ``value`` is a Coordinate with finite components."""
    return isinstance(value, Coordinate) and value.is_valid()


def distance_meters(a: Optional[Coordinate], b: Optional[Coordinate]) -> float:
    """Haversine distance in meters on a mean-radius spherical Earth.

    Returns 0.0 when either input is missing or invalid. A zero result is
    therefore ambiguous; callers that care must validate inputs first.
    """
    if not (is_valid_coordinate(a) and is_valid_coordinate(b)):
        return 0.0

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlmb = math.radians(b.longitude - a.longitude)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


__all__ = ["distance_meters", "is_valid_coordinate"]
