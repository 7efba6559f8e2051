"""Minimum-distance route filter that suppresses stationary jitter."""

from __future__ import annotations

from .constants import DEFAULT_MIN_DISTANCE_M
from .geometry import distance_meters, is_valid_coordinate
from .types import Coordinate, Route


def accept_sample(
    route: Route,
    sample: Coordinate,
    min_distance_m: float = DEFAULT_MIN_DISTANCE_M,
) -> Route:
    """Return ``route`` with ``sample`` appended if it passes the filter.

    The first point is always accepted so the route has a starting point.
    Later points must lie at least ``min_distance_m`` from the last accepted
    one. Invalid coordinates are never accepted. The input is not modified.
    """
    if not is_valid_coordinate(sample):
        return route
    if not route:
        return (sample,)
    if distance_meters(route[-1], sample) < min_distance_m:
        return route
    return route + (sample,)


__all__ = ["accept_sample"]
