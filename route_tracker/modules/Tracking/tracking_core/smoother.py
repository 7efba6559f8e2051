"""Smoothed marker position, decoupled from raw samples and route membership.

The smoother owns a single interpolation handle per session. The handle is
created lazily on the first valid coordinate and only ever retargeted after
that, so an in-flight animation is superseded rather than restarted.
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Protocol, runtime_checkable

from route_tracker.core.logging_utils import get_module_logger
from .constants import DEFAULT_ANIMATION_DURATION_MS
from .geometry import is_valid_coordinate
from .types import Coordinate, ZoomSpan

logger = get_module_logger(__name__)

Clock = Callable[[], float]


@runtime_checkable
class InterpolationHandle(Protocol):
    """Animated position supplied by a rendering surface (or the default one)."""

    @property
    def position(self) -> Coordinate:
        """Current interpolated coordinate."""
        ...

    def animate_to(self, target: Coordinate, duration_ms: float) -> None:
        """Start moving toward ``target`` over ``duration_ms``."""
        ...


HandleFactory = Callable[[Coordinate], InterpolationHandle]


class AnimatedPosition:
    """Linear interpolation between coordinates on a monotonic clock.

    Example:
        marker = AnimatedPosition(Coordinate(48.1, 11.5))
        marker.animate_to(Coordinate(48.2, 11.6), 800)
        marker.position  # somewhere between the two, depending on elapsed time
    """

    def __init__(
        self,
        anchor: Coordinate,
        span: ZoomSpan = ZoomSpan(0.0, 0.0),
        clock: Clock = time.monotonic,
    ):
        """Initialize the animated position.

        Args:
            anchor: Starting coordinate
            span: Spread around the position; zero for a point marker
            clock: Monotonic time source in seconds
        """
        self.span = span
        self._clock = clock
        self._origin = anchor
        self._target = anchor
        self._started_at = clock()
        self._duration_s = 0.0

    @property
    def target(self) -> Coordinate:
        return self._target

    @property
    def is_animating(self) -> bool:
        return self._progress() < 1.0

    @property
    def position(self) -> Coordinate:
        progress = self._progress()
        if progress >= 1.0:
            return self._target
        lat = self._origin.latitude + (self._target.latitude - self._origin.latitude) * progress
        lon = self._origin.longitude + (self._target.longitude - self._origin.longitude) * progress
        return Coordinate(lat, lon)

    def animate_to(self, target: Coordinate, duration_ms: float) -> None:
        # Start from wherever the marker is now, not from the old origin.
        self._origin = self.position
        self._target = target
        self._started_at = self._clock()
        self._duration_s = max(0.0, duration_ms / 1000.0)

    def _progress(self) -> float:
        if self._duration_s <= 0.0:
            return 1.0
        elapsed = self._clock() - self._started_at
        return min(1.0, max(0.0, elapsed / self._duration_s))


def _default_factory(anchor: Coordinate) -> InterpolationHandle:
    return AnimatedPosition(anchor)


class PositionSmoother:
    """Keeps one interpolation handle and retargets it on every valid sample."""

    def __init__(
        self,
        factory: Optional[HandleFactory] = None,
        duration_ms: float = DEFAULT_ANIMATION_DURATION_MS,
    ):
        self._factory = factory or _default_factory
        self.duration_ms = duration_ms
        self._handle: Optional[InterpolationHandle] = None

    @property
    def handle(self) -> Optional[InterpolationHandle]:
        return self._handle

    @property
    def position(self) -> Optional[Coordinate]:
        return self._handle.position if self._handle is not None else None

    def update(self, coordinate: Coordinate) -> None:
        """Create the handle on first use, otherwise animate it to ``coordinate``."""
        if not is_valid_coordinate(coordinate):
            logger.debug("Ignoring invalid coordinate %s", coordinate)
            return

        if self._handle is None:
            self._handle = self._factory(coordinate)
            logger.debug("Smoothed position anchored at %.6f, %.6f",
                         coordinate.latitude, coordinate.longitude)
            return

        try:
            self._handle.animate_to(coordinate, self.duration_ms)
        except Exception as exc:
            # Animation glitches must never interrupt tracking.
            logger.warning("Marker animation failed: %s", exc)


__all__ = [
    "InterpolationHandle",
    "HandleFactory",
    "AnimatedPosition",
    "PositionSmoother",
]
