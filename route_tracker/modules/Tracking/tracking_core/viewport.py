"""Follow mode: recenter the map on new fixes unless the user is panning."""

from __future__ import annotations

from route_tracker.core.logging_utils import get_module_logger
from .interfaces import MapSurface
from .types import Coordinate, ZoomSpan

logger = get_module_logger(__name__)


class ViewportFollowController:
    """Owns the interaction flag and issues fire-and-forget recenter requests."""

    def __init__(self, surface: MapSurface, zoom_span: ZoomSpan = ZoomSpan()):
        self._surface = surface
        self.zoom_span = zoom_span
        self._user_interacting = False

    @property
    def user_interacting(self) -> bool:
        return self._user_interacting

    def on_user_pan_start(self) -> None:
        if not self._user_interacting:
            logger.debug("User took over the viewport; follow suspended")
        self._user_interacting = True

    def on_viewport_settled(self) -> None:
        self._user_interacting = False

    def follow(self, coordinate: Coordinate) -> bool:
        """Recenter on ``coordinate`` unless the user is interacting.

        Returns:
            True if a recenter request was issued (even if it failed)
        """
        if self._user_interacting:
            return False

        try:
            self._surface.recenter(coordinate, self.zoom_span)
        except Exception as exc:
            # e.g. surface not mounted yet
            logger.debug("Recenter request failed: %s", exc)
        return True


__all__ = ["ViewportFollowController"]
