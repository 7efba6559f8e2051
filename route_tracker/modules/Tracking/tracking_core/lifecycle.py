"""Watches app foreground/background transitions for a tracking session."""

from __future__ import annotations

from typing import Any, Callable, Optional

from route_tracker.core.logging_utils import get_module_logger
from .interfaces import AppLifecycleSource, Unsubscribe
from .types import AppState

logger = get_module_logger(__name__)


def _coerce_state(value: Any) -> Optional[AppState]:
    if isinstance(value, AppState):
        return value
    try:
        return AppState(str(value).strip().lower())
    except ValueError:
        return None


class LifecycleMonitor:
    """Calls ``on_background`` on every active -> background transition.

    Any other transition is ignored; in particular returning to the
    foreground does not resume anything.
    """

    def __init__(self, source: AppLifecycleSource, on_background: Callable[[], None]):
        self._source = source
        self._on_background = on_background
        self._unsubscribe: Optional[Unsubscribe] = None
        self._detached = False

    @property
    def is_attached(self) -> bool:
        return self._unsubscribe is not None

    def attach(self) -> None:
        """Subscribe to the lifecycle source (once per monitor)."""
        if self._unsubscribe is not None or self._detached:
            return
        self._unsubscribe = self._source.add_listener(self.handle_state_change)
        logger.debug("Lifecycle monitor attached")

    def detach(self) -> None:
        """Unsubscribe; safe to call repeatedly."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        self._detached = True
        if unsubscribe is None:
            return
        try:
            unsubscribe()
        except Exception as exc:
            logger.warning("Lifecycle unsubscribe failed: %s", exc)
        else:
            logger.debug("Lifecycle monitor detached")

    def handle_state_change(self, previous: Any, current: Any) -> None:
        prev_state = _coerce_state(previous)
        next_state = _coerce_state(current)
        if prev_state is AppState.ACTIVE and next_state is AppState.BACKGROUND:
            logger.info("App moved to background")
            self._on_background()


__all__ = ["LifecycleMonitor"]
