"""Interfaces of the collaborators a tracking session talks to.

The session never renders, prompts or asks for permissions itself; the host
application supplies objects matching these protocols.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence, runtime_checkable

from route_tracker.core.logging_utils import get_module_logger
from .types import AppState, Coordinate, PermissionResult, ZoomSpan

logger = get_module_logger(__name__)

LifecycleCallback = Callable[[AppState, AppState], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class PermissionSubsystem(Protocol):
    """Platform permission API."""

    async def request(self, capability: str) -> PermissionResult: ...

    def open_system_settings(self) -> None: ...


@runtime_checkable
class RemediationPrompter(Protocol):
    """Shows a dialog offering to open the system settings."""

    def show_settings_prompt(
        self,
        title: str,
        message: str,
        on_open_settings: Callable[[], None],
    ) -> None: ...


@runtime_checkable
class MapSurface(Protocol):
    """Map view the session draws on.

    Inbound viewport events are forwarded by the host to
    ``TrackingSession.on_user_pan_start`` and
    ``TrackingSession.on_viewport_settled``.
    """

    def recenter(self, coordinate: Coordinate, zoom_span: ZoomSpan) -> None: ...

    def render_marker(self, position: Coordinate) -> None: ...

    def render_polyline(self, coordinates: Sequence[Coordinate]) -> None: ...


@runtime_checkable
class AppLifecycleSource(Protocol):
    """Source of application foreground/background transitions."""

    def add_listener(self, callback: LifecycleCallback) -> Unsubscribe: ...


class LoggingPrompter:
    """Headless prompter: logs the prompt and never opens the settings."""

    def show_settings_prompt(
        self,
        title: str,
        message: str,
        on_open_settings: Callable[[], None],
    ) -> None:
        logger.warning("%s: %s", title, message)


class NullSurface:
    """Surface that draws nothing, for headless sessions."""

    def recenter(self, coordinate: Coordinate, zoom_span: ZoomSpan) -> None:
        pass

    def render_marker(self, position: Coordinate) -> None:
        pass

    def render_polyline(self, coordinates: Sequence[Coordinate]) -> None:
        pass


__all__ = [
    "LifecycleCallback",
    "Unsubscribe",
    "PermissionSubsystem",
    "RemediationPrompter",
    "MapSurface",
    "AppLifecycleSource",
    "LoggingPrompter",
    "NullSurface",
]
