"""Tracking session: permission gate, provider subscription and route state.

The session is driven by callbacks (samples, provider errors, permission
results, lifecycle and viewport events) and mutates its state on a single
asyncio event loop. Callbacks arriving from another thread are re-posted to
that loop with ``call_soon_threadsafe``; ``start``, ``stop`` and ``reset``
are meant to be called on the loop thread.
"""

from __future__ import annotations

import asyncio
import threading
from functools import partial
from typing import Any, Callable, Optional, Sequence

from route_tracker.core.logging_utils import LoggerLike, ensure_structured_logger
from .config import TrackingConfig
from .tracking_core.constants import MSG_PERMISSION_DENIED, MSG_SERVICE_DISABLED
from .tracking_core.errors import (
    LocationError,
    PermissionDeniedError,
    ServiceDisabledError,
    error_from_code,
)
from .tracking_core.geometry import is_valid_coordinate
from .tracking_core.interfaces import AppLifecycleSource, MapSurface, NullSurface
from .tracking_core.lifecycle import LifecycleMonitor
from .tracking_core.permission_gate import PermissionGate
from .tracking_core.providers import LocationProvider, SubscriptionHandle
from .tracking_core.route_filter import accept_sample
from .tracking_core.smoother import HandleFactory, InterpolationHandle, PositionSmoother
from .tracking_core.types import (
    Coordinate,
    ErrorKind,
    LocationSample,
    PermissionResult,
    Region,
    Route,
    SessionState,
    TrackingError,
)
from .tracking_core.viewport import ViewportFollowController

StateCallback = Callable[[SessionState, SessionState], None]


def _classify(error: BaseException) -> TrackingError:
    code = getattr(error, "code", None)
    if not isinstance(error, LocationError) and isinstance(code, int) and not isinstance(code, bool):
        # Platform errors carrying a geolocation code
        error = error_from_code(code, str(error))
    if isinstance(error, PermissionDeniedError):
        return TrackingError(ErrorKind.PERMISSION_DENIED, MSG_PERMISSION_DENIED)
    if isinstance(error, ServiceDisabledError):
        return TrackingError(ErrorKind.SERVICE_DISABLED, MSG_SERVICE_DISABLED)
    message = str(error) or error.__class__.__name__
    return TrackingError(ErrorKind.PROVIDER_ERROR, message)


class TrackingSession:
    """Location tracking session.

    State transitions:
    - IDLE/STOPPED -> AWAITING_PERMISSION: start()
    - AWAITING_PERMISSION -> TRACKING: permission granted, subscription opened
    - AWAITING_PERMISSION -> IDLE: permission denied (error set, prompt shown)
      or stop() while waiting
    - TRACKING -> STOPPED: stop(), or the app moving to the background

    Provider errors never change the state; they only set ``error``.
    ``reset()`` clears the route and nothing else.

    Example:
        session = TrackingSession(provider, PermissionGate(subsystem), surface,
                                  lifecycle=app_state)
        await session.start()
        ...
        session.stop()
        session.close()
    """

    def __init__(
        self,
        provider: LocationProvider,
        permissions: Optional[PermissionGate] = None,
        surface: Optional[MapSurface] = None,
        *,
        lifecycle: Optional[AppLifecycleSource] = None,
        config: Optional[TrackingConfig] = None,
        smoother_factory: Optional[HandleFactory] = None,
        logger: LoggerLike = None,
    ):
        self.config = config or TrackingConfig()
        self.logger = ensure_structured_logger(logger, fallback_name="TrackingSession")

        self._provider = provider
        self._permissions = permissions or PermissionGate(
            runtime_permissions=self.config.runtime_permissions_override()
        )
        self._surface: MapSurface = surface or NullSurface()
        self._smoother = PositionSmoother(smoother_factory, self.config.animation_duration_ms)
        self._viewport = ViewportFollowController(self._surface, self.config.zoom_span())

        self._state = SessionState.IDLE
        self._route: Route = ()
        self._current: Optional[Coordinate] = None
        self._error: Optional[TrackingError] = None

        # Subscription bookkeeping; the generation invalidates in-flight samples
        self._handle: Optional[SubscriptionHandle] = None
        self._generation = 0

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[int] = None
        self._state_callback: Optional[StateCallback] = None
        self._closed = False

        self._monitor: Optional[LifecycleMonitor] = None
        if lifecycle is not None:
            self._monitor = LifecycleMonitor(
                lifecycle, lambda: self._call_serialized(self._on_app_background)
            )
            self._monitor.attach()

    # =========================================================================
    # Observers
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state is SessionState.TRACKING

    @property
    def has_subscription(self) -> bool:
        return self._handle is not None

    @property
    def route(self) -> Route:
        return self._route

    @property
    def current_position(self) -> Optional[Coordinate]:
        return self._current

    @property
    def smoothed_position(self) -> Optional[Coordinate]:
        return self._smoother.position

    @property
    def marker_handle(self) -> Optional[InterpolationHandle]:
        return self._smoother.handle

    @property
    def error(self) -> Optional[TrackingError]:
        return self._error

    @property
    def user_interacting(self) -> bool:
        return self._viewport.user_interacting

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def initial_region(self) -> Region:
        """Region to show before follow mode takes over."""
        center = self._current if self._current is not None else self.config.default_center()
        return Region(center, self.config.zoom_span())

    def set_state_callback(self, callback: Optional[StateCallback]) -> None:
        """Register ``callback(previous, current)`` for state transitions."""
        self._state_callback = callback

    # =========================================================================
    # Lifecycle Methods
    # =========================================================================

    async def start(self) -> bool:
        """Ask for permission and open the provider subscription.

        Returns:
            True if the session is tracking when this call returns
        """
        if self._closed:
            raise RuntimeError("Tracking session is closed")

        if self._state is SessionState.TRACKING:
            self.logger.debug("Already tracking")
            return True
        if self._state is SessionState.AWAITING_PERMISSION:
            self.logger.debug("Start already in progress")
            return False

        self._bind_loop()
        self._set_state(SessionState.AWAITING_PERMISSION)

        result = await self._permissions.request_access()

        if self._closed or self._state is not SessionState.AWAITING_PERMISSION:
            self.logger.info("Start abandoned while awaiting permission")
            return False

        if result is not PermissionResult.GRANTED:
            self._error = TrackingError(ErrorKind.PERMISSION_DENIED, MSG_PERMISSION_DENIED)
            self._set_state(SessionState.IDLE)
            self.logger.warning("Location permission denied")
            self._permissions.prompt_remediation(ErrorKind.PERMISSION_DENIED)
            return False

        self._error = None
        if self.config.clear_route_on_start:
            self._route = ()

        self._generation += 1
        generation = self._generation
        try:
            self._handle = self._provider.watch(
                self.config.provider_config(),
                partial(self._receive_sample, generation),
                partial(self._receive_error, generation),
            )
        except Exception as exc:
            self._generation += 1
            self.logger.error("Could not open location subscription: %s", exc)
            self._error = _classify(exc)
            self._set_state(SessionState.IDLE)
            return False

        self._set_state(SessionState.TRACKING)
        return True

    def stop(self) -> None:
        """Close the provider subscription. Idempotent.

        With no open subscription this makes no provider call and leaves the
        error untouched.
        """
        if not self._on_loop_thread():
            self._call_serialized(self.stop)
            return

        if self._handle is None:
            if self._state is SessionState.AWAITING_PERMISSION:
                self._set_state(SessionState.IDLE)
            return

        handle, self._handle = self._handle, None
        self._generation += 1
        try:
            self._provider.clear(handle)
        except Exception as exc:
            self.logger.warning("Error clearing location subscription: %s", exc)

        self._set_state(SessionState.STOPPED)

    def reset(self) -> None:
        """Clear the route. Does not stop tracking or move the marker."""
        if not self._on_loop_thread():
            self._call_serialized(self.reset)
            return
        self._route = ()
        self.logger.debug("Route reset")
        self._render_route()

    def close(self) -> None:
        """Dispose of the session: stop tracking and detach from the lifecycle source."""
        if self._closed:
            return
        self._closed = True
        try:
            self.stop()
        except Exception as exc:
            self.logger.warning("Error stopping session during close: %s", exc)
        if self._monitor is not None:
            self._monitor.detach()
        self.logger.debug("Tracking session closed")

    def locate_once(self) -> None:
        """Request a single fix to seed the marker before tracking starts.

        The fix updates the current and smoothed positions but not the route.
        Must be called with a running event loop.
        """
        if self._closed:
            return
        self._bind_loop()
        try:
            self._provider.read_once(
                self.config.provider_config(),
                lambda sample: self._call_serialized(self._handle_snapshot, sample),
                lambda error: self._call_serialized(self._handle_snapshot_error, error),
            )
        except Exception as exc:
            self.logger.error("Single location read failed: %s", exc)
            self._report_error(exc)

    # =========================================================================
    # Viewport events
    # =========================================================================

    def on_user_pan_start(self) -> None:
        self._call_serialized(self._viewport.on_user_pan_start)

    def on_viewport_settled(self) -> None:
        self._call_serialized(self._viewport.on_viewport_settled)

    # =========================================================================
    # Provider callbacks
    # =========================================================================

    def _receive_sample(self, generation: int, sample: Any) -> None:
        self._call_serialized(self._handle_sample, generation, sample)

    def _receive_error(self, generation: int, error: BaseException) -> None:
        self._call_serialized(self._handle_error, generation, error)

    def _handle_sample(self, generation: int, sample: Any) -> None:
        # Providers may deliver a cached fix from inside watch(), before TRACKING is set
        if generation != self._generation or self._closed:
            self.logger.debug("Dropping sample from a closed subscription")
            return

        coordinate = self._coordinate_of(sample)
        if coordinate is None:
            return

        self._current = coordinate
        self._route = accept_sample(self._route, coordinate, self.config.min_distance_m)
        self._smoother.update(coordinate)
        self._viewport.follow(coordinate)
        self._render_marker()
        self._render_route()

    def _handle_error(self, generation: int, error: BaseException) -> None:
        if generation != self._generation or self._closed:
            self.logger.debug("Ignoring error from a closed subscription: %s", error)
            return
        self._report_error(error)

    def _handle_snapshot(self, sample: Any) -> None:
        if self._closed:
            return
        coordinate = self._coordinate_of(sample)
        if coordinate is None:
            return
        self._current = coordinate
        self._smoother.update(coordinate)
        self._render_marker()

    def _handle_snapshot_error(self, error: BaseException) -> None:
        if not self._closed:
            self._report_error(error)

    def _report_error(self, error: BaseException) -> None:
        self._error = _classify(error)
        code = getattr(error, "code", None) if isinstance(error, LocationError) else None
        self.logger.warning("Location error (%s, code=%s): %s",
                            self._error.kind.value, code, error)
        if self._error.kind in (ErrorKind.PERMISSION_DENIED, ErrorKind.SERVICE_DISABLED):
            self._permissions.prompt_remediation(self._error.kind)

    def _on_app_background(self) -> None:
        if self._state is SessionState.TRACKING:
            self.logger.info("Stopping tracking: app moved to background")
            self.stop()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _coordinate_of(self, sample: Any) -> Optional[Coordinate]:
        if isinstance(sample, LocationSample):
            valid, coordinate = sample.has_valid_coordinate(), sample.coordinate
        else:
            valid, coordinate = is_valid_coordinate(sample), sample
        if not valid:
            self.logger.debug("Dropping invalid sample: %r", sample)
            return None
        return coordinate

    def _set_state(self, new_state: SessionState) -> None:
        previous = self._state
        if previous is new_state:
            return
        self._state = new_state
        self.logger.info("Session state: %s -> %s", previous.value, new_state.value)
        if self._state_callback is not None:
            try:
                self._state_callback(previous, new_state)
            except Exception:
                self.logger.exception("State callback failed")

    def _render_marker(self) -> None:
        position = self._smoother.position or self._current
        if position is None:
            return
        try:
            self._surface.render_marker(position)
        except Exception as exc:
            self.logger.warning("Marker render failed: %s", exc)

    def _render_route(self) -> None:
        visible: Sequence[Coordinate] = (
            self._route if len(self._route) > self.config.polyline_min_points else ()
        )
        try:
            self._surface.render_polyline(visible)
        except Exception as exc:
            self.logger.warning("Polyline render failed: %s", exc)

    def _bind_loop(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._loop = loop
        self._loop_thread = threading.get_ident()

    def _on_loop_thread(self) -> bool:
        return self._loop is None or threading.get_ident() == self._loop_thread

    def _call_serialized(self, fn: Callable[..., None], *args: Any) -> None:
        """Run ``fn`` now if on the session loop thread, else post it there."""
        if self._on_loop_thread():
            fn(*args)
            return
        loop = self._loop
        if loop is None or loop.is_closed():
            self.logger.debug("Event loop gone; dropping %s", getattr(fn, "__name__", fn))
            return
        loop.call_soon_threadsafe(fn, *args)


__all__ = ["TrackingSession", "StateCallback"]
