"""Base Location Provider

Abstract base class for continuous position sources. A provider hands out a
SubscriptionHandle per ``watch`` call and delivers samples and errors through
the callbacks registered with it until the handle is cleared.
"""

from __future__ import annotations

import asyncio
import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Set

from route_tracker.core.logging_utils import get_module_logger
from ..errors import LocationError
from ..types import LocationSample, ProviderConfig

logger = get_module_logger(__name__)

SampleCallback = Callable[[LocationSample], None]
ErrorCallback = Callable[[LocationError], None]


@dataclass(eq=False)
class SubscriptionHandle:
    """Live subscription returned by ``LocationProvider.watch``."""

    id: int
    config: ProviderConfig
    on_sample: SampleCallback = field(repr=False)
    on_error: ErrorCallback = field(repr=False)
    active: bool = True


def _task_exception_handler(task: asyncio.Task) -> None:
    """Log exceptions from fire-and-forget provider tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unhandled exception in provider task %s: %s", task.get_name(), exc)


class LocationProvider(ABC):
    """Abstract continuous location source.

    Subclasses implement ``_start_watch``/``_stop_watch`` and ``read_once``.
    ``clear`` is safe with None, a cleared handle, or a foreign handle.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__
        self._handles: Dict[int, SubscriptionHandle] = {}
        self._ids = itertools.count(1)
        self._pending_tasks: Set[asyncio.Task] = set()

    @property
    def active_subscriptions(self) -> int:
        return len(self._handles)

    # =========================================================================
    # Subscription API
    # =========================================================================

    def watch(
        self,
        config: ProviderConfig,
        on_sample: SampleCallback,
        on_error: ErrorCallback,
    ) -> SubscriptionHandle:
        """Start a continuous subscription. Never blocks."""
        handle = SubscriptionHandle(next(self._ids), config, on_sample, on_error)
        self._handles[handle.id] = handle
        self._start_watch(handle)
        logger.info("%s: subscription %d opened", self.name, handle.id)
        return handle

    def clear(self, handle: Optional[SubscriptionHandle]) -> None:
        """Stop a subscription. No-op for unknown or already-cleared handles."""
        if handle is None or not handle.active:
            return
        if self._handles.get(handle.id) is not handle:
            return

        handle.active = False
        del self._handles[handle.id]
        try:
            self._stop_watch(handle)
        except Exception as exc:
            logger.warning("%s: error stopping subscription %d: %s", self.name, handle.id, exc)
        logger.info("%s: subscription %d cleared", self.name, handle.id)

    def clear_all(self) -> None:
        for handle in list(self._handles.values()):
            self.clear(handle)

    @abstractmethod
    def read_once(
        self,
        config: ProviderConfig,
        on_sample: SampleCallback,
        on_error: ErrorCallback,
    ) -> None:
        """Deliver a single snapshot (or error) through the callbacks."""

    @abstractmethod
    def _start_watch(self, handle: SubscriptionHandle) -> None:
        ...

    @abstractmethod
    def _stop_watch(self, handle: SubscriptionHandle) -> None:
        ...

    # =========================================================================
    # Delivery helpers
    # =========================================================================

    def _emit_sample(self, handle: SubscriptionHandle, sample: LocationSample) -> bool:
        if not handle.active:
            return False
        try:
            handle.on_sample(sample)
        except Exception:
            logger.exception("%s: sample callback failed", self.name)
        return True

    def _emit_error(self, handle: SubscriptionHandle, error: LocationError) -> bool:
        if not handle.active:
            return False
        try:
            handle.on_error(error)
        except Exception:
            logger.exception("%s: error callback failed", self.name)
        return True

    def _create_background_task(self, coro, name: Optional[str] = None) -> asyncio.Task:
        """Create a tracked background task with exception logging."""
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._pending_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending_tasks.discard(task)
        _task_exception_handler(task)

    async def aclose(self) -> None:
        """Clear every subscription and wait for background tasks to finish."""
        self.clear_all()
        tasks = list(self._pending_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


__all__ = [
    "SampleCallback",
    "ErrorCallback",
    "SubscriptionHandle",
    "LocationProvider",
]
