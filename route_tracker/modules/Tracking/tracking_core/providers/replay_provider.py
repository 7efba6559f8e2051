"""Replay provider: plays back a recorded sequence of fixes and errors."""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Dict, Iterable, List, Optional, Union

from route_tracker.core.logging_utils import get_module_logger
from ..errors import LocationError, LocationTimeoutError
from ..types import LocationSample, ProviderConfig
from .base_provider import ErrorCallback, LocationProvider, SampleCallback, SubscriptionHandle

logger = get_module_logger(__name__)

ReplayItem = Union[LocationSample, LocationError]


class ReplayLocationProvider(LocationProvider):
    """Replays ``items`` to each subscription on the running event loop.

    Each subscription gets its own pass over the items, spaced
    ``spacing_s`` apart. Errors in the sequence are delivered to
    ``on_error`` in order, without interrupting the replay.

    Example:
        provider = ReplayLocationProvider(
            [LocationSample.at(48.1173, 11.5166), LocationSample.at(48.1174, 11.5167)],
            spacing_s=1.0,
        )
    """

    def __init__(
        self,
        items: Iterable[ReplayItem],
        spacing_s: float = 0.0,
        *,
        loop_forever: bool = False,
        name: Optional[str] = None,
    ):
        super().__init__(name)
        self._items: List[ReplayItem] = list(items)
        self.spacing_s = spacing_s
        self.loop_forever = loop_forever
        self._tasks: Dict[int, asyncio.Task] = {}

    def _start_watch(self, handle: SubscriptionHandle) -> None:
        task = self._create_background_task(
            self._replay(handle), name=f"{self.name}-replay-{handle.id}"
        )
        self._tasks[handle.id] = task
        task.add_done_callback(partial(self._forget_task, handle.id))

    def _forget_task(self, handle_id: int, task: asyncio.Task) -> None:
        if self._tasks.get(handle_id) is task:
            del self._tasks[handle_id]

    def _stop_watch(self, handle: SubscriptionHandle) -> None:
        task = self._tasks.pop(handle.id, None)
        if task is not None and not task.done():
            task.cancel()

    def read_once(
        self,
        config: ProviderConfig,
        on_sample: SampleCallback,
        on_error: ErrorCallback,
    ) -> None:
        first = self._items[0] if self._items else LocationTimeoutError("No position available")
        loop = asyncio.get_running_loop()
        if isinstance(first, LocationError):
            loop.call_soon(on_error, first)
        else:
            loop.call_soon(on_sample, first)

    async def _replay(self, handle: SubscriptionHandle) -> None:
        while True:
            for item in self._items:
                # Yield first so watch() always returns before delivery starts.
                await asyncio.sleep(self.spacing_s)
                if not handle.active:
                    return
                if isinstance(item, LocationError):
                    self._emit_error(handle, item)
                else:
                    self._emit_sample(handle, item)
            if not self.loop_forever or not self._items:
                break
        logger.debug("%s: replay finished for subscription %d", self.name, handle.id)


__all__ = ["ReplayLocationProvider", "ReplayItem"]
