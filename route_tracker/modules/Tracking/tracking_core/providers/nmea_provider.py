"""Location provider backed by an NMEA line transport.

One read loop serves every subscription on the provider. The loop runs
while at least one subscription or one-shot read is pending and reconnects
the transport when it drops.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Dict, List, Optional, Tuple

from route_tracker.core.logging_utils import get_module_logger
from ..constants import DEFAULT_READ_ONCE_TIMEOUT_S
from ..errors import LocationError, LocationTimeoutError, ProviderError, ServiceDisabledError
from ..geometry import distance_meters
from ..parsers import NMEAPositionParser
from ..transports import BaseLineTransport
from ..types import Coordinate, LocationSample, ProviderConfig
from .base_provider import ErrorCallback, LocationProvider, SampleCallback, SubscriptionHandle

logger = get_module_logger(__name__)

DEFAULT_RECONNECT_DELAY = 3.0
MAX_ERROR_BACKOFF = 2.0


class NMEALocationProvider(LocationProvider):
    """Streams positions parsed from NMEA sentences.

    Provider-level throttling follows each subscription's ProviderConfig:
    fixes closer than ``fastest_interval_ms`` to the previous delivery, or
    within ``distance_filter_m`` of it, are skipped. ``interval_ms`` is not
    used; the receiver decides its own output rate.

    Example:
        provider = NMEALocationProvider(SerialTransport("/dev/serial0", 9600))
        handle = provider.watch(ProviderConfig(), on_sample, on_error)
        ...
        provider.clear(handle)
    """

    def __init__(
        self,
        transport: BaseLineTransport,
        *,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        read_timeout: float = 1.0,
        read_once_timeout: float = DEFAULT_READ_ONCE_TIMEOUT_S,
        parser: Optional[NMEAPositionParser] = None,
        clock: Callable[[], float] = time.monotonic,
        name: Optional[str] = None,
    ):
        super().__init__(name)
        self.transport = transport
        self.reconnect_delay = reconnect_delay
        self.read_timeout = read_timeout
        self.read_once_timeout = read_once_timeout
        self._parser = parser or NMEAPositionParser()
        self._clock = clock
        self._reader_task: Optional[asyncio.Task] = None
        self._one_shots: List[asyncio.Future] = []
        self._last_delivery: Dict[int, Tuple[Coordinate, float]] = {}

    @property
    def is_reading(self) -> bool:
        return self._reader_task is not None and not self._reader_task.done()

    # =========================================================================
    # Subscription hooks
    # =========================================================================

    def _start_watch(self, handle: SubscriptionHandle) -> None:
        self._ensure_reader()

    def _stop_watch(self, handle: SubscriptionHandle) -> None:
        self._last_delivery.pop(handle.id, None)
        self._stop_reader_if_idle()

    def read_once(
        self,
        config: ProviderConfig,
        on_sample: SampleCallback,
        on_error: ErrorCallback,
    ) -> None:
        future = asyncio.get_running_loop().create_future()
        self._one_shots.append(future)
        self._ensure_reader()
        self._create_background_task(
            self._await_one_shot(future, on_sample, on_error),
            name=f"{self.name}-read-once",
        )

    async def _await_one_shot(
        self,
        future: asyncio.Future,
        on_sample: SampleCallback,
        on_error: ErrorCallback,
    ) -> None:
        try:
            sample = await asyncio.wait_for(asyncio.shield(future), self.read_once_timeout)
        except asyncio.TimeoutError:
            on_error(LocationTimeoutError(
                f"No GPS fix within {self.read_once_timeout:.0f} s"
            ))
        except LocationError as exc:
            on_error(exc)
        else:
            on_sample(sample)
        finally:
            if future in self._one_shots:
                self._one_shots.remove(future)
            if not future.done():
                future.cancel()
            self._stop_reader_if_idle()

    # =========================================================================
    # Read loop
    # =========================================================================

    def _wanted(self) -> bool:
        return bool(self._handles) or bool(self._one_shots)

    def _ensure_reader(self) -> None:
        if self.is_reading:
            return
        self._reader_task = self._create_background_task(
            self._read_loop(), name=f"{self.name}-reader"
        )

    def _stop_reader_if_idle(self) -> None:
        if self._wanted() or self._reader_task is None:
            return
        task, self._reader_task = self._reader_task, None
        if not task.done():
            task.cancel()

    async def _read_loop(self) -> None:
        logger.debug("%s: read loop started", self.name)
        outage_reported = False
        consecutive_errors = 0

        try:
            while self._wanted():
                if not self.transport.is_connected:
                    if await self.transport.connect():
                        outage_reported = False
                        self._parser.reset()
                    else:
                        if not outage_reported:
                            outage_reported = True
                            reason = self.transport.last_error or "receiver not available"
                            self._broadcast_error(ServiceDisabledError(
                                f"Location services disabled: {reason}"
                            ))
                        await asyncio.sleep(self.reconnect_delay)
                        continue

                try:
                    line = await self.transport.read_line(timeout=self.read_timeout)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    consecutive_errors += 1
                    backoff = min(0.1 * (2 ** (consecutive_errors - 1)), MAX_ERROR_BACKOFF)
                    logger.warning("%s: read error (%d): %s", self.name, consecutive_errors, exc)
                    self._broadcast_error(ProviderError(str(exc)))
                    await asyncio.sleep(backoff)
                    continue

                consecutive_errors = 0
                if not line:
                    continue

                sample = self._parser.parse_sentence(line)
                if sample is not None:
                    self._dispatch(sample)
        finally:
            await self.transport.disconnect()
            logger.debug("%s: read loop ended", self.name)

    def _dispatch(self, sample: LocationSample) -> None:
        for future in list(self._one_shots):
            if not future.done():
                future.set_result(sample)

        now = self._clock()
        for handle in list(self._handles.values()):
            if self._throttled(handle, sample.coordinate, now):
                continue
            self._last_delivery[handle.id] = (sample.coordinate, now)
            self._emit_sample(handle, sample)

    def _throttled(self, handle: SubscriptionHandle, coordinate: Coordinate, now: float) -> bool:
        previous = self._last_delivery.get(handle.id)
        if previous is None:
            return False
        last_coord, last_time = previous
        config = handle.config
        if (now - last_time) * 1000.0 < config.fastest_interval_ms:
            return True
        if config.distance_filter_m > 0 and distance_meters(last_coord, coordinate) < config.distance_filter_m:
            return True
        return False

    def _broadcast_error(self, error: LocationError) -> None:
        for future in list(self._one_shots):
            if not future.done():
                future.set_exception(error)
        for handle in list(self._handles.values()):
            self._emit_error(handle, error)


__all__ = ["NMEALocationProvider"]
