"""Headless tracking entry point for serial NMEA receivers.

Runs one tracking session against a GPS receiver and logs the route as it
grows. Stops on SIGINT/SIGTERM.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import signal
from pathlib import Path
from typing import Optional, Sequence

from route_tracker.core.logging_config import configure_logging
from route_tracker.core.logging_utils import get_module_logger
from .config import DEFAULT_CONFIG_PATH, TrackingConfig
from .session import TrackingSession
from .tracking_core.providers import NMEALocationProvider
from .tracking_core.transports import SerialTransport
from .tracking_core.types import Coordinate, ZoomSpan

logger = get_module_logger("MainTracking")


class LoggingSurface:
    """Map surface stand-in that writes what it would draw to the log."""

    def __init__(self) -> None:
        self._route_points = 0

    def recenter(self, coordinate: Coordinate, zoom_span: ZoomSpan) -> None:
        logger.debug("Recenter on %.6f, %.6f", coordinate.latitude, coordinate.longitude)

    def render_marker(self, position: Coordinate) -> None:
        logger.info("Position %.6f, %.6f", position.latitude, position.longitude)

    def render_polyline(self, coordinates: Sequence[Coordinate]) -> None:
        if len(coordinates) != self._route_points:
            self._route_points = len(coordinates)
            logger.info("Route: %d points", self._route_points)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Headless route tracker")
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to the tracking config.txt.",
    )
    parser.add_argument("--port", dest="serial_port", help="Serial device of the GPS receiver.")
    parser.add_argument("--baud", dest="baud_rate", type=int, help="Serial baud rate.")
    parser.add_argument(
        "--min-distance",
        dest="min_distance_m",
        type=float,
        help="Minimum spacing in meters between recorded route points.",
    )
    parser.add_argument("--log-level", dest="log_level", help="Logging level (debug, info, ...).")
    parser.add_argument("--log-file", dest="log_file", type=Path, help="Optional rotating log file.")
    return parser.parse_args(argv)


def install_signal_handlers(shutdown_event: asyncio.Event, loop: asyncio.AbstractEventLoop) -> None:
    """Register SIGINT/SIGTERM handlers that set ``shutdown_event``."""
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, shutdown_event.set)


async def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the tracking module."""
    args = parse_args(argv)
    config = await TrackingConfig.from_file_async(args.config_path, args)
    configure_logging(config.log_level, log_file=args.log_file)

    transport = SerialTransport(config.serial_port, config.baud_rate)
    provider = NMEALocationProvider(transport, read_once_timeout=config.read_once_timeout_s)
    session = TrackingSession(provider, surface=LoggingSurface(), config=config)

    shutdown_event = asyncio.Event()
    install_signal_handlers(shutdown_event, asyncio.get_running_loop())

    session.locate_once()
    if not await session.start():
        logger.error("Tracking did not start: %s", session.error)
        session.close()
        await provider.aclose()
        return

    logger.info("Tracking on %s at %d baud", config.serial_port, config.baud_rate)
    try:
        await shutdown_event.wait()
    finally:
        logger.info("Shutting down with %d route points", len(session.route))
        session.close()
        await provider.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
