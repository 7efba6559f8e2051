"""Serial UART transport for NMEA GPS receivers.

Uses serial_asyncio for non-blocking reads from UART receivers such as the
BerryGPS or USB GPS dongles.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

import serial
import serial_asyncio

from route_tracker.core.logging_utils import get_module_logger
from ..constants import DEFAULT_BAUD_RATE, DEFAULT_SERIAL_PORT
from .base_transport import BaseLineTransport

logger = get_module_logger(__name__)


class SerialTransport(BaseLineTransport):
    """Line transport over a serial port.

    Example:
        transport = SerialTransport("/dev/serial0", 9600)
        async with transport:
            line = await transport.read_line()
    """

    def __init__(self, port: str = DEFAULT_SERIAL_PORT, baudrate: int = DEFAULT_BAUD_RATE):
        super().__init__()
        self.port = port
        self.baudrate = baudrate
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_connected(self) -> bool:
        return self._connected and self._reader is not None

    async def connect(self) -> bool:
        if self.is_connected:
            return True

        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self.port,
                baudrate=self.baudrate,
            )
        except asyncio.CancelledError:
            raise
        except (serial.SerialException, OSError, ValueError) as exc:
            self._last_error = str(exc)
            self._connected = False
            logger.warning("Cannot open %s at %d baud: %s", self.port, self.baudrate, exc)
            return False

        self._connected = True
        self._last_error = None
        logger.info("Connected to GPS on %s at %d baud", self.port, self.baudrate)
        return True

    async def disconnect(self) -> None:
        writer = self._writer
        self._writer = None
        self._reader = None
        self._connected = False
        if writer is None:
            return

        with contextlib.suppress(Exception):
            writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=1.0)
        except asyncio.TimeoutError:
            logger.debug("Timeout waiting for serial close on %s", self.port)
        except Exception as exc:
            logger.debug("Error closing serial on %s: %s", self.port, exc)

        logger.info("Disconnected from GPS on %s", self.port)

    async def read_line(self, timeout: float = 1.0) -> Optional[str]:
        if not self.is_connected or self._reader is None:
            return None

        try:
            line = await asyncio.wait_for(self._reader.readline(), timeout=timeout)
        except asyncio.TimeoutError:
            return None
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._last_error = str(exc)
            self._connected = False
            raise

        if not line:
            self._last_error = "Stream ended (EOF)"
            self._connected = False
            logger.warning("Serial stream ended on %s (EOF)", self.port)
            return None

        decoded = line.decode("ascii", errors="ignore").strip()
        return decoded or None
