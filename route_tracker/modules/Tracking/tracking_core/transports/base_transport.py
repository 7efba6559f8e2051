"""Base class for read-only line transports (e.g. GPS receivers)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class BaseLineTransport(ABC):
    """A connection that yields text lines, such as NMEA sentences.

    Supports ``async with`` for connect/disconnect.
    """

    def __init__(self) -> None:
        self._connected = False
        self._last_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @abstractmethod
    async def connect(self) -> bool:
        """Open the connection. Returns True on success."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection. Safe to call when not connected."""

    @abstractmethod
    async def read_line(self, timeout: float = 1.0) -> Optional[str]:
        """Read one decoded line, or None on timeout."""

    async def __aenter__(self) -> "BaseLineTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
