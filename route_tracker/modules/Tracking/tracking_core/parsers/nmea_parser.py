"""NMEA position parsing for serial GPS receivers.

Only the sentences that carry a position are decoded (RMC, GGA, GLL). Date,
altitude and speed are remembered across sentences so that every emitted
sample carries the freshest metadata the receiver has reported.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

from ..errors import InvalidSampleError
from ..types import Coordinate, LocationSample

MPS_PER_KNOT = 0.514444


def _parse_float(value: str | None) -> Optional[float]:
    """Parse string to float, None on failure."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_int(value: str | None) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_latlon(
    value: str | None,
    direction: str | None,
    *,
    is_lat: bool
) -> Optional[float]:
    """Parse NMEA lat/lon format (DDMM.MMMM or DDDMM.MMMM) to decimal degrees."""
    if not value or not direction:
        return None
    deg_len = 2 if is_lat else 3
    if len(value) < deg_len:
        return None
    try:
        degrees = int(value[:deg_len])
        minutes = float(value[deg_len:])
    except ValueError:
        return None
    if not 0.0 <= minutes < 60.0:
        return None
    decimal = degrees + minutes / 60.0
    if not 0.0 <= decimal <= (90.0 if is_lat else 180.0):
        return None
    if direction.upper() in {"S", "W"}:
        decimal *= -1.0
    return decimal


def _parse_hms(value: str | None) -> Optional[dt.time]:
    """Parse NMEA time format (HHMMSS.sss) to a UTC time."""
    if not value or not value.strip():
        return None
    main, dot, frac = value.strip().partition(".")
    main = main.rjust(6, "0")
    try:
        micro = int((frac[:6] if dot else "0").ljust(6, "0"))
        return dt.time(int(main[0:2]), int(main[2:4]), int(main[4:6]), micro,
                       tzinfo=dt.timezone.utc)
    except ValueError:
        return None


def _parse_date(value: str | None) -> Optional[dt.date]:
    """Parse NMEA date format (DDMMYY)."""
    if not value or len(value) != 6:
        return None
    try:
        return dt.date(2000 + int(value[4:6]), int(value[2:4]), int(value[0:2]))
    except ValueError:
        return None


def validate_checksum(sentence: str) -> bool:
    """Validate the XOR checksum after '*'."""
    if not sentence.startswith("$") or "*" not in sentence:
        return False
    try:
        payload, checksum_str = sentence[1:].split("*", 1)
        expected = int(checksum_str[:2], 16)
    except (ValueError, IndexError):
        return False
    calculated = 0
    for char in payload:
        calculated ^= ord(char)
    return calculated == expected


class NMEAPositionParser:
    """Stateful parser turning NMEA sentences into location samples."""

    def __init__(self, validate_checksums: bool = True):
        self._validate_checksums = validate_checksums
        self._last_date: Optional[dt.date] = None
        self._altitude_m: Optional[float] = None
        self._speed_mps: Optional[float] = None
        self._heading_deg: Optional[float] = None
        self._hdop: Optional[float] = None

    def reset(self) -> None:
        self._last_date = None
        self._altitude_m = None
        self._speed_mps = None
        self._heading_deg = None
        self._hdop = None

    def parse_sentence(self, sentence: str) -> Optional[LocationSample]:
        """Return a sample for a valid position sentence, None otherwise.

        Sentences without a fix (status V, quality 0) yield None; so do
        sentences that fail the checksum or are not position sentences.
        """
        if not sentence or not sentence.startswith("$"):
            return None
        if self._validate_checksums and not validate_checksum(sentence):
            return None

        payload = sentence[1:].split("*", 1)[0]
        parts = payload.split(",")
        message_type = parts[0][-3:].upper()

        handler = getattr(self, f"_parse_{message_type.lower()}", None)
        if handler is None:
            return None

        data = handler(parts[1:])
        if not data or not data.get("fix_valid"):
            return None

        try:
            coordinate = Coordinate.parse(data.get("latitude"), data.get("longitude"))
        except InvalidSampleError:
            return None

        return LocationSample(
            coordinate=coordinate,
            accuracy_m=self._hdop,
            altitude_m=self._altitude_m,
            speed_mps=self._speed_mps,
            heading_deg=self._heading_deg,
            timestamp=self._timestamp(data.get("time")),
        )

    def _timestamp(self, time_obj: Optional[dt.time]) -> Optional[dt.datetime]:
        if time_obj is None:
            return None
        date_value = self._last_date or dt.datetime.now(dt.timezone.utc).date()
        return dt.datetime.combine(date_value, time_obj)

    # ------------------------------------------------------------------
    # Sentence-specific parsers
    # ------------------------------------------------------------------

    def _parse_rmc(self, fields: list[str]) -> Optional[Dict[str, Any]]:
        """$GPRMC: time, status, position, speed, course, date."""
        if len(fields) < 9:
            return None

        date_obj = _parse_date(fields[8])
        if date_obj:
            self._last_date = date_obj
        speed_knots = _parse_float(fields[6])
        if speed_knots is not None:
            self._speed_mps = speed_knots * MPS_PER_KNOT
        course = _parse_float(fields[7])
        if course is not None:
            self._heading_deg = course

        return {
            "time": _parse_hms(fields[0]),
            "fix_valid": (fields[1] or "").upper() == "A",
            "latitude": _parse_latlon(fields[2], fields[3], is_lat=True),
            "longitude": _parse_latlon(fields[4], fields[5], is_lat=False),
        }

    def _parse_gga(self, fields: list[str]) -> Optional[Dict[str, Any]]:
        """$GPGGA: time, position, fix quality, satellites, HDOP, altitude."""
        if len(fields) < 9:
            return None

        hdop = _parse_float(fields[7])
        if hdop is not None:
            self._hdop = hdop
        altitude = _parse_float(fields[8])
        if altitude is not None:
            self._altitude_m = altitude

        return {
            "time": _parse_hms(fields[0]),
            "fix_valid": (_parse_int(fields[5]) or 0) > 0,
            "latitude": _parse_latlon(fields[1], fields[2], is_lat=True),
            "longitude": _parse_latlon(fields[3], fields[4], is_lat=False),
        }

    def _parse_gll(self, fields: list[str]) -> Optional[Dict[str, Any]]:
        """$GPGLL: position, time, status."""
        if len(fields) < 6:
            return None

        return {
            "time": _parse_hms(fields[4]),
            "fix_valid": (fields[5] or "").upper() == "A",
            "latitude": _parse_latlon(fields[0], fields[1], is_lat=True),
            "longitude": _parse_latlon(fields[2], fields[3], is_lat=False),
        }


__all__ = ["NMEAPositionParser", "validate_checksum"]
