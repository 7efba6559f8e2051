"""Test helpers for the Route Tracker test suite.

Usage:
    from tests.infrastructure.helpers import gga, rmc, with_checksum
"""

from .nmea import gga, gll, nmea_checksum, rmc, with_checksum

__all__ = ["gga", "gll", "nmea_checksum", "rmc", "with_checksum"]
