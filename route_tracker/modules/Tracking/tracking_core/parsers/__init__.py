"""Sentence parsers for position sources."""

from .nmea_parser import NMEAPositionParser, validate_checksum

__all__ = ["NMEAPositionParser", "validate_checksum"]
