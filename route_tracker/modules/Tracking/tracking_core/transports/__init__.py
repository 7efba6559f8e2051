"""Line transports feeding NMEA providers."""

from .base_transport import BaseLineTransport
from .serial_transport import SerialTransport

__all__ = ["BaseLineTransport", "SerialTransport"]
