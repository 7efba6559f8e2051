"""End-to-end test fixtures.

Scenario tests drive a full session against mock collaborators and run
everywhere. Tests marked ``hardware`` and ``gps`` need a receiver on a serial
port and the --run-hardware flag.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

GPS_PORT_ENV = "ROUTE_TRACKER_GPS_PORT"


@pytest.fixture
def gps_port() -> str:
    """Serial port of the attached GPS receiver, or skip."""
    port = os.environ.get(GPS_PORT_ENV, "/dev/serial0")
    if not Path(port).exists():
        pytest.skip(f"No GPS receiver at {port} (set {GPS_PORT_ENV})")
    return port
