"""Tests for the headless tracking entry point."""

import asyncio
import logging
from pathlib import Path

import pytest

from route_tracker.modules.Tracking import main_tracking
from route_tracker.modules.Tracking.config import DEFAULT_CONFIG_PATH
from route_tracker.modules.Tracking.tracking_core.types import Coordinate, ZoomSpan
from tests.infrastructure.helpers import gga
from tests.infrastructure.mocks.tracking_mocks import ScriptedTransport


CONFIG_TEMPLATE = """\
runtime_permissions = {permissions}
fastest_interval_ms = 0
read_once_timeout_s = 0.5
serial_port = /dev/ttyFAKE0
baud_rate = 4800
"""


@pytest.fixture
def wired(monkeypatch):
    """Patch out the serial port, signal handlers and logging setup."""
    captured = {}
    transport = ScriptedTransport([gga(48.1173, 11.5166), gga(48.1174, 11.5166)])

    def fake_serial(port, baud_rate):
        captured["port"] = port
        captured["baud_rate"] = baud_rate
        return transport

    def fake_signals(event, loop):
        captured["shutdown"] = event

    monkeypatch.setattr(main_tracking, "SerialTransport", fake_serial)
    monkeypatch.setattr(main_tracking, "install_signal_handlers", fake_signals)
    monkeypatch.setattr(main_tracking, "configure_logging", lambda *a, **kw: None)
    captured["transport"] = transport
    return captured


def write_config(tmp_path: Path, permissions: str) -> Path:
    path = tmp_path / "config.txt"
    path.write_text(CONFIG_TEMPLATE.format(permissions=permissions))
    return path


class TestParseArgs:

    def test_defaults(self):
        args = main_tracking.parse_args([])

        assert args.config_path == DEFAULT_CONFIG_PATH
        assert args.serial_port is None
        assert args.baud_rate is None
        assert args.min_distance_m is None
        assert args.log_file is None

    def test_overrides(self, tmp_path):
        args = main_tracking.parse_args([
            "--config", str(tmp_path / "alt.txt"),
            "--port", "/dev/ttyACM0",
            "--baud", "38400",
            "--min-distance", "2.5",
            "--log-level", "debug",
        ])

        assert args.config_path == tmp_path / "alt.txt"
        assert args.serial_port == "/dev/ttyACM0"
        assert args.baud_rate == 38400
        assert args.min_distance_m == 2.5
        assert args.log_level == "debug"


class TestLoggingSurface:

    def test_route_logged_only_when_length_changes(self, caplog):
        surface = main_tracking.LoggingSurface()
        points = [Coordinate(0.0, 0.0), Coordinate(0.0, 0.0001)]

        with caplog.at_level(logging.INFO):
            surface.recenter(points[0], ZoomSpan(0.01, 0.01))
            surface.render_marker(points[0])
            surface.render_polyline(points)
            surface.render_polyline(points)

        route_lines = [r for r in caplog.records if "Route:" in r.getMessage()]
        assert len(route_lines) == 1
        assert "2 points" in route_lines[0].getMessage()


class TestMain:

    @pytest.mark.asyncio
    async def test_runs_until_shutdown(self, tmp_path, wired):
        config_path = write_config(tmp_path, "false")

        task = asyncio.create_task(main_tracking.main(["--config", str(config_path)]))
        for _ in range(200):
            if "shutdown" in wired and wired["transport"].connect_calls:
                break
            await asyncio.sleep(0.01)

        assert wired["port"] == "/dev/ttyFAKE0"
        assert wired["baud_rate"] == 4800
        assert not task.done()

        wired["shutdown"].set()
        await asyncio.wait_for(task, timeout=2.0)

        assert not wired["transport"].is_connected

    @pytest.mark.asyncio
    async def test_cli_port_overrides_config(self, tmp_path, wired):
        config_path = write_config(tmp_path, "false")

        task = asyncio.create_task(
            main_tracking.main(["--config", str(config_path), "--port", "/dev/ttyUSB3"])
        )
        for _ in range(200):
            if "shutdown" in wired:
                break
            await asyncio.sleep(0.01)

        wired["shutdown"].set()
        await asyncio.wait_for(task, timeout=2.0)

        assert wired["port"] == "/dev/ttyUSB3"

    @pytest.mark.asyncio
    async def test_denied_permission_returns_without_waiting(self, tmp_path, wired):
        # Runtime permissions without a platform subsystem are always denied
        config_path = write_config(tmp_path, "true")

        await asyncio.wait_for(main_tracking.main(["--config", str(config_path)]), timeout=2.0)

        assert not wired["transport"].is_connected

    @pytest.mark.asyncio
    async def test_invalid_cli_baud_keeps_config_value(self, tmp_path, wired):
        config_path = write_config(tmp_path, "false")

        task = asyncio.create_task(
            main_tracking.main(["--config", str(config_path), "--baud", "0"])
        )
        for _ in range(200):
            if "shutdown" in wired:
                break
            await asyncio.sleep(0.01)

        wired["shutdown"].set()
        await asyncio.wait_for(task, timeout=2.0)

        assert wired["baud_rate"] == 4800
