"""Unit tests for structured logging helpers."""

import logging

import pytest

from route_tracker.core import logging_config
from route_tracker.core.logging_config import coerce_level, configure_logging
from route_tracker.core.logging_utils import (
    StructuredLogger,
    ensure_structured_logger,
    get_module_logger,
)


class TestStructuredLogger:

    def test_module_logger_is_namespaced(self):
        log = get_module_logger("TrackingSession")

        assert isinstance(log, StructuredLogger)
        assert log.name == "route_tracker.TrackingSession"
        assert log.component == "TrackingSession"

    def test_dotted_module_path_uses_leaf_component(self):
        log = get_module_logger("route_tracker.modules.Tracking.tracking_core.viewport")

        assert log.name == "route_tracker.modules.Tracking.tracking_core.viewport"
        assert log.component == "viewport"

    def test_messages_are_prefixed(self, caplog):
        log = get_module_logger("PrefixTest")

        with caplog.at_level(logging.INFO, logger="route_tracker.PrefixTest"):
            log.info("Route has %d points", 3)

        assert "[PrefixTest] Route has 3 points" in caplog.messages

    def test_bad_format_args_do_not_raise(self, caplog):
        log = get_module_logger("FormatTest")

        with caplog.at_level(logging.INFO, logger="route_tracker.FormatTest"):
            log.info("Needs %d", "not-a-number")

        assert caplog.messages[-1].startswith("[FormatTest] Needs %d | args=")

    def test_exception_attaches_traceback(self, caplog):
        log = get_module_logger("ExcTest")

        with caplog.at_level(logging.ERROR, logger="route_tracker.ExcTest"):
            try:
                raise RuntimeError("surface gone")
            except RuntimeError:
                log.exception("Render failed")

        assert caplog.records[-1].exc_info is not None
        assert caplog.messages[-1] == "[ExcTest] Render failed"

    def test_disabled_level_is_skipped(self, caplog):
        log = get_module_logger("QuietTest")

        with caplog.at_level(logging.WARNING, logger="route_tracker.QuietTest"):
            log.debug("hidden")

        assert caplog.messages == []


class TestEnsureStructuredLogger:

    def test_passthrough(self):
        log = get_module_logger("Same")
        assert ensure_structured_logger(log) is log

    def test_wraps_plain_logger(self):
        wrapped = ensure_structured_logger(logging.getLogger("plain.component"), component="Custom")
        assert wrapped.component == "Custom"

    def test_fallback_name_when_none(self):
        wrapped = ensure_structured_logger(None, fallback_name="Fallback")
        assert wrapped.name == "route_tracker.Fallback"


class TestConfigureLogging:

    @pytest.fixture
    def restore_root(self, monkeypatch):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        monkeypatch.setattr(logging_config, "_configured", False)
        yield root
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    def test_coerce_level(self):
        assert coerce_level("debug") == logging.DEBUG
        assert coerce_level(" Warning ") == logging.WARNING
        assert coerce_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ValueError):
            coerce_level("chatty")

    def test_installs_console_and_file_handlers(self, restore_root, tmp_path):
        log_file = tmp_path / "logs" / "tracking.log"

        configure_logging("debug", log_file=log_file)

        assert restore_root.level == logging.DEBUG
        assert len(restore_root.handlers) == 2
        assert log_file.parent.is_dir()
        assert logging.getLogger("serial_asyncio").level == logging.WARNING

    def test_second_call_only_adjusts_level(self, restore_root):
        configure_logging("info")
        handlers = list(restore_root.handlers)

        configure_logging("error")

        assert restore_root.handlers == handlers
        assert restore_root.level == logging.ERROR
