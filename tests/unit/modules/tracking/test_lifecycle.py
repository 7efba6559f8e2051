"""Unit tests for the lifecycle monitor."""

import pytest

from route_tracker.modules.Tracking.tracking_core.lifecycle import LifecycleMonitor
from route_tracker.modules.Tracking.tracking_core.types import AppState
from tests.infrastructure.mocks.tracking_mocks import MockLifecycleSource


@pytest.fixture
def calls():
    return []


@pytest.fixture
def monitor(lifecycle, calls):
    m = LifecycleMonitor(lifecycle, lambda: calls.append("background"))
    m.attach()
    return m


class TestLifecycleMonitor:

    def test_active_to_background_fires(self, lifecycle, monitor, calls):
        lifecycle.background()
        assert calls == ["background"]

    @pytest.mark.parametrize("previous,current", [
        (AppState.BACKGROUND, AppState.ACTIVE),
        (AppState.ACTIVE, AppState.INACTIVE),
        (AppState.INACTIVE, AppState.BACKGROUND),
        (AppState.BACKGROUND, AppState.BACKGROUND),
        ("active", "suspended"),
    ])
    def test_other_transitions_ignored(self, lifecycle, monitor, calls, previous, current):
        lifecycle.transition(previous, current)
        assert calls == []

    def test_string_states_accepted(self, lifecycle, monitor, calls):
        lifecycle.transition("active", "background")
        assert calls == ["background"]

    def test_every_background_edge_fires(self, lifecycle, monitor, calls):
        lifecycle.background()
        lifecycle.transition(AppState.BACKGROUND, AppState.ACTIVE)
        lifecycle.background()
        assert calls == ["background", "background"]

    def test_attach_is_once(self, lifecycle, monitor):
        monitor.attach()
        assert len(lifecycle.listeners) == 1
        assert monitor.is_attached

    def test_detach_is_idempotent(self, lifecycle, monitor, calls):
        monitor.detach()
        monitor.detach()

        assert lifecycle.unsubscribe_calls == 1
        assert not monitor.is_attached
        lifecycle.background()
        assert calls == []

    def test_no_reattach_after_detach(self, lifecycle, monitor):
        monitor.detach()
        monitor.attach()
        assert lifecycle.listeners == []

    def test_unsubscribe_failure_absorbed(self, calls):
        class FlakySource(MockLifecycleSource):
            def add_listener(self, callback):
                super().add_listener(callback)

                def unsubscribe():
                    raise RuntimeError("already gone")
                return unsubscribe

        m = LifecycleMonitor(FlakySource(), lambda: calls.append("x"))
        m.attach()
        m.detach()
        assert not m.is_attached
