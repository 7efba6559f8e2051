"""Shared pytest configuration and fixtures for the Route Tracker test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for `tests.infrastructure` imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from route_tracker.core.platform_info import reset_platform_info  # noqa: E402
from route_tracker.modules.Tracking.config import TrackingConfig  # noqa: E402
from route_tracker.modules.Tracking.session import TrackingSession  # noqa: E402
from route_tracker.modules.Tracking.tracking_core.permission_gate import PermissionGate  # noqa: E402
from tests.infrastructure.mocks.tracking_mocks import (  # noqa: E402
    CountingHandleFactory,
    MockLifecycleSource,
    MockPermissionSubsystem,
    MockProvider,
    RecordingPrompter,
    RecordingSurface,
)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-hardware",
        action="store_true",
        default=False,
        help="Run tests that require a physical GPS receiver",
    )


def pytest_collection_modifyitems(config, items):
    """Skip hardware tests unless --run-hardware is specified."""
    if config.getoption("--run-hardware"):
        return

    skip_hardware = pytest.mark.skip(reason="Need --run-hardware option to run")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hardware)


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(autouse=True)
def _fresh_platform_info():
    """Drop cached platform detection between tests."""
    reset_platform_info()
    yield
    reset_platform_info()


@pytest.fixture
def provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def permissions() -> MockPermissionSubsystem:
    return MockPermissionSubsystem()


@pytest.fixture
def prompter() -> RecordingPrompter:
    return RecordingPrompter()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def lifecycle() -> MockLifecycleSource:
    return MockLifecycleSource()


@pytest.fixture
def handle_factory() -> CountingHandleFactory:
    return CountingHandleFactory()


@pytest.fixture
def make_session(provider, permissions, prompter, surface, lifecycle, handle_factory):
    """Factory building a session wired to the mock collaborators.

    Example:
        session = make_session(permission_subsystem=MockPermissionSubsystem(PermissionResult.DENIED))
    """
    sessions = []

    def _make(*, config=None, permission_subsystem=None, with_lifecycle=True, **overrides):
        gate = PermissionGate(
            permission_subsystem or permissions,
            prompter,
            runtime_permissions=True,
        )
        session = TrackingSession(
            overrides.get("provider", provider),
            gate,
            overrides.get("surface", surface),
            lifecycle=lifecycle if with_lifecycle else None,
            config=config or TrackingConfig(),
            smoother_factory=handle_factory,
        )
        sessions.append(session)
        return session

    yield _make

    for session in sessions:
        session.close()
