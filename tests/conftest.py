"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from korkort.auth import Identity  # noqa: E402
from korkort.storage import LocalStorage  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Controllable replacement for datetime.now()."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def storage(tmp_path):
    """Fresh SQLite key-value store in a temp directory."""
    return LocalStorage(tmp_path / "state.db")


@pytest.fixture
def real_user():
    """Authenticated identity that may sync."""
    return Identity(user_id="user-123", username="Alva")


@pytest.fixture
def guest_user():
    """Guest identity that never syncs."""
    return Identity(user_id="guest-1700000000000", is_guest=True, username="Guest")


@pytest.fixture
def clock():
    """Clock fixed at a mid-morning instant in UTC."""
    return FakeClock(datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc))
