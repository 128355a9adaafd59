"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import datetime, timedelta, timezone

from versiontracker import InMemoryStore, Version, VersionStore, reset_merge_flags
from versiontracker.versions_tracker import VersionsTracker

ENV_VARS = (
    "VERSIONTRACKER_LOG_LEVEL",
    "VERSIONTRACKER_LOG_DIR",
    "VERSIONTRACKER_STORE_PATH",
)


@pytest.fixture(autouse=True)
def fresh_session():
    """Every test starts like a freshly launched process."""
    reset_merge_flags()
    VersionsTracker._reset_shared_instance()
    yield
    reset_merge_flags()
    VersionsTracker._reset_shared_instance()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No VERSIONTRACKER_* variables and no .env file in the working directory."""
    for name in ENV_VARS:
        # setenv first so monkeypatch restores the original state afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def version_store(memory_store) -> VersionStore:
    return VersionStore(memory_store)


@pytest.fixture
def install_date() -> datetime:
    return datetime(2024, 3, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)


@pytest.fixture
def sample_history(install_date):
    """Three versions installed a day apart."""
    return (
        Version("1.0", "1", install_date),
        Version("1.0", "2", install_date + timedelta(days=1)),
        Version("1.1", "3", install_date + timedelta(days=2)),
    )
