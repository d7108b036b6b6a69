"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings  # noqa: E402
from src.engine.base import SessionSummary  # noqa: E402
from src.progress.curriculum import get_curriculum  # noqa: E402
from src.progress.persistence import MemoryPersistence  # noqa: E402
from src.progress.store import ProgressStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (tutor flows end to end)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from ~/.libregto and any local .env overrides."""
    monkeypatch.setenv("LIBREGTO_PROGRESS_PATH", str(tmp_path / "progress.json"))
    monkeypatch.delenv("LIBREGTO_CURRICULUM_FILE", raising=False)
    monkeypatch.delenv("LIBREGTO_STRICT_MODE", raising=False)
    monkeypatch.delenv("LIBREGTO_RNG_SEED", raising=False)
    get_settings.cache_clear()
    get_curriculum.cache_clear()
    yield
    get_settings.cache_clear()
    get_curriculum.cache_clear()


@pytest.fixture
def tmp_progress_path(tmp_path):
    """Progress file the settings point at for this test."""
    return tmp_path / "progress.json"


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def rng():
    """Seeded RNG so generated questions are reproducible."""
    return random.Random(1234)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    """ProgressStore over an in-memory document with a fixed timestamp."""
    return ProgressStore(persistence=MemoryPersistence(), now=lambda: "2026-01-01T00:00:00")


def make_summary(
    unit_id: str,
    accuracy: float,
    avg_time_ms: float = 3000.0,
    best_streak: int = 0,
    total: int = 20,
) -> SessionSummary:
    """Finished-session summary with the given score."""
    correct = round(total * accuracy / 100)
    return SessionSummary(
        unit_id=unit_id,
        total_questions=total,
        answered=total,
        correct=correct,
        accuracy=accuracy,
        avg_time_ms=avg_time_ms,
        fastest_time_ms=avg_time_ms,
        best_streak=best_streak,
        passed=None,
    )


@pytest.fixture
def summary_factory():
    return make_summary
