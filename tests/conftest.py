# ==============================================================================
# conftest.py — Shared test fixtures
# ==============================================================================
# Purpose: Observers, sleep recorders and scheduler fixtures used across tests
# ==============================================================================

import pytest

from sitemap_analyzer.utils.batch_scheduler import BatchScheduler
from sitemap_analyzer.utils.observer import RecordingObserver

class SleepRecorder:
    """Stands in for asyncio.sleep and remembers every requested wait."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)

@pytest.fixture
def sleep_recorder():
    return SleepRecorder()

@pytest.fixture
def observer():
    return RecordingObserver()

@pytest.fixture
def scheduler(observer):
    return BatchScheduler(batch_size=10, delay_ms=0, observer=observer)

@pytest.fixture(autouse=True)
def fast_pipeline(monkeypatch):
    """No inter-batch pauses and no common page probing unless a test asks."""
    monkeypatch.setenv("SITEMAP_BATCH_DELAY_MS", "0")
    monkeypatch.setenv("SITEMAP_PROBE_COMMON_PAGES", "false")
