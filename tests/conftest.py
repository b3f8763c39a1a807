from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from tracker.core.clock import Clock
from tracker.core.errors import ReportingError
from tracker.core.stats_store import StatsStore


class ManualClock(Clock):
    """Clock whose current instant is set by the test."""

    def __init__(self, start: datetime, tz_name: str = "UTC"):
        self.current = start
        super().__init__(tz_name, now_fn=lambda: self.current)

    def advance(self, seconds: float) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


class RecordingSink:
    """In-memory sink that records every publication."""

    def __init__(self):
        self.statuses = []
        self.hourly = []
        self.recaps = []
        self.fail_hourly = False
        self._counter = 0

    def _new_handle(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def publish_status(self, status, handle=None, time_string=None):
        self.statuses.append((status, handle, time_string))
        return handle or self._new_handle("status")

    def publish_hourly(self, dataset: List[Optional[float]], day_key: str, handle=None):
        if self.fail_hourly:
            raise ReportingError("sink offline")
        self.hourly.append((list(dataset), day_key, handle))
        return handle or self._new_handle("hourly")

    def publish_daily_recap(self, snapshot):
        self.recaps.append(snapshot)


@pytest.fixture
def clock():
    return ManualClock(datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(tmp_path, clock):
    return StatsStore(tmp_path / "daily_stats.json", clock)


@pytest.fixture
def sink():
    return RecordingSink()
