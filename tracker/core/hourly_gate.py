"""
Hourly Publication Gate
At most one hourly dataset publication per distinct hour of the day.
"""

from typing import List, Optional

from .models import DailyStats
from .stats_store import StatsStore


class HourlyGate:
    """Decides when the hourly dataset should be (re)published."""

    def __init__(self, store: StatsStore):
        self.store = store

    def should_publish(self, stats: DailyStats, hour_key: int) -> bool:
        """True until mark_published is called for this hour."""
        return hour_key != stats.last_published_hour

    def mark_published(self, stats: DailyStats, hour_key: int, handle: Optional[str] = None):
        stats.last_published_hour = hour_key
        if handle is not None:
            stats.publication_handle = handle
        self.store.save(stats)

    def dataset(self, stats: DailyStats) -> List[Optional[float]]:
        """Hourly means for the 24 hours; None marks an hour with no data."""
        return stats.hourly_averages()
