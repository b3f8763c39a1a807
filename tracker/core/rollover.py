"""
Rollover Controller
Finalizes the previous day's record when the local date changes.
"""

from loguru import logger

from .models import DailyStats, RolloverResult
from .stats_store import StatsStore


class RolloverController:
    """Exactly-once daily reset, checked once per polling tick."""

    def __init__(self, store: StatsStore):
        self.store = store

    def rollover_if_needed(self, current_day_key: str, stats: DailyStats) -> RolloverResult:
        if stats.day_key == current_day_key:
            return RolloverResult(rolled_over=False, finalized_snapshot=None, new_stats=stats)

        snapshot = stats.snapshot()
        # The hourly publication keeps being edited in place across days;
        # only the hour marker is cleared so the new day publishes at once.
        new_stats = DailyStats.fresh(current_day_key, publication_handle=stats.publication_handle)
        self.store.save(new_stats)

        logger.info(
            f"Day rollover {stats.day_key} → {current_day_key}: "
            f"{snapshot.player_sample_total} samples finalized"
        )
        return RolloverResult(rolled_over=True, finalized_snapshot=snapshot, new_stats=new_stats)
