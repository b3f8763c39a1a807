"""
Aggregator
Folds one status sample per polling tick into the daily record.
"""

from loguru import logger

from .models import DailyStats, HourBucket, Sample
from .stats_store import StatsStore


class Aggregator:
    """Duration accounting, transition detection and hourly load buckets."""

    def __init__(self, store: StatsStore):
        self.store = store

    def record_sample(self, stats: DailyStats, sample: Sample, now: float, hour_key: int) -> DailyStats:
        """
        Record one sample observed at POSIX time ``now`` in hour ``hour_key``.

        The interval since the previous sample is credited to the state that
        was in effect during it, i.e. the previously recorded state. Calling
        twice with the same ``now`` counts the load twice.
        """
        # ── 1. Duration accounting ──────────────────────────────────────
        if stats.last_sample_timestamp is not None:
            delta = max(0, round(now - stats.last_sample_timestamp))
            if stats.last_known_state:
                stats.online_seconds += delta
            else:
                stats.offline_seconds += delta

        # ── 2. Timestamp ────────────────────────────────────────────────
        stats.last_sample_timestamp = now

        # ── 3. Transition detection ─────────────────────────────────────
        if stats.last_known_state is None:
            stats.last_known_state = sample.online
        elif sample.online != stats.last_known_state:
            if sample.online:
                stats.transitions.to_online += 1
                logger.info("Server came online")
            else:
                stats.transitions.to_offline += 1
                logger.info("Server went offline")
            stats.last_known_state = sample.online

        # ── 4. Load accounting ──────────────────────────────────────────
        load = sample.load if sample.online else 0
        bucket = stats.hourly_buckets.setdefault(hour_key, HourBucket())
        bucket.player_sum += load
        bucket.sample_count += 1
        stats.player_sum_total += load
        stats.player_sample_total += 1

        logger.debug(
            f"Sample h{hour_key:02d}: online={sample.online} load={load} "
            f"(bucket {bucket.player_sum}/{bucket.sample_count})"
        )

        # ── 5. Persist ──────────────────────────────────────────────────
        self.store.save(stats)
        return stats
