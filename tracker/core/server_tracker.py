"""
Server Tracker - polling loop and owner of the live daily record.

One tick:
  1. Query the server (status, ping, location)
  2. Validate the sample at the boundary
  3. Roll the day over if the local date changed (recap goes to the sink)
  4. Record the sample
  5. Refresh the live status summary
  6. Publish the hourly dataset once per hour

Ticks never overlap: the next interval wait starts only after the previous
tick (including persistence) has finished.
"""

import asyncio
from typing import Optional

from loguru import logger

from .aggregator import Aggregator
from .checker import StatusChecker
from .clock import Clock
from .errors import InvalidSample, ReportingError
from .hourly_gate import HourlyGate
from .models import DailyStats, Sample, ServerStatus
from .rollover import RolloverController
from .stats_store import StatsStore


class ServerTracker:
    """Explicit owner of the tracker state; one instance per process."""

    def __init__(
        self,
        checker: StatusChecker,
        sink,
        store: StatsStore,
        clock: Optional[Clock] = None,
        interval: float = 30,
    ):
        self.checker  = checker
        self.sink     = sink
        self.store    = store
        self.clock    = clock or store.clock
        self.interval = interval

        self.aggregator = Aggregator(store)
        self.rollover   = RolloverController(store)
        self.gate       = HourlyGate(store)

        self.stats: DailyStats = store.load()
        self.status_handle: Optional[str] = None

        self._is_checking = False
        self._stop_event: Optional[asyncio.Event] = None

    # ──────────────────────────────────────────────────────────────────
    # Tick
    # ──────────────────────────────────────────────────────────────────

    async def tick(self) -> bool:
        """Run one polling tick. Returns False when the tick was skipped or failed."""
        if self._is_checking:
            logger.debug("Check already in progress, skipping")
            return False

        self._is_checking = True
        try:
            status = await self.checker.check()
            return self.process(status)
        except Exception as e:
            logger.error(f"Check failed: {e}", exc_info=True)
            return False
        finally:
            self._is_checking = False

    def process(self, status: ServerStatus) -> bool:
        """Fold an already-fetched status into the daily record and report."""
        try:
            sample = Sample.from_status(status)
        except InvalidSample as e:
            logger.warning(f"Rejected status sample: {e}")
            return False

        now = self.clock.now()

        result = self.rollover.rollover_if_needed(self.clock.day_key(now), self.stats)
        self.stats = result.new_stats
        if result.rolled_over:
            self._publish_recap(result.finalized_snapshot)

        hour = self.clock.hour_key(now)
        self.aggregator.record_sample(self.stats, sample, self.clock.timestamp(now), hour)

        self._publish_status(status, self.clock.time_string(now))

        if self.gate.should_publish(self.stats, hour):
            self._publish_hourly(hour)

        return True

    # ──────────────────────────────────────────────────────────────────
    # Reporting
    # ──────────────────────────────────────────────────────────────────

    def _publish_recap(self, snapshot):
        try:
            self.sink.publish_daily_recap(snapshot)
        except ReportingError as e:
            logger.error(f"Daily recap for {snapshot.day_key} not delivered: {e}")

    def _publish_status(self, status: ServerStatus, time_string: str):
        try:
            self.status_handle = self.sink.publish_status(
                status, self.status_handle, time_string=time_string
            )
        except ReportingError as e:
            logger.error(f"Status summary not delivered: {e}")

    def _publish_hourly(self, hour: int):
        dataset = self.gate.dataset(self.stats)
        try:
            handle = self.sink.publish_hourly(
                dataset, self.stats.day_key, self.stats.publication_handle
            )
        except ReportingError as e:
            # Hour stays unmarked; the next tick retries.
            logger.error(f"Hourly publication for {hour:02d}:00 failed: {e}")
            return
        self.gate.mark_published(self.stats, hour, handle)

    # ──────────────────────────────────────────────────────────────────
    # Loop
    # ──────────────────────────────────────────────────────────────────

    async def run(self, stop_event: Optional[asyncio.Event] = None):
        """Tick every ``interval`` seconds until stopped."""
        self._stop_event = stop_event or asyncio.Event()
        logger.info(f"Tracking {self.checker.address} every {self.interval}s")

        while not self._stop_event.is_set():
            await self.tick()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                logger.debug("Refreshing server status...")

        logger.info("Tracker stopped")

    def stop(self):
        if self._stop_event is not None:
            self._stop_event.set()
