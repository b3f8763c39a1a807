"""
Stats Store
Durable JSON record of the current day's statistics.

Writes go to a temp file in the target directory and are moved into place
with os.replace, so a failed write never leaves a half-written record.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from loguru import logger

from .clock import Clock
from .errors import PersistenceCorruption, PersistenceWriteFailure
from .models import DailyStats


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name} in stats record")


class StatsStore:
    """Load/save primitives with fail-soft semantics."""

    FILENAME = "daily_stats.json"

    def __init__(self, path: Optional[Path] = None, clock: Optional[Clock] = None):
        if path is None:
            path = Path("data") / self.FILENAME
        self.path = Path(path)
        self.clock = clock or Clock()

    def load(self) -> DailyStats:
        """Return the stored record, or a fresh one for today."""
        if not self.path.exists():
            logger.info(f"No stats record at {self.path}, starting fresh")
            return DailyStats.fresh(self.clock.day_key())

        try:
            stats = self._read()
        except PersistenceCorruption as e:
            logger.warning(f"Discarding unreadable stats record {self.path}: {e}")
            return DailyStats.fresh(self.clock.day_key())

        logger.info(
            f"Restored stats for {stats.day_key}: "
            f"{stats.player_sample_total} samples, "
            f"{stats.online_seconds}s online / {stats.offline_seconds}s offline"
        )
        return stats

    def save(self, stats: DailyStats) -> bool:
        """Persist the record; failures are logged, never raised."""
        try:
            self._write(stats)
        except PersistenceWriteFailure as e:
            logger.error(f"Stats not saved, keeping in-memory record: {e}")
            return False
        return True

    # ──────────────────────────────────────────────────────────────────
    # File access
    # ──────────────────────────────────────────────────────────────────

    def _read(self) -> DailyStats:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f, parse_constant=_reject_constant)
        except (OSError, ValueError) as e:
            raise PersistenceCorruption(str(e)) from e

        if not isinstance(data, dict):
            raise PersistenceCorruption(f"expected an object, got {type(data).__name__}")
        return DailyStats.from_dict(data)

    def _write(self, stats: DailyStats):
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(stats.to_dict(), indent=2)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(self.path.parent),
                prefix=self.path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceWriteFailure(f"{self.path}: {e}") from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError as e:
                    logger.debug(f"Could not remove temp file {tmp_name}: {e}")
