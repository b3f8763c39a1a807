"""
Clock / calendar adapter.
Resolves local date, hour bucket and time string for the configured zone.
"""

from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger


class Clock:
    """Local-time view of the current instant."""

    def __init__(self, tz_name: str = "UTC", now_fn: Optional[Callable[[], datetime]] = None):
        try:
            self.tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown time zone {tz_name!r}, falling back to UTC")
            self.tz = ZoneInfo("UTC")
        self._now_fn = now_fn or (lambda: datetime.now(timezone.utc))

    def now(self) -> datetime:
        """Current instant, converted to the configured zone."""
        current = self._now_fn()
        if current.tzinfo is None:
            current = current.replace(tzinfo=self.tz)
        return current.astimezone(self.tz)

    def _resolve(self, now: Optional[datetime]) -> datetime:
        if now is None:
            return self.now()
        if now.tzinfo is None:
            return now.replace(tzinfo=self.tz)
        return now.astimezone(self.tz)

    def day_key(self, now: Optional[datetime] = None) -> str:
        return self._resolve(now).date().isoformat()

    def hour_key(self, now: Optional[datetime] = None) -> int:
        return self._resolve(now).hour

    def time_string(self, now: Optional[datetime] = None) -> str:
        return self._resolve(now).strftime("%H:%M:%S")

    def timestamp(self, now: Optional[datetime] = None) -> float:
        return self._resolve(now).timestamp()
