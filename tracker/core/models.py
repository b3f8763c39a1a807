"""
Shared data models for the tracker.
Status results are frozen; the live daily record is the only mutable model.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .errors import InvalidSample, PersistenceCorruption


HOURS_PER_DAY = 24


@dataclass(frozen=True)
class ServerStatus:
    """One observation of the tracked server."""
    address: str
    online: bool
    timestamp: datetime
    players_online: int = 0
    players_max: int = 0
    version: str = "Unknown"
    motd: str = ""
    game_modes: Tuple[str, ...] = ()
    ping: str = "N/A"
    location: str = "Unknown Location"
    isp: str = "Unknown ISP"
    icon_url: Optional[str] = None


@dataclass(frozen=True)
class Sample:
    """Validated input for the aggregator."""
    online: bool
    load: int

    @classmethod
    def from_status(cls, status: ServerStatus) -> "Sample":
        if not isinstance(status.online, bool):
            raise InvalidSample(f"online flag is not a bool: {status.online!r}")
        if not status.online:
            return cls(online=False, load=0)

        load = status.players_online
        if isinstance(load, bool) or not isinstance(load, int) or load < 0:
            raise InvalidSample(f"player count must be a non-negative int: {load!r}")
        return cls(online=True, load=load)


@dataclass
class HourBucket:
    sample_count: int = 0
    player_sum: int = 0


class HourTotals(NamedTuple):
    sample_count: int
    player_sum: int


@dataclass
class TransitionCounts:
    to_online: int = 0
    to_offline: int = 0

    @property
    def total(self) -> int:
        return self.to_online + self.to_offline


class _SummaryMixin:
    """Derived views shared by the live record and its snapshots."""

    def hourly_averages(self) -> List[Optional[float]]:
        """Mean load per hour of day; None where the hour has no samples."""
        averages: List[Optional[float]] = [None] * HOURS_PER_DAY
        for hour, bucket in self.hourly_buckets.items():
            if bucket.sample_count > 0:
                averages[hour] = bucket.player_sum / bucket.sample_count
        return averages

    def daily_mean(self) -> float:
        if self.player_sample_total == 0:
            return 0.0
        return self.player_sum_total / self.player_sample_total

    def peak_hourly_average(self) -> float:
        present = [avg for avg in self.hourly_averages() if avg is not None]
        return max(present) if present else 0.0


def _new_buckets() -> Dict[int, HourBucket]:
    return {}


@dataclass
class DailyStats(_SummaryMixin):
    """Accumulated statistics for one local calendar day."""

    day_key: str
    hourly_buckets: Dict[int, HourBucket] = field(default_factory=_new_buckets)
    player_sum_total: int = 0
    player_sample_total: int = 0
    online_seconds: int = 0
    offline_seconds: int = 0
    transitions: TransitionCounts = field(default_factory=TransitionCounts)
    last_known_state: Optional[bool] = None
    last_sample_timestamp: Optional[float] = None
    last_published_hour: Optional[int] = None
    publication_handle: Optional[str] = None

    @classmethod
    def fresh(cls, day_key: str, publication_handle: Optional[str] = None) -> "DailyStats":
        return cls(day_key=day_key, publication_handle=publication_handle)

    def snapshot(self) -> "DailySnapshot":
        """Immutable copy, unaffected by later mutation of this record."""
        buckets = {
            hour: HourTotals(b.sample_count, b.player_sum)
            for hour, b in sorted(self.hourly_buckets.items())
        }
        return DailySnapshot(
            day_key=self.day_key,
            hourly_buckets=MappingProxyType(buckets),
            player_sum_total=self.player_sum_total,
            player_sample_total=self.player_sample_total,
            online_seconds=self.online_seconds,
            offline_seconds=self.offline_seconds,
            to_online=self.transitions.to_online,
            to_offline=self.transitions.to_offline,
            last_known_state=self.last_known_state,
            last_sample_timestamp=self.last_sample_timestamp,
            publication_handle=self.publication_handle,
        )

    # ──────────────────────────────────────────────────────────────────
    # Serialization
    # ──────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day_key": self.day_key,
            "hourly_buckets": {
                str(hour): {"sample_count": b.sample_count, "player_sum": b.player_sum}
                for hour, b in sorted(self.hourly_buckets.items())
            },
            "player_sum_total": self.player_sum_total,
            "player_sample_total": self.player_sample_total,
            "online_seconds": self.online_seconds,
            "offline_seconds": self.offline_seconds,
            "transitions": {
                "to_online": self.transitions.to_online,
                "to_offline": self.transitions.to_offline,
            },
            "last_known_state": self.last_known_state,
            "last_sample_timestamp": self.last_sample_timestamp,
            "last_published_hour": self.last_published_hour,
            "publication_handle": self.publication_handle,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DailyStats":
        """Rebuild a record from its stored form, rejecting malformed data."""
        try:
            day_key = data["day_key"]
            if not isinstance(day_key, str) or not day_key:
                raise ValueError(f"bad day_key {day_key!r}")

            buckets: Dict[int, HourBucket] = {}
            for raw_hour, raw_bucket in data.get("hourly_buckets", {}).items():
                hour = int(raw_hour)
                if not 0 <= hour < HOURS_PER_DAY:
                    raise ValueError(f"hour out of range: {hour}")
                buckets[hour] = HourBucket(
                    sample_count=int(raw_bucket["sample_count"]),
                    player_sum=int(raw_bucket["player_sum"]),
                )

            raw_transitions = data.get("transitions") or {}
            last_state = data.get("last_known_state")
            if last_state is not None and not isinstance(last_state, bool):
                raise ValueError(f"bad last_known_state {last_state!r}")
            last_ts = data.get("last_sample_timestamp")
            if last_ts is not None:
                last_ts = float(last_ts)
                if not math.isfinite(last_ts):
                    raise ValueError(f"non-finite last_sample_timestamp {last_ts!r}")
            last_hour = data.get("last_published_hour")
            handle = data.get("publication_handle")

            return cls(
                day_key=day_key,
                hourly_buckets=buckets,
                player_sum_total=int(data.get("player_sum_total", 0)),
                player_sample_total=int(data.get("player_sample_total", 0)),
                online_seconds=int(data.get("online_seconds", 0)),
                offline_seconds=int(data.get("offline_seconds", 0)),
                transitions=TransitionCounts(
                    to_online=int(raw_transitions.get("to_online", 0)),
                    to_offline=int(raw_transitions.get("to_offline", 0)),
                ),
                last_known_state=last_state,
                last_sample_timestamp=last_ts,
                last_published_hour=int(last_hour) if last_hour is not None else None,
                publication_handle=str(handle) if handle is not None else None,
            )
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            raise PersistenceCorruption(f"malformed stats record: {e}") from e


@dataclass(frozen=True)
class DailySnapshot(_SummaryMixin):
    """Finalized, read-only view of one day's statistics."""
    day_key: str
    hourly_buckets: Mapping[int, HourTotals]
    player_sum_total: int
    player_sample_total: int
    online_seconds: int
    offline_seconds: int
    to_online: int
    to_offline: int
    last_known_state: Optional[bool] = None
    last_sample_timestamp: Optional[float] = None
    publication_handle: Optional[str] = None


@dataclass(frozen=True)
class RolloverResult:
    rolled_over: bool
    finalized_snapshot: Optional[DailySnapshot]
    new_stats: DailyStats
