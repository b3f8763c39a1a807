from datetime import datetime

import pytest

from tracker.core.errors import InvalidSample, PersistenceCorruption
from tracker.core.models import DailyStats, HourBucket, Sample, ServerStatus


def _status(**kwargs) -> ServerStatus:
    kwargs.setdefault("address", "play.example.net")
    kwargs.setdefault("timestamp", datetime(2024, 1, 1, 10, 0))
    return ServerStatus(**kwargs)


def test_sample_from_online_status_uses_player_count():
    sample = Sample.from_status(_status(online=True, players_online=12))

    assert sample == Sample(online=True, load=12)


def test_sample_from_offline_status_has_no_load():
    sample = Sample.from_status(_status(online=False, players_online=40))

    assert sample == Sample(online=False, load=0)


@pytest.mark.parametrize("players", [-1, "7", 2.5, None])
def test_sample_rejects_bad_player_count(players):
    with pytest.raises(InvalidSample):
        Sample.from_status(_status(online=True, players_online=players))


def test_sample_rejects_missing_online_flag():
    with pytest.raises(InvalidSample):
        Sample.from_status(_status(online=None))


def test_summary_views_without_samples():
    stats = DailyStats.fresh("2024-01-01")

    assert stats.daily_mean() == 0
    assert stats.peak_hourly_average() == 0
    assert stats.hourly_averages() == [None] * 24


def test_peak_uses_hourly_means_not_raw_samples():
    stats = DailyStats.fresh("2024-01-01")
    # One sample of 100 and one of 0 in the same hour: mean 50
    stats.hourly_buckets[14] = HourBucket(sample_count=2, player_sum=100)
    stats.hourly_buckets[15] = HourBucket(sample_count=1, player_sum=30)
    stats.player_sum_total = 130
    stats.player_sample_total = 3

    assert stats.peak_hourly_average() == 50
    assert stats.daily_mean() == pytest.approx(130 / 3)


def test_from_dict_fills_optional_fields():
    stats = DailyStats.from_dict({"day_key": "2024-01-01"})

    assert stats == DailyStats.fresh("2024-01-01")


def test_from_dict_rejects_missing_day():
    with pytest.raises(PersistenceCorruption):
        DailyStats.from_dict({"online_seconds": 10})


def test_from_dict_rejects_bad_bucket():
    with pytest.raises(PersistenceCorruption):
        DailyStats.from_dict({"day_key": "2024-01-01", "hourly_buckets": {"3": {"sample_count": 1}}})


@pytest.mark.parametrize("record", [
    {"day_key": "2024-01-01", "player_sum_total": float("inf")},
    {"day_key": "2024-01-01", "last_sample_timestamp": float("nan")},
    {"day_key": "2024-01-01", "last_sample_timestamp": float("-inf")},
])
def test_from_dict_rejects_non_finite_numbers(record):
    with pytest.raises(PersistenceCorruption):
        DailyStats.from_dict(record)
