from .server_tracker import ServerTracker
from .settings import Settings
from .stats_store import StatsStore
from .aggregator import Aggregator
from .rollover import RolloverController
from .hourly_gate import HourlyGate
from .checker import StatusChecker
from .clock import Clock
from .errors import (
    TrackerError, PersistenceCorruption, PersistenceWriteFailure, InvalidSample, ReportingError,
)
from .models import (
    ServerStatus, Sample, HourBucket, HourTotals, TransitionCounts,
    DailyStats, DailySnapshot, RolloverResult,
)

__all__ = [
    'ServerTracker',
    'Settings',
    'StatsStore',
    'Aggregator',
    'RolloverController',
    'HourlyGate',
    'StatusChecker',
    'Clock',
    'TrackerError',
    'PersistenceCorruption',
    'PersistenceWriteFailure',
    'InvalidSample',
    'ReportingError',
    'ServerStatus',
    'Sample',
    'HourBucket',
    'HourTotals',
    'TransitionCounts',
    'DailyStats',
    'DailySnapshot',
    'RolloverResult',
]
