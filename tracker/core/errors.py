"""
Error categories raised inside the tracker.
Each category has one recovery action, applied where it is caught.
"""


class TrackerError(Exception):
    """Base class for tracker errors."""


class PersistenceCorruption(TrackerError):
    """Stored record is missing fields or cannot be parsed."""


class PersistenceWriteFailure(TrackerError):
    """Stored record could not be written."""


class InvalidSample(TrackerError):
    """Status sample rejected at the boundary."""


class ReportingError(TrackerError):
    """Reporting sink failed to deliver."""
