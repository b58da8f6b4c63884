from typing import Any


class AnalyticsError(Exception):
    """Base class for errors raised by the analytics engine."""


class MalformedRecordError(AnalyticsError):
    """A single session record cannot be placed in time or has a bad duration."""

    def __init__(self, record_id: Any, reason: str):
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"session {record_id}: {reason}")


class InvalidRangeError(AnalyticsError, ValueError):
    pass


class InvalidInputError(AnalyticsError, TypeError):
    pass
