import enum
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from pomodoro_api.analytics.dates import parse_instant, parse_minutes, round_half_up
from pomodoro_api.analytics.errors import InvalidRangeError, MalformedRecordError


class TimeRange(str, enum.Enum):
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    ALL_TIME = "all_time"

    @property
    def window(self) -> timedelta | None:
        """Look-back window, or None for an unbounded range."""
        if self is TimeRange.LAST_7_DAYS:
            return timedelta(days=7)
        if self is TimeRange.LAST_30_DAYS:
            return timedelta(days=30)
        return None

    @classmethod
    def coerce(cls, value: "TimeRange | str") -> "TimeRange":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRangeError(f"Unsupported time range: {value!r}") from None


@dataclass(frozen=True)
class SessionRecord:
    id: Any
    user_id: Any
    start_time: datetime | str | None
    duration_minutes: float
    completed: bool
    task: str | None = None

    @classmethod
    def from_row(cls, row) -> "SessionRecord":
        """Build a record from a stored ``PomodoroSession`` row."""
        return cls(
            id=row.id,
            user_id=row.user_id,
            start_time=row.start_time,
            duration_minutes=row.duration_minutes,
            completed=bool(row.completed),
            task=row.task,
        )

    @classmethod
    def from_mapping(cls, data: dict) -> "SessionRecord":
        """Build a record from a client-side JSON object.

        Accepts both the snake_case keys the API emits and the camelCase
        keys the dashboard uses. When no duration is given it is derived
        from ``start_time``/``end_time`` in whole minutes. Values are kept
        as supplied so that unparsable timestamps surface later as
        warnings instead of failing the whole payload.
        """
        start = _first(data, "start_time", "startTime", "created_at")
        duration = _first(data, "duration_minutes", "durationMinutes", "duration")
        if duration is None:
            duration = _derive_minutes(start, _first(data, "end_time", "endTime"))
        return cls(
            id=data.get("id"),
            user_id=_first(data, "user_id", "userId"),
            start_time=start,
            duration_minutes=duration,
            completed=_parse_flag(data.get("completed")),
            task=data.get("task"),
        )


def _parse_flag(value) -> bool:
    """Read a JSON completion flag; the strings "false" and "0" are false."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _first(data: dict, *keys: str):
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _derive_minutes(start, end) -> float:
    if start is None or end is None:
        return 0
    try:
        delta = parse_instant(end) - parse_instant(start)
    except ValueError:
        return 0
    return round_half_up(delta.total_seconds() / 60)


@dataclass(frozen=True)
class TimedSession:
    """A record whose start instant and duration have been validated."""

    record: SessionRecord
    start: datetime
    minutes: float

    @property
    def completed(self) -> bool:
        return self.record.completed


def validate(record: SessionRecord) -> TimedSession:
    try:
        minutes = parse_minutes(record.duration_minutes)
        start = parse_instant(record.start_time)
    except ValueError as exc:
        raise MalformedRecordError(record.id, str(exc)) from None
    return TimedSession(record=record, start=start, minutes=minutes)


def timed_sessions(sessions, warnings: list[str] | None = None) -> list[TimedSession]:
    """Validate records, dropping malformed ones.

    Already-validated ``TimedSession`` items pass through unchanged. When
    ``warnings`` is given, one message per dropped record is appended.
    """
    timed = []
    for item in sessions:
        if isinstance(item, TimedSession):
            timed.append(item)
            continue
        try:
            timed.append(validate(item))
        except MalformedRecordError as exc:
            if warnings is not None:
                warnings.append(str(exc))
    return timed


@dataclass(frozen=True)
class DayBucket:
    day_name: str
    day_index: int  # 0=Sunday .. 6=Saturday
    session_count: int = 0
    focus_minutes: float = 0


@dataclass(frozen=True)
class ActivityBuckets:
    range: TimeRange
    buckets: tuple[DayBucket, ...]
    is_empty: bool

    @property
    def total_sessions(self) -> int:
        return sum(b.session_count for b in self.buckets)


@dataclass(frozen=True)
class HeatmapEntry:
    date: date
    count: int = 0
    minutes: float = 0


@dataclass(frozen=True)
class MostProductiveDay:
    day: str = "N/A"
    minutes: float = 0


@dataclass(frozen=True)
class CompletionTrend:
    current_week: int = 0
    previous_week: int = 0
    percent_change: float = 0


@dataclass(frozen=True)
class StatsSnapshot:
    total_sessions: int
    completed_sessions: int
    total_focus_minutes: float
    completion_rate_percent: int
    average_session_duration: int
    average_daily_sessions: float
    current_streak_days: int
    longest_session_minutes: float
    most_productive_day: MostProductiveDay
    completion_trend: CompletionTrend
    activity_buckets: dict[TimeRange, ActivityBuckets]
    activity_heatmap: tuple[HeatmapEntry, ...]
    generated_at: datetime
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "total_sessions": self.total_sessions,
            "completed_sessions": self.completed_sessions,
            "total_focus_minutes": self.total_focus_minutes,
            "completion_rate_percent": self.completion_rate_percent,
            "average_session_duration": self.average_session_duration,
            "average_daily_sessions": self.average_daily_sessions,
            "current_streak_days": self.current_streak_days,
            "longest_session_minutes": self.longest_session_minutes,
            "most_productive_day": {
                "day": self.most_productive_day.day,
                "minutes": self.most_productive_day.minutes,
            },
            "completion_trend": {
                "current_week": self.completion_trend.current_week,
                "previous_week": self.completion_trend.previous_week,
                "percent_change": self.completion_trend.percent_change,
            },
            "activity_buckets": {
                time_range.value: {
                    "is_empty": activity.is_empty,
                    "buckets": [
                        {
                            "day_name": b.day_name,
                            "day_index": b.day_index,
                            "session_count": b.session_count,
                            "focus_minutes": b.focus_minutes,
                        }
                        for b in activity.buckets
                    ],
                }
                for time_range, activity in self.activity_buckets.items()
            },
            "activity_heatmap": [
                {"date": e.date.isoformat(), "count": e.count, "minutes": e.minutes}
                for e in self.activity_heatmap
            ],
            "generated_at": self.generated_at.isoformat(),
            "warnings": list(self.warnings),
        }
