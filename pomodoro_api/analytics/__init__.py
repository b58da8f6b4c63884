"""Session analytics: pure functions from session records to dashboard stats.

Nothing in this package performs I/O or reads the clock; the reference
instant ``now`` is always passed in by the caller.
"""
from pomodoro_api.analytics.bucketing import (
    activity_buckets,
    bucket_by_weekday,
    filter_by_range,
)
from pomodoro_api.analytics.dates import format_duration
from pomodoro_api.analytics.engine import compute_snapshot
from pomodoro_api.analytics.errors import (
    AnalyticsError,
    InvalidInputError,
    InvalidRangeError,
    MalformedRecordError,
)
from pomodoro_api.analytics.heatmap import activity_heatmap
from pomodoro_api.analytics.records import (
    ActivityBuckets,
    CompletionTrend,
    DayBucket,
    HeatmapEntry,
    MostProductiveDay,
    SessionRecord,
    StatsSnapshot,
    TimeRange,
)
from pomodoro_api.analytics.streaks import (
    current_streak_days,
    longest_session_minutes,
    most_productive_day,
)
from pomodoro_api.analytics.trends import completion_trend, percent_change

__all__ = [
    "ActivityBuckets",
    "AnalyticsError",
    "CompletionTrend",
    "DayBucket",
    "HeatmapEntry",
    "InvalidInputError",
    "InvalidRangeError",
    "MalformedRecordError",
    "MostProductiveDay",
    "SessionRecord",
    "StatsSnapshot",
    "TimeRange",
    "activity_buckets",
    "activity_heatmap",
    "bucket_by_weekday",
    "completion_trend",
    "compute_snapshot",
    "current_streak_days",
    "filter_by_range",
    "format_duration",
    "longest_session_minutes",
    "most_productive_day",
    "percent_change",
]
