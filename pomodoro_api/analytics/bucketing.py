from collections.abc import Iterable
from datetime import datetime, tzinfo

from pomodoro_api.analytics.dates import (
    DAY_NAMES,
    ensure_aware,
    reference_timezone,
    weekday_index,
)
from pomodoro_api.analytics.records import (
    ActivityBuckets,
    DayBucket,
    SessionRecord,
    TimedSession,
    TimeRange,
    timed_sessions,
)


def filter_by_range(
    sessions: Iterable[SessionRecord | TimedSession],
    time_range: TimeRange | str,
    now: datetime,
) -> list[TimedSession]:
    """Sessions starting at or after ``now`` minus the range window.

    ``ALL_TIME`` keeps every session that can be placed in time. Records
    with an unparsable start are never part of any range.
    """
    time_range = TimeRange.coerce(time_range)
    timed = timed_sessions(sessions)
    window = time_range.window
    if window is None:
        return timed

    cutoff = ensure_aware(now) - window
    return [s for s in timed if s.start >= cutoff]


def bucket_by_weekday(
    filtered: Iterable[SessionRecord | TimedSession], tz: tzinfo
) -> tuple[DayBucket, ...]:
    """Collapse sessions into seven weekday buckets, Sunday first.

    Grouping is by local weekday name, so sessions from different calendar
    weeks share a bucket. Days without sessions are still present.
    """
    counts = [0] * 7
    minutes = [0.0] * 7
    for s in timed_sessions(filtered):
        idx = weekday_index(s.start.astimezone(tz).date())
        counts[idx] += 1
        minutes[idx] += s.minutes

    return tuple(
        DayBucket(
            day_name=DAY_NAMES[idx],
            day_index=idx,
            session_count=counts[idx],
            focus_minutes=minutes[idx],
        )
        for idx in range(7)
    )


def activity_buckets(
    sessions: Iterable[SessionRecord | TimedSession],
    time_range: TimeRange | str,
    now: datetime,
) -> ActivityBuckets:
    time_range = TimeRange.coerce(time_range)
    filtered = filter_by_range(sessions, time_range, now)
    return ActivityBuckets(
        range=time_range,
        buckets=bucket_by_weekday(filtered, reference_timezone(now)),
        is_empty=not filtered,
    )
