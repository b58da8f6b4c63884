from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime

from pomodoro_api.analytics.dates import date_range, local_date, reference_timezone
from pomodoro_api.analytics.records import (
    HeatmapEntry,
    SessionRecord,
    TimedSession,
    timed_sessions,
)

DEFAULT_DAYS = 30


def activity_heatmap(
    sessions: Iterable[SessionRecord | TimedSession],
    now: datetime,
    days: int = DEFAULT_DAYS,
) -> tuple[HeatmapEntry, ...]:
    """Per-day session count and minutes for the ``days`` local dates ending today.

    Every date in the window is present, including days with no sessions.
    """
    if days < 1:
        raise ValueError("Heatmap needs at least one day")

    tz = reference_timezone(now)
    window = date_range(local_date(now, tz), days)
    first, last = window[0], window[-1]

    counts: dict = defaultdict(int)
    minutes: dict = defaultdict(float)
    for s in timed_sessions(sessions):
        day = local_date(s.start, tz)
        if first <= day <= last:
            counts[day] += 1
            minutes[day] += s.minutes

    return tuple(
        HeatmapEntry(date=day, count=counts[day], minutes=minutes[day])
        for day in window
    )
