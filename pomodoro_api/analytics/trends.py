from collections.abc import Iterable
from datetime import datetime, timedelta

from pomodoro_api.analytics.dates import ensure_aware, round_half_up
from pomodoro_api.analytics.records import (
    CompletionTrend,
    SessionRecord,
    TimedSession,
    timed_sessions,
)

WEEK = timedelta(days=7)


def percent_change(current: int, previous: int) -> float:
    # No baseline: any activity counts as a full 100% increase.
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up((current - previous) / previous * 100, 2)


def completion_trend(
    sessions: Iterable[SessionRecord | TimedSession], now: datetime
) -> CompletionTrend:
    """Completed sessions this week vs. the week before, relative to ``now``.

    The current week is ``[now - 7d, now]`` and the previous week is
    ``[now - 14d, now - 7d)``.
    """
    now = ensure_aware(now)
    week_start = now - WEEK
    previous_start = week_start - WEEK

    current = previous = 0
    for s in timed_sessions(sessions):
        if not s.completed:
            continue
        if week_start <= s.start <= now:
            current += 1
        elif previous_start <= s.start < week_start:
            previous += 1

    return CompletionTrend(
        current_week=current,
        previous_week=previous,
        percent_change=percent_change(current, previous),
    )
