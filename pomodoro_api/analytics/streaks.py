from collections.abc import Iterable
from datetime import datetime, timedelta, tzinfo

from pomodoro_api.analytics.dates import (
    DAY_NAMES,
    local_date,
    parse_minutes,
    reference_timezone,
    weekday_index,
)
from pomodoro_api.analytics.records import (
    MostProductiveDay,
    SessionRecord,
    TimedSession,
    timed_sessions,
)


def current_streak_days(
    sessions: Iterable[SessionRecord | TimedSession], now: datetime
) -> int:
    """Consecutive local days, ending today, with at least one completed session.

    A day without a completed session today means a streak of 0; there is
    no grace period for a day that has not started yet.
    """
    tz = reference_timezone(now)
    completed_dates = {
        local_date(s.start, tz) for s in timed_sessions(sessions) if s.completed
    }

    streak = 0
    expected = local_date(now, tz)
    while expected in completed_dates:
        streak += 1
        expected -= timedelta(days=1)
    return streak


def longest_session_minutes(sessions: Iterable[SessionRecord | TimedSession]) -> float:
    longest = 0.0
    for s in sessions:
        if isinstance(s, TimedSession):
            minutes = s.minutes
        else:
            try:
                minutes = parse_minutes(s.duration_minutes)
            except ValueError:
                continue
        longest = max(longest, minutes)
    return longest


def most_productive_day(
    sessions: Iterable[SessionRecord | TimedSession],
    tz: tzinfo,
    *,
    include_incomplete: bool = True,
) -> MostProductiveDay:
    """Weekday with the largest total focus minutes over the whole history.

    Ties go to the earliest day of the week (Sunday first).
    """
    totals = [0.0] * 7
    for s in timed_sessions(sessions):
        if not include_incomplete and not s.completed:
            continue
        totals[weekday_index(local_date(s.start, tz))] += s.minutes

    best = max(range(7), key=lambda idx: (totals[idx], -idx))
    if totals[best] <= 0:
        return MostProductiveDay()
    return MostProductiveDay(day=DAY_NAMES[best], minutes=totals[best])
