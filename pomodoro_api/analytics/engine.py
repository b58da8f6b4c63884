import logging
from collections.abc import Mapping, Sequence
from datetime import datetime

from pomodoro_api.analytics.bucketing import activity_buckets
from pomodoro_api.analytics.dates import (
    ensure_aware,
    parse_minutes,
    reference_timezone,
    round_half_up,
)
from pomodoro_api.analytics.errors import InvalidInputError
from pomodoro_api.analytics.heatmap import DEFAULT_DAYS, activity_heatmap
from pomodoro_api.analytics.records import (
    SessionRecord,
    StatsSnapshot,
    TimeRange,
    timed_sessions,
)
from pomodoro_api.analytics.streaks import (
    current_streak_days,
    longest_session_minutes,
    most_productive_day,
)
from pomodoro_api.analytics.trends import completion_trend

logger = logging.getLogger(__name__)


def compute_snapshot(
    sessions: Sequence[SessionRecord],
    now: datetime,
    *,
    include_incomplete_in_totals: bool = True,
    heatmap_days: int = DEFAULT_DAYS,
) -> StatsSnapshot:
    """Compute every dashboard statistic for one user's session history.

    Malformed records (unparsable start, negative duration) are counted in
    ``total_sessions`` but left out of every date-based figure; each one
    adds a message to ``warnings`` instead of failing the computation.

    ``include_incomplete_in_totals`` decides whether interrupted sessions
    contribute to focus minutes, the average duration and the most
    productive day.
    """
    if isinstance(sessions, (str, bytes, Mapping)) or not isinstance(sessions, Sequence):
        raise InvalidInputError(
            f"sessions must be a sequence of records, got {type(sessions).__name__}"
        )
    if not isinstance(now, datetime):
        raise InvalidInputError("now must be a datetime")

    records = tuple(sessions)
    if not all(isinstance(r, SessionRecord) for r in records):
        raise InvalidInputError("sessions must contain only SessionRecord items")
    now = ensure_aware(now)
    tz = reference_timezone(now)

    warnings: list[str] = []
    timed = timed_sessions(records, warnings)
    for message in warnings:
        logger.warning("Skipping malformed session in stats: %s", message)

    total = len(records)
    completed = sum(1 for r in records if r.completed)

    counted = [
        r for r in records if include_incomplete_in_totals or r.completed
    ]
    counted_minutes = [m for m in map(_minutes_or_none, counted) if m is not None]
    total_minutes = sum(counted_minutes)

    return StatsSnapshot(
        total_sessions=total,
        completed_sessions=completed,
        total_focus_minutes=total_minutes,
        completion_rate_percent=(
            round_half_up(completed / total * 100) if total else 0
        ),
        average_session_duration=(
            round_half_up(total_minutes / len(counted_minutes)) if counted_minutes else 0
        ),
        average_daily_sessions=round_half_up(total / 7, 2),
        current_streak_days=current_streak_days(timed, now),
        longest_session_minutes=longest_session_minutes(records),
        most_productive_day=most_productive_day(
            timed, tz, include_incomplete=include_incomplete_in_totals
        ),
        completion_trend=completion_trend(timed, now),
        activity_buckets={
            time_range: activity_buckets(timed, time_range, now)
            for time_range in TimeRange
        },
        activity_heatmap=activity_heatmap(timed, now, days=heatmap_days),
        generated_at=now,
        warnings=tuple(warnings),
    )


def _minutes_or_none(record: SessionRecord) -> float | None:
    try:
        return parse_minutes(record.duration_minutes)
    except ValueError:
        return None
