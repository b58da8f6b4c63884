import logging
import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.analytics import (
    SessionRecord,
    StatsSnapshot,
    TimeRange,
    activity_buckets,
    compute_snapshot,
    format_duration,
)
from pomodoro_api.analytics.dates import ensure_aware, resolve_timezone
from pomodoro_api.config import settings
from pomodoro_api.services import session_service

logger = logging.getLogger(__name__)


def localize(now: datetime, tz_name: str | None) -> datetime:
    """Express ``now`` in the user's timezone so calendar days are local."""
    return ensure_aware(now).astimezone(resolve_timezone(tz_name or settings.STATS_DEFAULT_TIMEZONE))


def snapshot_payload(snapshot: StatsSnapshot) -> dict:
    payload = snapshot.to_dict()
    payload["total_focus_time_label"] = format_duration(snapshot.total_focus_minutes)
    return payload


def build_snapshot(
    records: list[SessionRecord],
    now: datetime,
    tz_name: str | None = None,
    heatmap_days: int | None = None,
    include_incomplete: bool | None = None,
) -> dict:
    if include_incomplete is None:
        include_incomplete = settings.STATS_INCLUDE_INCOMPLETE_IN_TOTALS

    snapshot = compute_snapshot(
        records,
        localize(now, tz_name),
        include_incomplete_in_totals=include_incomplete,
        heatmap_days=heatmap_days or settings.STATS_HEATMAP_DAYS,
    )
    if snapshot.warnings:
        logger.warning(
            "Stats computed with %d skipped session(s)", len(snapshot.warnings)
        )
    return snapshot_payload(snapshot)


async def _load_records(db: AsyncSession, user_id: uuid.UUID) -> list[SessionRecord]:
    rows = await session_service.get_all_sessions(db, user_id)
    return [SessionRecord.from_row(row) for row in rows]


async def get_stats(
    db: AsyncSession,
    user_id: uuid.UUID,
    now: datetime,
    tz_name: str | None = None,
    heatmap_days: int | None = None,
    include_incomplete: bool | None = None,
) -> dict:
    records = await _load_records(db, user_id)
    return build_snapshot(
        records,
        now,
        tz_name=tz_name,
        heatmap_days=heatmap_days,
        include_incomplete=include_incomplete,
    )


async def get_range_activity(
    db: AsyncSession,
    user_id: uuid.UUID,
    time_range: TimeRange | str,
    now: datetime,
    tz_name: str | None = None,
) -> dict:
    time_range = TimeRange.coerce(time_range)
    records = await _load_records(db, user_id)
    activity = activity_buckets(records, time_range, localize(now, tz_name))
    return {
        "range": activity.range,
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


def compute_from_client(
    sessions: list[dict],
    now: datetime,
    tz_name: str | None = None,
    heatmap_days: int | None = None,
    include_incomplete: bool | None = None,
) -> dict:
    """Run the same engine over a session list supplied by the dashboard."""
    records = [SessionRecord.from_mapping(item) for item in sessions]
    return build_snapshot(
        records,
        now,
        tz_name=tz_name,
        heatmap_days=heatmap_days,
        include_incomplete=include_incomplete,
    )
