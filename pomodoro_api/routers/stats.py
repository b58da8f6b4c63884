from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.analytics import TimeRange
from pomodoro_api.database import get_db
from pomodoro_api.dependencies import get_current_user
from pomodoro_api.models.user import User
from pomodoro_api.schemas.stats import (
    RangeActivityResponse,
    StatsComputeRequest,
    StatsResponse,
)
from pomodoro_api.services import stats_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
async def get_stats(
    tz: str | None = Query(default=None, max_length=64),
    heatmap_days: int | None = Query(default=None, ge=1, le=366),
    include_incomplete: bool | None = Query(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await stats_service.get_stats(
        db,
        user.id,
        now=datetime.now(timezone.utc),
        tz_name=tz,
        heatmap_days=heatmap_days,
        include_incomplete=include_incomplete,
    )


@router.get("/activity", response_model=RangeActivityResponse)
async def get_activity(
    time_range: TimeRange = Query(default=TimeRange.LAST_7_DAYS, alias="range"),
    tz: str | None = Query(default=None, max_length=64),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await stats_service.get_range_activity(
        db, user.id, time_range, now=datetime.now(timezone.utc), tz_name=tz
    )


@router.post("/compute", response_model=StatsResponse)
async def compute_stats(
    data: StatsComputeRequest,
    user: User = Depends(get_current_user),
):
    """Recompute a snapshot from a session list the client already holds."""
    return stats_service.compute_from_client(
        data.sessions,
        data.now,
        tz_name=data.tz,
        heatmap_days=data.heatmap_days,
        include_incomplete=data.include_incomplete,
    )
