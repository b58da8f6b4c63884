from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from pomodoro_api.analytics import TimeRange


class DayBucketResponse(BaseModel):
    day_name: str
    day_index: int  # 0=Sunday, 6=Saturday
    session_count: int
    focus_minutes: float


class ActivityBucketsResponse(BaseModel):
    is_empty: bool
    buckets: list[DayBucketResponse]


class RangeActivityResponse(ActivityBucketsResponse):
    range: TimeRange


class HeatmapEntryResponse(BaseModel):
    date: date
    count: int
    minutes: float


class MostProductiveDayResponse(BaseModel):
    day: str
    minutes: float


class CompletionTrendResponse(BaseModel):
    current_week: int
    previous_week: int
    percent_change: float


class StatsResponse(BaseModel):
    total_sessions: int
    completed_sessions: int
    total_focus_minutes: float
    total_focus_time_label: str
    completion_rate_percent: int
    average_session_duration: int
    average_daily_sessions: float
    current_streak_days: int
    longest_session_minutes: float
    most_productive_day: MostProductiveDayResponse
    completion_trend: CompletionTrendResponse
    activity_buckets: dict[TimeRange, ActivityBucketsResponse]
    activity_heatmap: list[HeatmapEntryResponse]
    generated_at: datetime
    warnings: list[str]


class StatsComputeRequest(BaseModel):
    """Session list recomputed on behalf of a client that already holds it."""

    sessions: list[dict[str, Any]] = Field(max_length=10000)
    now: datetime
    tz: str | None = None
    heatmap_days: int = Field(default=30, ge=1, le=366)
    include_incomplete: bool | None = None
