import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.config import settings
from pomodoro_api.models.session import PomodoroSession


def _clean_task(task: str | None) -> str:
    if task and task.strip():
        return task.strip()
    return settings.DEFAULT_TASK_NAME


async def get_sessions(
    db: AsyncSession,
    user_id: uuid.UUID,
    limit: int | None = 50,
    offset: int = 0,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[PomodoroSession]:
    query = select(PomodoroSession).where(PomodoroSession.user_id == user_id)
    if start_date:
        query = query.where(PomodoroSession.start_time >= start_date)
    if end_date:
        query = query.where(PomodoroSession.start_time <= end_date)
    query = query.order_by(PomodoroSession.start_time.desc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_all_sessions(db: AsyncSession, user_id: uuid.UUID) -> list[PomodoroSession]:
    """Full history for the statistics dashboard."""
    return await get_sessions(db, user_id, limit=None)


async def create_session(db: AsyncSession, user_id: uuid.UUID, data: dict) -> PomodoroSession:
    start = data.get("start_time") or datetime.now(timezone.utc)
    end = data.get("end_time") or start + timedelta(minutes=settings.DEFAULT_SESSION_MINUTES)

    session = PomodoroSession(
        user_id=user_id,
        start_time=start,
        end_time=end,
        task=_clean_task(data.get("task")),
        completed=bool(data.get("completed")),
    )
    db.add(session)
    await db.flush()
    await db.refresh(session)
    return session


async def _get_owned(
    db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID
) -> PomodoroSession | None:
    result = await db.execute(
        select(PomodoroSession).where(
            PomodoroSession.id == session_id, PomodoroSession.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def update_session(
    db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID, data: dict
) -> PomodoroSession | None:
    session = await _get_owned(db, user_id, session_id)
    if session is None:
        return None

    for key, value in data.items():
        if value is None:
            continue
        if key == "task":
            value = _clean_task(value)
        setattr(session, key, value)
    session.updated_at = datetime.now(timezone.utc)

    await db.flush()
    await db.refresh(session)
    return session


async def delete_session(
    db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID
) -> bool:
    session = await _get_owned(db, user_id, session_id)
    if session is None:
        return False
    await db.delete(session)
    await db.flush()
    return True
