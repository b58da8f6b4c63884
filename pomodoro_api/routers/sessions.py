import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.database import get_db
from pomodoro_api.dependencies import get_current_user
from pomodoro_api.models.user import User
from pomodoro_api.schemas.session import (
    PomodoroSessionCreate,
    PomodoroSessionResponse,
    PomodoroSessionUpdate,
)
from pomodoro_api.services import session_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=list[PomodoroSessionResponse])
async def list_sessions(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.get_sessions(
        db, user.id, limit=limit, offset=offset,
        start_date=start_date, end_date=end_date,
    )


@router.post("", response_model=PomodoroSessionResponse, status_code=201)
async def create_session(
    data: PomodoroSessionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.create_session(db, user.id, data.model_dump())


@router.patch("/{session_id}", response_model=PomodoroSessionResponse)
async def update_session(
    session_id: uuid.UUID,
    data: PomodoroSessionUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session = await session_service.update_session(
        db, user.id, session_id, data.model_dump(exclude_unset=True)
    )
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return session


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    deleted = await session_service.delete_session(db, user.id, session_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
