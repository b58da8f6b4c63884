import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class PomodoroSessionCreate(BaseModel):
    start_time: datetime | None = None
    end_time: datetime | None = None
    task: str | None = Field(default=None, max_length=255)
    completed: bool = False


class PomodoroSessionUpdate(BaseModel):
    start_time: datetime | None = None
    end_time: datetime | None = None
    task: str | None = Field(default=None, max_length=255)
    completed: bool | None = None


class PomodoroSessionResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    start_time: datetime
    end_time: datetime | None
    task: str | None
    completed: bool
    duration: int = Field(validation_alias="duration_minutes")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
