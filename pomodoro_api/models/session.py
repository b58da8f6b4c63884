import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pomodoro_api.analytics.dates import ensure_aware, round_half_up
from pomodoro_api.models.base import Base


class PomodoroSession(Base):
    __tablename__ = "pomodoro_sessions"

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    task: Mapped[str | None] = mapped_column(String(255))
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="pomodoro_sessions")  # noqa: F821

    @property
    def duration_minutes(self) -> int:
        """Whole minutes between start and end; may be negative for bad rows."""
        if self.end_time is None:
            return 0
        delta = ensure_aware(self.end_time) - ensure_aware(self.start_time)
        return round_half_up(delta.total_seconds() / 60)
