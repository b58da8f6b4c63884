from pomodoro_api.models.base import Base
from pomodoro_api.models.session import PomodoroSession
from pomodoro_api.models.user import User

__all__ = [
    "Base",
    "PomodoroSession",
    "User",
]
