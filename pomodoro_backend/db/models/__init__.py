"""SQLAlchemy ORM models"""

from pomodoro_backend.db.models.pomodoro_timer import PomodoroTimer
from pomodoro_backend.db.models.pomodoro_settings import PomodoroSettings

__all__ = ["PomodoroTimer", "PomodoroSettings"]
