"""SQLAlchemy ORM model for pomodoro_settings table"""

from sqlalchemy import Column, Boolean, Integer, String, DateTime, Text
from sqlalchemy.sql import func

from pomodoro_backend.config import (
    DEFAULT_POMODORO_MINUTES,
    DEFAULT_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_INTERVAL,
    DEFAULT_NOTIFICATION_SOUND,
)
from pomodoro_backend.db.base import Base


class PomodoroSettings(Base):
    """
    SQLAlchemy ORM model for the pomodoro_settings table.
    Per-user timer configuration; durations are in minutes.
    """
    __tablename__ = "pomodoro_settings"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(String, nullable=False, unique=True, index=True)

    # Durations (minutes)
    pomodoro_duration = Column(Integer, nullable=False, default=DEFAULT_POMODORO_MINUTES)
    break_duration = Column(Integer, nullable=False, default=DEFAULT_BREAK_MINUTES)
    long_break_duration = Column(Integer, nullable=False, default=DEFAULT_LONG_BREAK_MINUTES)

    # Long break cadence
    long_break_interval = Column(Integer, nullable=False, default=DEFAULT_LONG_BREAK_INTERVAL)
    enable_long_break = Column(Boolean, nullable=False, default=True)

    # Presentation preferences
    notification_sound = Column(Text, nullable=False, default=DEFAULT_NOTIFICATION_SOUND)
    mute = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<PomodoroSettings(user_id='{self.user_id}', "
            f"durations={self.pomodoro_duration}/{self.break_duration}/{self.long_break_duration})>"
        )
