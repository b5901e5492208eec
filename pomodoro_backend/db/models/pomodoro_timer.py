"""SQLAlchemy ORM model for pomodoro_timers table"""

from sqlalchemy import Column, Boolean, Integer, String, DateTime
from sqlalchemy.sql import func

from pomodoro_backend.db.base import Base


class PomodoroTimer(Base):
    """
    SQLAlchemy ORM model for the pomodoro_timers table.
    One row per user; holds the persisted anchor of the focus timer.

    Exactly one of start_time / remaining_time is set: start_time while
    the timer runs, remaining_time while it is paused.
    """
    __tablename__ = "pomodoro_timers"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # Owner (opaque user id from the session)
    user_id = Column(String, nullable=False, unique=True, index=True)

    # Phase flags
    is_running = Column(Boolean, nullable=False, default=False)
    is_resting = Column(Boolean, nullable=False, default=False)
    is_long_break = Column(Boolean, nullable=False, default=False)
    completed_pomodoros = Column(Integer, nullable=False, default=0)

    # Countdown anchor
    start_time = Column(DateTime(timezone=True), nullable=True)
    remaining_time = Column(Integer, nullable=True)

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
            f"<PomodoroTimer(user_id='{self.user_id}', running={self.is_running}, "
            f"resting={self.is_resting}, completed={self.completed_pomodoros})>"
        )
