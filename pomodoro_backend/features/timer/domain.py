"""Domain models for the Pomodoro timer feature"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pomodoro_backend.config import (
    DEFAULT_POMODORO_MINUTES,
    DEFAULT_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_INTERVAL,
    DEFAULT_NOTIFICATION_SOUND,
)
from pomodoro_backend.utils.datetime_helper import ensure_utc


class TimerAction(str, Enum):
    """Actions accepted by the timer service"""
    TOGGLE = "toggle"
    RESET = "reset"
    SKIP = "skip"
    FINISH = "finish"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimerSettings(CamelModel):
    """Per-user timer configuration (durations in minutes)"""
    pomodoro_duration: int = DEFAULT_POMODORO_MINUTES
    break_duration: int = DEFAULT_BREAK_MINUTES
    long_break_duration: int = DEFAULT_LONG_BREAK_MINUTES
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL
    enable_long_break: bool = True
    notification_sound: str = DEFAULT_NOTIFICATION_SOUND
    mute: bool = False

    @property
    def work_seconds(self) -> int:
        return max(1, self.pomodoro_duration * 60)

    @property
    def rest_seconds(self) -> int:
        return max(1, self.break_duration * 60)

    @property
    def long_rest_seconds(self) -> int:
        return max(1, self.long_break_duration * 60)


class UserTimerSettings(TimerSettings):
    """Stored settings record returned by the settings endpoint"""
    user_id: str


class TimerState(CamelModel):
    """
    Persisted timer state for one user.

    While running, start_time is the anchor elapsed time is measured from
    and remaining_time is None. While paused, remaining_time holds the
    frozen countdown and start_time is None.
    """
    user_id: str
    is_running: bool = False
    is_resting: bool = False
    is_long_break: bool = False
    completed_pomodoros: int = Field(default=0, ge=0)
    start_time: Optional[datetime] = None
    remaining_time: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("start_time", "created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    def persisted_fields(self) -> dict:
        """Column values written back in a single update"""
        return self.model_dump(
            include={
                "is_running",
                "is_resting",
                "is_long_break",
                "completed_pomodoros",
                "start_time",
                "remaining_time",
            }
        )


class TimerSnapshot(TimerState):
    """Timer state merged with computed time left and client-facing settings"""
    time_left: int
    enable_long_break: bool
    long_break_interval: int
