"""Request schemas for the timer API"""

from typing import Any, Optional

from pydantic import Field

from pomodoro_backend.config import (
    DEFAULT_POMODORO_MINUTES,
    DEFAULT_BREAK_MINUTES,
    DEFAULT_LONG_BREAK_MINUTES,
)
from pomodoro_backend.features.timer.domain import CamelModel


class TimerActionRequest(CamelModel):
    """
    Body of POST /timer.

    action is left untyped so missing, null, non-string and unknown values
    all reach the service and are rejected there with the same error. The
    durations let a client preview unsaved settings; is_long_break and
    completed_pomodoros are accepted for wire compatibility but the stored
    state wins.
    """
    action: Optional[Any] = None
    pomodoro_duration: int = Field(default=DEFAULT_POMODORO_MINUTES, gt=0)
    break_duration: int = Field(default=DEFAULT_BREAK_MINUTES, gt=0)
    long_break_duration: int = Field(default=DEFAULT_LONG_BREAK_MINUTES, gt=0)
    is_long_break: bool = False
    completed_pomodoros: int = Field(default=0, ge=0)


class TimerSettingsUpdate(CamelModel):
    """Body of POST /timer/settings - any subset of the allow-listed fields"""
    pomodoro_duration: Optional[int] = Field(default=None, gt=0)
    break_duration: Optional[int] = Field(default=None, gt=0)
    long_break_duration: Optional[int] = Field(default=None, gt=0)
    long_break_interval: Optional[int] = Field(default=None, ge=2)
    enable_long_break: Optional[bool] = None
    notification_sound: Optional[str] = None
    mute: Optional[bool] = None
