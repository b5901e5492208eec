"""Pomodoro timer feature module"""

from pomodoro_backend.features.timer.domain import (
    TimerAction,
    TimerSettings,
    TimerSnapshot,
    TimerState,
    UserTimerSettings,
)
from pomodoro_backend.features.timer.exceptions import (
    TimerError,
    InvalidActionError,
    PersistenceError,
)

__all__ = [
    "TimerAction",
    "TimerSettings",
    "TimerSnapshot",
    "TimerState",
    "UserTimerSettings",
    "TimerError",
    "InvalidActionError",
    "PersistenceError",
]
