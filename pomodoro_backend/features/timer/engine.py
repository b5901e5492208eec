"""
Pomodoro timer state engine.

Pure functions over (state, settings, now). Nothing here touches the
database or the clock: the caller supplies `now` and persists the result.
Elapsed time is always recomputed from the persisted start_time anchor,
so no process has to keep a live countdown.
"""

import logging
from datetime import datetime, timedelta
from typing import Tuple

from pomodoro_backend.features.timer.domain import TimerAction, TimerSettings, TimerState
from pomodoro_backend.utils.datetime_helper import elapsed_seconds, ensure_utc

logger = logging.getLogger(__name__)


def phase_length(is_resting: bool, is_long_break: bool, settings: TimerSettings) -> int:
    """Full length in seconds of the phase described by the two flags"""
    if not is_resting:
        return settings.work_seconds
    return settings.long_rest_seconds if is_long_break else settings.rest_seconds


def active_phase_length(state: TimerState, settings: TimerSettings) -> int:
    """Full length in seconds of the state's current phase"""
    return phase_length(state.is_resting, state.is_long_break, settings)


def compute_time_left(state: TimerState, settings: TimerSettings, now: datetime) -> int:
    """
    Seconds left in the current phase, as shown in a snapshot.

    Running timers count down from start_time with elapsed time floored to
    whole seconds and clamped at zero. Paused timers report the frozen
    remaining_time, or the full phase length if none was stored.
    """
    length = active_phase_length(state, settings)
    if state.is_running and state.start_time is not None:
        return max(0, length - elapsed_seconds(state.start_time, now))
    if state.remaining_time is not None:
        return max(0, state.remaining_time)
    return length


def toggle(state: TimerState, settings: TimerSettings, now: datetime) -> TimerState:
    """Pause a running timer or resume a paused one"""
    length = active_phase_length(state, settings)

    if state.is_running:
        elapsed = elapsed_seconds(state.start_time, now) if state.start_time else 0
        return state.model_copy(update={
            "is_running": False,
            "start_time": None,
            "remaining_time": max(0, length - elapsed),
        })

    remaining = state.remaining_time if state.remaining_time is not None else length
    # Synthetic anchor: as if the phase had started (length - remaining) seconds ago
    start_time = ensure_utc(now) - timedelta(seconds=length - remaining)
    return state.model_copy(update={
        "is_running": True,
        "start_time": start_time,
        "remaining_time": None,
    })


def reset(state: TimerState, settings: TimerSettings, now: datetime) -> TimerState:
    """Return to a paused work phase with the counter cleared"""
    return state.model_copy(update={
        "is_running": False,
        "is_resting": False,
        "is_long_break": False,
        "completed_pomodoros": 0,
        "start_time": None,
        "remaining_time": settings.work_seconds,
    })


def advance_phase(state: TimerState, settings: TimerSettings) -> TimerState:
    """
    Flip between work and rest, stopping the timer.

    Leaving a work phase counts a completed pomodoro; the following rest is
    a long break when long breaks are enabled and the new count is a
    multiple of the interval. Leaving a rest phase always clears the flag.
    """
    completed = state.completed_pomodoros
    if not state.is_resting:
        completed += 1
        interval = max(1, settings.long_break_interval)
        is_long_break = settings.enable_long_break and completed % interval == 0
        logger.debug(
            f"Work phase ended: completed={completed}, interval={interval}, "
            f"enable_long_break={settings.enable_long_break}, long_break={is_long_break}"
        )
    else:
        is_long_break = False

    is_resting = not state.is_resting
    return state.model_copy(update={
        "is_running": False,
        "is_resting": is_resting,
        "is_long_break": is_long_break,
        "completed_pomodoros": completed,
        "start_time": None,
        "remaining_time": phase_length(is_resting, is_long_break, settings),
    })


def skip(state: TimerState, settings: TimerSettings, now: datetime) -> TimerState:
    """User ends the current phase early"""
    return advance_phase(state, settings)


def finish(state: TimerState, settings: TimerSettings, now: datetime) -> TimerState:
    """The current phase's countdown reached zero"""
    return advance_phase(state, settings)


_TRANSITIONS = {
    TimerAction.TOGGLE: toggle,
    TimerAction.RESET: reset,
    TimerAction.SKIP: skip,
    TimerAction.FINISH: finish,
}


def apply_action(
    state: TimerState,
    action: TimerAction,
    settings: TimerSettings,
    now: datetime,
) -> Tuple[TimerState, int]:
    """
    Apply an action and compute the resulting time left.

    Args:
        state: Current persisted state
        action: Action to apply
        settings: Durations and long break cadence to use for this call
        now: Reference time

    Returns:
        (new_state, time_left)
    """
    new_state = _TRANSITIONS[action](state, settings, now)
    return new_state, compute_time_left(new_state, settings, now)
