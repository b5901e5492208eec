"""Business logic for the Pomodoro timer"""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_backend.features.timer import engine
from pomodoro_backend.features.timer.domain import (
    TimerAction,
    TimerSettings,
    TimerSnapshot,
    TimerState,
    UserTimerSettings,
)
from pomodoro_backend.features.timer.exceptions import InvalidActionError
from pomodoro_backend.features.timer.repository import TimerRepository
from pomodoro_backend.features.timer.schemas import TimerActionRequest, TimerSettingsUpdate
from pomodoro_backend.utils.datetime_helper import utc_now

logger = logging.getLogger(__name__)


def parse_action(action: Any) -> TimerAction:
    """Map a wire action string to a TimerAction, rejecting anything else"""
    if not isinstance(action, str):
        raise InvalidActionError(action)
    try:
        return TimerAction(action)
    except ValueError:
        raise InvalidActionError(action)


def build_snapshot(
    state: TimerState,
    settings: TimerSettings,
    now: datetime,
    time_left: Optional[int] = None,
) -> TimerSnapshot:
    """Merge state, computed time left and the settings a client needs"""
    if time_left is None:
        time_left = engine.compute_time_left(state, settings, now)
    return TimerSnapshot(
        **state.model_dump(),
        time_left=time_left,
        enable_long_break=settings.enable_long_break,
        long_break_interval=settings.long_break_interval,
    )


class TimerService:
    """Service layer for the Pomodoro timer and its settings"""

    def __init__(self, db: AsyncSession):
        self.repository = TimerRepository(db)

    async def get_snapshot(self, user_id: str, now: Optional[datetime] = None) -> TimerSnapshot:
        """
        Current timer snapshot for a user.

        Creates the state and settings on first access; otherwise read-only.

        Args:
            user_id: The authenticated user ID
            now: Reference time (defaults to the current UTC time)

        Returns:
            TimerSnapshot with time_left computed from the stored anchor
        """
        now = now or utc_now()
        settings = await self.repository.get_or_create_settings(user_id)
        state = await self.repository.get_or_create_state(user_id, settings)
        return build_snapshot(state, settings, now)

    async def perform_action(
        self,
        user_id: str,
        request: TimerActionRequest,
        now: Optional[datetime] = None,
    ) -> TimerSnapshot:
        """
        Apply a timer action and persist the result.

        Business rules:
        - Durations come from the request so unsaved settings can be previewed
        - Long break cadence (enable flag and interval) comes from stored settings
        - The stored state is authoritative over the request's phase fields
        - The complete new state is written in one update

        Args:
            user_id: The authenticated user ID
            request: Action and duration overrides
            now: Reference time (defaults to the current UTC time)

        Returns:
            TimerSnapshot after the transition

        Raises:
            InvalidActionError: If the action is not recognised
            PersistenceError: If the state could not be loaded or written
        """
        action = parse_action(request.action)
        now = now or utc_now()

        stored_settings = await self.repository.get_or_create_settings(user_id)
        effective_settings = TimerSettings(
            pomodoro_duration=request.pomodoro_duration,
            break_duration=request.break_duration,
            long_break_duration=request.long_break_duration,
            long_break_interval=stored_settings.long_break_interval,
            enable_long_break=stored_settings.enable_long_break,
        )

        current = await self.repository.get_or_create_state(user_id, stored_settings)
        new_state, time_left = engine.apply_action(current, action, effective_settings, now)
        saved = await self.repository.update_state(user_id, new_state.persisted_fields())

        logger.info(
            f"Timer action '{action.value}' for user {user_id}: "
            f"resting {current.is_resting}->{saved.is_resting}, "
            f"running {current.is_running}->{saved.is_running}, "
            f"completed={saved.completed_pomodoros}, long_break={saved.is_long_break}"
        )
        return build_snapshot(saved, effective_settings, now, time_left)

    async def get_settings(self, user_id: str) -> UserTimerSettings:
        """Stored settings for a user, created with defaults on first access"""
        return await self.repository.get_or_create_settings(user_id)

    async def update_settings(self, user_id: str, update: TimerSettingsUpdate) -> UserTimerSettings:
        """Upsert only the fields present in the update"""
        patch = update.model_dump(exclude_unset=True, exclude_none=True)
        settings = await self.repository.upsert_settings(user_id, patch)
        logger.info(f"Updated timer settings for user {user_id}: {sorted(patch)}")
        return settings
