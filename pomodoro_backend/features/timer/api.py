"""Pomodoro timer API endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_backend.db import get_db
from pomodoro_backend.auth import get_current_user_id
from pomodoro_backend.features.timer.domain import TimerSnapshot, UserTimerSettings
from pomodoro_backend.features.timer.exceptions import InvalidActionError, PersistenceError
from pomodoro_backend.features.timer.schemas import TimerActionRequest, TimerSettingsUpdate
from pomodoro_backend.features.timer.service import TimerService

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/timer", tags=["timer"])


@router.get("", response_model=TimerSnapshot)
async def get_timer(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the current timer snapshot for the authenticated user.

    The state and settings are created with defaults on first access.
    time_left is recomputed from the stored start time on every call.
    """
    try:
        service = TimerService(db)
        return await service.get_snapshot(user_id)

    except PersistenceError as e:
        logger.error(f"Error fetching timer state for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch timer state")


@router.post("", response_model=TimerSnapshot)
async def post_timer_action(
    request: TimerActionRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply a timer action: toggle, reset, skip or finish.

    Durations in the body override the stored settings for this call.

    Raises:
        400: Unknown action
        500: Database error while loading or saving the state
    """
    try:
        service = TimerService(db)
        return await service.perform_action(user_id, request)

    except InvalidActionError as e:
        logger.error(f"Unknown timer action from user {user_id}: {e.action!r}")
        raise HTTPException(status_code=400, detail="Invalid action specified")
    except PersistenceError as e:
        logger.error(f"Error updating timer state for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update timer state")


@router.get("/settings", response_model=UserTimerSettings)
async def get_timer_settings(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Get the authenticated user's timer settings, creating defaults if missing"""
    try:
        service = TimerService(db)
        return await service.get_settings(user_id)

    except PersistenceError as e:
        logger.error(f"Error fetching timer settings for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch timer settings")


@router.post("/settings", response_model=UserTimerSettings)
async def post_timer_settings(
    update: TimerSettingsUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Upsert the authenticated user's timer settings.

    Only pomodoroDuration, breakDuration, longBreakDuration,
    longBreakInterval, enableLongBreak, notificationSound and mute are
    written; other keys are ignored.
    """
    try:
        service = TimerService(db)
        return await service.update_settings(user_id, update)

    except PersistenceError as e:
        logger.error(f"Error saving timer settings for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save timer settings")
