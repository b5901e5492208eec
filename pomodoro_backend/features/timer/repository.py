"""SQLAlchemy repository for Pomodoro timer state and settings"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# SQLAlchemy ORM models
from pomodoro_backend.db.models.pomodoro_timer import PomodoroTimer as PomodoroTimerORM
from pomodoro_backend.db.models.pomodoro_settings import PomodoroSettings as PomodoroSettingsORM

# Pydantic domain models (feature-local)
from pomodoro_backend.features.timer.domain import TimerSettings, TimerState, UserTimerSettings
from pomodoro_backend.features.timer.engine import active_phase_length
from pomodoro_backend.features.timer.exceptions import PersistenceError

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = (
    "pomodoro_duration",
    "break_duration",
    "long_break_duration",
    "long_break_interval",
    "enable_long_break",
    "notification_sound",
    "mute",
)


class TimerRepository:
    """Repository for per-user timer state and settings using SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    # ------------------------------------------------------------------
    # Timer state
    # ------------------------------------------------------------------

    async def get_state(self, user_id: str) -> Optional[TimerState]:
        """Fetch the user's timer state, or None if it was never created"""
        try:
            orm_timer = await self._fetch_timer(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load timer state for user {user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to load timer state") from e
        return TimerState.model_validate(orm_timer) if orm_timer else None

    async def create_state(self, user_id: str, defaults: TimerState) -> TimerState:
        """
        Insert the user's timer row.

        If a concurrent request inserted it first, the existing row is
        returned instead.
        """
        orm_timer = PomodoroTimerORM(user_id=user_id, **defaults.persisted_fields())
        try:
            self.db.add(orm_timer)
            await self.db.commit()
            await self.db.refresh(orm_timer)
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Timer state for user {user_id} was created concurrently; re-reading")
            existing = await self.get_state(user_id)
            if existing is None:
                raise PersistenceError("Failed to create timer state")
            return existing
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create timer state for user {user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to create timer state") from e

        logger.info(f"Created timer state for user {user_id}")
        return TimerState.model_validate(orm_timer)

    async def update_state(self, user_id: str, patch: Dict[str, Any]) -> TimerState:
        """
        Write the given columns in a single UPDATE and return the stored row.

        The update is one statement in one transaction, so concurrent
        writers resolve as last-write-wins without mixing fields.
        """
        try:
            stmt = (
                update(PomodoroTimerORM)
                .where(PomodoroTimerORM.user_id == user_id)
                .values(**patch)
                .execution_options(synchronize_session=False)
            )
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise PersistenceError(f"Timer state for user {user_id} does not exist")
            await self.db.commit()
            orm_timer = await self._fetch_timer(user_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update timer state for user {user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to update timer state") from e

        if orm_timer is None:
            raise PersistenceError(f"Timer state for user {user_id} disappeared after update")
        return TimerState.model_validate(orm_timer)

    async def get_or_create_state(self, user_id: str, settings: TimerSettings) -> TimerState:
        """
        Load the user's timer state, creating a paused work phase on first access.

        A paused state without remaining_time is backfilled with the full
        length of its phase so exactly one of start_time/remaining_time is set.
        """
        state = await self.get_state(user_id)
        if state is None:
            defaults = TimerState(user_id=user_id, remaining_time=settings.work_seconds)
            return await self.create_state(user_id, defaults)

        if not state.is_running and state.remaining_time is None:
            logger.warning(f"Backfilling missing remaining_time for user {user_id}")
            state = await self.update_state(
                user_id, {"remaining_time": active_phase_length(state, settings)}
            )
        return state

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_settings(self, user_id: str) -> Optional[UserTimerSettings]:
        """Fetch the user's settings, or None if they were never created"""
        try:
            orm_settings = await self._fetch_settings(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load settings for user {user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to load timer settings") from e
        return UserTimerSettings.model_validate(orm_settings) if orm_settings else None

    async def create_settings(
        self,
        user_id: str,
        values: Optional[Dict[str, Any]] = None
    ) -> UserTimerSettings:
        """Insert the user's settings row, defaults filling any omitted field"""
        data = TimerSettings(**(values or {})).model_dump(include=set(SETTINGS_FIELDS))
        orm_settings = PomodoroSettingsORM(user_id=user_id, **data)
        try:
            self.db.add(orm_settings)
            await self.db.commit()
            await self.db.refresh(orm_settings)
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Settings for user {user_id} were created concurrently; re-reading")
            existing = await self.get_settings(user_id)
            if existing is None:
                raise PersistenceError("Failed to create timer settings")
            return existing
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create settings for user {user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to create timer settings") from e

        logger.info(f"Created timer settings for user {user_id}")
        return UserTimerSettings.model_validate(orm_settings)

    async def update_settings(self, user_id: str, patch: Dict[str, Any]) -> UserTimerSettings:
        """Write the allow-listed settings columns present in patch"""
        values = {key: value for key, value in patch.items() if key in SETTINGS_FIELDS}
        try:
            if values:
                stmt = (
                    update(PomodoroSettingsORM)
                    .where(PomodoroSettingsORM.user_id == user_id)
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                await self.db.execute(stmt)
                await self.db.commit()
            orm_settings = await self._fetch_settings(user_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update settings for user {user_id}: {e}", exc_info=True)
            raise PersistenceError("Failed to update timer settings") from e

        if orm_settings is None:
            raise PersistenceError(f"Settings for user {user_id} do not exist")
        return UserTimerSettings.model_validate(orm_settings)

    async def get_or_create_settings(self, user_id: str) -> UserTimerSettings:
        """Load the user's settings, creating defaults on first access"""
        settings = await self.get_settings(user_id)
        if settings is None:
            settings = await self.create_settings(user_id)
        return settings

    async def upsert_settings(self, user_id: str, patch: Dict[str, Any]) -> UserTimerSettings:
        """Update the allow-listed fields, creating the row with them if missing"""
        values = {key: value for key, value in patch.items() if key in SETTINGS_FIELDS}
        existing = await self.get_settings(user_id)
        if existing is None:
            created = await self.create_settings(user_id, values)
            if all(getattr(created, key) == value for key, value in values.items()):
                return created
            # Another request inserted the row first; apply the patch on top of it
            logger.info(f"Settings insert for user {user_id} lost a race; applying patch")
        return await self.update_settings(user_id, values)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _fetch_timer(self, user_id: str) -> Optional[PomodoroTimerORM]:
        stmt = (
            select(PomodoroTimerORM)
            .where(PomodoroTimerORM.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _fetch_settings(self, user_id: str) -> Optional[PomodoroSettingsORM]:
        stmt = (
            select(PomodoroSettingsORM)
            .where(PomodoroSettingsORM.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
