"""Shared fixtures: in-memory database, ASGI client and session tokens."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-that-is-long-enough")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from pomodoro_backend.auth import create_session_token  # noqa: E402
from pomodoro_backend.db import get_db  # noqa: E402
from pomodoro_backend.db import models  # noqa: E402,F401
from pomodoro_backend.db.base import Base  # noqa: E402
from pomodoro_backend.features.timer.domain import TimerSettings, TimerState  # noqa: E402
from pomodoro_backend.main import app  # noqa: E402


@pytest.fixture
def settings():
    return TimerSettings()


@pytest.fixture
def fresh_state():
    return TimerState(user_id="user-1", remaining_time=25 * 60)


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id: str = "user-1") -> dict:
        return {"Authorization": f"Bearer {create_session_token(user_id)}"}
    return _headers
