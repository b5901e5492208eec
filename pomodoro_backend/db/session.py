"""Database session configuration"""

import logging
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from pomodoro_backend.config import (
    DATABASE_URL,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_POOL_RECYCLE,
)

logger = logging.getLogger(__name__)

if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is not set")


def to_async_url(url: str) -> str:
    """
    Convert a database URL to its async driver form.

    postgresql:// and the legacy asyncpg form become postgresql+psycopg://;
    sqlite+aiosqlite:// is passed through.
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql+psycopg://"):
        return url
    if url.startswith("postgresql+asyncpg://"):
        # Legacy support: convert asyncpg URLs to psycopg
        return url.replace("postgresql+asyncpg://", "postgresql+psycopg://", 1)
    if url.startswith("sqlite+aiosqlite://"):
        return url
    raise ValueError(f"Unsupported database URL format: {url}")


ASYNC_DATABASE_URL = to_async_url(DATABASE_URL)

if ASYNC_DATABASE_URL.startswith("sqlite"):
    # SQLite uses a single-file pool; pool tuning does not apply
    engine = create_async_engine(ASYNC_DATABASE_URL, echo=False)
else:
    engine = create_async_engine(
        ASYNC_DATABASE_URL,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        pool_recycle=DB_POOL_RECYCLE,
        echo=False,  # Set to True to see SQL queries in logs
    )

# Create async session factory
SessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI routes.
    
    Usage:
        @router.get("/example")
        async def example(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """Create the timer tables if they do not exist"""
    # Import models so they register on Base.metadata
    from pomodoro_backend.db import models  # noqa: F401
    from pomodoro_backend.db.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")
