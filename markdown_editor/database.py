"""Async database connection and session management."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .config import settings

logger = logging.getLogger(__name__)

# SQLite (local runs, tests) gets the dialect's default pool
_pool_options = {} if settings.is_sqlite else {
    "pool_size": settings.db_pool_size,
    "max_overflow": settings.db_max_overflow,
    "pool_timeout": 15,  # Fail fast - let clients retry rather than hang
    "pool_pre_ping": True,
    "pool_recycle": 3600,
}

engine = create_async_engine(
    settings.database_url,
    echo=settings.sql_echo,
    **_pool_options,
)

# Create async session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for ORM models."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async dependency injection for FastAPI.

    One session (and one transaction) per request. Commits on success,
    rolls back on exception, so multi-statement actions either land
    completely or not at all.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping_database(session: AsyncSession) -> bool:
    """Return True if a trivial query succeeds on the given session."""
    try:
        await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        return False


async def warmup_connection_pool(pool_size: Optional[int] = None) -> None:
    """
    Pre-warm the database connection pool at startup.

    asyncpg runs a handful of introspection queries on every new
    connection; opening them up front keeps the first requests fast.

    Args:
        pool_size: Number of connections to warm up. Defaults to settings.db_pool_size.
    """
    if settings.is_sqlite:
        return

    target_size = pool_size or settings.db_pool_size
    logger.info(f"Warming up connection pool with {target_size} connections...")

    async def create_connection(i: int):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug(f"  Connection {i + 1}/{target_size} warmed")
        except Exception as e:
            logger.warning(f"  Connection {i + 1} warmup failed: {e}")

    batch_size = 10
    for batch_start in range(0, target_size, batch_size):
        batch_end = min(batch_start + batch_size, target_size)
        await asyncio.gather(*(create_connection(i) for i in range(batch_start, batch_end)))

    logger.info(f"Connection pool warmup complete ({target_size} connections)")


def utcnow() -> datetime:
    """Timezone-aware current instant used for all timestamp columns."""
    return datetime.now(timezone.utc)
