"""Database client and connection management with SQLAlchemy."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from src.config.settings import settings
from src.database.base import Base

logger = logging.getLogger(__name__)

# Global SQLAlchemy engine
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get the SQLAlchemy async engine instance."""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the SQLAlchemy async session factory."""
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _async_session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession]:
    """Get an async database session.

    Usage:
        async with get_session() as session:
            user = await UserService.create_user(session, params)
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _engine_options(url: str) -> dict:
    """Pool options apply to PostgreSQL only; SQLite uses a single connection pool."""
    if make_url(url).get_backend_name() == "sqlite":
        return {"echo": settings.postgres_echo}
    return {
        "echo": settings.postgres_echo,
        "pool_size": settings.postgres_pool_size,
        "max_overflow": settings.postgres_max_overflow,
        "pool_timeout": settings.postgres_pool_timeout,
        "pool_recycle": settings.postgres_pool_recycle,
        "pool_pre_ping": True,  # Verify connections before using
    }


async def init_db(url: str | None = None, create_schema: bool = False) -> None:
    """Initialize the database connection and SQLAlchemy.

    Args:
        url: Database URL, defaults to settings.postgres_url
        create_schema: Create missing tables (development only)

    """
    global _engine, _async_session_factory

    url = url or settings.postgres_url

    try:
        logger.info(f"Connecting to database at {url.split('@')[-1]}")

        _engine = create_async_engine(url, **_engine_options(url))
        _async_session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with _engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_schema:
                await conn.run_sync(Base.metadata.create_all)
                logger.info("Database schema created")

        logger.info("Database initialization complete")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db() -> None:
    """Close the database connection gracefully."""
    global _engine, _async_session_factory

    if _engine is not None:
        logger.info("Closing database connection")
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connection closed")
