"""Database dependencies."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from src.database.client import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """Get a database session.

    The session commits when the request succeeds and rolls back when it
    raises, including on changeset errors raised by the services.
    """
    async with get_session() as session:
        yield session
