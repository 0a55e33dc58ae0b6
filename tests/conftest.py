"""Test configuration and fixtures.

Each test gets its own in-memory SQLite database:
1. The schema is created from the models when the engine fixture starts
2. A single connection is shared through StaticPool so every session sees it
3. The engine is disposed after the test, dropping the database
4. Password hashing uses a cheap PBKDF2 cost so hashing does not dominate runtime
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.config.credentials import CredentialConfig, get_credential_config
from src.database.base import Base
from src.database.dependencies import get_db_session
from src.features.user.changesets import hash_password
from src.features.user.models import User
from src.main import app
from src.shared.security.password import pbkdf2_hash_methods

TEST_DB_URL = "sqlite+aiosqlite://"
TEST_PBKDF2_ROUNDS = 1_000


# Credential Configuration


@pytest.fixture
def config() -> CredentialConfig:
    """Default length bounds with a fast PBKDF2 hash pair."""
    return CredentialConfig(password_hash_methods=pbkdf2_hash_methods(rounds=TEST_PBKDF2_ROUNDS))


# Database Setup - Function Scope (Fresh Database Per Test)


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory database with the schema for one test."""
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a database session per test."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as async_session:
        yield async_session


# FastAPI Client & Dependency Overrides


@pytest_asyncio.fixture
async def client(session: AsyncSession, config: CredentialConfig) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP test client bound to the test session and config."""

    async def _get_test_session():
        yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    app.dependency_overrides[get_credential_config] = lambda: config

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# Test User Factories


@pytest_asyncio.fixture
async def make_user(session: AsyncSession, config: CredentialConfig):
    """Factory fixture to create stored test users.

    Usage:
        user = await make_user()                             # with a password
        user = await make_user(email="a@example.com")        # custom email
        passwordless = await make_user(password=None)        # no password hash
    """
    counter = 0

    async def _factory(email=None, password="correct horse battery", **kwargs) -> User:
        nonlocal counter
        counter += 1

        if email is None:
            email = f"testuser{counter}@example.com"

        password_hash = hash_password(password, config) if password is not None else None

        user = User(email=email, password_hash=password_hash, **kwargs)

        session.add(user)
        await session.flush()
        await session.refresh(user)
        return user

    yield _factory
