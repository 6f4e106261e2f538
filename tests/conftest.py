# tests/conftest.py

"""Pytest configuration and fixtures."""

import os

# Keep bcrypt cheap in tests; must be set before roundboard.security is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from roundboard.db.models import Base, User  # noqa: E402
from roundboard.db.session import get_db  # noqa: E402
from roundboard.main import app  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database file per test, with the schema created."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, expire_on_commit=False, autocommit=False, autoflush=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and inspecting results directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Fixture to provide an async test client for the API."""

    # Each request gets its own session, as with the real get_db
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    del app.dependency_overrides[get_db]


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory that inserts a user with the given score and coins."""

    async def _make_user(
        username: str, score: float = 0.0, coins_total: float = 0.0
    ) -> User:
        user = User(
            username=username,
            password_hash="not-a-real-hash",
            wallet=f"wallet-{username}",
            score=score,
            coins_total=coins_total,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user
