"""Pytest configuration and shared fixtures for tests."""

from collections.abc import AsyncGenerator
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.api.deps import get_db, get_now, get_redis
from src.main import app
from src.models import Base

FIXED_NOW = datetime(2024, 3, 14, 10, 30)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests.

    Returns:
        Backend name string.
    """
    return "asyncio"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create a sqlite-backed session factory with every table."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    app.state.async_session = factory
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Redis double whose SET NX honours existing keys.

    Returns:
        AsyncMock with ``set`` and ``ping`` behaving like a live server.
    """
    store: dict[str, str] = {}

    async def fake_set(key: str, value: str, nx: bool = False, ex: int | None = None):
        if nx and key in store:
            return None
        store[key] = value
        return True

    redis_mock = AsyncMock()
    redis_mock.set.side_effect = fake_set
    redis_mock.ping.return_value = True
    redis_mock.store = store
    return redis_mock


@pytest.fixture
def now() -> datetime:
    """Evaluation instant used by date-relative endpoints."""
    return FIXED_NOW


@pytest_asyncio.fixture
async def api_client(
    session_factory: async_sessionmaker[AsyncSession],
    mock_redis: AsyncMock,
    now: datetime,
) -> AsyncGenerator[AsyncClient, None]:
    """Create API client with DB, Redis and clock overrides."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: mock_redis
    app.dependency_overrides[get_now] = lambda: now
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
