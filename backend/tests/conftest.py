"""Shared fixtures: in-memory database, API client and a fixed reference day."""
import os
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from lifeadmin import models  # noqa: E402,F401
from lifeadmin.api.deps import get_db, get_today  # noqa: E402
from lifeadmin.database import Base  # noqa: E402
from lifeadmin.main import app  # noqa: E402
from lifeadmin.services.analytics_config import AnalyticsConfig, set_analytics_config  # noqa: E402

# A Saturday
TODAY = date(2024, 6, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture(autouse=True)
def default_analytics_config():
    """Every test starts from the default thresholds."""
    set_analytics_config(AnalyticsConfig())
    yield
    set_analytics_config(AnalyticsConfig())


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, today: date):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
