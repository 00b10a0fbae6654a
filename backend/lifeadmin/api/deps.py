from collections.abc import AsyncGenerator
from datetime import date
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lifeadmin.database import async_session_maker
from lifeadmin.services.analytics_config import AnalyticsConfig, get_analytics_config


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


def get_today() -> date:
    """Reference day for relative-day arithmetic. Overridden in tests."""
    return date.today()


DbSession = Annotated[AsyncSession, Depends(get_db)]
Today = Annotated[date, Depends(get_today)]
Analytics = Annotated[AnalyticsConfig, Depends(get_analytics_config)]
