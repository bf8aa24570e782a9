from __future__ import annotations

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from .config import settings

# background pipelines and request handlers share one engine
engine: AsyncEngine = create_async_engine(settings.LEADS_DB_URL, echo=False, future=True)

# Every pipeline step opens its own short session from here
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Request-scoped session for the read endpoints."""
    async with AsyncSessionLocal() as session:
        yield session
