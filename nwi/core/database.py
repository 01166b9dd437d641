# nwi/core/database.py
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from nwi.core.config import settings

Base = declarative_base()


def make_engine(url: str = None, echo: bool = None) -> AsyncEngine:
    """Engine for the score store; defaults come from settings."""
    url = url or settings.DATABASE_URL
    kwargs = {"echo": settings.DB_ECHO if echo is None else echo}
    # SQLite (tests, local runs) has no server-side pool to pre-ping
    if not url.startswith("sqlite"):
        kwargs["pool_pre_ping"] = True
    return create_async_engine(url, **kwargs)


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    # Loaded rows are read after commit by the ingest passes and the resolver
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = make_engine()
AsyncSessionLocal = make_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for the read routes."""
    async with AsyncSessionLocal() as session:
        yield session
