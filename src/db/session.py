"""Async database session management."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from config import settings
from db.models import Base


def build_engine(database_url: str | None = None, pooled: bool = True) -> AsyncEngine:
    """
    Create an async engine.

    Worker processes run each task in a fresh event loop, so they ask for an
    unpooled engine (connections cannot outlive the loop they were made in).
    """
    options = {"echo": settings.debug}
    if pooled:
        options["pool_pre_ping"] = True
    else:
        options["poolclass"] = NullPool
    return create_async_engine(database_url or settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: Objects remain usable after commit
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
