"""
Database Configuration

Async SQLAlchemy 2.0 setup with session management.
Defaults to SQLite through aiosqlite; any async URL works (e.g. asyncpg).
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from quillnote.core.config import settings
from quillnote.models.base import Base

engine = create_async_engine(settings.DATABASE_URL, echo=False)

# expire_on_commit=False: prevents implicit I/O after commit when accessing attributes
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Yields:
        AsyncSession: Scoped to the request lifecycle. Automatically closed
        after the request completes (including on exceptions).
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_models() -> None:
    """Create missing tables (idempotent)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = ["Base", "engine", "AsyncSessionLocal", "get_db", "init_models"]
