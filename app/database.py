"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 in async mode for the Book Catalog API.

Async Engine
============
Every repository call awaits its I/O, so the event loop keeps serving
other requests while a query runs. The list endpoint also relies on this
to run its page query and its count query side by side.

Session Management Pattern
==========================
We use the "session per operation" pattern:
1. A repository call opens a new AsyncSession from the factory
2. The session performs one read or one write
3. Writes commit before the session closes
4. The session is closed when the call returns

Two calls never share a session, which is what allows independent reads
to run concurrently.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import get_settings

settings = get_settings()


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for autogenerate.
    """
    pass


# =============================================================================
# Engine & Session Factory
# =============================================================================
def create_engine(database_url: str | None = None, **kwargs) -> AsyncEngine:
    """
    Create the async engine.

    SQLite (aiosqlite) does not accept the queue pool sizing arguments,
    so they are only passed to server databases.

    Args:
        database_url: Override for settings.database_url
        **kwargs: Extra keyword arguments for create_async_engine

    Returns:
        Configured AsyncEngine
    """
    url = database_url or settings.database_url
    options = {
        "echo": settings.db_echo,
        "pool_pre_ping": True,  # Verify connections are alive before using
    }
    if not url.startswith("sqlite") and "poolclass" not in kwargs:
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    options.update(kwargs)
    return create_async_engine(url, **options)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create a session factory bound to an engine.

    expire_on_commit=False keeps loaded attributes readable after commit,
    so records can be serialized once their session has closed.
    """
    return async_sessionmaker(
        bind=bind,
        autoflush=False,
        expire_on_commit=False,
    )


engine = create_engine()
SessionLocal = create_session_factory(engine)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory dependency for FastAPI.

    Tests override this to point the app at a temporary database.
    """
    return SessionLocal


# =============================================================================
# Utility Functions
# =============================================================================
async def create_tables(bind: AsyncEngine | None = None) -> None:
    """
    Create all database tables.

    Useful for development and tests. In production, use Alembic
    migrations instead.
    """
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(bind: AsyncEngine | None = None) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only use in development and tests.
    """
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def dispose_engine() -> None:
    """Close every pooled connection (called on shutdown)."""
    await engine.dispose()
