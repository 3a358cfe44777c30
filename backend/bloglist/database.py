"""
Bloglist Backend - Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   create_app() builds one engine and one session factory from its
       Settings and keeps them on `app.state`; the session dependency reads
       the factory from there, commits on success and rolls back on error.
Who:   Used by route handlers and the identity dependency via Depends().
When:  Engine is created per application; sessions are created per-request.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600.
    SQLite URLs skip the pool arguments; aiosqlite picks its own pool class.
"""

from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bloglist.config import Settings


def build_engine(config: Settings) -> AsyncEngine:
    """Create an async engine, applying pool settings where the driver supports them."""
    kwargs: Dict[str, Any] = {"echo": config.log_level == "DEBUG"}
    if not config.database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(config.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: response models are built from ORM objects after
    # the handler returns, when the session has already committed
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the application's factory
        2. Yields it to the route handler (and to the identity dependency,
           which FastAPI resolves against the same cached session)
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables. Development convenience behind DB_CREATE_TABLES."""
    # Import models so every table is registered on Base.metadata
    import bloglist.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
