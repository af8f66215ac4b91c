"""
DevCamper API - Database Session Management
===========================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   One engine per process with connection pooling; one session per
       request that commits on success and rolls back on error.
Who:   Route handlers (via Depends), Alembic (Base.metadata), health check.

The session is the storage collaborator of the list pipeline and services:
find-by-filter, count, find-by-id, create, update and delete all go through it.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from devcamper.config import Settings, get_settings


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Pool sizing only applies to server databases; SQLite (used by tests and
    local development) keeps SQLAlchemy's default pool for its dialect.
    """
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
        "pool_pre_ping": settings.db_pool_pre_ping,
    }
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


engine = build_engine(get_settings())

# expire_on_commit=False: attributes stay readable after the request commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Closes all pooled connections; called from the app lifespan on shutdown."""
    await engine.dispose()
