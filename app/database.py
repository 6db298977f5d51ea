"""
Database Connection Module
Handles the relational store using a SQLAlchemy async engine.

Store access goes through a few primitives that take SQLAlchemy Core
statements, so every user-supplied value reaches the database as a
bind parameter:

    insert_row(db, insert(...))   -> generated primary key
    update_rows(db, update(...))  -> rows matched
    fetch_all(db, select(...))    -> list of row dicts
    fetch_one(db, select(...))    -> row dict or None

Errors raised by the driver (constraint violations, connection failures)
propagate unchanged to the caller.
"""

from functools import lru_cache
from typing import Any, AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Executable

from app.core.config import get_settings


# Base class for all our models
class Base(DeclarativeBase):
    pass


@lru_cache()
def get_engine() -> AsyncEngine:
    """Build the process-wide async engine from settings."""
    settings = get_settings()
    return create_async_engine(
        settings.database_url,
        echo=settings.database_echo,  # Logs all SQL queries
    )


@lru_cache()
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the process-wide engine."""
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False  # Objects remain accessible after commit
    )


async def reset_engine() -> None:
    """
    Dispose the cached engine and forget it.

    The next call to get_engine() builds a new one from current settings.
    """
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
    get_session_maker.cache_clear()
    get_engine.cache_clear()


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency injection for FastAPI routes.
    Yields a database session and ensures cleanup.

    Handlers commit explicitly; anything left uncommitted is rolled back
    when the session closes.
    """
    async with get_session_maker()() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """
    Create all tables in database.
    Safe to call repeatedly: existing tables are left alone.
    """
    # Register the mapped tables on Base.metadata
    import app.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# =============================================================================
# STORE PRIMITIVES
# =============================================================================

async def insert_row(db: AsyncSession, statement: Executable) -> int:
    """Execute an INSERT and return the generated primary key."""
    result = await db.execute(statement)
    return result.inserted_primary_key[0]


async def fetch_all(db: AsyncSession, statement: Executable) -> list[dict[str, Any]]:
    """Execute a SELECT and return every row as a plain dict."""
    result = await db.execute(statement)
    return [dict(row) for row in result.mappings().all()]


async def fetch_one(db: AsyncSession, statement: Executable) -> Optional[dict[str, Any]]:
    """Execute a SELECT and return the first row, or None."""
    result = await db.execute(statement)
    row = result.mappings().first()
    return dict(row) if row is not None else None


async def update_rows(db: AsyncSession, statement: Executable) -> int:
    """Execute an UPDATE and return the number of rows matched."""
    result = await db.execute(statement)
    return result.rowcount
