"""
Database Session Management

This module builds the async engine and session factory used by the link store.
Uses a database abstraction layer to support different database backends.

Engines are created by the application at startup and disposed at shutdown,
so nothing here connects at import time.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.sqlite_adapter import get_database_adapter


def create_engine(database_url: str, adapter: Optional[DatabaseAdapter] = None) -> AsyncEngine:
    """
    Create an async engine for ``database_url``.

    Args:
        database_url: SQLAlchemy async connection string
        adapter: Database adapter (defaults to get_database_adapter())

    Returns:
        Configured AsyncEngine
    """
    adapter = adapter or get_database_adapter()
    return adapter.create_engine(database_url)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables (idempotent)."""
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
