"""Database connection and session management.

Provides async database engine, session factory and the database handle
for PostgreSQL.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import logfire
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from signin.config import Settings
from signin.domain.repository import Database, UserRepository
from signin.persistence.repository import PostgresUserRepository


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async database engine.

    Args:
        settings: Application settings with database URL

    Returns:
        Configured async engine
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,  # Log SQL queries in debug mode
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory.

    Args:
        engine: Database engine

    Returns:
        Session factory for creating database sessions
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,  # Manual flushing for better control
        autocommit=False,  # Explicit transaction management
    )


class SqlDatabase(Database):
    """PostgreSQL database handle.

    Every `users()` block runs in its own session and transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize database handle.

        Args:
            session_factory: Factory for creating sessions
        """
        self.session_factory = session_factory

    @asynccontextmanager
    async def users(self) -> AsyncIterator[UserRepository]:
        """Yield a user repository bound to a fresh transaction.

        Commits if the block completes, rolls back and re-raises otherwise.
        """
        async with self.session_factory() as session:
            try:
                yield PostgresUserRepository(session)
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise
