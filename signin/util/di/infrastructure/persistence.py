"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from signin.config import Settings
from signin.domain.repository import Database, UserRepository
from signin.persistence.database import (
    SqlDatabase,
    create_engine,
    create_session_factory,
)
from signin.util.di.base import ProviderBase
from signin.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_database(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> Database:
        """Provide the database handle used by OAuth strategies."""
        return SqlDatabase(session_factory)

    @provide(scope=Scope.REQUEST)
    async def get_user_repository(
        self, database: Database
    ) -> AsyncIterator[UserRepository]:
        """Provide a User repository bound to one request-long unit of work.

        Committed when the request scope closes.
        """
        async with database.users() as users:
            yield users
