"""In-memory database handle for testing."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from signin.domain.repository import Database, UserRepository
from signin.persistence.repository.inmemory.user import InMemoryUserRepository


class InMemoryDatabase(Database):
    """Database handle sharing one in-memory users collection."""

    def __init__(self, user_repository: InMemoryUserRepository | None = None) -> None:
        self.user_repository = user_repository or InMemoryUserRepository()

    @asynccontextmanager
    async def users(self) -> AsyncIterator[UserRepository]:
        """Yield the shared repository (no transaction semantics)."""
        yield self.user_repository
