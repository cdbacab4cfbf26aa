"""In-memory user repository for testing."""

from typing import Optional

from signin.domain.error import DuplicateUserError, UnsupportedProviderError
from signin.domain.model import LINKAGE_FIELDS, User
from signin.domain.repository.user import UserRepository
from signin.domain.value import AuthProvider, UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Enforces the same per-provider uniqueness as the database indexes and
    counts inserts so tests can assert on side effects.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self.insert_count = 0

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def find_by_provider_id(
        self, provider: AuthProvider, provider_id: str
    ) -> Optional[User]:
        """Find a user by the linkage field of an external provider."""
        linkage_field = LINKAGE_FIELDS.get(provider)
        if linkage_field is None:
            raise UnsupportedProviderError(provider.value)

        for user in self._users.values():
            if getattr(user, linkage_field) == provider_id:
                return user
        return None

    async def create(self, user: User) -> User:
        """Insert a user, rejecting an already linked provider ID."""
        if user.provider_id is not None:
            existing = await self.find_by_provider_id(user.provider, user.provider_id)
            if existing:
                raise DuplicateUserError(user.provider.value, user.provider_id)

        self._users[user.id] = user
        self.insert_count += 1
        return user
