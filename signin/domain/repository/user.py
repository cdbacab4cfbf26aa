"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from signin.domain.model.user import User
from signin.domain.value import AuthProvider, UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email.

        Args:
            email: Lower-cased email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_provider_id(
        self, provider: AuthProvider, provider_id: str
    ) -> Optional[User]:
        """Find a user by the linkage field of an external provider.

        Args:
            provider: The authentication provider (not LOCAL)
            provider_id: The user's ID on that provider

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: The user to insert

        Returns:
            The persisted user

        Raises:
            DuplicateUserError: If the provider linkage is already taken
        """
        pass
