"""Database handle interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from signin.domain.repository.user import UserRepository


class Database(ABC):
    """Handle to the store holding the users collection.

    Each `users()` context is one unit of work: committed when the block
    exits cleanly, rolled back when it raises.
    """

    @abstractmethod
    def users(self) -> AbstractAsyncContextManager[UserRepository]:
        """Open a unit of work over the users collection.

        Usage:
            async with database.users() as users:
                user = await users.find_by_id(user_id)
        """
        pass
