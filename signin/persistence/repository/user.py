"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from signin.domain.error import DuplicateUserError, UnsupportedProviderError
from signin.domain.model import LINKAGE_FIELDS, User
from signin.domain.repository import UserRepository
from signin.domain.value import AuthProvider, UserId
from signin.persistence.mappers import row_to_user, user_to_dict
from signin.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email.

        Args:
            email: Lower-cased email to search for

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.email == email)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_provider_id(
        self, provider: AuthProvider, provider_id: str
    ) -> Optional[User]:
        """Find a user by the linkage column of an external provider.

        Args:
            provider: The authentication provider
            provider_id: The user's ID on that provider

        Returns:
            User if found, None otherwise
        """
        linkage_field = LINKAGE_FIELDS.get(provider)
        if linkage_field is None:
            raise UnsupportedProviderError(provider.value)

        stmt = select(users_table).where(
            users_table.c[linkage_field] == provider_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def create(self, user: User) -> User:
        """Insert a user.

        The insert runs in a savepoint so a uniqueness violation leaves the
        surrounding transaction usable for a follow-up lookup.

        Args:
            user: User to insert

        Returns:
            Inserted user

        Raises:
            DuplicateUserError: If the provider linkage is already taken
        """
        stmt = users_table.insert().values(**user_to_dict(user))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if user.provider_id is None:
                raise
            raise DuplicateUserError(user.provider.value, user.provider_id) from e

        await self.session.flush()
        return user
