"""User domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from signin.domain.error import NotFoundError, UnsupportedProviderError
from signin.domain.model import LINKAGE_FIELDS, User
from signin.domain.repository import UserRepository
from signin.domain.value import AuthProvider, UserId
from signin.util.password import DEFAULT_ROUNDS, hash_password
from signin.util.password import verify_password as check_password

from .base import Service


def normalize_email(email: str | None) -> str | None:
    """Lower-case an email address; None and empty strings become None."""
    return email.lower() if email else None


class UserService(Service):
    """Domain service for user lookups and account creation."""

    def __init__(
        self, user_repository: UserRepository, bcrypt_rounds: int = DEFAULT_ROUNDS
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            bcrypt_rounds: Cost factor for local account password hashes
        """
        self.user_repository = user_repository
        self.bcrypt_rounds = bcrypt_rounds

    async def find_by_id(self, user_id: UserId) -> User | None:
        """Find user by ID.

        Args:
            user_id: User ID

        Returns:
            User if found, None otherwise
        """
        with logfire.span("user_service.find_by_id", user_id=str(user_id)):
            return await self.user_repository.find_by_id(user_id)

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.find_by_id(user_id)
        if not user:
            logfire.warn("User not found", user_id=str(user_id))
            raise NotFoundError("User", str(user_id))
        return user

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email, ignoring case.

        Args:
            email: Email address in any case

        Returns:
            User if found, None otherwise
        """
        normalized = normalize_email(email)
        with logfire.span("user_service.find_by_email", email=normalized):
            if normalized is None:
                return None
            user = await self.user_repository.find_by_email(normalized)
            if user:
                logfire.info("User found", email=normalized, user_id=str(user.id))
            else:
                logfire.info("User not found", email=normalized)
            return user

    async def find_by_provider_id(
        self, provider: AuthProvider, provider_id: str
    ) -> User | None:
        """Find user by the linkage field of an external provider.

        Args:
            provider: Authentication provider
            provider_id: Provider-specific user ID

        Returns:
            User if found, None otherwise

        Raises:
            UnsupportedProviderError: If provider has no linkage field
        """
        if provider not in LINKAGE_FIELDS:
            raise UnsupportedProviderError(provider.value)

        with logfire.span(
            "user_service.find_by_provider_id",
            provider=provider.value,
            provider_id=provider_id,
        ):
            user = await self.user_repository.find_by_provider_id(
                provider, provider_id
            )
            if user:
                logfire.info(
                    "User found",
                    provider=provider.value,
                    provider_id=provider_id,
                    user_id=str(user.id),
                )
            else:
                logfire.info(
                    "User not found",
                    provider=provider.value,
                    provider_id=provider_id,
                )
            return user

    async def create_local_user(
        self, email: str, plain_password: str, name: str | None
    ) -> User:
        """Create an email/password account.

        Args:
            email: Email address in any case (stored lower-cased)
            plain_password: Password to hash with bcrypt
            name: Display name from signup form

        Returns:
            The persisted user
        """
        user = User(
            id=UserId(uuid4()),
            provider=AuthProvider.LOCAL,
            email=normalize_email(email),
            name=name,
            password=hash_password(plain_password, rounds=self.bcrypt_rounds),
            created_at=datetime.now(timezone.utc),
        )
        with logfire.span("user_service.create_local_user", user_id=str(user.id)):
            saved = await self.user_repository.create(user)
            logfire.info("Local user created", user_id=str(saved.id))
            return saved

    async def create_from_provider(
        self,
        provider: AuthProvider,
        provider_id: str,
        email: str | None,
        name: str | None,
        picture: str | None,
    ) -> User:
        """Create a user linked to an external provider.

        Args:
            provider: Authentication provider (not LOCAL)
            provider_id: Provider-specific user ID stored in the linkage field
            email: Email from provider profile, if any
            name: Display name from provider profile
            picture: Avatar URL, if any

        Returns:
            The persisted user

        Raises:
            UnsupportedProviderError: If provider has no linkage field
            DuplicateUserError: If the provider ID is already linked
        """
        linkage_field = LINKAGE_FIELDS.get(provider)
        if linkage_field is None:
            raise UnsupportedProviderError(provider.value)

        user = User.model_validate(
            {
                "id": UserId(uuid4()),
                "provider": provider,
                "email": normalize_email(email),
                "name": name,
                "picture": picture,
                linkage_field: provider_id,
                "created_at": datetime.now(timezone.utc),
            }
        )
        with logfire.span(
            "user_service.create_from_provider",
            provider=provider.value,
            provider_id=provider_id,
            user_id=str(user.id),
        ):
            saved = await self.user_repository.create(user)
            logfire.info(
                "User created from provider",
                provider=provider.value,
                provider_id=provider_id,
                user_id=str(saved.id),
            )
            return saved

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Check a local account password against its stored hash."""
        return check_password(plain_password, hashed_password)
