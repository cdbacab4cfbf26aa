"""Find-or-create user use case."""

from enum import Enum
from typing import Literal

import logfire
from pydantic import BaseModel, ConfigDict

from signin.application.usecase.base import BaseUseCase
from signin.domain.error import (
    DatabaseUnavailableError,
    DuplicateUserError,
    MalformedProfileError,
)
from signin.domain.model import User
from signin.domain.repository import UserRepository
from signin.domain.service import ProviderDescriptor, UserService
from signin.domain.value import NormalizedProfile, ProviderProfile
from signin.util.password import DEFAULT_ROUNDS


class LoginErrorKind(str, Enum):
    """Why a login could not resolve a user."""

    DATABASE_UNAVAILABLE = "database_unavailable"
    STORAGE_FAILURE = "storage_failure"
    MALFORMED_PROFILE = "malformed_profile"


class FindOrCreateUserRequest(BaseModel):
    """Find-or-create request for one authenticated provider profile.

    `users` is the database handle for this request. None means no handle
    was reachable, which fails the login without touching storage.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    descriptor: ProviderDescriptor
    profile: ProviderProfile
    users: UserRepository | None = None


class LoginSuccess(BaseModel):
    """Resolved user."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    user: User
    created: bool  # True if this login inserted the user


class LoginFailure(BaseModel):
    """Login failure carrying the original error."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: Literal[False] = False
    kind: LoginErrorKind
    error: Exception


LoginResult = LoginSuccess | LoginFailure


class FindOrCreateUserUseCase(BaseUseCase[FindOrCreateUserRequest, LoginResult]):
    """Resolve a provider profile to a local user, creating it on first login.

    The same flow serves every provider; per-provider differences live in
    the descriptor's extraction function. Never raises: every outcome is
    returned as a LoginResult.
    """

    def __init__(self, bcrypt_rounds: int = DEFAULT_ROUNDS) -> None:
        """Initialize use case.

        Args:
            bcrypt_rounds: Cost factor for the per-request UserService
        """
        self.bcrypt_rounds = bcrypt_rounds

    async def execute(self, request: FindOrCreateUserRequest) -> LoginResult:
        """Execute find-or-create flow.

        Steps:
        1. Fail fast if no database handle is available
        2. Extract the normalized profile
        3. Look up by provider linkage; return the user unchanged if found
        4. Otherwise insert a new user; on a concurrent insert, re-fetch

        Args:
            request: Descriptor, provider profile and database handle

        Returns:
            LoginSuccess with the user, or LoginFailure with the error kind
        """
        provider = request.descriptor.provider

        with logfire.span(
            "find_or_create_user",
            provider=provider.value,
            linkage_field=request.descriptor.linkage_field,
            provider_id=request.profile.id,
        ):
            if request.users is None:
                error = DatabaseUnavailableError()
                logfire.error("Login failed - no database handle", provider=provider.value)
                return LoginFailure(kind=LoginErrorKind.DATABASE_UNAVAILABLE, error=error)

            try:
                normalized = request.descriptor.extract_profile(request.profile)
            except MalformedProfileError as e:
                logfire.error(
                    "Login failed - malformed provider profile",
                    provider=provider.value,
                    field=e.field,
                )
                return LoginFailure(kind=LoginErrorKind.MALFORMED_PROFILE, error=e)

            user_service = UserService(
                user_repository=request.users, bcrypt_rounds=self.bcrypt_rounds
            )
            try:
                user, created = await self._find_or_create(
                    user_service, request.descriptor, normalized
                )
            except Exception as e:
                logfire.error(
                    "Login failed - storage error",
                    provider=provider.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return LoginFailure(kind=LoginErrorKind.STORAGE_FAILURE, error=e)

            logfire.info(
                "New user created" if created else "Existing user logged in",
                provider=provider.value,
                user_id=str(user.id),
            )
            return LoginSuccess(user=user, created=created)

    async def _find_or_create(
        self,
        user_service: UserService,
        descriptor: ProviderDescriptor,
        profile: NormalizedProfile,
    ) -> tuple[User, bool]:
        """Find the linked user or insert one.

        Returns:
            Tuple of (user, created)
        """
        existing = await user_service.find_by_provider_id(
            descriptor.provider, profile.provider_id
        )
        if existing:
            return existing, False

        try:
            user = await user_service.create_from_provider(
                provider=descriptor.provider,
                provider_id=profile.provider_id,
                email=profile.email,
                name=profile.name,
                picture=profile.picture,
            )
            return user, True
        except DuplicateUserError:
            # Another request linked this provider ID first
            logfire.warn(
                "Concurrent first login - re-fetching user",
                provider=descriptor.provider.value,
                provider_id=profile.provider_id,
            )
            user = await user_service.find_by_provider_id(
                descriptor.provider, profile.provider_id
            )
            if user is None:
                raise
            return user, False
