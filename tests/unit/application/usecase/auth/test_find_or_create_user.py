"""Unit tests for FindOrCreateUserUseCase."""

import asyncio
from uuid import uuid4

import pytest

from signin.application.usecase.auth import (
    FindOrCreateUserRequest,
    FindOrCreateUserUseCase,
    LoginErrorKind,
    LoginFailure,
    LoginSuccess,
)
from signin.domain.error import (
    DatabaseUnavailableError,
    DuplicateUserError,
    MalformedProfileError,
)
from signin.domain.model import User
from signin.domain.service import get_descriptor
from signin.domain.value import AuthProvider, UserId
from signin.persistence.repository.inmemory import InMemoryUserRepository
from tests.conftest import make_profile


class RacingUserRepository(InMemoryUserRepository):
    """Simulates another request inserting the same user between find and insert."""

    def __init__(self, winner: User) -> None:
        super().__init__()
        self.winner = winner
        self.lookups = 0

    async def find_by_provider_id(self, provider, provider_id):
        self.lookups += 1
        if self.lookups == 1:
            # First lookup misses, then the other request commits
            self._users[self.winner.id] = self.winner
            return None
        return await super().find_by_provider_id(provider, provider_id)


class BrokenUserRepository(InMemoryUserRepository):
    """Fails every lookup like an unreachable database."""

    async def find_by_provider_id(self, provider, provider_id):
        raise ConnectionError("connection refused")


def _request(provider, profile, users):
    return FindOrCreateUserRequest(
        descriptor=get_descriptor(provider), profile=profile, users=users
    )


class TestFindOrCreateUser:
    """Tests for FindOrCreateUserUseCase.execute()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "provider,linkage_field",
        [
            (AuthProvider.GOOGLE, "google_id"),
            (AuthProvider.DISCORD, "discord_id"),
            (AuthProvider.MICROSOFT, "microsoft_id"),
        ],
    )
    async def test_first_login_creates_user(self, provider, linkage_field):
        """Should insert exactly one user with the provider's linkage set."""
        # Arrange
        repo = InMemoryUserRepository()
        use_case = FindOrCreateUserUseCase()
        profile = make_profile(
            provider_id="p-1",
            display_name="Ada",
            emails=["Ada@Example.com"],
            photos=["https://photos/ada"],
        )

        # Act
        result = await use_case.execute(_request(provider, profile, repo))

        # Assert
        assert isinstance(result, LoginSuccess)
        assert result.created is True
        assert repo.insert_count == 1
        assert result.user.provider == provider
        assert getattr(result.user, linkage_field) == "p-1"
        assert result.user.email == "ada@example.com"
        assert result.user.password is None

    @pytest.mark.asyncio
    async def test_existing_user_returned_unchanged(self, google_profile):
        """Should return the stored user without inserting or updating."""
        # Arrange
        repo = InMemoryUserRepository()
        existing = User(
            id=UserId(uuid4()),
            provider=AuthProvider.GOOGLE,
            google_id=google_profile.id,
            name="Old Name",
            email="old@example.com",
        )
        await repo.create(existing)
        use_case = FindOrCreateUserUseCase()

        # Act
        result = await use_case.execute(
            _request(AuthProvider.GOOGLE, google_profile, repo)
        )

        # Assert
        assert isinstance(result, LoginSuccess)
        assert result.created is False
        assert result.user == existing
        assert result.user.name == "Old Name"
        assert repo.insert_count == 1

    @pytest.mark.asyncio
    async def test_repeated_logins_resolve_same_user(self, google_profile):
        """Two logins with the same Google id should yield the same user id."""
        repo = InMemoryUserRepository()
        use_case = FindOrCreateUserUseCase()

        first = await use_case.execute(
            _request(AuthProvider.GOOGLE, google_profile, repo)
        )
        second = await use_case.execute(
            _request(AuthProvider.GOOGLE, google_profile, repo)
        )

        assert isinstance(first, LoginSuccess)
        assert isinstance(second, LoginSuccess)
        assert first.user.id == second.user.id
        assert repo.insert_count == 1

    @pytest.mark.asyncio
    async def test_same_id_on_different_providers_are_distinct(self):
        """Should never merge accounts across providers."""
        repo = InMemoryUserRepository()
        use_case = FindOrCreateUserUseCase()
        profile = make_profile(provider_id="shared-1", emails=["x@example.com"])

        discord = await use_case.execute(_request(AuthProvider.DISCORD, profile, repo))
        microsoft = await use_case.execute(
            _request(AuthProvider.MICROSOFT, profile, repo)
        )

        assert discord.user.id != microsoft.user.id
        assert repo.insert_count == 2

    @pytest.mark.asyncio
    async def test_discord_avatar_becomes_picture(self):
        """Should store the Discord CDN avatar URL."""
        repo = InMemoryUserRepository()
        profile = make_profile(provider_id="99", username="nelly", avatar="abc")

        result = await FindOrCreateUserUseCase().execute(
            _request(AuthProvider.DISCORD, profile, repo)
        )

        assert result.user.picture == "https://cdn.discordapp.com/avatars/99/abc.png"
        assert result.user.name == "nelly"
        assert result.user.email is None

    @pytest.mark.asyncio
    async def test_microsoft_user_has_no_picture(self):
        """Should store no picture for Microsoft users."""
        repo = InMemoryUserRepository()
        profile = make_profile(photos=["https://photos/ignored"])

        result = await FindOrCreateUserUseCase().execute(
            _request(AuthProvider.MICROSOFT, profile, repo)
        )

        assert result.user.picture is None

    @pytest.mark.asyncio
    async def test_missing_database(self, google_profile):
        """Should fail with DATABASE_UNAVAILABLE and touch no storage."""
        result = await FindOrCreateUserUseCase().execute(
            _request(AuthProvider.GOOGLE, google_profile, None)
        )

        assert isinstance(result, LoginFailure)
        assert result.kind == LoginErrorKind.DATABASE_UNAVAILABLE
        assert isinstance(result.error, DatabaseUnavailableError)

    @pytest.mark.asyncio
    async def test_google_profile_without_photos(self):
        """Should fail with MALFORMED_PROFILE and insert nothing."""
        repo = InMemoryUserRepository()
        profile = make_profile(emails=["ada@example.com"], photos=[])

        result = await FindOrCreateUserUseCase().execute(
            _request(AuthProvider.GOOGLE, profile, repo)
        )

        assert isinstance(result, LoginFailure)
        assert result.kind == LoginErrorKind.MALFORMED_PROFILE
        assert isinstance(result.error, MalformedProfileError)
        assert repo.insert_count == 0

    @pytest.mark.asyncio
    async def test_storage_error(self, google_profile):
        """Should surface the original error as STORAGE_FAILURE."""
        result = await FindOrCreateUserUseCase().execute(
            _request(AuthProvider.GOOGLE, google_profile, BrokenUserRepository())
        )

        assert isinstance(result, LoginFailure)
        assert result.kind == LoginErrorKind.STORAGE_FAILURE
        assert isinstance(result.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_concurrent_first_login_refetches(self, google_profile):
        """Should return the user inserted by the racing request."""
        # Arrange
        winner = User(
            id=UserId(uuid4()),
            provider=AuthProvider.GOOGLE,
            google_id=google_profile.id,
        )
        repo = RacingUserRepository(winner)

        # Act
        result = await FindOrCreateUserUseCase().execute(
            _request(AuthProvider.GOOGLE, google_profile, repo)
        )

        # Assert
        assert isinstance(result, LoginSuccess)
        assert result.created is False
        assert result.user.id == winner.id
        assert repo.insert_count == 0

    @pytest.mark.asyncio
    async def test_parallel_first_logins_create_one_user(self, google_profile):
        """Concurrent first logins should converge on a single user."""
        repo = InMemoryUserRepository()
        use_case = FindOrCreateUserUseCase()

        results = await asyncio.gather(
            *(
                use_case.execute(_request(AuthProvider.GOOGLE, google_profile, repo))
                for _ in range(5)
            )
        )

        assert all(isinstance(r, LoginSuccess) for r in results)
        assert len({r.user.id for r in results}) == 1
        assert repo.insert_count == 1

    def test_duplicate_error_names_provider(self):
        """DuplicateUserError should carry the conflicting linkage."""
        error = DuplicateUserError("google", "g-1")

        assert error.provider == "google"
        assert error.provider_id == "g-1"
