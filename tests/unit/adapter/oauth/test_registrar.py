"""Unit tests for StrategyRegistrar and Strategy."""

from types import SimpleNamespace

import pytest
from authlib.integrations.starlette_client import OAuth

from signin.adapter.oauth import StrategyRegistrar
from signin.application.usecase.auth import (
    FindOrCreateUserUseCase,
    LoginErrorKind,
    LoginFailure,
    LoginSuccess,
)
from signin.config import AuthSettings, Settings
from signin.domain.error import DatabaseUnavailableError, UnsupportedProviderError
from signin.domain.value import AuthProvider
from signin.persistence.repository.inmemory import (
    InMemoryDatabase,
    InMemoryUserRepository,
)
from tests.conftest import make_profile


def _registrar(auth_settings: AuthSettings | None = None) -> StrategyRegistrar:
    registrar = StrategyRegistrar(
        oauth=OAuth(),
        auth_settings=auth_settings or Settings().auth,
        use_case=FindOrCreateUserUseCase(),
    )
    registrar.register_all()
    return registrar


def _request(database=None):
    """Minimal stand-in exposing request.app.state."""
    state = SimpleNamespace()
    if database is not None:
        state.database = database
    return SimpleNamespace(app=SimpleNamespace(state=state))


class TestStrategyRegistrar:
    """Tests for StrategyRegistrar."""

    def test_registers_every_external_provider(self):
        """Should register Google, Discord and Microsoft."""
        registrar = _registrar()

        assert set(registrar.providers) == {
            AuthProvider.GOOGLE,
            AuthProvider.DISCORD,
            AuthProvider.MICROSOFT,
        }
        for provider in registrar.providers:
            assert registrar.get(provider).provider == provider
            assert registrar.client(provider) is not None

    def test_local_is_not_registered(self):
        """Should reject LOCAL, which has no OAuth client."""
        registrar = _registrar()

        with pytest.raises(UnsupportedProviderError):
            registrar.get(AuthProvider.LOCAL)
        with pytest.raises(UnsupportedProviderError):
            registrar.client(AuthProvider.LOCAL)

    def test_callback_url_defaults_to_api_base(self):
        """Should default callbacks to {base_url}/auth/callback/{provider}."""
        registrar = _registrar(Settings(host="localhost", port=8000).auth)

        assert (
            registrar.callback_url(AuthProvider.DISCORD)
            == "http://localhost:8000/auth/callback/discord"
        )

    def test_google_uses_oidc_discovery(self):
        """Should configure Google through its discovery document."""
        registrar = _registrar()

        config = registrar._client_config(AuthProvider.GOOGLE)

        assert config["server_metadata_url"] == (
            "https://accounts.google.com/.well-known/openid-configuration"
        )
        assert config["client_kwargs"]["scope"] == "openid email profile"

    def test_microsoft_uses_tenant_endpoints(self):
        """Should build Microsoft endpoints from the tenant."""
        auth = Settings().auth
        auth.microsoft.tenant = "contoso.onmicrosoft.com"
        registrar = _registrar(auth)

        config = registrar._client_config(AuthProvider.MICROSOFT)

        assert config["authorize_url"] == (
            "https://login.microsoftonline.com/contoso.onmicrosoft.com"
            "/oauth2/v2.0/authorize"
        )
        assert config["client_kwargs"]["scope"] == "user.read"


class TestStrategyVerify:
    """Tests for the middleware-style verify() callback."""

    @pytest.mark.asyncio
    async def test_success_calls_done_with_user(self):
        """Should call done(None, user) exactly once."""
        # Arrange
        users = InMemoryUserRepository()
        strategy = _registrar().get(AuthProvider.DISCORD)
        calls = []

        # Act
        await strategy.verify(
            _request(InMemoryDatabase(users)),
            "access",
            "refresh",
            make_profile(provider_id="d-7", username="nelly"),
            lambda error, user: calls.append((error, user)),
        )

        # Assert
        assert len(calls) == 1
        error, user = calls[0]
        assert error is None
        assert user.discord_id == "d-7"
        assert users.insert_count == 1

    @pytest.mark.asyncio
    async def test_missing_database_calls_done_with_error(self):
        """Should call done(error, None) when no database is attached."""
        strategy = _registrar().get(AuthProvider.GOOGLE)
        calls = []

        await strategy.verify(
            _request(),
            "access",
            None,
            make_profile(emails=["a@example.com"], photos=["https://p"]),
            lambda error, user: calls.append((error, user)),
        )

        assert len(calls) == 1
        error, user = calls[0]
        assert isinstance(error, DatabaseUnavailableError)
        assert user is None

    @pytest.mark.asyncio
    async def test_async_done_is_awaited(self):
        """Should await a coroutine done callback."""
        strategy = _registrar().get(AuthProvider.MICROSOFT)
        calls = []

        async def done(error, user):
            calls.append((error, user))

        await strategy.verify(
            _request(InMemoryDatabase()), None, None, make_profile(), done
        )

        assert len(calls) == 1
        assert calls[0][0] is None


class TestStrategyAuthenticate:
    """Tests for Strategy.authenticate()."""

    @pytest.mark.asyncio
    async def test_malformed_profile(self):
        """Should return MALFORMED_PROFILE and insert nothing."""
        users = InMemoryUserRepository()
        strategy = _registrar().get(AuthProvider.GOOGLE)

        result = await strategy.authenticate(
            _request(InMemoryDatabase(users)), "access", None, make_profile(emails=[])
        )

        assert isinstance(result, LoginFailure)
        assert result.kind == LoginErrorKind.MALFORMED_PROFILE
        assert users.insert_count == 0

    @pytest.mark.asyncio
    async def test_unit_of_work_error(self):
        """Should report a failing database handle as STORAGE_FAILURE."""

        class FailingDatabase(InMemoryDatabase):
            def users(self):
                raise ConnectionError("pool exhausted")

        strategy = _registrar().get(AuthProvider.DISCORD)

        result = await strategy.authenticate(
            _request(FailingDatabase()), "access", None, make_profile()
        )

        assert isinstance(result, LoginFailure)
        assert result.kind == LoginErrorKind.STORAGE_FAILURE
        assert isinstance(result.error, ConnectionError)

    @pytest.mark.asyncio
    async def test_second_login_is_not_created(self):
        """Should report created=False for a returning user."""
        database = InMemoryDatabase()
        strategy = _registrar().get(AuthProvider.DISCORD)
        profile = make_profile(provider_id="d-1")

        first = await strategy.authenticate(_request(database), "a", None, profile)
        second = await strategy.authenticate(_request(database), "a", None, profile)

        assert isinstance(first, LoginSuccess) and first.created
        assert isinstance(second, LoginSuccess) and not second.created
        assert first.user.id == second.user.id
