"""OAuth strategy registration.

Registers one Authlib client per identity provider and binds the
verification strategy that runs once the provider has authenticated the
user.
"""

import inspect
from typing import Any, Awaitable, Callable

import logfire
from authlib.integrations.starlette_client import OAuth, StarletteOAuth2App
from starlette.requests import Request

from signin.application.usecase.auth import (
    FindOrCreateUserRequest,
    FindOrCreateUserUseCase,
    LoginErrorKind,
    LoginFailure,
    LoginResult,
)
from signin.config import (
    AuthSettings,
    DiscordOAuthSettings,
    GoogleOAuthSettings,
    MicrosoftOAuthSettings,
)
from signin.domain.error import UnsupportedProviderError
from signin.domain.model import User
from signin.domain.repository import Database
from signin.domain.service import PROVIDER_DESCRIPTORS, ProviderDescriptor
from signin.domain.value import AuthProvider, ProviderProfile

# done(error, user): exactly one argument is non-None
DoneCallback = Callable[[Exception | None, User | None], None | Awaitable[None]]


def get_request_database(request: Request) -> Database | None:
    """Database handle attached to the application serving this request."""
    return getattr(request.app.state, "database", None)


class Strategy:
    """Verification strategy for one identity provider.

    Runs after the OAuth handshake with the authenticated profile. Tokens
    are accepted for compatibility with the middleware callback shape but
    are not stored.
    """

    def __init__(
        self, descriptor: ProviderDescriptor, use_case: FindOrCreateUserUseCase
    ) -> None:
        self.descriptor = descriptor
        self.use_case = use_case

    @property
    def provider(self) -> AuthProvider:
        return self.descriptor.provider

    async def authenticate(
        self,
        request: Request,
        access_token: str | None,
        refresh_token: str | None,
        profile: ProviderProfile,
    ) -> LoginResult:
        """Resolve the profile to a user within one database unit of work.

        The unit of work is rolled back whenever the result is a failure.

        Returns:
            LoginSuccess or LoginFailure, never raises
        """
        _ = access_token, refresh_token

        database = get_request_database(request)
        if database is None:
            return await self.use_case.execute(
                FindOrCreateUserRequest(
                    descriptor=self.descriptor, profile=profile, users=None
                )
            )

        result: LoginResult | None = None
        try:
            async with database.users() as users:
                result = await self.use_case.execute(
                    FindOrCreateUserRequest(
                        descriptor=self.descriptor, profile=profile, users=users
                    )
                )
                if isinstance(result, LoginFailure):
                    raise result.error
        except Exception as e:
            if isinstance(result, LoginFailure) and e is result.error:
                return result
            # Commit or session setup failed
            logfire.error(
                "Login failed - unit of work error",
                provider=self.provider.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return LoginFailure(kind=LoginErrorKind.STORAGE_FAILURE, error=e)

        return result

    async def verify(
        self,
        request: Request,
        access_token: str | None,
        refresh_token: str | None,
        profile: ProviderProfile,
        done: DoneCallback,
    ) -> None:
        """Middleware-style verification callback.

        Completes through `done(None, user)` on success or
        `done(error, None)` on failure, exactly once.
        """
        try:
            result = await self.authenticate(
                request, access_token, refresh_token, profile
            )
        except Exception as e:
            outcome = done(e, None)
        else:
            if isinstance(result, LoginFailure):
                outcome = done(result.error, None)
            else:
                outcome = done(None, result.user)

        if inspect.isawaitable(outcome):
            await outcome


class StrategyRegistrar:
    """Registers OAuth clients and strategies for every supported provider."""

    def __init__(
        self,
        oauth: OAuth,
        auth_settings: AuthSettings,
        use_case: FindOrCreateUserUseCase,
    ) -> None:
        """Initialize registrar.

        Args:
            oauth: Authlib client registry
            auth_settings: Provider credentials and endpoints
            use_case: Find-or-create use case shared by all strategies
        """
        self.oauth = oauth
        self.auth_settings = auth_settings
        self.use_case = use_case
        self._strategies: dict[AuthProvider, Strategy] = {}

    @property
    def providers(self) -> list[AuthProvider]:
        """Providers registered so far."""
        return list(self._strategies)

    def register_all(self) -> None:
        """Register every provider that has a descriptor."""
        for provider in PROVIDER_DESCRIPTORS:
            self.register(provider)

    def register(self, provider: AuthProvider) -> Strategy:
        """Register the OAuth client and strategy for one provider.

        Raises:
            UnsupportedProviderError: If the provider has no descriptor
        """
        descriptor = PROVIDER_DESCRIPTORS.get(provider)
        if descriptor is None:
            raise UnsupportedProviderError(provider.value)

        self.oauth.register(
            name=provider.value, overwrite=True, **self._client_config(provider)
        )
        strategy = Strategy(descriptor=descriptor, use_case=self.use_case)
        self._strategies[provider] = strategy

        logfire.info(
            "OAuth strategy registered",
            provider=provider.value,
            callback_url=self.callback_url(provider),
        )
        return strategy

    def get(self, provider: AuthProvider) -> Strategy:
        """Strategy for a provider.

        Raises:
            UnsupportedProviderError: If the provider is not registered
        """
        strategy = self._strategies.get(provider)
        if strategy is None:
            raise UnsupportedProviderError(provider.value)
        return strategy

    def client(self, provider: AuthProvider) -> StarletteOAuth2App:
        """Authlib client for a registered provider.

        Raises:
            UnsupportedProviderError: If the provider is not registered
        """
        self.get(provider)
        return self.oauth.create_client(provider.value)

    def callback_url(self, provider: AuthProvider) -> str:
        """Redirect URI registered with the provider."""
        callback_url = self._settings_for(provider).callback_url
        if callback_url is None:
            raise UnsupportedProviderError(provider.value)
        return callback_url

    def _settings_for(
        self, provider: AuthProvider
    ) -> GoogleOAuthSettings | DiscordOAuthSettings | MicrosoftOAuthSettings:
        if provider == AuthProvider.GOOGLE:
            return self.auth_settings.google
        if provider == AuthProvider.DISCORD:
            return self.auth_settings.discord
        if provider == AuthProvider.MICROSOFT:
            return self.auth_settings.microsoft
        raise UnsupportedProviderError(provider.value)

    def _client_config(self, provider: AuthProvider) -> dict[str, Any]:
        """Keyword arguments for OAuth.register()."""
        settings = self._settings_for(provider)
        config: dict[str, Any] = {
            "client_id": settings.client_id,
            "client_secret": settings.client_secret,
            "client_kwargs": {"scope": " ".join(settings.scope)},
        }

        if isinstance(settings, GoogleOAuthSettings):
            # Endpoints and signing keys come from OIDC discovery
            config["server_metadata_url"] = settings.server_metadata_url
        else:
            config["authorize_url"] = settings.authorize_url
            config["access_token_url"] = settings.access_token_url
            config["api_base_url"] = settings.api_base_url

        return config
