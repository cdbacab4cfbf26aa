"""OAuth infrastructure provider for multi-provider authentication."""

from authlib.integrations.starlette_client import OAuth
from dishka import Scope, provide

from signin.adapter.oauth import StrategyRegistrar
from signin.application.usecase.auth import FindOrCreateUserUseCase
from signin.config import Settings
from signin.util.di.base import ProviderBase
from signin.util.error import ConfigurationError

PLACEHOLDER = "CHANGE_ME_IN_PRODUCTION"


class OAuthRegistryProvider(ProviderBase):
    """Provider for the Authlib registry and the strategies bound to it."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_oauth(self) -> OAuth:
        """Provide the Authlib client registry."""
        return OAuth()

    @provide(scope=Scope.APP)
    def get_strategy_registrar(
        self,
        oauth: OAuth,
        settings: Settings,
        use_case: FindOrCreateUserUseCase,
    ) -> StrategyRegistrar:
        """Provide registrar with Google, Discord and Microsoft registered.

        Registration only records client configuration; no provider is
        contacted until the first login.

        Raises:
            ConfigurationError: If production runs with placeholder credentials
        """
        if settings.environment == "production":
            for name in ("google", "discord", "microsoft"):
                credentials = getattr(settings.auth, name)
                if PLACEHOLDER in (credentials.client_id, credentials.client_secret):
                    raise ConfigurationError(
                        f"{name.capitalize()} OAuth credentials must be configured"
                    )
            if settings.auth.session_secret == PLACEHOLDER:
                raise ConfigurationError("Session secret must be configured")

        registrar = StrategyRegistrar(
            oauth=oauth, auth_settings=settings.auth, use_case=use_case
        )
        registrar.register_all()
        return registrar
