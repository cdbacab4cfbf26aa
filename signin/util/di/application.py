"""Application layer DI providers."""

from dishka import Scope, provide

from signin.application.usecase.auth import FindOrCreateUserUseCase
from signin.config import AuthSettings
from signin.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.APP)
    def get_find_or_create_user_use_case(
        self, auth_settings: AuthSettings
    ) -> FindOrCreateUserUseCase:
        """Provide find-or-create use case.

        Stateless: the database handle travels with each request.
        """
        return FindOrCreateUserUseCase(bcrypt_rounds=auth_settings.bcrypt_rounds)
