"""Domain layer DI providers."""

from dishka import Scope, provide

from signin.config import AuthSettings
from signin.domain.repository import UserRepository
from signin.domain.service import UserService
from signin.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_user_service(
        self, user_repository: UserRepository, auth_settings: AuthSettings
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            bcrypt_rounds=auth_settings.bcrypt_rounds,
        )
