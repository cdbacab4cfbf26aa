"""Authentication routes."""

import logging
from datetime import datetime
from typing import Any

from authlib.integrations.starlette_client import OAuthError
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from signin.adapter.error import ProviderError
from signin.adapter.oauth import StrategyRegistrar, fetch_profile
from signin.domain.error import (
    DatabaseUnavailableError,
    MalformedProfileError,
    UnsupportedProviderError,
)
from signin.domain.model import User
from signin.domain.value import AuthProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

# Checked in order; anything else is a storage failure
LOGIN_ERRORS: list[tuple[type[Exception], int, str]] = [
    (
        DatabaseUnavailableError,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "database_unavailable",
    ),
    (MalformedProfileError, status.HTTP_502_BAD_GATEWAY, "malformed_profile"),
]


def _login_error(error: Exception) -> HTTPException:
    """HTTP error for a login that completed with done(error, None)."""
    for error_type, status_code, detail in LOGIN_ERRORS:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="storage_failure"
    )


def _registered_provider(name: str, registrar: StrategyRegistrar) -> AuthProvider:
    """Resolve a path segment to a provider with a registered strategy.

    Raises:
        HTTPException: 404 for unknown providers and for LOCAL
    """
    try:
        provider = AuthProvider(name)
        registrar.get(provider)
    except (ValueError, UnsupportedProviderError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unsupported provider: {name}",
        )
    return provider


class UserResponse(BaseModel):
    """Resolved user, handed to the downstream session/token step."""

    id: str
    provider: AuthProvider
    name: str | None
    email: str | None
    picture: str | None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=str(user.id),
            provider=user.provider,
            name=user.name,
            email=user.email,
            picture=user.picture,
            created_at=user.created_at,
        )


@router.get("/{provider}/login")
async def login(
    provider: str,
    request: Request,
    registrar: FromDishka[StrategyRegistrar],
):
    """Redirect to the identity provider's consent screen.

    Args:
        provider: Identity provider to sign in with
        request: Incoming request (OAuth state is kept in its session)
        registrar: Strategy registrar from DI

    Returns:
        HTTP 302 redirect to the provider

    Raises:
        HTTPException: 404 if the provider is not registered

    Example:
        GET /auth/discord/login

        Redirects to: https://discord.com/oauth2/authorize?response_type=code&...
    """
    auth_provider = _registered_provider(provider, registrar)
    client = registrar.client(auth_provider)

    logger.info(f"Initiating {provider} login")
    return await client.authorize_redirect(
        request, registrar.callback_url(auth_provider)
    )


@router.get("/callback/{provider}", response_model=UserResponse)
async def callback(
    provider: str,
    request: Request,
    registrar: FromDishka[StrategyRegistrar],
) -> UserResponse:
    """Complete the OAuth handshake and resolve the local user.

    The first login for a provider identity creates the user; later logins
    return the same record unchanged. The provider strategy reports the
    outcome through its verify callback as done(error, user).

    Args:
        provider: Identity provider redirecting back
        request: Callback request carrying code and state
        registrar: Strategy registrar from DI

    Returns:
        The resolved user

    Raises:
        HTTPException: 404 unknown provider, 502 provider or profile error,
            503 database unavailable, 500 storage failure
    """
    auth_provider = _registered_provider(provider, registrar)
    strategy = registrar.get(auth_provider)
    client = registrar.client(auth_provider)

    logger.info(f"OAuth callback received: provider={provider}")

    try:
        token = await client.authorize_access_token(request)
        profile = await fetch_profile(auth_provider, client, token)
    except (OAuthError, ProviderError) as e:
        logger.error(f"OAuth error during {provider} callback: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Authentication with {provider} failed",
        )

    outcome: dict[str, Any] = {}

    def done(error: Exception | None, user: User | None) -> None:
        outcome["error"] = error
        outcome["user"] = user

    await strategy.verify(
        request,
        token.get("access_token"),
        token.get("refresh_token"),
        profile,
        done,
    )

    error = outcome["error"]
    if error is not None:
        logger.error(
            f"Login failed: provider={provider}, error_type={type(error).__name__}, "
            f"error={error}"
        )
        raise _login_error(error)

    user = outcome["user"]
    logger.info(f"Login successful: provider={provider}, user_id={user.id}")
    return UserResponse.from_user(user)
