"""Provider userinfo to ProviderProfile conversion.

Each provider reports the signed-in user in its own format: OIDC claims for
Google, the `users/@me` object for Discord and the Graph `me` resource for
Microsoft. These helpers map them onto the common ProviderProfile shape.
"""

from typing import Any

import httpx
import logfire
from authlib.integrations.starlette_client import StarletteOAuth2App

from signin.adapter.error import ProviderError
from signin.domain.value import AuthProvider, ProviderProfile


def _required_id(provider: AuthProvider, data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None or value == "":
        raise ProviderError(provider.value, f"userinfo is missing '{key}'")
    return str(value)


def _as_list(value: str | None) -> list[str]:
    return [value] if value else []


def google_profile(userinfo: dict[str, Any]) -> ProviderProfile:
    """Map OpenID Connect claims from Google."""
    return ProviderProfile(
        id=_required_id(AuthProvider.GOOGLE, userinfo, "sub"),
        display_name=userinfo.get("name"),
        emails=_as_list(userinfo.get("email")),
        photos=_as_list(userinfo.get("picture")),
    )


def discord_profile(data: dict[str, Any]) -> ProviderProfile:
    """Map a Discord user object."""
    return ProviderProfile(
        id=_required_id(AuthProvider.DISCORD, data, "id"),
        username=data.get("username"),
        display_name=data.get("global_name"),
        emails=_as_list(data.get("email")),
        avatar=data.get("avatar"),
    )


def microsoft_profile(data: dict[str, Any]) -> ProviderProfile:
    """Map a Microsoft Graph user resource."""
    return ProviderProfile(
        id=_required_id(AuthProvider.MICROSOFT, data, "id"),
        username=data.get("userPrincipalName"),
        display_name=data.get("displayName"),
        emails=_as_list(data.get("mail")),
    )


async def fetch_profile(
    provider: AuthProvider, client: StarletteOAuth2App, token: dict[str, Any]
) -> ProviderProfile:
    """Load the signed-in user's profile after the token exchange.

    Args:
        provider: Provider that issued the token
        client: Authlib client registered for that provider
        token: Token response from authorize_access_token

    Returns:
        Provider profile

    Raises:
        ProviderError: If the provider API call fails or returns no id
    """
    with logfire.span("oauth.fetch_profile", provider=provider.value):
        try:
            if provider == AuthProvider.GOOGLE:
                # Parsed from the ID token when the openid scope is granted
                userinfo = token.get("userinfo") or await client.userinfo(token=token)
                return google_profile(dict(userinfo))

            if provider == AuthProvider.DISCORD:
                response = await client.get("users/@me", token=token)
                response.raise_for_status()
                return discord_profile(response.json())

            if provider == AuthProvider.MICROSOFT:
                response = await client.get("me", token=token)
                response.raise_for_status()
                return microsoft_profile(response.json())

        except httpx.HTTPError as e:
            logfire.error(
                "Provider userinfo request failed", provider=provider.value, error=str(e)
            )
            raise ProviderError(provider.value, f"userinfo request failed: {e}") from e

        raise ProviderError(provider.value, "no userinfo mapping for provider")
