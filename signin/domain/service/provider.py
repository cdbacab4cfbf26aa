"""Provider descriptors and profile extraction rules.

Each supported identity provider is described by the user field that links
accounts to it and a function reducing its profile to the fields stored
on a user. Extraction quirks stay isolated per provider.
"""

from dataclasses import dataclass
from typing import Callable

from signin.domain.error import MalformedProfileError, UnsupportedProviderError
from signin.domain.model.user import LINKAGE_FIELDS
from signin.domain.value import AuthProvider, NormalizedProfile, ProviderProfile

DISCORD_AVATAR_URL = "https://cdn.discordapp.com/avatars/{user_id}/{avatar}.png"


@dataclass(frozen=True)
class ProviderDescriptor:
    """Everything find-or-create needs to know about one provider."""

    provider: AuthProvider
    linkage_field: str
    extract_profile: Callable[[ProviderProfile], NormalizedProfile]


def extract_google_profile(profile: ProviderProfile) -> NormalizedProfile:
    """Google always returns an email and a photo with the requested scopes.

    Raises:
        MalformedProfileError: If either list is empty
    """
    if not profile.emails:
        raise MalformedProfileError(AuthProvider.GOOGLE.value, "emails")
    if not profile.photos:
        raise MalformedProfileError(AuthProvider.GOOGLE.value, "photos")

    return NormalizedProfile(
        provider_id=profile.id,
        email=profile.emails[0] or None,
        name=profile.display_name,
        picture=profile.photos[0],
    )


def extract_discord_profile(profile: ProviderProfile) -> NormalizedProfile:
    """Discord email is optional; the avatar URL is built from the hash."""
    picture = None
    if profile.avatar:
        picture = DISCORD_AVATAR_URL.format(user_id=profile.id, avatar=profile.avatar)

    return NormalizedProfile(
        provider_id=profile.id,
        email=profile.emails[0] if profile.emails else None,
        name=profile.username or profile.display_name,
        picture=picture,
    )


def extract_microsoft_profile(profile: ProviderProfile) -> NormalizedProfile:
    """Microsoft photos need a separate Graph call, so picture is never set."""
    return NormalizedProfile(
        provider_id=profile.id,
        email=profile.emails[0] if profile.emails else None,
        name=profile.display_name,
        picture=None,
    )


PROVIDER_DESCRIPTORS: dict[AuthProvider, ProviderDescriptor] = {
    AuthProvider.GOOGLE: ProviderDescriptor(
        provider=AuthProvider.GOOGLE,
        linkage_field=LINKAGE_FIELDS[AuthProvider.GOOGLE],
        extract_profile=extract_google_profile,
    ),
    AuthProvider.DISCORD: ProviderDescriptor(
        provider=AuthProvider.DISCORD,
        linkage_field=LINKAGE_FIELDS[AuthProvider.DISCORD],
        extract_profile=extract_discord_profile,
    ),
    AuthProvider.MICROSOFT: ProviderDescriptor(
        provider=AuthProvider.MICROSOFT,
        linkage_field=LINKAGE_FIELDS[AuthProvider.MICROSOFT],
        extract_profile=extract_microsoft_profile,
    ),
}


def get_descriptor(provider: AuthProvider) -> ProviderDescriptor:
    """Look up the descriptor for an external provider.

    Raises:
        UnsupportedProviderError: For LOCAL or any unknown provider
    """
    descriptor = PROVIDER_DESCRIPTORS.get(provider)
    if descriptor is None:
        raise UnsupportedProviderError(getattr(provider, "value", str(provider)))
    return descriptor
