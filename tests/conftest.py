"""Test configuration and fixtures."""

from uuid import uuid4

import logfire
import pytest

from signin.domain.value import ProviderProfile

# Keep spans and logs local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)


def make_profile(
    provider_id: str | None = None,
    display_name: str | None = "Ada Lovelace",
    username: str | None = None,
    emails: list[str] | None = None,
    photos: list[str] | None = None,
    avatar: str | None = None,
) -> ProviderProfile:
    """Helper function to build a provider profile for tests.

    Args:
        provider_id: Provider-scoped id (random if omitted)
        display_name: Display name reported by the provider
        username: Username reported by the provider
        emails: Email addresses (empty if omitted)
        photos: Photo URLs (empty if omitted)
        avatar: Discord avatar hash

    Returns:
        ProviderProfile value object
    """
    return ProviderProfile(
        id=provider_id or str(uuid4().int)[:18],
        display_name=display_name,
        username=username,
        emails=emails if emails is not None else [],
        photos=photos if photos is not None else [],
        avatar=avatar,
    )


@pytest.fixture
def google_profile() -> ProviderProfile:
    """Google profile with the email and photo the requested scopes grant."""
    return make_profile(
        provider_id="g-123",
        display_name="Ada Lovelace",
        emails=["Ada@Example.com"],
        photos=["https://lh3.googleusercontent.com/a/ada"],
    )
