"""Domain value objects for sign-in.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import Field, field_validator

from signin.domain.value.common import ValueObject


class AuthProvider(str, Enum):
    """How a user account authenticates.

    LOCAL is email/password signup; every other member is an external
    identity provider with its own linkage field on the user record.
    """

    LOCAL = "local"
    GOOGLE = "google"
    DISCORD = "discord"
    MICROSOFT = "microsoft"


class ProviderProfile(ValueObject):
    """Authenticated profile handed over by the OAuth middleware.

    Common shape for every provider. Only `id` is guaranteed; the rest
    depends on what the provider exposes and the scopes granted.
    """

    id: str  # Stable provider-scoped identifier
    display_name: str | None = None
    username: str | None = None
    emails: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)
    avatar: str | None = None  # Discord avatar hash

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate provider id is not empty."""
        if not v:
            raise ValueError("Provider profile id must not be empty")
        return v


class NormalizedProfile(ValueObject):
    """Provider profile reduced to the fields stored on a user."""

    provider_id: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None
