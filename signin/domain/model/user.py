"""User aggregate root.

One record per external identity (or per local email/password signup).
Accounts are never merged across providers.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, model_validator

from signin.domain.model.common import DomainModel
from signin.domain.value import AuthProvider, UserId

# User attribute holding each provider's stable identifier
LINKAGE_FIELDS: dict[AuthProvider, str] = {
    AuthProvider.GOOGLE: "google_id",
    AuthProvider.DISCORD: "discord_id",
    AuthProvider.MICROSOFT: "microsoft_id",
}


class User(DomainModel):
    """User aggregate root.

    Exactly one linkage is populated, and it matches `provider`:
    google_id, discord_id, microsoft_id, or a password hash for local
    accounts.
    """

    id: UserId
    provider: AuthProvider
    name: Optional[str] = None
    email: Optional[str] = None  # Always stored lower-cased
    picture: Optional[str] = None
    google_id: Optional[str] = None
    discord_id: Optional[str] = None
    microsoft_id: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)  # bcrypt hash
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def validate_linkage(self) -> "User":
        """Ensure the only populated linkage is the one for `provider`."""
        populated = {
            provider
            for provider, field in LINKAGE_FIELDS.items()
            if getattr(self, field) is not None
        }
        if self.password is not None:
            populated.add(AuthProvider.LOCAL)

        if populated != {self.provider}:
            raise ValueError(
                f"User with provider '{self.provider.value}' must have exactly "
                f"its own linkage populated, got: "
                f"{sorted(p.value for p in populated) or 'none'}"
            )
        return self

    @property
    def provider_id(self) -> Optional[str]:
        """Identifier linking this user to its external provider, if any."""
        field = LINKAGE_FIELDS.get(self.provider)
        return getattr(self, field) if field else None
