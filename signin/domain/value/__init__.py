"""Domain value objects."""

from signin.domain.value.identifiers import UserId
from signin.domain.value.types import (
    AuthProvider,
    NormalizedProfile,
    ProviderProfile,
)

__all__ = [
    # Identifiers
    "UserId",
    # Types
    "AuthProvider",
    "NormalizedProfile",
    "ProviderProfile",
]
