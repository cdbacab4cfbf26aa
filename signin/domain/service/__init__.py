"""Domain services."""

from .base import Service
from .provider import (
    PROVIDER_DESCRIPTORS,
    ProviderDescriptor,
    get_descriptor,
)
from .user_service import UserService, normalize_email

__all__ = [
    "PROVIDER_DESCRIPTORS",
    "ProviderDescriptor",
    "Service",
    "UserService",
    "get_descriptor",
    "normalize_email",
]
