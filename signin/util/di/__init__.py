"""Dependency injection module."""

from typing import Type

from signin.util.di.application import ProdApplicationProvider
from signin.util.di.base import Component, ProviderBase
from signin.util.di.core import ProdConfigProvider
from signin.util.di.domain import ProdDomainProvider
from signin.util.di.infrastructure import (
    OAuthRegistryProvider,
    PersistenceProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Mockable: tests swap in in-memory users
    PersistenceProvider,
    OAuthRegistryProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for a PROVIDERS entry.

    A base without subclasses is concrete and used as-is. A base with
    subclasses is a mockable component, and the subclass whose
    `__is_mock__` matches `use_mock` is returned.

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    subclasses = base.__subclasses__()
    if not subclasses:
        return base

    for candidate in subclasses:
        if getattr(candidate, "__is_mock__", False) == use_mock:
            return candidate

    kind = "mock" if use_mock else "production"
    component_name = getattr(base, "__mock_component__", None) or base.__name__
    raise ValueError(f"No {kind} implementation for {component_name}")


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "OAuthRegistryProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
