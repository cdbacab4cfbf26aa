"""Infrastructure providers."""

# Import bases
from .oauth import OAuthRegistryProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "OAuthRegistryProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
