"""In-memory repository implementations for testing."""

from .database import InMemoryDatabase
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryDatabase",
    "InMemoryUserRepository",
]
