"""Repository interfaces.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from signin.domain.repository.database import Database
from signin.domain.repository.user import UserRepository

__all__ = [
    "Database",
    "UserRepository",
]
