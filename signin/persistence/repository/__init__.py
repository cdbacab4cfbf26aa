"""PostgreSQL repository implementations."""

from signin.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
]
