"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from signin.domain.model import User
from signin.domain.value import AuthProvider, UserId


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        provider=AuthProvider(row["provider"]),
        name=row.get("name"),
        email=row.get("email"),
        picture=row.get("picture"),
        google_id=row.get("google_id"),
        discord_id=row.get("discord_id"),
        microsoft_id=row.get("microsoft_id"),
        password=row.get("password"),
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion
    """
    return user.model_dump(mode="python", exclude={"provider"}) | {
        "provider": user.provider.value
    }
