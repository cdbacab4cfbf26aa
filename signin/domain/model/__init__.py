"""Domain model entities."""

from signin.domain.model.user import LINKAGE_FIELDS, User

__all__ = [
    "LINKAGE_FIELDS",
    "User",
]
