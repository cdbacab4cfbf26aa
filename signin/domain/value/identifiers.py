"""Strongly typed identifiers for domain entities."""

from typing import NewType
from uuid import UUID

# Internal user id, independent of any provider's id
UserId = NewType("UserId", UUID)
