"""Unit tests for the User model."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from signin.domain.model import User
from signin.domain.value import AuthProvider, UserId


def test_provider_user_exposes_provider_id():
    """Should read the provider id from the matching linkage field."""
    user = User(id=UserId(uuid4()), provider=AuthProvider.DISCORD, discord_id="42")

    assert user.provider_id == "42"
    assert user.google_id is None
    assert user.microsoft_id is None


def test_local_user_has_no_provider_id():
    """Local accounts are linked by password, not a provider id."""
    user = User(id=UserId(uuid4()), provider=AuthProvider.LOCAL, password="$2b$10$hash")

    assert user.provider_id is None


def test_created_at_is_timezone_aware():
    """Should default created_at to an aware UTC timestamp."""
    user = User(id=UserId(uuid4()), provider=AuthProvider.GOOGLE, google_id="g-1")

    assert user.created_at.tzinfo is not None


def test_rejects_missing_linkage():
    """Should reject a provider user without its linkage field."""
    with pytest.raises(ValidationError):
        User(id=UserId(uuid4()), provider=AuthProvider.GOOGLE)


def test_rejects_foreign_linkage():
    """Should reject a user carrying another provider's linkage."""
    with pytest.raises(ValidationError):
        User(
            id=UserId(uuid4()),
            provider=AuthProvider.GOOGLE,
            google_id="g-1",
            discord_id="d-1",
        )


def test_password_is_hidden_from_repr():
    """Should keep the password hash out of repr."""
    user = User(id=UserId(uuid4()), provider=AuthProvider.LOCAL, password="secret-hash")

    assert "secret-hash" not in repr(user)
