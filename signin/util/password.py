"""Password hashing utilities for local accounts."""

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only uses the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _password_bytes(plain_password: str) -> bytes:
    """Encode and truncate to the bytes bcrypt actually hashes."""
    return plain_password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(plain_password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with a fresh bcrypt salt.

    Passwords longer than 72 bytes are truncated, not rejected.

    Args:
        plain_password: Password as entered by the user
        rounds: bcrypt cost factor

    Returns:
        Encoded bcrypt hash (includes salt and cost)
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a bcrypt hash.

    Args:
        plain_password: Password to check
        hashed_password: Hash produced by hash_password

    Returns:
        True if the password matches, False otherwise (including for
        malformed hashes)
    """
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError:
        # bcrypt rejects hashes with an invalid salt
        return False
