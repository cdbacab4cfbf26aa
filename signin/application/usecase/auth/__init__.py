"""Authentication use cases."""

from .find_or_create_user import (
    FindOrCreateUserRequest,
    FindOrCreateUserUseCase,
    LoginErrorKind,
    LoginFailure,
    LoginResult,
    LoginSuccess,
)

__all__ = [
    "FindOrCreateUserRequest",
    "FindOrCreateUserUseCase",
    "LoginErrorKind",
    "LoginFailure",
    "LoginResult",
    "LoginSuccess",
]
