"""Token, identity and user payload models."""

from .claims import TokenClaims
from .user import (
    CamelModel,
    LoginResult,
    UserCreate,
    UserCreated,
    UserProfileFields,
    UserPublic,
    UserUpdate,
)

__all__ = [
    "CamelModel",
    "LoginResult",
    "TokenClaims",
    "UserCreate",
    "UserCreated",
    "UserProfileFields",
    "UserPublic",
    "UserUpdate",
]
