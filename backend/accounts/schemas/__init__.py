"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenResponseSchema,
)
from .user import (
    AvatarSchema,
    ChangePasswordSchema,
    CoverImageSchema,
    UpdateAccountSchema,
    UserSchema,
)

__all__ = [
    "LoginSchema",
    "LoginResponseSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenResponseSchema",
    "AvatarSchema",
    "ChangePasswordSchema",
    "CoverImageSchema",
    "UpdateAccountSchema",
    "UserSchema",
]
