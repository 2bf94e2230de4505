"""Pydantic request/response schemas."""

from accounts.schemas.auth import (
    AuthResponse,
    CurrentUser,
    MessageResponse,
    RefreshResponse,
    SignInRequest,
    SignUpRequest,
)
from accounts.schemas.health import HealthResponse
from accounts.schemas.user import (
    UserDeletedResponse,
    UserRead,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "MessageResponse",
    "RefreshResponse",
    "SignInRequest",
    "SignUpRequest",
    "UserDeletedResponse",
    "UserRead",
    "UserResponse",
    "UsersListResponse",
    "UserUpdate",
]
