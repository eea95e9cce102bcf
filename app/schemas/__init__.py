"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AdminLoginRequest,
    AdminRegisterRequest,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from app.schemas.error import ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.user import UpdateUserRequest, UserListItem, UsersListResponse

__all__ = [
    "AdminLoginRequest",
    "AdminRegisterRequest",
    "AuthResponse",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UpdateUserRequest",
    "UserListItem",
    "UserPublic",
    "UsersListResponse",
]
