"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import UserRole


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Account email")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )


class RegisterRequest(LoginRequest):
    """Customer registration; name defaults to 'Customer #<id>'."""

    name: str | None = Field(default=None, min_length=1, max_length=255)


class AdminLoginRequest(LoginRequest):
    """Admin login: credentials plus the out-of-band admin secret key."""

    model_config = ConfigDict(populate_by_name=True)

    secret_key: str = Field(..., alias="secretKey", min_length=1, max_length=512)


class AdminRegisterRequest(AdminLoginRequest):
    name: str | None = Field(default=None, min_length=1, max_length=255)


class UserPublic(BaseModel):
    """User fields safe to return to the client (no password hash, no role)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    name: str | None = None
    created_at: datetime = Field(..., alias="createdAt")


class AuthResponse(BaseModel):
    """Body returned by register/login/refresh. The refresh token travels only in a cookie."""

    model_config = ConfigDict(populate_by_name=True)

    user: UserPublic
    access_token: str = Field(..., alias="accessToken", description="JWT access token")


class CurrentUser(BaseModel):
    """Authenticated user (id, email, role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: UserRole
