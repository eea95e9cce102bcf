"""Request/response schemas for user profile endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import UserRole


class UpdateUserRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )


class UserListItem(BaseModel):
    """User entry for the admin list (no password)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    name: str | None = None
    role: UserRole
    created_at: datetime = Field(..., alias="createdAt")


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserListItem]
