"""Profile endpoints for the signed-in user and the admin user list."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin_session, require_roles
from app.core.database import get_db
from app.models.user import UserRole
from app.schemas.auth import CurrentUser, UserPublic
from app.schemas.user import UpdateUserRequest, UserListItem, UsersListResponse
from app.services.users import UserService

router = APIRouter()

require_customer_or_admin = require_roles(UserRole.CUSTOMER, UserRole.ADMIN)


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    return UserService(db)


@router.get("/profile", response_model=UserPublic)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(require_customer_or_admin)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserPublic:
    """Return the signed-in user's public fields."""
    return UserPublic.model_validate(users.require_by_id(current_user.id))


@router.put("/profile", response_model=UserPublic)
def update_profile(
    body: UpdateUserRequest,
    current_user: Annotated[CurrentUser, Depends(require_customer_or_admin)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UserPublic:
    """Update email, name and/or password. Issued tokens are not revoked by a password change."""
    return UserPublic.model_validate(users.update(current_user.id, body))


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin_session)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> UsersListResponse:
    """List all users (admin role and admin session cookie required)."""
    return UsersListResponse(
        users=[UserListItem.model_validate(u) for u in users.list_users()]
    )
