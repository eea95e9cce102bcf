"""Auth endpoints (register, login, admin elevation, refresh, logout) and auth dependencies."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.errors import error_response
from app.core.config import Settings, get_settings
from app.core.cookies import ADMIN_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, SessionCookieManager
from app.core.database import get_db
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import ACCESS_TOKEN_TYPE
from app.models.user import UserRole
from app.schemas.auth import (
    AdminLoginRequest,
    AdminRegisterRequest,
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from app.services.auth import AuthResult, AuthService

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(db, settings)


def get_cookie_manager(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionCookieManager:
    return SessionCookieManager(settings.SERVER_DOMAIN)


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=UserPublic.model_validate(result.user),
        access_token=result.access_token,
    )


def _attach_session(
    response: Response,
    result: AuthResult,
    cookies: SessionCookieManager,
    settings: Settings,
) -> None:
    cookies.attach(
        response, REFRESH_TOKEN_COOKIE, result.refresh_token, settings.COOKIE_EXPIRE_DAYS
    )
    if result.admin_token is not None:
        cookies.attach(
            response, ADMIN_TOKEN_COOKIE, result.admin_token, settings.COOKIE_EXPIRE_DAYS
        )


@router.post("/register", response_model=AuthResponse)
def register(
    body: RegisterRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Create a customer account and start a session.
    Returns the user and an access token; the refresh token is set as an HttpOnly cookie.
    """
    result = auth.register(body.email, body.password, name=body.name)
    _attach_session(response, result, cookies, settings)
    return _to_response(result)


@router.post("/register-admin", response_model=AuthResponse)
def register_admin(
    body: AdminRegisterRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Create an admin account (requires the admin secret key); sets refresh and admin cookies."""
    result = auth.register_admin(body.email, body.password, body.secret_key, name=body.name)
    _attach_session(response, result, cookies, settings)
    return _to_response(result)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Authenticate with email and password.
    Include the returned token in the Authorization header as: Bearer <accessToken>
    """
    result = auth.login(body.email, body.password)
    _attach_session(response, result, cookies, settings)
    return _to_response(result)


@router.post("/login-admin", response_model=AuthResponse)
def login_admin(
    body: AdminLoginRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Authenticate and obtain the admin elevation cookie (requires the admin secret key)."""
    result = auth.login_admin(body.email, body.password, body.secret_key)
    _attach_session(response, result, cookies, settings)
    return _to_response(result)


@router.post("/access-token", response_model=AuthResponse)
def refresh_access_token(
    request: Request,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse | JSONResponse:
    """
    Rotate the session using the refreshToken cookie.
    On a missing, invalid or expired cookie the response is 401 and the cookie is cleared.
    """
    try:
        result = auth.refresh_tokens(request.cookies.get(REFRESH_TOKEN_COOKIE))
    except UnauthorizedError as e:
        logger.info("Refresh rejected", extra={"reason": type(e).__name__})
        failure = error_response(e.status_code, e.message)
        cookies.clear(failure, REFRESH_TOKEN_COOKIE)
        return failure
    _attach_session(response, result, cookies, settings)
    return _to_response(result)


@router.post("/logout", response_model=bool)
def logout(
    response: Response,
    cookies: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
) -> bool:
    """Clear the refresh and admin cookies. Issued tokens stay valid until they expire."""
    cookies.clear(response, REFRESH_TOKEN_COOKIE)
    cookies.clear(response, ADMIN_TOKEN_COOKIE)
    return True


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> CurrentUser:
    """Dependency: require a valid Bearer access token and return the current user. Raises 401 otherwise."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated", headers=BEARER_CHALLENGE)
    try:
        claims = auth.tokens.verify(credentials.credentials, expected_type=ACCESS_TOKEN_TYPE)
    except UnauthorizedError as e:
        raise UnauthorizedError("Invalid or expired token", headers=BEARER_CHALLENGE) from e
    user = auth.users.get_by_id(claims.subject_id)
    if user is None:
        raise UnauthorizedError("User not found", headers=BEARER_CHALLENGE)
    return CurrentUser.model_validate(user)


def require_roles(*roles: UserRole) -> Callable[..., CurrentUser]:
    """
    Build a dependency that admits only users whose role is in roles.
    Attach per route, e.g. dependencies=[Depends(require_roles(UserRole.ADMIN))].
    """
    allowed = frozenset(roles)

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in allowed:
            raise ForbiddenError("Insufficient role")
        return current_user

    return dependency


require_admin = require_roles(UserRole.ADMIN)


def require_admin_session(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_admin)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> CurrentUser:
    """Dependency: ADMIN role plus a valid adminToken cookie for the same user. Raises 403 otherwise."""
    auth.verify_admin_token(request.cookies.get(ADMIN_TOKEN_COOKIE), current_user.id)
    return current_user
