"""Authentication flows: registration, login, admin elevation and refresh-token rotation."""

import hmac
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import (
    ADMIN_TOKEN_TYPE,
    DUMMY_PASSWORD_HASH,
    REFRESH_TOKEN_TYPE,
    TokenIssuer,
    verify_password,
)
from app.models.user import User, UserRole
from app.services.users import UserService

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
INVALID_SECRET_KEY_MESSAGE = "Invalid secret key."
INVALID_REFRESH_TOKEN_MESSAGE = "Invalid refresh token."


@dataclass
class AuthResult:
    """Outcome of a successful flow. Tokens other than access_token go into cookies."""

    user: User
    access_token: str
    refresh_token: str
    admin_token: str | None = None


class AuthService:
    """
    Coordinates the credential store, password hasher and token issuers.

    Stateless between calls: every method either returns fresh tokens or raises
    an AppError subclass (ConflictError, UnauthorizedError, ForbiddenError,
    NotFoundError). Cookie handling stays at the HTTP boundary.
    """

    def __init__(self, db: Session, settings: "Settings") -> None:
        self.settings = settings
        self.users = UserService(db)
        self.tokens = TokenIssuer(
            settings.JWT_SECRET.get_secret_value(), settings.JWT_ALGORITHM
        )
        self.admin_tokens = TokenIssuer(
            settings.ADMIN_TOKEN_SECRET.get_secret_value(), settings.JWT_ALGORITHM
        )

    def register(self, email: str, password: str, name: str | None = None) -> AuthResult:
        user = self.users.create(email, password, name=name, role=UserRole.CUSTOMER)
        logger.info("User registered", extra={"user_id": user.id})
        return self._issue(user)

    def register_admin(
        self, email: str, password: str, secret_key: str, name: str | None = None
    ) -> AuthResult:
        self._check_secret_key(secret_key)
        user = self.users.create(email, password, name=name, role=UserRole.ADMIN)
        logger.info("Admin registered", extra={"user_id": user.id})
        return self._issue(user, elevate=True)

    def login(self, email: str, password: str) -> AuthResult:
        user = self._authenticate(email, password)
        logger.info("User logged in", extra={"user_id": user.id})
        return self._issue(user)

    def login_admin(self, email: str, password: str, secret_key: str) -> AuthResult:
        """Secret key is checked before the store is touched, so a bad key reveals nothing about the email."""
        self._check_secret_key(secret_key)
        user = self._authenticate(email, password)
        logger.info("Admin elevation granted", extra={"user_id": user.id})
        return self._issue(user, elevate=True)

    def refresh_tokens(self, refresh_token: str | None) -> AuthResult:
        """
        Mint a new pair from a valid refresh token. The password is not re-checked and
        no revocation list exists: any validly signed, unexpired refresh token works.
        """
        if not refresh_token:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN_MESSAGE)
        claims = self.tokens.verify(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        user = self.users.require_by_id(claims.subject_id)
        return self._issue(user)

    def verify_admin_token(self, admin_token: str | None, user_id: int) -> None:
        """Raise ForbiddenError unless admin_token is a valid elevation token for user_id."""
        if not admin_token:
            raise ForbiddenError("Admin session required.")
        try:
            claims = self.admin_tokens.verify(admin_token, expected_type=ADMIN_TOKEN_TYPE)
        except UnauthorizedError as e:
            raise ForbiddenError("Admin session required.") from e
        if claims.subject_id != user_id or claims.role != UserRole.ADMIN:
            raise ForbiddenError("Admin session required.")

    def _check_secret_key(self, secret_key: str) -> None:
        expected = self.settings.ADMIN_SECRET_KEY.get_secret_value()
        if not hmac.compare_digest(secret_key.encode("utf-8"), expected.encode("utf-8")):
            logger.warning("Admin secret key rejected", extra={"reason": "bad_secret_key"})
            raise ForbiddenError(INVALID_SECRET_KEY_MESSAGE)

    def _authenticate(self, email: str, password: str) -> User:
        user = self.users.get_by_email(email)
        if user is None:
            # Same hashing cost as a wrong password.
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed", extra={"reason": "invalid_credentials"})
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        if not verify_password(password, user.password_hash):
            logger.info("Login failed", extra={"reason": "invalid_credentials"})
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        return user

    def _issue(self, user: User, elevate: bool = False) -> AuthResult:
        access_ttl = timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        refresh_ttl = timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS)
        result = AuthResult(
            user=user,
            access_token=self.tokens.issue(user.id, user.role, access_ttl),
            refresh_token=self.tokens.issue(
                user.id, user.role, refresh_ttl, token_type=REFRESH_TOKEN_TYPE
            ),
        )
        if elevate:
            admin_ttl = timedelta(minutes=self.settings.ADMIN_TOKEN_EXPIRE_MINUTES)
            result.admin_token = self.admin_tokens.issue(
                user.id, user.role, admin_ttl, token_type=ADMIN_TOKEN_TYPE
            )
        return result
