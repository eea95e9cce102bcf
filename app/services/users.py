"""Credential store access: create, look up and update User rows."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.core.security import hash_password
from app.models.user import User, UserRole
from app.schemas.user import UpdateUserRequest

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = "User with this email already exists."


def normalize_email(email: str) -> str:
    """Emails are stored and compared lowercased so uniqueness is case-insensitive."""
    return email.strip().lower()


class UserService:
    """User persistence on top of one SQLAlchemy session (one per request)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def require_by_id(self, user_id: int) -> User:
        """Return the user or raise NotFoundError."""
        user = self.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def list_users(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

    def create(
        self,
        email: str,
        password: str,
        name: str | None = None,
        role: UserRole = UserRole.CUSTOMER,
    ) -> User:
        """
        Hash the password and insert a user.

        Raises ConflictError when the email is taken, including when a concurrent
        registration wins the race and the unique index rejects this insert.
        Customers created without a name are named "Customer #<id>".
        """
        email = normalize_email(email)
        if self.get_by_email(email) is not None:
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
        )
        self.db.add(user)
        try:
            self.db.flush()
            if user.name is None and role == UserRole.CUSTOMER:
                user.name = f"Customer #{user.id}"
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("User insert rejected by unique constraint", extra={"reason": "email_taken"})
            raise ConflictError(EMAIL_TAKEN_MESSAGE) from e
        self.db.refresh(user)
        return user

    def update(self, user_id: int, body: UpdateUserRequest) -> User:
        """Apply the fields present in body; password is re-hashed. An empty body is a BadRequestError."""
        if body.email is None and body.name is None and body.password is None:
            raise BadRequestError("No fields to update.")
        user = self.require_by_id(user_id)

        if body.email is not None:
            email = normalize_email(body.email)
            if email != user.email:
                existing = self.get_by_email(email)
                if existing is not None:
                    raise ConflictError(EMAIL_TAKEN_MESSAGE)
                user.email = email
        if body.name is not None:
            user.name = body.name
        if body.password is not None:
            user.password_hash = hash_password(body.password)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(EMAIL_TAKEN_MESSAGE) from e
        self.db.refresh(user)
        return user
