"""ORM model for store accounts (credentials and role)."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String, func

from app.models.base import Base


class UserRole(str, enum.Enum):
    """Roles a user can hold; ADMIN is only granted through the admin-key ceremony or the CLI."""

    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class User(Base):
    """
    Customer or admin account used for JWT authentication and role-based access control.

    email is unique (enforced by the store); name is filled with "Customer #<id>"
    when a customer registers without one.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False, length=32),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
