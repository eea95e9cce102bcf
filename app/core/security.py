"""Password hashing and JWT issuing/verification for authentication."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from app.core.errors import TokenExpiredError, TokenInvalidError
from app.models.user import UserRole

# Min/max lengths for password validation (input validation before hashing).
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"
ADMIN_TOKEN_TYPE = "admin"

# Argon2id with library defaults; callers cannot tune the cost.
_password_hasher = PasswordHasher()


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    return _password_hasher.hash(plain_password)


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes verify as False."""
    try:
        return _password_hasher.verify(hashed, plain_password)
    except (VerificationError, InvalidHashError):
        return False


# Verified against when the email is unknown, so both login failure paths do one hash.
# Built at import so the first unknown-email login costs the same as later ones.
DUMMY_PASSWORD_HASH = hash_password("dummy-password-for-unknown-users")


@dataclass(frozen=True)
class TokenClaims:
    """Verified token payload."""

    subject_id: int
    role: UserRole
    token_type: str


class TokenIssuer:
    """
    Mints and verifies symmetric-signed JWTs carrying subject id, role and token type.

    One instance per signing secret: the access/refresh pair shares JWT_SECRET,
    the admin elevation token uses ADMIN_TOKEN_SECRET.
    """

    def __init__(self, secret: str, algorithm: str) -> None:
        self._secret = secret
        self._algorithm = algorithm

    def issue(
        self,
        subject_id: int,
        role: UserRole,
        ttl: timedelta,
        token_type: str = ACCESS_TOKEN_TYPE,
    ) -> str:
        """
        Create a signed token valid for at least ttl from now.

        exp is rounded up to the next whole second, since JWT times are integral.
        """
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "role": UserRole(role).value,
            "type": token_type,
            "iat": now,
            "exp": math.ceil((now + ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str, expected_type: str | None = None) -> TokenClaims:
        """
        Decode and validate a token.

        Raises TokenExpiredError when exp is in the past and TokenInvalidError for
        any other failure (signature, structure, missing claims, unexpected type).
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.PyJWTError as e:
            raise TokenInvalidError("Invalid token") from e

        token_type = payload.get("type")
        if expected_type is not None and token_type != expected_type:
            raise TokenInvalidError("Invalid token type")
        try:
            subject_id = int(payload["sub"])
            role = UserRole(payload.get("role"))
        except (TypeError, ValueError) as e:
            raise TokenInvalidError("Invalid token payload") from e
        return TokenClaims(subject_id=subject_id, role=role, token_type=token_type)
