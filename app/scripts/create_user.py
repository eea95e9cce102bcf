"""
Create a user directly in the credential store (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD [--name NAME] [--role CUSTOMER|ADMIN]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password --role ADMIN
"""
import argparse
import logging
import sys

from email_validator import EmailNotValidError, validate_email

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import ConflictError
from app.core.log import configure_logging
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import UserRole
from app.services.users import UserService

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Storefront user without the HTTP API.")
    parser.add_argument("email", help="Account email")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument(
        "--role",
        default=UserRole.CUSTOMER.value,
        choices=[role.value for role in UserRole],
    )
    args = parser.parse_args(argv)
    configure_logging(get_settings().LOG_LEVEL)

    # Same validator as the API's EmailStr, so the account can log in.
    try:
        email = validate_email(args.email.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        print(f"Invalid email: {e}", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        user = UserService(db).create(
            email, args.password, name=args.name, role=UserRole(args.role)
        )
    except ConflictError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user", extra={"user_id": user.id, "role": user.role.value})
    print(f"Created user '{user.email}' (id={user.id}) with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
