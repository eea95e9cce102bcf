"""Application error kinds. Each carries the HTTP status it maps to at the API boundary."""


class AppError(Exception):
    """Base class for expected failures surfaced to clients as {statusCode, message}."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers
        super().__init__(message)


class BadRequestError(AppError):
    """Request is well-formed JSON but semantically invalid."""

    status_code = 400


class UnauthorizedError(AppError):
    """Missing or bad credentials, or a missing, invalid or expired token."""

    status_code = 401


class ForbiddenError(AppError):
    """Authenticated but not allowed (wrong role, bad admin secret key)."""

    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Unique constraint would be violated (e.g. email already registered)."""

    status_code = 409


class InternalError(AppError):
    """Unexpected store or hashing failure."""

    status_code = 500


class TokenInvalidError(UnauthorizedError):
    """Token signature does not match, structure is malformed, or claims are wrong."""


class TokenExpiredError(UnauthorizedError):
    """Token signature is valid but its exp claim is in the past."""
