"""Session cookies holding the refresh and admin elevation tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any

from starlette.responses import Response

REFRESH_TOKEN_COOKIE = "refreshToken"
ADMIN_TOKEN_COOKIE = "adminToken"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class SessionCookieManager:
    """
    Sets and clears HttpOnly, Secure, SameSite=None cookies scoped to one domain.

    attach and clear share the same attribute set; browsers ignore a clear whose
    Domain/Path/Secure/SameSite differ from the original cookie.
    """

    def __init__(self, domain: str | None) -> None:
        self._domain = domain

    def _attributes(self) -> dict[str, Any]:
        return {
            "httponly": True,
            "secure": True,
            "samesite": "none",
            "domain": self._domain,
        }

    def attach(self, response: Response, name: str, value: str, ttl_days: int) -> None:
        """Set cookie name=value expiring ttl_days from now."""
        expires = datetime.now(UTC) + timedelta(days=ttl_days)
        response.set_cookie(name, value, expires=expires, **self._attributes())

    def clear(self, response: Response, name: str) -> None:
        """Overwrite cookie name with an empty value that has already expired."""
        response.set_cookie(name, "", expires=_EPOCH, **self._attributes())
