"""HTTP middleware: per-request timeout."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, Response, status

from app.api.errors import error_response

logger = logging.getLogger(__name__)


def request_timeout_middleware(
    timeout_sec: float,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """
    Build middleware answering 504 when a request exceeds timeout_sec.

    Work already handed to the threadpool (hashing, DB calls) is not interrupted;
    the client just stops waiting for it.
    """

    async def middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout_sec)
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out",
                extra={"path": request.url.path, "timeout_sec": timeout_sec},
            )
            return error_response(
                status.HTTP_504_GATEWAY_TIMEOUT, "Request timed out."
            )

    return middleware
