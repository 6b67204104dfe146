"""Shared-secret guard for the dispatch relay.

The relay spends the configured GitHub token on behalf of its callers, so
``POST /dispatch`` is only served to clients presenting ``settings.api_key``.
"""

import hmac

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from dispatch_relay.config import settings

API_KEY_HEADER = "X-API-Key"

# Health checks from load balancers carry no key
_PUBLIC_PATHS = frozenset({"/healthz"})


def api_key_matches(provided: str | None, expected: str) -> bool:
    """Constant-time comparison of the presented key against the configured one."""
    if not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject relay calls lacking the configured API key with a JSON 401.

    An empty ``settings.api_key`` turns the guard off for local use.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        expected = settings.api_key
        if not expected or request.url.path in _PUBLIC_PATHS:
            return await call_next(request)

        if not api_key_matches(request.headers.get(API_KEY_HEADER), expected):
            return JSONResponse(
                status_code=401, content={"detail": "Invalid or missing API key"}
            )
        return await call_next(request)
