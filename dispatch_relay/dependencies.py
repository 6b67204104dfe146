"""Centralized FastAPI dependencies for use with Depends()."""

from collections.abc import AsyncIterator

import httpx

from dispatch_relay.config import settings


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Yield an httpx client for one GitHub request, closed afterwards.

    Redirects are followed: GitHub answers 307 for a renamed repository and
    httpx replays the POST with its body on the new location.  Tests replace
    this dependency with a client backed by ``httpx.MockTransport``.
    """
    async with httpx.AsyncClient(
        timeout=settings.github_timeout, follow_redirects=True
    ) as client:
        yield client


__all__ = ["get_http_client"]
