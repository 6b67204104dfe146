"""Shared test fixtures: a stub GitHub API and a FastAPI test client."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from dispatch_relay.config import settings
from dispatch_relay.dependencies import get_http_client
from dispatch_relay.main import app


class StubGitHub:
    """Records dispatch requests and answers them with a configurable response.

    Set ``error`` to make the transport raise instead of responding.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 204
        self.json: object | None = None
        self.text: str | None = None
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep environment-provided secrets out of the tests."""
    monkeypatch.setattr(settings, "github_token", "")
    monkeypatch.setattr(settings, "api_key", "")
    monkeypatch.setattr(settings, "github_api_url", "https://api.github.com")
    monkeypatch.setattr(settings, "default_event_type", "update-file-event")


@pytest.fixture
def github() -> StubGitHub:
    """Create a fresh stub GitHub API."""
    return StubGitHub()


@pytest.fixture
async def client(github: StubGitHub) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient for the relay app with GitHub stubbed out."""

    async def _override_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        async with github.client() as gh_client:
            yield gh_client

    app.dependency_overrides[get_http_client] = _override_http_client
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
