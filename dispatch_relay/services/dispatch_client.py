"""GitHub ``repository_dispatch`` client that asks a workflow to write a file.

The file itself is written by a workflow in the target repository; this
module only sends the dispatch event carrying the path and base64 content.
Every failure is returned as a ``DispatchOutcome`` with ``success=False`` and
reported once through the optional status observer.  Nothing is retried.
"""

from __future__ import annotations

import base64
from typing import Any

import httpx
import structlog

from dispatch_relay.schemas.dispatch import (
    DEFAULT_EVENT_TYPE,
    DispatchErrorKind,
    DispatchOutcome,
    DispatchRequest,
    StatusEvent,
    StatusPhase,
)
from dispatch_relay.services.status_observer import StatusObserver

logger = structlog.get_logger()

GITHUB_API_URL = "https://api.github.com"

_DISPATCH_HEADERS_BASE = {
    "Accept": "application/vnd.github.v3+json",
    "Content-Type": "application/json",
    "X-GitHub-Api-Version": "2022-11-28",
}

_MISSING_CREDENTIAL_WARNING = (
    "Warning: No credential provided. The API request might fail or be "
    "rate-limited, especially for private repositories or frequent use."
)


def dispatch_url(owner: str, repo: str, api_url: str = GITHUB_API_URL) -> str:
    """Return the ``repository_dispatch`` endpoint for ``owner/repo``."""
    return f"{api_url.rstrip('/')}/repos/{owner}/{repo}/dispatches"


def dispatch_headers(credential: str | None) -> dict[str, str]:
    """Build request headers, adding Bearer auth only when a credential is set."""
    if not credential:
        return dict(_DISPATCH_HEADERS_BASE)
    return {**_DISPATCH_HEADERS_BASE, "Authorization": f"Bearer {credential}"}


def encode_content(file_content: str) -> str:
    """Base64-encode the UTF-8 bytes of ``file_content``.

    Raises:
        UnicodeEncodeError: If the text holds code points UTF-8 cannot encode
            (lone surrogates).
    """
    return base64.b64encode(file_content.encode("utf-8")).decode("ascii")


def build_dispatch_body(event_type: str, file_path: str, content_base64: str) -> dict:
    """Build the JSON body.  The field names are read by the receiving workflow."""
    return {
        "event_type": event_type,
        "client_payload": {
            "filename": file_path,
            "content_base64": content_base64,
        },
    }


def parse_error_body(response: httpx.Response) -> Any | None:
    """Return the decoded JSON body of an error response, or None if it isn't JSON."""
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response, error_data: Any | None) -> str:
    server_message = None
    if isinstance(error_data, dict):
        server_message = error_data.get("message")
    if not server_message:
        server_message = (
            response.reason_phrase or f"Request failed with status: {response.status_code}"
        )
    return f"Error: {response.status_code} - {server_message}"


def _missing_fields(owner: Any, repo: Any, file_path: Any, file_content: Any) -> list[str]:
    missing = [
        name
        for name, value in (("owner", owner), ("repo", repo), ("file_path", file_path))
        if not value
    ]
    if not isinstance(file_content, str):
        missing.append("file_content")
    return missing


async def notify(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    file_path: str,
    file_content: str,
    *,
    credential: str | None = None,
    event_type: str = DEFAULT_EVENT_TYPE,
    on_status: StatusObserver | None = None,
    api_url: str = GITHUB_API_URL,
) -> DispatchOutcome:
    """Send a ``repository_dispatch`` event carrying a file path and content.

    Args:
        client: httpx async client used for the single POST.
        owner: Repository owner (user or organisation).
        repo: Repository name.
        file_path: Path of the file the workflow should write.
        file_content: Text to write; may be empty.
        credential: GitHub token.  Optional -- a missing token only warns.
        event_type: ``event_type`` the target workflow listens for.
        on_status: Observer receiving progress events.
        api_url: GitHub REST API root, overridable for GitHub Enterprise.

    Returns:
        The outcome.  Validation, encoding, HTTP and transport failures are
        all reported as ``success=False`` rather than raised.
    """

    def emit(phase: StatusPhase, message: str, http_status: int | None = None) -> None:
        if on_status is not None:
            on_status.on_status(
                StatusEvent(phase=phase, message=message, http_status=http_status)
            )

    missing = _missing_fields(owner, repo, file_path, file_content)
    if missing:
        message = f"Error: Missing required parameters ({', '.join(missing)})."
        logger.warning("dispatch_invalid", missing=missing)
        emit(StatusPhase.ERROR, message)
        return DispatchOutcome(
            success=False,
            message=message,
            error_kind=DispatchErrorKind.VALIDATION,
        )

    if not credential:
        logger.warning("dispatch_unauthenticated", owner=owner, repo=repo)
        emit(StatusPhase.WARNING, _MISSING_CREDENTIAL_WARNING)

    emit(StatusPhase.SENDING, "Preparing data...")

    try:
        content_base64 = encode_content(file_content)
    except UnicodeEncodeError as exc:
        message = f"Error encoding file content: {exc}"
        logger.warning("dispatch_encoding_failed", path=file_path, error=str(exc))
        emit(StatusPhase.ERROR, message)
        return DispatchOutcome(
            success=False,
            message=message,
            error_details=exc,
            error_kind=DispatchErrorKind.ENCODING,
        )

    url = dispatch_url(owner, repo, api_url)
    body = build_dispatch_body(event_type, file_path, content_base64)

    # Header values must be ASCII and the URL free of control characters.
    try:
        request = client.build_request(
            "POST", url, json=body, headers=dispatch_headers(credential)
        )
    except (UnicodeEncodeError, httpx.InvalidURL) as exc:
        message = f"Error: Invalid request parameters: {exc}"
        logger.warning("dispatch_invalid", owner=owner, repo=repo, error=str(exc))
        emit(StatusPhase.ERROR, message)
        return DispatchOutcome(
            success=False,
            message=message,
            error_details=exc,
            error_kind=DispatchErrorKind.VALIDATION,
        )

    emit(StatusPhase.SENDING, f"Sending request to {url}...")

    try:
        resp = await client.send(request)
    except httpx.RequestError as exc:
        message = f"Network or fetch error: {exc}"
        logger.warning("dispatch_transport_failed", url=url, error=str(exc))
        emit(StatusPhase.ERROR, message)
        return DispatchOutcome(
            success=False,
            message=message,
            error_details=exc,
            error_kind=DispatchErrorKind.TRANSPORT,
        )

    if resp.is_success:
        # GitHub answers 204 No Content for an accepted dispatch
        message = (
            f"Success! Dispatch event sent. Status: {resp.status_code}. "
            f"Check Actions tab in '{owner}/{repo}'."
        )
        logger.info(
            "dispatch_sent",
            owner=owner,
            repo=repo,
            path=file_path,
            event_type=event_type,
            status=resp.status_code,
        )
        emit(StatusPhase.SUCCESS, message, resp.status_code)
        return DispatchOutcome(success=True, message=message, http_status=resp.status_code)

    error_data = parse_error_body(resp)
    message = _error_message(resp, error_data)
    logger.warning(
        "dispatch_rejected",
        owner=owner,
        repo=repo,
        status=resp.status_code,
        message=message,
    )
    emit(StatusPhase.ERROR, message, resp.status_code)
    return DispatchOutcome(
        success=False,
        message=message,
        http_status=resp.status_code,
        error_details=error_data,
        error_kind=DispatchErrorKind.API,
    )


async def notify_request(
    client: httpx.AsyncClient,
    request: DispatchRequest,
    on_status: StatusObserver | None = None,
    api_url: str = GITHUB_API_URL,
) -> DispatchOutcome:
    """Call :func:`notify` with the fields of a ``DispatchRequest``."""
    return await notify(
        client,
        request.owner,
        request.repo,
        request.file_path,
        request.file_content,
        credential=request.credential,
        event_type=request.event_type,
        on_status=on_status,
        api_url=api_url,
    )
