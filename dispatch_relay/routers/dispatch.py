"""Dispatch router: relays file-update requests to GitHub ``repository_dispatch``."""

from http import HTTPStatus
from typing import Annotated

import httpx
import structlog
from fastapi import APIRouter, Depends, Response

from dispatch_relay.config import settings
from dispatch_relay.dependencies import get_http_client
from dispatch_relay.schemas.dispatch import (
    DispatchErrorKind,
    DispatchOutcome,
    DispatchRequest,
    DispatchResponse,
)
from dispatch_relay.services.dispatch_client import notify_request
from dispatch_relay.services.status_observer import InMemoryStatusObserver

router = APIRouter(tags=["dispatch"])

_FAILURE_STATUS = {
    DispatchErrorKind.VALIDATION: HTTPStatus.UNPROCESSABLE_ENTITY,
    DispatchErrorKind.ENCODING: HTTPStatus.UNPROCESSABLE_ENTITY,
    DispatchErrorKind.API: HTTPStatus.BAD_GATEWAY,
    DispatchErrorKind.TRANSPORT: HTTPStatus.BAD_GATEWAY,
}


def response_status(outcome: DispatchOutcome) -> int:
    """Map a dispatch outcome to the relay's HTTP status code."""
    if outcome.success:
        return HTTPStatus.OK
    return _FAILURE_STATUS.get(outcome.error_kind, HTTPStatus.BAD_GATEWAY)


@router.post("/dispatch", response_model=DispatchResponse)
async def dispatch_file_update(
    payload: DispatchRequest,
    response: Response,
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> DispatchResponse:
    """Send a ``repository_dispatch`` event for one file.

    The configured GitHub token is used when the body carries no credential.
    The body always holds the outcome and every status event emitted on the way.
    """
    request = payload.model_copy(
        update={
            "credential": payload.credential or settings.github_token or None,
            "event_type": payload.event_type or settings.default_event_type,
        }
    )
    recorder = InMemoryStatusObserver()
    # notify logs the result; tag those records with the file being relayed
    with structlog.contextvars.bound_contextvars(
        file_path=request.file_path, event_type=request.event_type
    ):
        outcome = await notify_request(
            client, request, on_status=recorder, api_url=settings.github_api_url
        )
    response.status_code = response_status(outcome)
    return DispatchResponse(outcome=outcome, events=recorder.events)
