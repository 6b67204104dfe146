"""Pydantic models for repository_dispatch requests, status events, and outcomes."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer

DEFAULT_EVENT_TYPE = "update-file-event"


class StatusPhase(str, Enum):
    """Progress phases reported while a dispatch is in flight."""

    SENDING = "sending"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class DispatchErrorKind(str, Enum):
    """Why a dispatch failed."""

    VALIDATION = "validation"
    ENCODING = "encoding"
    API = "api"
    TRANSPORT = "transport"


class DispatchRequest(BaseModel):
    """Target repository, file and credential for a single dispatch.

    Emptiness of ``owner``/``repo``/``file_path`` is checked by ``notify`` so
    that it surfaces as a failed outcome rather than a model error.
    """

    owner: str
    repo: str
    file_path: str
    file_content: str
    credential: str | None = None
    event_type: str = DEFAULT_EVENT_TYPE


class StatusEvent(BaseModel):
    """A single progress notification."""

    phase: StatusPhase
    message: str
    http_status: int | None = None


class DispatchOutcome(BaseModel):
    """Terminal result of a dispatch call."""

    success: bool
    message: str
    http_status: int | None = None
    error_details: Any | None = None
    error_kind: DispatchErrorKind | None = None

    @field_serializer("error_details")
    def _serialize_error_details(self, value: Any) -> Any:
        if isinstance(value, BaseException):
            return f"{type(value).__name__}: {value}"
        return value


class DispatchResponse(BaseModel):
    """Response body of ``POST /dispatch``: the outcome plus the event trail."""

    outcome: DispatchOutcome
    events: list[StatusEvent] = Field(default_factory=list)
