"""Health check endpoint."""

from fastapi import APIRouter

from dispatch_relay.config import settings
from dispatch_relay.schemas.health import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    """Report liveness and whether a default GitHub token is configured.

    GitHub is not contacted; a dispatch is the only outbound call the relay makes.
    """
    return HealthResponse(status="ok", github_token_configured=bool(settings.github_token))
