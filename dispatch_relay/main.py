"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dispatch_relay.config import settings
from dispatch_relay.logging_config import configure_logging
from dispatch_relay.middleware.api_key import ApiKeyMiddleware
from dispatch_relay.routers import dispatch, health


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup."""
    configure_logging(json_logs=not settings.debug, log_level=settings.log_level)
    if not settings.github_token:
        structlog.get_logger().warning("github_token_missing")
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(ApiKeyMiddleware)

if settings.cors_origins:
    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(dispatch.router)
