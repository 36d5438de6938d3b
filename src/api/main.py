"""Main FastAPI application entry point."""

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from giftcard.presentation import routes as giftcard_routes
from giftcard.presentation.routes import REQUEST_ID_HEADER
from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_app_proxy_settings,
    get_cors_settings,
    get_settings,
)
from infrastructure.version import __version__


@asynccontextmanager
async def giftcard_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Startup diagnostics (version, signature verification mode)
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    configure_logging()
    probe = DefaultStartupProbe()
    probe.application_started(version=__version__)
    if not get_app_proxy_settings().signature_verification_enabled:
        probe.signature_verification_disabled()

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title=get_settings().app_name,
    description="Gift card verification and discount issuance for storefronts",
    version=__version__,
    lifespan=giftcard_lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_settings().origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    """Bind a request id to the request state and to every log line."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    structlog.contextvars.bind_contextvars(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.unbind_contextvars("request_id")
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


# Include gift card bounded context routes
app.include_router(giftcard_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok", "version": __version__}
