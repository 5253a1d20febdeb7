"""
api/main.py -- FastAPI application entry point for AuthGate.

Exposes the auth core over HTTP so any front end can register, log in,
resolve sessions and check role gates without linking the core directly.

Run with:  uvicorn asgi:app --reload

Lifespan handles startup (account store, gateway, session purge task) and
shutdown (cancel purge task, dispose DB engine) symmetrically. The gateway
is stored on app.state; there is no module-level singleton.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.v1.admin import router as admin_router
from api.routes.v1.auth import router as auth_router
from auth.errors import (
    AccountBlocked,
    AuthGatewayError,
    DuplicateIdentity,
    InvalidCredentials,
    InvalidInput,
    SessionError,
)
from auth.gateway import AuthGateway
from core.config import get_settings

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("authgate.api")

# ---------------------------------------------------------------------------
# Background purge task
# ---------------------------------------------------------------------------


async def _purge_loop(app: FastAPI, interval: int) -> None:
    """Drop expired sessions every `interval` seconds.

    Housekeeping only: resolve() already refuses expired tokens, this just
    keeps memory from growing with abandoned sessions. CancelledError from
    task.cancel() during shutdown propagates out of asyncio.sleep.
    """
    while True:
        await asyncio.sleep(interval)
        app.state.gateway.sessions.purge_expired()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the gateway on startup and tear it down on shutdown."""
    settings = get_settings()
    logger.info("AuthGate API starting up")
    app.state.gateway = AuthGateway.from_settings(settings)
    logger.info(
        "Auth initialized (session_ttl=%ds, bcrypt_rounds=%d)",
        settings.session_ttl_seconds,
        settings.bcrypt_rounds,
    )
    app.state.purge_task = asyncio.create_task(_purge_loop(app, settings.session_purge_interval_seconds))

    yield

    app.state.purge_task.cancel()
    app.state.gateway.close()
    logger.info("AuthGate API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="AuthGate API",
    description="Credential registration, login, sessions and role gates.",
    version=__version__,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Only method, path, status and latency are logged -- never bodies,
# cookies or headers, which carry passwords and session tokens.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
app.include_router(admin_router, prefix="/api/v1", tags=["Admin"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------

# Ordered most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[AuthGatewayError], int], ...] = (
    (InvalidInput, 400),
    (DuplicateIdentity, 409),
    (InvalidCredentials, 401),
    (AccountBlocked, 403),
    (SessionError, 401),
)


def _status_for(exc: AuthGatewayError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


@app.exception_handler(AuthGatewayError)
async def auth_error_handler(request: Request, exc: AuthGatewayError) -> JSONResponse:
    """Map typed auth outcomes to HTTP responses.

    Anything not in _STATUS_BY_ERROR (CorruptHash, AccountNotFound) is an
    internal fault: logged with traceback, returned as a generic 500.
    """
    status = _status_for(exc)
    if status == 500:
        logger.error("Internal auth failure on %s %s: %s", request.method, request.url.path, exc.code)
        error = ErrorDetail(code="internal_error", message="An unexpected error occurred.")
    else:
        error = ErrorDetail(code=exc.code, message=str(exc))
    response = JSONResponse(status_code=status, content=ErrorResponse(error=error).model_dump())
    response.headers["Cache-Control"] = "no-store"
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when request body or query params fail validation."""
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=ErrorDetail(
                code="validation_error",
                message="Request validation failed.",
                detail=str(exc.errors()),
            )
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return a structured error for all FastAPI/Starlette HTTP exceptions.

    When detail is already a structured dict, use it directly as the error
    field rather than stringifying it.
    """
    if isinstance(exc.detail, dict):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=f"http_{exc.status_code}",
                message=str(exc.detail),
            )
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="internal_error",
                message="An unexpected error occurred.",
            )
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/api/v1/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version and component status. No auth required."""
    gateway: AuthGateway = request.app.state.gateway
    try:
        gateway.store.ping()
        database = "ok"
    except SQLAlchemyError:
        logger.exception("Health check: database unavailable")
        database = "error"
    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=__version__,
        components={"app": "ok", "database": database, "sessions": str(len(gateway.sessions))},
    )
