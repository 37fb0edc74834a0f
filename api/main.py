"""
api/main.py -- FastAPI application: the persistent SAFECORD identity service.

Run with:  uvicorn asgi:app --reload
           python main.py serve

Middleware stack (outermost to innermost):
  1. CORSMiddleware        -- adds CORS headers for allowed browser origins
  2. SlowAPIMiddleware     -- enforces per-route rate limits from api.limiter

Lifespan opens the SQL Credential Store and builds the identity services on
startup, and closes the store on shutdown.

Every response, success or failure, uses the {success, ...} envelope. The
exception handlers below are the HTTP half of contract/envelope.py; the local
simulation (local/router.py) is the other half.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.routes.admin import router as admin_router
from api.routes.auth import router as auth_router
from api.routes.public import router as public_router
from auth.services import build_services
from contract import operations
from contract.envelope import (
    RATE_LIMITED_MESSAGE,
    envelope,
    error_response,
    format_validation_errors,
    not_found_response,
)
from contract.models import HealthResponse
from core.config import get_settings
from core.errors import SafecordError
from store.sql import SqlCredentialStore

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("safecord.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the store on startup, close it on shutdown.

    Everything before yield runs on startup; everything after yield runs on
    shutdown, even if a request handler raised.
    """
    logger.info("SAFECORD API starting up")
    store = SqlCredentialStore(_settings.database_url)
    app.state.services = build_services(store, _settings)
    logger.info(
        "Identity services initialized (bootstrap_enabled=%s, consume_once=%s)",
        bool(_settings.bootstrap_secret),
        _settings.bootstrap_consume_once,
    )

    yield

    app.state.services.close()
    logger.info("SAFECORD API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="SAFECORD Identity API",
    description="Username registration, login, rank administration and rank-5 bootstrap.",
    version="1.0.0",
    lifespan=lifespan,
    # The local router has no trailing-slash redirect; neither may this app.
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "X-Username"],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


# ---------------------------------------------------------------------------
# Request logging middleware
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

app.include_router(auth_router, tags=["Auth"])
app.include_router(public_router, tags=["Public"])
app.include_router(admin_router, tags=["Admin"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the {success: false, error} envelope so clients can
# parse errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


@app.exception_handler(SafecordError)
async def domain_error_handler(request: Request, exc: SafecordError) -> JSONResponse:
    status, body = error_response(exc)
    return JSONResponse(status_code=status, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Schema failures are 400, not FastAPI's default 422 -- the local backend has no 422."""
    return JSONResponse(status_code=400, content=envelope(format_validation_errors(exc.errors())))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes and unsupported methods are both "Not found".

    A route that exists under another method is still an unrecognized route
    from the client's point of view, and the local router cannot tell the
    two apart either.
    """
    if exc.status_code in (404, 405):
        status, body = not_found_response()
        return JSONResponse(status_code=status, content=body)
    return JSONResponse(status_code=exc.status_code, content=envelope(str(exc.detail)))


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 when a rate limit is exceeded.

    Retry-After tells clients how many seconds to wait before retrying.
    Plain def: SlowAPIMiddleware calls this handler directly without awaiting it.
    """
    retry_after = int(getattr(exc, "retry_after", 60))
    response = JSONResponse(status_code=429, content=envelope(RATE_LIMITED_MESSAGE))
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected failures (store errors included).

    The stringified error goes back to the client -- existing clients display
    it -- and the full traceback goes to the log.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    status, body = error_response(exc)
    return JSONResponse(status_code=status, content=body)


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state. Not rate limited.
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health() -> HealthResponse:
    return operations.health()
