"""
api/main.py -- FastAPI application entry point for Doorman.

Run with:      python main.py
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. log_requests        -- one log line per request with latency
  2. SessionMiddleware   -- decodes/encodes the signed session cookie
  3. SlowAPIMiddleware   -- applies default limits; decorated routes
                            (POST /login, POST /signup) check their own

Lifespan builds the injected services (UserStore, SessionStore) on startup
and releases them on shutdown. Route handlers reach them through app.state,
so tests can swap in isolated instances.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from api.limiter import limiter
from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from auth.errors import DoormanError, RateLimitError
from auth.sessions import SessionStore
from auth.store import UserStore
from core.config import get_settings

VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("doorman.api")

_settings = get_settings()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the user store and session store; dispose of them on shutdown.

    UserStore creates the users table if it does not exist, so the schema is
    ready before the first request arrives.
    """
    logger.info("Doorman starting up")
    app.state.user_store = UserStore(_settings.database_url)
    app.state.sessions = SessionStore(ttl=_settings.session_ttl_seconds)
    logger.info("Storage and session store initialized")

    yield

    app.state.user_store.close()
    logger.info("Doorman shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Doorman",
    description="Session-based signup, login, logout and profile service.",
    version=VERSION,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# add_middleware() prepends, so the last one registered is the outermost.
# Register innermost first: SlowAPI -> Session. The @app.middleware("http")
# request logger below wraps both.
# ---------------------------------------------------------------------------

app.add_middleware(SlowAPIMiddleware)

# The cookie holds only {"sid": <token>}, signed with SECRET_KEY via
# itsdangerous. Starlette always marks it httpOnly.
app.add_middleware(
    SessionMiddleware,
    secret_key=_settings.secret_key,
    session_cookie=_settings.session_cookie_name,
    max_age=_settings.session_ttl_seconds,
    same_site="lax",
    https_only=_settings.secure_cookies,
)

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
# Web UI router is mounted by asgi.py, not here.


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error body has the same shape: {"error": "<message>"}.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(DoormanError)
async def doorman_error_handler(request: Request, exc: DoormanError) -> JSONResponse:
    """Translate domain errors (validation, conflict, auth) into JSON."""
    return _error(exc.status_code, exc.message)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 when a client exceeds the auth route limit.

    Retry-After is the number of seconds until the current window resets.
    """
    logger.warning(
        "Rate limit exceeded on %s from %s", request.url.path, request.client.host if request.client else "unknown"
    )
    err = RateLimitError()
    response = _error(err.status_code, err.message)
    response.headers["Retry-After"] = str(_retry_after(request, exc))
    return response


def _retry_after(request: Request, exc: RateLimitExceeded) -> int:
    current = getattr(request.state, "view_rate_limit", None)
    if current is not None:
        reset_at = limiter.limiter.get_window_stats(current[0], *current[1])[0]
        return max(1, int(reset_at - time.time()) + 1)
    return exc.limit.limit.get_expiry()


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "Invalid request")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Structured error for framework-raised HTTP errors (404, 405, ...)."""
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "An unexpected error occurred")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py so it is always reachable. No rate limit.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version and per-component status."""
    db_ok = request.app.state.user_store.ping()
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=VERSION,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
