"""
api/main.py -- FastAPI application entry point for SecureSphere.

Run with:  python main.py
           uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- CORS headers for the configured browser origins (plus
                       any local port outside production); allow_credentials
                       so the session cookie travels
  2. log_requests   -- one access-log line per request

Lifespan owns the credential store: it is created on startup, handed to
AuthService, and disposed on shutdown. Nothing else opens a connection.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, FieldErrorModel, HealthResponse
from api.routes.auth import router as auth_router
from auth.errors import AuthServiceError, ValidationError
from auth.service import AuthService
from auth.store import UserStore
from core.config import get_settings

__version__ = "1.0.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("securesphere.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the credential store on startup and dispose it on shutdown."""
    logger.info("SecureSphere API starting up (environment=%s)", _settings.environment)
    app.state.settings = _settings
    app.state.user_store = UserStore(_settings.database_url)
    app.state.auth_service = AuthService(app.state.user_store, _settings)
    logger.info("Credential store initialized")

    yield

    app.state.user_store.close()
    logger.info("SecureSphere API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="SecureSphere API",
    description="Registration, login, and stateless JWT sessions.",
    version=__version__,
    lifespan=lifespan,
)

# Outside production any localhost / 127.0.0.1 port may call the API.
LOCAL_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_origin_regex=None if _settings.is_production else LOCAL_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


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

app.include_router(auth_router, prefix="/api", tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so clients can parse
# failures uniformly: {"success": false, "code", "message", ...}.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, error: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error.model_dump(exclude_none=True))


@app.exception_handler(AuthServiceError)
async def auth_error_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
    """Map the auth error taxonomy onto status codes."""
    errors = None
    if isinstance(exc, ValidationError):
        errors = [FieldErrorModel(**e.to_dict()) for e in exc.errors]
    return _error_response(
        exc.status_code,
        ErrorResponse(code=exc.code, message=exc.message, errors=errors),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body that could not be parsed at all (wrong types, not an object) -> 400.

    Same envelope as auth.errors.ValidationError so the client has one shape
    to handle.
    """
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append(FieldErrorModel(field=".".join(loc) or "body", message=err.get("msg", "Invalid value")))
    return _error_response(
        400,
        ErrorResponse(code="validation_error", message="Validation failed", errors=errors),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-level HTTP errors (unknown route, wrong method)."""
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return _error_response(
        exc.status_code,
        ErrorResponse(code=f"http_{exc.status_code}", message=message),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected faults.

    The traceback always goes to the log. The response carries the exception
    text only in development; everywhere else the client gets a generic
    message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(
        500,
        ErrorResponse(
            code="internal_error",
            message="Server error",
            detail=repr(exc) if _settings.is_development else None,
        ),
    )


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly here (not in a router) so it is reachable regardless of
# router registration state. No auth.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return liveness, version, and whether the credential store answers."""
    user_store: UserStore = request.app.state.user_store
    database = "ok" if user_store.ping() else "error"
    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        environment=_settings.environment,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        components={"app": "ok", "database": database},
    )
