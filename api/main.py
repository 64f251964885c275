"""
api/main.py -- FastAPI application entry point for AgriRent.

Exposes the account/session core over HTTP for the marketplace front-end.

Run with:      uvicorn asgi:app --reload
               python asgi.py          (listens on PORT, default 5000)

Middleware stack (outermost to innermost):
  1. CORSMiddleware  -- lets the front-end origin send the session cookie
  2. log_requests    -- one log line per request with status and latency

Lifespan builds the auth components once from Settings and publishes them on
app.state; route handlers and the session gate read them from there.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from auth.errors import (
    AuthError,
    DuplicateAccount,
    InvalidCredentials,
    InvalidToken,
    MissingToken,
    NotFound,
    StoreUnavailable,
    ValidationError,
)
from auth.service import AccountService
from core.config import get_settings

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

_LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT, datefmt=_LOG_DATEFMT)
logger = logging.getLogger("agrirent.api")


def _add_file_logging(log_file: str) -> None:
    """Mirror the root logger into log_file. Empty string disables it."""
    if not log_file:
        return
    path = Path(os.path.abspath(log_file))
    root = logging.getLogger()
    for existing in root.handlers:
        if isinstance(existing, logging.FileHandler) and Path(existing.baseFilename) == path:
            return
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT))
    root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the auth components on startup.

    Nothing here holds an open handle, so shutdown only logs.
    """
    settings = get_settings()
    _add_file_logging(settings.log_file)
    logger.info("AgriRent API starting up (debug=%s)", settings.debug)

    app.state.settings = settings
    app.state.accounts = AccountService.from_settings(settings)
    app.state.tokens = app.state.accounts.tokens
    logger.info(
        "Auth initialized (users_file=%s, %d accounts)",
        settings.users_file,
        len(app.state.accounts.store.load_all()),
    )

    yield

    logger.info("AgriRent API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="AgriRent API",
    description="Accounts and sessions for the farmer / vehicle-owner marketplace.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms origin=%s %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.headers.get("origin", "unknown"),
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
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------

_AUTH_ERROR_STATUS: dict[type[AuthError], int] = {
    ValidationError: 400,
    DuplicateAccount: 400,
    InvalidCredentials: 401,
    MissingToken: 401,
    InvalidToken: 401,
    NotFound: 404,
    StoreUnavailable: 503,
}


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Translate an Account Service failure into its status and a client-safe body."""
    status = _AUTH_ERROR_STATUS.get(type(exc), 400)
    response = JSONResponse(
        status_code=status,
        content=ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message)).model_dump(),
    )
    if status == 401:
        response.headers["Cache-Control"] = "no-store"
    return response


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Summarise validation errors by location and message only.

    Pydantic attaches the offending input to each error; for login and signup
    that input can be a password, so it is never copied into the response.
    """
    return "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}" for err in exc.errors()
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when the request body is not valid JSON of the right shape."""
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=ErrorDetail(
                code="validation_error",
                message="Request validation failed.",
                detail=_describe_validation_errors(exc),
            )
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return a structured error for all FastAPI/Starlette HTTP exceptions.

    The session gate raises HTTPException with a dict detail; use it directly
    as the error field rather than stringifying it.
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

    The traceback goes to the log only; the client receives a generic message.
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


@app.get("/api/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=__version__)
