"""API middleware: CORS, request logging, and error handling.

Provides helper functions and middleware classes to configure cross-origin
resource sharing, structured request logging (via structlog), and automatic
conversion of ``InstructorHubError`` subclasses into ``{"error": ...}``
JSON bodies with the status code each error class declares.

# ─── MIDDLEWARE EXECUTION ORDER ──────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed):
#
#   In main.py:
#     app.add_middleware(AccessGateMiddleware)      # innermost
#     app.add_middleware(ErrorHandlingMiddleware)
#     app.add_middleware(RequestLoggingMiddleware)  # outermost
#
#   Request flow:
#     Client → RequestLogging → ErrorHandling → AccessGate → route handler
#
# RequestLoggingMiddleware therefore sees the final status code, including
# redirects from the gate and JSON errors produced by ErrorHandling.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import InstructorHubError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_INTERNAL_ERROR_MESSAGE = "Internal server error"


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]`` for
        development; override with specific origins in production.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"error": message}`` body every failing endpoint returns."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert exceptions escaping a handler into structured JSON errors.

    ``InstructorHubError`` subclasses keep their own status code and
    message (400 validation, 401 authentication, 404 not found, 500
    provider/configuration).  Anything else is logged with its traceback
    and answered with a generic 500, so stack traces and file paths never
    reach the client and no request can take the process down.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except InstructorHubError as exc:
            log = _logger.error if exc.status_code >= 500 else _logger.info
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=exc.status_code,
                path=str(request.url.path),
            )
            return error_response(exc.status_code, exc.message)
        except Exception:
            _logger.exception("unhandled_error", path=str(request.url.path))
            return error_response(500, _INTERNAL_ERROR_MESSAGE)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer unparseable request bodies with 400 instead of FastAPI's 422."""
    errors = exc.errors()
    first = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
    _logger.info("request_rejected", path=str(request.url.path), reason=first)
    return error_response(400, f"Invalid request body: {first}")
