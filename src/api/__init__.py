"""Instructor Hub API layer: routes, pages, schemas, session cookie, and middleware."""

from src.api.auth_middleware import AccessGateMiddleware
from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    request_validation_handler,
)
from src.api.pages import pages_router
from src.api.routes import router
from src.api.schemas import (
    EMCredentialsRequest,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    RequestCodeRequest,
    ResetPinRequest,
    SimpleResetPinRequest,
    SuccessResponse,
    VerifyCodeRequest,
)
from src.api.session_cookie import COOKIE_NAME, SessionCookie

__all__ = [
    "AccessGateMiddleware",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "request_validation_handler",
    "pages_router",
    "router",
    "COOKIE_NAME",
    "SessionCookie",
    "EMCredentialsRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "RequestCodeRequest",
    "ResetPinRequest",
    "SimpleResetPinRequest",
    "SuccessResponse",
    "VerifyCodeRequest",
]
