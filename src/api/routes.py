"""REST API routes for Instructor Hub authentication and PIN recovery.

# ─── ROUTE ARCHITECTURE ─────────────────────────────────────────────
#
# Pattern: Routes access services via ``request.app.state`` (populated by
#          the lifespan in main.py).  Handlers stay thin: parse, delegate
#          to a service, shape JSON.  Failures are raised as
#          InstructorHubError subclasses and turned into
#          ``{"error": message}`` by ErrorHandlingMiddleware.
#
# Endpoints:
#   POST /api/auth/login                    : check credentials, set session cookie
#   POST /api/auth/logout                   : clear session cookie
#   GET  /api/auth/me                       : current user or 401
#   POST /api/instructor/request-pin-reset  : always 200 (no account discovery)
#   POST /api/instructor/verify-pin-reset   : advisory code check
#   POST /api/instructor/reset-pin          : code-verified PIN reset
#   POST /api/instructor/reset-pin-simple   : email-only PIN reset
#   POST /api/em/update-credentials         : change the EM login (EM session only)
#   GET  /api/health                        : liveness + wired providers
#
# /api/* is exempt from the page access gate; recovery endpoints are
# public by nature (the caller has forgotten their PIN).  The EM endpoint
# checks the session cookie itself and answers 403 without an EM session.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.api.schemas import (
    EMCredentialsRequest,
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
from src.api.session_cookie import SessionCookie
from src.services.auth_service import EM_CREDENTIALS_CHANGED_MESSAGE, AuthService
from src.services.credential_recovery import CredentialRecoveryService
from src.services.session_codec import SessionCodec
from src.utils.errors import AuthenticationError, ConfigurationError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")


# ── State accessors ───────────────────────────────────────────────────
def _component(request: Request, name: str) -> Any:
    """Retrieve a lifespan-built component from app state."""
    component = getattr(request.app.state, name, None)
    if component is None:
        raise ConfigurationError(f"{name} is not initialised")
    return component


def _session_cookie(request: Request) -> SessionCookie:
    return _component(request, "session_cookie")


def _recovery(request: Request) -> CredentialRecoveryService:
    return _component(request, "recovery_service")


def _success(message: str | None = None) -> dict[str, Any]:
    return SuccessResponse(message=message).model_dump(exclude_none=True)


# ── Session ───────────────────────────────────────────────────────────
@router.post("/auth/login", response_model=LoginResponse, tags=["auth"])
async def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate and set the ``auth-token`` cookie."""
    auth_service: AuthService = _component(request, "auth_service")
    codec: SessionCodec = _component(request, "session_codec")

    user = await auth_service.login(
        role=body.role,
        name=body.name,
        email=body.email,
        pin=body.pin_code,
    )
    token = codec.issue(user)
    _logger.info("session_issued", role=user.role.value, email=user.email)

    response = JSONResponse(
        content=LoginResponse(role=user.role.value, user=user.public_profile()).model_dump()
    )
    _session_cookie(request).save(response, token)
    return response


@router.post("/auth/logout", response_model=SuccessResponse, tags=["auth"])
async def logout(request: Request) -> JSONResponse:
    """Clear the session cookie.  Always succeeds."""
    response = JSONResponse(content=_success())
    _session_cookie(request).clear(response)
    return response


@router.get("/auth/me", response_model=MeResponse, tags=["auth"])
async def me(request: Request) -> MeResponse:
    """Return the signed-in user, or 401."""
    user = _session_cookie(request).current_user(request)
    if user is None:
        raise AuthenticationError("You are not signed in.")
    return MeResponse(role=user.role.value, user=user.public_profile())


# ── PIN recovery ──────────────────────────────────────────────────────
@router.post("/instructor/request-pin-reset", response_model=SuccessResponse, tags=["recovery"])
async def request_pin_reset(request: Request, body: RequestCodeRequest) -> dict[str, Any]:
    """Issue a verification code.  Unknown emails get the same answer."""
    result = await _recovery(request).request_code(body.email)
    return _success(result.message)


@router.post("/instructor/verify-pin-reset", response_model=SuccessResponse, tags=["recovery"])
async def verify_pin_reset(request: Request, body: VerifyCodeRequest) -> dict[str, Any]:
    """Confirm a code before asking for the new PIN; the code stays valid."""
    result = await _recovery(request).verify_code(body.email, body.verification_code)
    return _success(result.message)


@router.post("/instructor/reset-pin", response_model=SuccessResponse, tags=["recovery"])
async def reset_pin(request: Request, body: ResetPinRequest) -> dict[str, Any]:
    """Set a new PIN with a live verification code."""
    result = await _recovery(request).reset_pin(
        body.email,
        body.verification_code,
        body.new_pin_code,
    )
    return _success(result.message)


@router.post("/instructor/reset-pin-simple", response_model=SuccessResponse, tags=["recovery"])
async def reset_pin_simple(request: Request, body: SimpleResetPinRequest) -> dict[str, Any]:
    """Set a new PIN knowing only the account email (weaker path)."""
    result = await _recovery(request).reset_pin_without_code(body.email, body.new_pin_code)
    return _success(result.message)


# ── EM account ────────────────────────────────────────────────────────
@router.post("/em/update-credentials", response_model=SuccessResponse, tags=["em"])
async def update_em_credentials(request: Request, body: EMCredentialsRequest) -> dict[str, Any]:
    """Change the EM login name and PIN after re-checking the current PIN."""
    auth_service: AuthService = _component(request, "auth_service")
    user = _session_cookie(request).current_user(request)
    auth_service.update_em_credentials(user, body.current_pin, body.new_name, body.new_pin)
    return _success(EM_CREDENTIALS_CHANGED_MESSAGE)


# ── Health ────────────────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health(request: Request) -> HealthResponse:
    """Liveness check listing the wired providers."""
    return HealthResponse(
        status="ok",
        version=getattr(request.app.state, "version", "0.1.0"),
        providers=getattr(request.app.state, "provider_registry", {}),
    )
