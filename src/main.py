"""Instructor Hub FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging before anything else runs.

Provider selection:
    * Google service-account credentials present → Sheets directory and
      Gmail delivery, sharing one token-caching HTTP client.
    * Credentials absent → in-memory directory and an unconfigured Gmail
      sender; verification codes then only reach the server log.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from src.api.auth_middleware import AccessGateMiddleware
from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    request_validation_handler,
)
from src.api.pages import pages_router
from src.api.routes import router as api_router
from src.api.session_cookie import SessionCookie
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.account_directory import IAccountDirectory
from src.models.auth import UserRole
from src.providers.code_store.memory_code_store import MemoryCodeStore
from src.providers.directory.google_sheets_directory import (
    SHEETS_SCOPES,
    GoogleSheetsAccountDirectory,
)
from src.providers.directory.memory_directory import InMemoryAccountDirectory
from src.providers.google.service_account import ServiceAccountTokenSource
from src.providers.notification.gmail_sender import GMAIL_SCOPES, GmailNotificationSender
from src.services.access_gate import AccessGate
from src.services.auth_service import AuthService
from src.services.credential_recovery import CredentialRecoveryService
from src.services.session_codec import SessionCodec
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=settings.is_production,
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_directory(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
) -> IAccountDirectory:
    """Use the Google Sheets directory when credentials are configured."""
    if app_settings.has_google_credentials() and app_settings.google_login_spreadsheet_id:
        tokens = ServiceAccountTokenSource(
            http_client=http_client,
            service_account_email=app_settings.google_service_account_email,
            private_key=app_settings.google_private_key(),
            scopes=SHEETS_SCOPES,
        )
        return GoogleSheetsAccountDirectory(
            http_client=http_client,
            token_source=tokens,
            spreadsheet_id=app_settings.google_login_spreadsheet_id,
            sheet_name=app_settings.instructor_sheet_name,
        )

    _logger.warning(
        "directory_fallback",
        provider="InMemoryAccountDirectory",
        reason="Google Sheets credentials not configured",
    )
    return InMemoryAccountDirectory()


def _build_sender(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
) -> GmailNotificationSender:
    """Gmail sender; left unconfigured (every send fails) without credentials."""
    tokens: ServiceAccountTokenSource | None = None
    if app_settings.has_google_credentials():
        tokens = ServiceAccountTokenSource(
            http_client=http_client,
            service_account_email=app_settings.google_service_account_email,
            private_key=app_settings.google_private_key(),
            scopes=GMAIL_SCOPES,
            subject=app_settings.google_delegate_email,
        )
    else:
        _logger.warning(
            "email_delivery_disabled",
            reason="Google service account not configured; codes will be logged",
        )
    return GmailNotificationSender(
        http_client=http_client,
        token_source=tokens,
        sender_address=app_settings.mail_from or app_settings.google_delegate_email,
    )


# ---------------------------------------------------------------------------
# Component assembly
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = httpx.AsyncClient(timeout=15.0)

    session_cfg = app_config["session"]
    recovery_cfg = app_config["recovery"]
    access_cfg = app_config["access"]

    if not app_settings.jwt_secret:
        _logger.warning(
            "jwt_secret_fallback",
            reason="JWT_SECRET not set; using the development secret",
            environment=app_settings.app_env,
        )

    codec = SessionCodec(
        secret=app_settings.effective_jwt_secret(),
        ttl=timedelta(hours=session_cfg["ttl_hours"]),
    )
    session_cookie = SessionCookie(
        codec=codec,
        cookie_name=session_cfg["cookie_name"],
        secure=session_cfg.get("secure_cookie", app_settings.is_production),
    )
    access_gate = AccessGate(
        codec=codec,
        role_paths={prefix: UserRole(role) for prefix, role in access_cfg["role_paths"].items()},
        login_path=access_cfg["login_path"],
        exempt_prefixes=access_cfg["exempt_prefixes"],
    )

    code_store = MemoryCodeStore(max_size=recovery_cfg["max_pending_codes"])
    directory = _build_directory(app_settings, http_client)
    sender = _build_sender(app_settings, http_client)

    recovery_service = CredentialRecoveryService(
        directory=directory,
        notifier=sender,
        code_store=code_store,
        code_ttl_minutes=recovery_cfg["code_ttl_minutes"],
        pin_min_length=recovery_cfg["pin_min_length"],
        pin_max_length=recovery_cfg["pin_max_length"],
        allow_email_only_reset=recovery_cfg.get(
            "allow_email_only_reset", app_settings.allow_email_only_pin_reset
        ),
    )
    auth_service = AuthService(
        directory=directory,
        em_login_name=app_settings.em_login_name,
        em_login_pin=app_settings.em_login_pin,
        em_contact_email=app_settings.em_contact_email,
    )

    return {
        "http_client": http_client,
        "session_codec": codec,
        "session_cookie": session_cookie,
        "access_gate": access_gate,
        "code_store": code_store,
        "account_directory": directory,
        "notification_sender": sender,
        "recovery_service": recovery_service,
        "auth_service": auth_service,
        "provider_registry": {
            "account_directory": directory.get_provider_name(),
            "notification_sender": sender.get_provider_name(),
            "code_store": code_store.get_provider_name(),
        },
        "version": app_config["app"]["version"],
        "settings": app_settings,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    app_settings: Settings = getattr(application.state, "settings", settings)
    app_config: dict[str, Any] = getattr(application.state, "config", config)
    components = getattr(application.state, "hub_components", None)
    if components is None:
        components = _build_all(app_settings, app_config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=app_config["app"]["version"],
        environment=app_settings.app_env,
        providers=components.get("provider_registry", {}),
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient | None = components.get("http_client")
    if http_client is not None:
        await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to build from; the module-level ``settings`` when omitted.
    components:
        Pre-built components placed on ``app.state`` by the lifespan instead
        of calling ``_build_all()``.  Used by tests.
    """
    application = FastAPI(
        title="Instructor Hub API",
        version=config["app"]["version"],
        description=(
            "Role-based sign-in for instructors and the EM, with an "
            "email-verified PIN recovery flow backed by Google Sheets."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = app_settings or settings
    application.state.config = load_config(settings=app_settings) if app_settings else config
    if components is not None:
        application.state.hub_components = components

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(AccessGateMiddleware)
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # Malformed bodies answer 400 with {"error": ...}.
    application.add_exception_handler(RequestValidationError, request_validation_handler)

    # -- Routes --
    application.include_router(api_router)
    application.include_router(pages_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
