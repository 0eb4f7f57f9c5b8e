"""Role-based access middleware for page routes.

# ─── HOW THE ACCESS MIDDLEWARE WORKS ─────────────────────────────────
#
# AccessGateMiddleware runs before every handler, reads the session
# cookie and asks AccessGate.decide() whether to pass the request on or
# redirect it.  All decision logic lives in the gate; this class only
# adapts it to Starlette.
#
#   /login with a valid session      → 303 to /instructor or /em
#   /instructor/*, /em/* unauthorised → 303 to /login
#   /api/*, static assets             → untouched (API routes answer 401
#                                       JSON themselves)
#
# The gate is looked up on app.state at request time, because the
# lifespan builds it after the middleware stack is assembled.  A missing
# gate is a startup bug and fails closed (500), never open.
#
# Layer position: inside request logging and error handling, before
# route handlers.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from src.api.session_cookie import SessionCookie
from src.services.access_gate import AccessGate
from src.utils.errors import ConfigurationError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Redirects page requests according to the configured AccessGate."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        gate: AccessGate | None = getattr(request.app.state, "access_gate", None)
        session_cookie: SessionCookie | None = getattr(request.app.state, "session_cookie", None)
        if gate is None or session_cookie is None:
            raise ConfigurationError("Access gate is not initialised")

        path = request.url.path
        decision = gate.decide(path, session_cookie.read(request), datetime.now(tz=timezone.utc))
        if decision.allow:
            return await call_next(request)

        _logger.info("access_redirect", path=path, redirect_to=decision.redirect_to)
        root_path = request.scope.get("root_path", "")
        return RedirectResponse(url=f"{root_path}{decision.redirect_to}", status_code=303)
