"""Session store backed by an HTTP cookie.

# ─── HOW THE SESSION COOKIE WORKS ────────────────────────────────────
#
# The signed token from SessionCodec is the whole session, so "storing"
# it means setting a cookie on the response:
#
#   auth-token=<jwt>; HttpOnly; SameSite=Lax; Max-Age=86400; Path=/
#   (+ Secure when APP_ENV=production)
#
# HttpOnly keeps page scripts away from the token; Lax still lets the
# browser send it on top-level navigations (links into /instructor).
#
# ``current_user`` is the single entry point route handlers use before
# doing anything privileged: absent cookie, bad signature and expired
# token all come back as ``None``.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime

from starlette.requests import Request
from starlette.responses import Response

from src.models.auth import AuthUser
from src.services.session_codec import SessionCodec

COOKIE_NAME = "auth-token"


class SessionCookie:
    """Reads, writes and clears the session cookie.

    Parameters
    ----------
    codec:
        Verifies tokens for :meth:`current_user`.
    cookie_name:
        Name of the cookie carrying the token.
    secure:
        Set the ``Secure`` attribute (production deployments behind HTTPS).
    """

    def __init__(
        self,
        codec: SessionCodec,
        cookie_name: str = COOKIE_NAME,
        secure: bool = False,
    ) -> None:
        self._codec = codec
        self._cookie_name = cookie_name
        self._secure = secure

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def save(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self._cookie_name,
            value=token,
            max_age=self._codec.ttl_seconds,
            path="/",
            secure=self._secure,
            httponly=True,
            samesite="lax",
        )

    def read(self, request: Request) -> str | None:
        return request.cookies.get(self._cookie_name) or None

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self._cookie_name,
            path="/",
            secure=self._secure,
            httponly=True,
            samesite="lax",
        )

    def current_user(self, request: Request, now: datetime | None = None) -> AuthUser | None:
        claims = self._codec.verify(self.read(request), now=now)
        return claims.to_user() if claims else None
