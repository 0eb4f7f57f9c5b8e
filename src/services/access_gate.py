"""Request-time access decisions for page routes.

``AccessGate.decide`` is a pure function of (path, cookie token, now):

    path exempt (API, static)          → allow
    path is the login page             → valid session ? redirect to role home : allow
    path under a role prefix           → valid session with that role ? allow : redirect to login
    anything else                      → allow

A valid session with the wrong role is sent to the login page exactly like
a missing one.  No 403 is ever produced here, so an authenticated user
learns nothing about pages reserved for the other role.

Prefixes match on path segments: ``/em`` guards ``/em`` and ``/em/...`` but
not ``/emails``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping

from src.models.auth import UserRole
from src.services.session_codec import SessionCodec

DEFAULT_ROLE_PATHS: dict[str, UserRole] = {
    "/instructor": UserRole.INSTRUCTOR,
    "/em": UserRole.EM,
}


@dataclass(frozen=True)
class GateDecision:
    """Either let the request through or send it to ``redirect_to``."""

    allow: bool
    redirect_to: str | None = None


_ALLOW = GateDecision(allow=True)


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


class AccessGate:
    """Decides redirect vs. pass-through for an incoming page request."""

    def __init__(
        self,
        codec: SessionCodec,
        role_paths: Mapping[str, UserRole] | None = None,
        login_path: str = "/login",
        exempt_prefixes: Iterable[str] = (),
    ) -> None:
        self._codec = codec
        self._role_paths = dict(role_paths or DEFAULT_ROLE_PATHS)
        self._login_path = login_path
        self._exempt_prefixes = tuple(exempt_prefixes)
        self._homes = {role: prefix for prefix, role in self._role_paths.items()}

    @property
    def login_path(self) -> str:
        return self._login_path

    def is_exempt(self, path: str) -> bool:
        return any(_under(path, prefix) for prefix in self._exempt_prefixes)

    def required_role(self, path: str) -> UserRole | None:
        for prefix, role in self._role_paths.items():
            if _under(path, prefix):
                return role
        return None

    def home_for(self, role: UserRole) -> str:
        return self._homes.get(role, self._login_path)

    def decide(self, path: str, token: str | None, now: datetime) -> GateDecision:
        if self.is_exempt(path):
            return _ALLOW

        if path == self._login_path:
            claims = self._codec.verify(token, now=now)
            if claims is None:
                return _ALLOW
            return GateDecision(allow=False, redirect_to=self.home_for(claims.role))

        required = self.required_role(path)
        if required is None:
            return _ALLOW

        claims = self._codec.verify(token, now=now)
        if claims is None or claims.role != required:
            return GateDecision(allow=False, redirect_to=self._login_path)
        return _ALLOW
