"""Authentication domain models: roles, the authenticated user, session claims.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph: no imports from upper layers).
#
# ``SessionClaims`` is what the signed session token carries.  The server
# keeps no copy: the token in the browser cookie is the only record of a
# session, so every field needed for authorization must live here.
#
# ``expires_at`` is fixed at issue time (``issued_at`` + TTL) and is never
# refreshed in place.  A longer session means issuing a new token.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """The two roles the application knows about."""

    INSTRUCTOR = "INSTRUCTOR"
    EM = "EM"


class AuthUser(BaseModel):
    """An authenticated caller.

    ``mobile`` and ``fee`` are only known at login time for instructors
    (they come from the directory row) and are not embedded in the token.
    """

    model_config = ConfigDict(frozen=True)

    role: UserRole
    name: str
    email: str
    mobile: str | None = None
    fee: str | None = None

    def public_profile(self) -> dict[str, str]:
        """Return the user fields safe to echo back to the browser."""
        profile = {"name": self.name, "email": self.email}
        if self.role == UserRole.INSTRUCTOR:
            if self.mobile is not None:
                profile["mobile"] = self.mobile
            if self.fee is not None:
                profile["fee"] = self.fee
        return profile


class SessionClaims(BaseModel):
    """Verified contents of a session token."""

    model_config = ConfigDict(frozen=True)

    role: UserRole
    name: str
    email: str
    issued_at: datetime
    expires_at: datetime = Field(description="issued_at + session TTL, fixed at creation.")

    def to_user(self) -> AuthUser:
        return AuthUser(role=self.role, name=self.name, email=self.email)
