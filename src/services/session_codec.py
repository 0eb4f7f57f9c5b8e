"""Signed, time-limited session tokens.

# ─── TOKEN FORMAT ────────────────────────────────────────────────────
#
# A compact HS256 JWT:
#
#   { "role": "INSTRUCTOR" | "EM", "name": ..., "email": ...,
#     "iat": <issued, epoch seconds>, "exp": <iat + TTL> }
#
# The token is the only record of a session: the server keeps no table,
# so verification is a pure function of (token, secret, now).  Expiry is
# checked here against the injected clock rather than PyJWT's wall clock,
# which keeps the boundary testable: a token is invalid from ``exp`` on.
#
# Verification never explains itself.  Bad signature, garbage input,
# missing claims, unknown role and expiry all collapse to ``None``; callers
# treat every failure as "not logged in".
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
import structlog

from src.models.auth import AuthUser, SessionClaims

logger = structlog.get_logger(logger_name=__name__)

_ALGORITHM = "HS256"
DEFAULT_SESSION_TTL = timedelta(hours=24)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class SessionCodec:
    """Issues and verifies session tokens with a symmetric secret.

    Parameters
    ----------
    secret:
        HMAC signing key.  Should be at least 32 bytes.
    ttl:
        Lifetime of an issued token.
    clock:
        Returns the current aware datetime when callers do not pass ``now``.
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._secret = secret
        self._ttl_seconds = int(ttl.total_seconds())
        self._clock = clock or _utc_now

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self, user: AuthUser, now: datetime | None = None) -> str:
        """Return a token embedding *user*'s role, name and email."""
        issued = int((now or self._clock()).timestamp())
        payload = {
            "role": user.role.value,
            "name": user.name,
            "email": user.email,
            "iat": issued,
            "exp": issued + self._ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str | None, now: datetime | None = None) -> SessionClaims | None:
        """Return the claims of a valid, unexpired *token*, else ``None``."""
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={
                    "require": ["exp", "iat"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            logger.debug("session_rejected", reason=type(exc).__name__)
            return None

        current = (now or self._clock()).timestamp()
        try:
            if current >= payload["exp"]:
                logger.debug("session_rejected", reason="expired")
                return None
            return SessionClaims(
                role=payload["role"],
                name=payload["name"],
                email=payload["email"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            logger.debug("session_rejected", reason="claims")
            return None
