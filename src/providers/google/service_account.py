"""Google service-account access tokens via the JWT bearer grant.

A service account proves its identity by signing a short JWT assertion
with its RSA private key (RS256) and exchanging it at Google's token
endpoint for a bearer access token.  Tokens are cached until shortly
before they expire so a burst of Sheets calls costs one exchange.

For Gmail the assertion carries ``sub`` (the delegated mailbox) because a
service account cannot send mail as itself.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence

import httpx
import jwt

from src.utils.errors import ConfigurationError, ProviderUnavailableError
from src.utils.logging import get_logger

_TOKEN_URI = "https://oauth2.googleapis.com/token"
_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
_ASSERTION_LIFETIME_SECONDS = 3600
_REFRESH_MARGIN = timedelta(seconds=60)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class ServiceAccountTokenSource:
    """Fetches and caches OAuth2 access tokens for one service account.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient`` shared with the API adapters.
    service_account_email:
        The ``client_email`` of the service account.
    private_key:
        PEM-encoded RSA private key with real newlines.
    scopes:
        OAuth scopes requested for the token.
    subject:
        Mailbox to impersonate (domain-wide delegation), if any.
    clock:
        Returns the current aware datetime; injectable for tests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        service_account_email: str,
        private_key: str,
        scopes: Sequence[str],
        subject: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._http = http_client
        self._email = service_account_email
        self._private_key = private_key
        self._scopes = tuple(scopes)
        self._subject = subject or None
        self._clock = clock or _utc_now
        self._token: str | None = None
        self._expires_at: datetime | None = None
        self._lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    async def get_token(self) -> str:
        """Return a valid access token, exchanging a new assertion if needed."""
        async with self._lock:
            now = self._clock()
            if self._token and self._expires_at and now < self._expires_at - _REFRESH_MARGIN:
                return self._token

            token, expires_in = await self._exchange(self._build_assertion(now))
            self._token = token
            self._expires_at = now + timedelta(seconds=expires_in)
            self._logger.info(
                "google_token_refreshed",
                service_account=self._email,
                scopes=" ".join(self._scopes),
                expires_in=expires_in,
            )
            return token

    def _build_assertion(self, now: datetime) -> str:
        if not self._email or not self._private_key:
            raise ProviderUnavailableError(
                "Google service account is not configured",
                provider_name="google_oauth",
            )

        issued = int(now.timestamp())
        claims = {
            "iss": self._email,
            "scope": " ".join(self._scopes),
            "aud": _TOKEN_URI,
            "iat": issued,
            "exp": issued + _ASSERTION_LIFETIME_SECONDS,
        }
        if self._subject:
            claims["sub"] = self._subject

        try:
            return jwt.encode(claims, self._private_key, algorithm="RS256")
        except (ValueError, TypeError, jwt.PyJWTError) as exc:
            raise ConfigurationError(
                f"Google service account private key is unusable: {exc}",
                provider_name="google_oauth",
            ) from exc

    async def _exchange(self, assertion: str) -> tuple[str, int]:
        try:
            response = await self._http.post(
                _TOKEN_URI,
                data={"grant_type": _GRANT_TYPE, "assertion": assertion},
            )
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                f"Token request failed: {exc}",
                provider_name="google_oauth",
            ) from exc

        if response.status_code != 200:
            self._logger.warning(
                "google_token_rejected",
                status=response.status_code,
                body=response.text[:200],
            )
            raise ProviderUnavailableError(
                f"Token endpoint returned {response.status_code}",
                provider_name="google_oauth",
            )

        payload = response.json()
        token = payload.get("access_token")
        if not token:
            raise ProviderUnavailableError(
                "Token endpoint response carried no access_token",
                provider_name="google_oauth",
            )
        return token, int(payload.get("expires_in", _ASSERTION_LIFETIME_SECONDS))
