"""Gmail API email delivery implementing INotificationSender.

Builds an RFC 822 HTML message, base64url-encodes it and posts it to
``users/me/messages/send``.  ``me`` resolves to the delegated mailbox the
token source impersonates.  When no service account is configured the
sender still exists but every ``send`` raises, which the recovery workflow
treats like any other delivery failure.
"""

from __future__ import annotations

import base64
from email.message import EmailMessage

import httpx

from src.interfaces.notification_sender import INotificationSender
from src.providers.google.service_account import ServiceAccountTokenSource
from src.utils.errors import ProviderUnavailableError
from src.utils.logging import get_logger

GMAIL_SCOPES = ("https://www.googleapis.com/auth/gmail.send",)

_SEND_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages/send"


class GmailNotificationSender(INotificationSender):
    """Sends HTML mail through the Gmail REST API.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``.
    token_source:
        Delegated service-account token source, or ``None`` when Google
        credentials are absent.
    sender_address:
        Value of the ``From`` header; must be the delegated mailbox or one
        of its aliases.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_source: ServiceAccountTokenSource | None,
        sender_address: str,
    ) -> None:
        self._http = http_client
        self._tokens = token_source
        self._sender = sender_address
        self._logger = get_logger(__name__)

    @property
    def is_configured(self) -> bool:
        return self._tokens is not None and bool(self._sender)

    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        if not self.is_configured:
            raise ProviderUnavailableError("Gmail sender is not configured", provider_name="gmail")

        message = EmailMessage()
        message["To"] = to_email
        message["From"] = self._sender
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")

        token = await self._tokens.get_token()
        try:
            response = await self._http.post(
                _SEND_URL,
                headers={"Authorization": f"Bearer {token}"},
                json={"raw": raw},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._logger.warning(
                "gmail_send_rejected",
                to=to_email,
                status=exc.response.status_code,
                body=exc.response.text[:200],
            )
            raise ProviderUnavailableError(
                f"Gmail API returned {exc.response.status_code}",
                provider_name="gmail",
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                f"Gmail API request failed: {exc}",
                provider_name="gmail",
            ) from exc

        self._logger.info("email_sent", to=to_email, message_id=response.json().get("id"))
