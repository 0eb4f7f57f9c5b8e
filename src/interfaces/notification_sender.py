"""Abstract base class for outbound email delivery."""

from __future__ import annotations

from abc import ABC, abstractmethod


class INotificationSender(ABC):
    """Contract for sending a single HTML email."""

    @abstractmethod
    async def send(self, to_email: str, subject: str, html_body: str) -> None:
        """Deliver one message.

        Raises
        ------
        ProviderUnavailableError
            If the message could not be handed to the mail service,
            including when the sender is not configured.
        """

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return type(self).__name__
