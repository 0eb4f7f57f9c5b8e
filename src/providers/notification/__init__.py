"""Outbound email delivery."""

from src.providers.notification.gmail_sender import GmailNotificationSender

__all__ = ["GmailNotificationSender"]
