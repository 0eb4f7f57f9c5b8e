"""Shared Google API plumbing (service-account OAuth tokens)."""

from src.providers.google.service_account import ServiceAccountTokenSource

__all__ = ["ServiceAccountTokenSource"]
