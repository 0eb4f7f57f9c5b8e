"""Utility modules for Instructor Hub.

- **errors** -- Domain exception hierarchy rooted at InstructorHubError;
  each class carries the HTTP status the API layer should answer with.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    InstructorHubError,
    NotFoundError,
    ProviderUnavailableError,
    ValidationError,
)

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "InstructorHubError",
    "NotFoundError",
    "ProviderUnavailableError",
    "ValidationError",
    "configure_logging",
    "get_logger",
]
