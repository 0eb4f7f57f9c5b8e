"""Custom exception hierarchy for Instructor Hub.

All application exceptions inherit from :class:`InstructorHubError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "google_sheets", "gmail") caused the failure, and
an HTTP ``status_code`` so the API layer can translate the error without a
lookup table.

The hierarchy is organized by who is at fault:

    InstructorHubError  (base -- catch-all for any Instructor Hub error)
    +-- ValidationError          (400: missing/malformed input, bad code, PIN length)
    +-- AuthenticationError      (401: no session, bad credentials)
    +-- AuthorizationError       (403: valid session, wrong role)
    +-- NotFoundError            (404: unknown account)
    +-- ConfigurationError       (500: startup / missing config)
    +-- ProviderUnavailableError (500: Google API down / unreachable)

Validation failures are fully recoverable and never mutate state; the
caller simply fixes the input and retries.
"""


class InstructorHubError(Exception):
    """Base exception for all Instructor Hub errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[gmail] Message rejected``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class ValidationError(InstructorHubError):
    """Raised when request input is missing, malformed, or fails a business rule."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AuthenticationError(InstructorHubError):
    """Raised when the caller has no valid session or presented wrong credentials.

    Never distinguishes an expired session from a forged one.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AuthorizationError(InstructorHubError):
    """Raised when an authenticated caller lacks the role an API requires."""

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(InstructorHubError):
    """Raised when a requested account or feature does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str = "Resource not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Server-side errors
# ---------------------------------------------------------------------------

class ConfigurationError(InstructorHubError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(InstructorHubError):
    """Raised when an external service (Sheets, Gmail, OAuth) fails or is unreachable.

    Not retried automatically.  The recovery workflow catches this around
    email delivery so a lost email never invalidates an issued code.
    """

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
