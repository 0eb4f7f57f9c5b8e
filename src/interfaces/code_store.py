"""Abstract base class for verification-code stores.

Defines the contract for the short-lived email → code mapping used by
credential recovery.  The in-process implementation is enough for a single
worker; a networked expiring key-value service (e.g. Redis with ``SETEX``)
can be swapped in behind the same interface without touching the recovery
workflow.
"""

from __future__ import annotations

import secrets
from abc import ABC, abstractmethod

CODE_MIN = 100000
CODE_MAX = 999999


class ICodeStore(ABC):
    """Contract for expiring verification-code storage.

    Keys are email addresses, compared case-insensitively.  At most one
    live code exists per email; ``set`` overwrites.  All storage operations
    are async so network-backed stores do not block the event loop.
    """

    def generate(self) -> str:
        """Return a fresh, uniformly random 6-digit code (100000–999999)."""
        return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))

    @abstractmethod
    async def set(self, email: str, code: str, ttl_minutes: int) -> None:
        """Store *code* for *email*, replacing any previous code.

        Parameters
        ----------
        email:
            Account email; normalised to lower case.
        code:
            The code to store.
        ttl_minutes:
            Minutes until the code expires.
        """

    @abstractmethod
    async def get(self, email: str) -> str | None:
        """Return the live code for *email*, or ``None``.

        An expired entry is removed on lookup and ``None`` is returned; a
        live entry is returned without being consumed.
        """

    @abstractmethod
    async def delete(self, email: str) -> None:
        """Remove the code for *email*.  No-op if absent."""

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return type(self).__name__
