"""Abstract base class for the instructor account directory.

The directory is the system of record for instructor accounts and their
PINs.  In production it is a Google spreadsheet; the adapter pattern keeps
the login and recovery services unaware of that.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.account import Account


class IAccountDirectory(ABC):
    """Contract for looking up instructors and updating their PIN."""

    @abstractmethod
    async def find_account_by_email(self, email: str) -> Account | None:
        """Return the account registered under *email* (case-insensitive), or ``None``."""

    @abstractmethod
    async def find_account_by_credentials(self, email: str, pin: str) -> Account | None:
        """Return the account matching *email* and *pin*, or ``None``.

        Email matching is case-insensitive; the PIN must match exactly.
        """

    @abstractmethod
    async def update_credential(self, row_ref: int, new_value: str) -> None:
        """Replace the PIN of the account identified by *row_ref*.

        Parameters
        ----------
        row_ref:
            The ``Account.row_ref`` previously returned by this directory.
        new_value:
            The new PIN, stored verbatim.
        """

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return type(self).__name__
