"""In-memory instructor directory.

Used for local development when no Google credentials are configured, and
as a real (non-mock) collaborator in integration tests.  Contents are lost
on restart.
"""

from __future__ import annotations

from src.interfaces.account_directory import IAccountDirectory
from src.models.account import Account
from src.utils.errors import NotFoundError


class InMemoryAccountDirectory(IAccountDirectory):
    """Dict-backed directory keyed by ``row_ref``."""

    def __init__(self) -> None:
        self._rows: dict[int, tuple[Account, str]] = {}

    def add(self, name: str, email: str, pin: str, mobile: str = "", fee: str = "") -> Account:
        """Register an instructor and return the stored account."""
        account = Account(
            name=name,
            email=email,
            row_ref=len(self._rows) + 1,
            mobile=mobile,
            fee=fee,
        )
        self._rows[account.row_ref] = (account, pin)
        return account

    async def find_account_by_email(self, email: str) -> Account | None:
        wanted = email.strip().lower()
        for account, _pin in self._rows.values():
            if account.email.lower() == wanted:
                return account
        return None

    async def find_account_by_credentials(self, email: str, pin: str) -> Account | None:
        wanted = email.strip().lower()
        for account, stored_pin in self._rows.values():
            if account.email.lower() == wanted and stored_pin == pin:
                return account
        return None

    async def update_credential(self, row_ref: int, new_value: str) -> None:
        if row_ref not in self._rows:
            raise NotFoundError(f"No account at row {row_ref}")
        account, _old = self._rows[row_ref]
        self._rows[row_ref] = (account, new_value)

    def __len__(self) -> int:
        return len(self._rows)
