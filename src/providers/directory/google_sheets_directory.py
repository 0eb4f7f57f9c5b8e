"""Google Sheets-backed instructor directory implementing IAccountDirectory.

Instructors live one per row on a single sheet; row 1 is the header.
Columns used (0-based index / sheet letter):

    2  C  name
    6  G  mobile
    7  H  email
    8  I  fee
    21 V  PIN

Each lookup reads ``A:Z`` through the Sheets v4 REST API and scans in
memory; the sheet holds at most a few thousand rows, so there is no index.
``row_ref`` is the 1-based sheet row, which is exactly what the PIN update
needs to address the ``V`` cell.
"""

from __future__ import annotations

from typing import Any, Iterator
from urllib.parse import quote

import httpx

from src.interfaces.account_directory import IAccountDirectory
from src.models.account import Account
from src.providers.google.service_account import ServiceAccountTokenSource
from src.utils.errors import ProviderUnavailableError
from src.utils.logging import get_logger

SHEETS_SCOPES = ("https://www.googleapis.com/auth/spreadsheets",)

_SHEETS_API = "https://sheets.googleapis.com/v4/spreadsheets"
_READ_COLUMNS = "A:Z"
_NAME_COL = 2
_MOBILE_COL = 6
_EMAIL_COL = 7
_FEE_COL = 8
_PIN_COL = 21
_PIN_COLUMN_LETTER = "V"


def _cell(row: list[Any], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


class GoogleSheetsAccountDirectory(IAccountDirectory):
    """Reads and updates instructor rows in a Google spreadsheet.

    The ``httpx.AsyncClient`` and token source are injected for testability
    and connection pooling.  Any HTTP failure surfaces as
    :class:`ProviderUnavailableError`; nothing is retried here.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_source: ServiceAccountTokenSource,
        spreadsheet_id: str,
        sheet_name: str,
    ) -> None:
        self._http = http_client
        self._tokens = token_source
        self._spreadsheet_id = spreadsheet_id
        self._sheet_name = sheet_name
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IAccountDirectory implementation
    # ------------------------------------------------------------------

    async def find_account_by_email(self, email: str) -> Account | None:
        wanted = email.strip().lower()
        for account, _pin in self._iter_accounts(await self._read_rows()):
            if account.email.lower() == wanted:
                return account
        return None

    async def find_account_by_credentials(self, email: str, pin: str) -> Account | None:
        wanted = email.strip().lower()
        for account, stored_pin in self._iter_accounts(await self._read_rows()):
            if account.email.lower() == wanted and stored_pin == pin:
                return account
        return None

    async def update_credential(self, row_ref: int, new_value: str) -> None:
        # RAW keeps leading zeros; USER_ENTERED would turn "0123" into 123.
        cell_range = self._a1(f"{_PIN_COLUMN_LETTER}{row_ref}")
        await self._request(
            "PUT",
            self._values_url(cell_range),
            params={"valueInputOption": "RAW"},
            json={"range": cell_range, "values": [[new_value]]},
        )
        self._logger.info("sheet_credential_updated", row=row_ref)

    def get_provider_name(self) -> str:
        return f"google_sheets:{self._sheet_name}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _a1(self, cells: str) -> str:
        """Build an A1 range with the sheet name quoted (names may contain spaces)."""
        escaped = self._sheet_name.replace("'", "''")
        return f"'{escaped}'!{cells}"

    def _values_url(self, cell_range: str) -> str:
        return f"{_SHEETS_API}/{self._spreadsheet_id}/values/{quote(cell_range, safe='')}"

    async def _read_rows(self) -> list[list[Any]]:
        response = await self._request("GET", self._values_url(self._a1(_READ_COLUMNS)))
        return response.json().get("values", [])

    @staticmethod
    def _iter_accounts(rows: list[list[Any]]) -> Iterator[tuple[Account, str]]:
        """Yield (account, stored PIN) for every data row that has an email."""
        for index, row in enumerate(rows):
            if index == 0:
                continue  # header
            email = _cell(row, _EMAIL_COL)
            if not email:
                continue
            account = Account(
                name=_cell(row, _NAME_COL),
                email=email,
                row_ref=index + 1,
                mobile=_cell(row, _MOBILE_COL),
                fee=_cell(row, _FEE_COL),
            )
            yield account, _cell(row, _PIN_COL)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        token = await self._tokens.get_token()
        headers = {"Authorization": f"Bearer {token}"}
        try:
            response = await self._http.request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._logger.warning(
                "sheets_http_error",
                method=method,
                status=exc.response.status_code,
                body=exc.response.text[:200],
            )
            raise ProviderUnavailableError(
                f"Sheets API returned {exc.response.status_code}",
                provider_name="google_sheets",
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                f"Sheets API request failed: {exc}",
                provider_name="google_sheets",
            ) from exc
        return response
