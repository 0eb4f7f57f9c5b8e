"""Instructor account records as returned by the account directory."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """One instructor row in the directory.

    ``row_ref`` is opaque to callers; the Sheets directory uses the 1-based
    sheet row, the in-memory directory its own key.  It is only ever handed
    back to the same directory's ``update_credential``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    row_ref: int = Field(ge=1)
    mobile: str = ""
    fee: str = ""
