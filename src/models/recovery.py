"""Credential-recovery domain models: code entries and workflow states.

# ─── RECOVERY STATE MACHINE ──────────────────────────────────────────
#
#   NO_CODE_ISSUED ──request──▶ CODE_PENDING ──verify (optional)──▶ CODE_VERIFIED
#                                     │                                  │
#                                     └──────────reset PIN───────────────┴──▶ RESET
#
# Only CODE_PENDING is held server-side (as a live VerificationCodeEntry).
# CODE_VERIFIED is advisory: verifying does not consume the code, so a
# client may skip straight to the reset call.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class RecoveryState(str, Enum):
    """Where a recovery attempt stands after an operation."""

    NO_CODE_ISSUED = "NO_CODE_ISSUED"
    CODE_PENDING = "CODE_PENDING"
    CODE_VERIFIED = "CODE_VERIFIED"
    RESET = "RESET"


class VerificationCodeEntry(BaseModel):
    """A live code for one (lower-cased) email address."""

    model_config = ConfigDict(frozen=True)

    email: str
    code: str
    expires_at: datetime


class RecoveryResult(BaseModel):
    """Outcome of a successful recovery step, with the user-facing message."""

    model_config = ConfigDict(frozen=True)

    state: RecoveryState
    message: str
