"""Pydantic request/response schemas for the Instructor Hub API.

# ─── HOW SCHEMAS WORK ────────────────────────────────────────────────
#
# Request fields are all optional on purpose: a missing field is a
# business-level validation failure answered with 400 and a readable
# message by the service layer, not a schema failure.  Only bodies that
# are not JSON objects at all are rejected by FastAPI (also as 400, see
# middleware.request_validation_handler).
#
# Wire names follow the web client (camelCase: ``pinCode``,
# ``verificationCode``, ``newPinCode``); Python code uses snake_case via
# aliases.  Numeric PINs sent as JSON numbers are coerced to strings.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _RequestBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


# ─── Request schemas ──────────────────────────────────────────────────

class LoginRequest(_RequestBody):
    """Login form.  ``role == "EM"`` selects the EM login; anything else is an instructor."""

    role: str | None = None
    name: str | None = None
    email: str | None = None
    pin_code: str | None = Field(default=None, alias="pinCode")


class RequestCodeRequest(_RequestBody):
    """Ask for a PIN-reset verification code."""

    email: str | None = None


class VerifyCodeRequest(_RequestBody):
    """Check a verification code without consuming it."""

    email: str | None = None
    verification_code: str | None = Field(default=None, alias="verificationCode")


class ResetPinRequest(_RequestBody):
    """Set a new PIN using a verification code."""

    email: str | None = None
    verification_code: str | None = Field(default=None, alias="verificationCode")
    new_pin_code: str | None = Field(default=None, alias="newPinCode")


class SimpleResetPinRequest(_RequestBody):
    """Set a new PIN by email alone."""

    email: str | None = None
    new_pin_code: str | None = Field(default=None, alias="newPinCode")


class EMCredentialsRequest(_RequestBody):
    """Change the EM login.  Wire names match the EM settings form."""

    current_pin: str | None = Field(default=None, alias="currentPassword")
    new_name: str | None = Field(default=None, alias="newId")
    new_pin: str | None = Field(default=None, alias="newPassword")


# ─── Response schemas ─────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""

    error: str


class SuccessResponse(BaseModel):
    success: bool = True
    message: str | None = None


class LoginResponse(BaseModel):
    success: bool = True
    role: str
    user: dict[str, str]


class MeResponse(BaseModel):
    role: str
    user: dict[str, str]


class HealthResponse(BaseModel):
    status: str
    version: str
    providers: dict[str, str]
