"""Instructor PIN recovery: prove email ownership, then reset the PIN.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (business logic orchestration).
# Depends on: ICodeStore, IAccountDirectory, INotificationSender.
#
# Flow (see src/models/recovery.py for the state diagram):
#
#   1. request_code  : issue a 6-digit code for a known email and mail it.
#                       Unknown emails get the same success answer and no
#                       code, so the endpoint cannot be used to discover which
#                       addresses have accounts.  A failed email does not
#                       roll back the code; it is logged server-side instead.
#   2. verify_code   : optional pre-check.  Does not consume the code.
#                       Codes must match exactly; whitespace is not trimmed.
#   3. reset_pin     : re-check the code, apply the new PIN, then delete
#                       the code so it cannot be replayed.
#
# reset_pin_without_code is the older email-only path.  Knowing an
# instructor's email is enough to change their PIN there, which is far
# weaker than the code-verified path.  It stays available for operations
# but can be switched off with ALLOW_EMAIL_ONLY_PIN_RESET=false.
#
# Every validation failure raises before any state changes; a stored code
# is only deleted after the directory update succeeded.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from html import escape

import structlog

from src.interfaces.account_directory import IAccountDirectory
from src.interfaces.code_store import ICodeStore
from src.interfaces.notification_sender import INotificationSender
from src.models.recovery import RecoveryResult, RecoveryState
from src.utils.errors import NotFoundError, ValidationError

logger = structlog.get_logger(logger_name=__name__)

# ── Constants ─────────────────────────────────────────────────────────
DEFAULT_CODE_TTL_MINUTES = 10
DEFAULT_PIN_MIN_LENGTH = 4
DEFAULT_PIN_MAX_LENGTH = 10

CODE_SENT_MESSAGE = "A verification code has been sent."
CODE_CONFIRMED_MESSAGE = "The verification code has been confirmed."
PIN_CHANGED_MESSAGE = "Your PIN has been changed."

_EMAIL_SUBJECT = "PIN reset verification code"
_EMAIL_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">PIN reset verification code</h2>
  <p>Hello {name},</p>
  <p>Use this code to reset your PIN:</p>
  <div style="background-color: #f5f5f5; padding: 20px; text-align: center; margin: 20px 0; border-radius: 8px;">
    <h1 style="color: #2563eb; font-size: 32px; margin: 0; letter-spacing: 4px;">{code}</h1>
  </div>
  <p style="color: #666; font-size: 14px;">This code is valid for {ttl_minutes} minutes.</p>
  <p style="color: #666; font-size: 14px;">If you did not ask for this, you can ignore this email.</p>
</div>
"""


def _clean(value: str | None) -> str:
    return (value or "").strip()


class CredentialRecoveryService:
    """Orchestrates the verification-code PIN reset.

    Parameters
    ----------
    directory:
        Where instructor accounts and PINs live.
    notifier:
        Delivers the code by email.
    code_store:
        Holds pending codes; one live code per email.
    code_ttl_minutes:
        Lifetime of an issued code.
    pin_min_length, pin_max_length:
        Inclusive bounds on the new PIN's length.
    allow_email_only_reset:
        Whether :meth:`reset_pin_without_code` is enabled.
    """

    def __init__(
        self,
        directory: IAccountDirectory,
        notifier: INotificationSender,
        code_store: ICodeStore,
        code_ttl_minutes: int = DEFAULT_CODE_TTL_MINUTES,
        pin_min_length: int = DEFAULT_PIN_MIN_LENGTH,
        pin_max_length: int = DEFAULT_PIN_MAX_LENGTH,
        allow_email_only_reset: bool = True,
    ) -> None:
        self._directory = directory
        self._notifier = notifier
        self._codes = code_store
        self._code_ttl_minutes = code_ttl_minutes
        self._pin_min = pin_min_length
        self._pin_max = pin_max_length
        self._allow_email_only = allow_email_only_reset

    @property
    def code_ttl_minutes(self) -> int:
        return self._code_ttl_minutes

    # ------------------------------------------------------------------
    # Step 1: request a code
    # ------------------------------------------------------------------

    async def request_code(self, email: str | None) -> RecoveryResult:
        """Issue and email a code if *email* belongs to an instructor.

        Returns CODE_PENDING for known accounts and NO_CODE_ISSUED for
        unknown ones; the API layer answers both identically.
        """
        email = _clean(email)
        if not email:
            raise ValidationError("Please enter your email address.")

        account = await self._directory.find_account_by_email(email)
        if account is None:
            logger.info("verification_code_skipped", reason="unknown_email")
            return RecoveryResult(state=RecoveryState.NO_CODE_ISSUED, message=CODE_SENT_MESSAGE)

        code = self._codes.generate()
        await self._codes.set(email, code, self._code_ttl_minutes)
        logger.info("verification_code_issued", email=email.lower(), ttl_minutes=self._code_ttl_minutes)

        body = _EMAIL_TEMPLATE.format(name=escape(account.name), code=code, ttl_minutes=self._code_ttl_minutes)
        try:
            await self._notifier.send(email, _EMAIL_SUBJECT, body)
        except Exception:
            # The code stays valid; an operator can read it from the logs.
            logger.exception("verification_email_failed", email=email.lower())
            logger.warning("verification_code_fallback", email=email.lower(), code=code)

        return RecoveryResult(state=RecoveryState.CODE_PENDING, message=CODE_SENT_MESSAGE)

    # ------------------------------------------------------------------
    # Step 2: optional advisory check
    # ------------------------------------------------------------------

    async def verify_code(self, email: str | None, code: str | None) -> RecoveryResult:
        """Confirm *code* matches without consuming it."""
        email = _clean(email)
        code = code or ""
        if not email or not code:
            raise ValidationError("Please enter both your email address and the verification code.")

        stored = await self._codes.get(email)
        if stored is None:
            raise ValidationError("The verification code has expired or does not exist.")
        if stored != code:
            raise ValidationError("The verification code is incorrect.")

        return RecoveryResult(state=RecoveryState.CODE_VERIFIED, message=CODE_CONFIRMED_MESSAGE)

    # ------------------------------------------------------------------
    # Step 3: reset
    # ------------------------------------------------------------------

    async def reset_pin(
        self,
        email: str | None,
        code: str | None,
        new_pin: str | None,
    ) -> RecoveryResult:
        """Apply *new_pin* if *code* is still the live code for *email*."""
        email = _clean(email)
        code = code or ""
        if not email or not code or not new_pin:
            raise ValidationError("Please fill in all fields.")
        self._check_pin_length(new_pin)

        stored = await self._codes.get(email)
        if stored is None or stored != code:
            raise ValidationError("The verification code is expired or invalid.")

        account = await self._directory.find_account_by_email(email)
        if account is None:
            raise NotFoundError("No instructor account was found.")

        await self._directory.update_credential(account.row_ref, new_pin)
        await self._codes.delete(email)
        logger.info("pin_reset_completed", email=email.lower(), row=account.row_ref)
        return RecoveryResult(state=RecoveryState.RESET, message=PIN_CHANGED_MESSAGE)

    async def reset_pin_without_code(self, email: str | None, new_pin: str | None) -> RecoveryResult:
        """Apply *new_pin* on knowledge of the email alone (weaker path)."""
        if not self._allow_email_only:
            raise NotFoundError("This recovery option is not available.")

        email = _clean(email)
        if not email or not new_pin:
            raise ValidationError("Please enter your email address and a new PIN.")
        self._check_pin_length(new_pin)

        account = await self._directory.find_account_by_email(email)
        if account is None:
            raise NotFoundError("No instructor is registered with that email address.")

        await self._directory.update_credential(account.row_ref, new_pin)
        logger.warning("pin_reset_without_code", email=email.lower(), row=account.row_ref)
        return RecoveryResult(state=RecoveryState.RESET, message=PIN_CHANGED_MESSAGE)

    def _check_pin_length(self, new_pin: str) -> None:
        if not self._pin_min <= len(new_pin) <= self._pin_max:
            raise ValidationError(
                f"The PIN must be between {self._pin_min} and {self._pin_max} characters."
            )
