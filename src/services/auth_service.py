"""Login credential checks for both roles.

Instructors authenticate with email + PIN against the account directory.
The EM account is a single shared login whose name and PIN come from the
environment; it is disabled while either value is empty.  Both checks end
in an :class:`AuthUser` that the API layer turns into a session token.

The EM can change the shared login from an EM session.  The new name and
PIN replace the configured pair for the lifetime of the process; the
environment values apply again after a restart.
"""

from __future__ import annotations

import hmac

import structlog

from src.interfaces.account_directory import IAccountDirectory
from src.models.auth import AuthUser, UserRole
from src.utils.errors import AuthenticationError, AuthorizationError, ValidationError

logger = structlog.get_logger(logger_name=__name__)

NO_MATCH_MESSAGE = "No matching account was found."
EM_CREDENTIALS_CHANGED_MESSAGE = "Your login has been changed. Use the new name and PIN next time you sign in."


class AuthService:
    """Resolves login form input to an authenticated user."""

    def __init__(
        self,
        directory: IAccountDirectory,
        em_login_name: str = "",
        em_login_pin: str = "",
        em_contact_email: str = "em@localhost",
    ) -> None:
        self._directory = directory
        self._em_name = em_login_name
        self._em_pin = em_login_pin
        self._em_email = em_contact_email

    async def login(
        self,
        role: str | None,
        name: str | None = None,
        email: str | None = None,
        pin: str | None = None,
    ) -> AuthUser:
        """Authenticate as EM when *role* is ``"EM"``, otherwise as an instructor.

        Raises
        ------
        ValidationError
            A required field is missing.
        AuthenticationError
            The credentials match no account.
        """
        if role == UserRole.EM.value:
            return self._login_em((name or "").strip(), pin or "")
        return await self._login_instructor((email or "").strip(), pin or "")

    def _login_em(self, name: str, pin: str) -> AuthUser:
        if not name or not pin:
            raise ValidationError("Please enter both your name and PIN.")

        configured = bool(self._em_name and self._em_pin)
        # Compare both fields every time so timing does not reveal which one failed.
        name_ok = hmac.compare_digest(name.encode("utf-8"), self._em_name.encode("utf-8"))
        pin_ok = hmac.compare_digest(pin.encode("utf-8"), self._em_pin.encode("utf-8"))
        if not (configured and name_ok and pin_ok):
            logger.info("login_failed", role=UserRole.EM.value)
            raise AuthenticationError(NO_MATCH_MESSAGE)

        return AuthUser(role=UserRole.EM, name=name, email=self._em_email)

    async def _login_instructor(self, email: str, pin: str) -> AuthUser:
        if not email or not pin:
            raise ValidationError("Please enter both your email address and PIN.")

        account = await self._directory.find_account_by_credentials(email, pin)
        if account is None:
            logger.info("login_failed", role=UserRole.INSTRUCTOR.value, email=email.lower())
            raise AuthenticationError(NO_MATCH_MESSAGE)

        return AuthUser(
            role=UserRole.INSTRUCTOR,
            name=account.name,
            email=account.email,
            mobile=account.mobile,
            fee=account.fee,
        )

    def update_em_credentials(
        self,
        user: AuthUser | None,
        current_pin: str | None,
        new_name: str | None,
        new_pin: str | None,
    ) -> None:
        """Replace the EM login name and PIN.

        Raises
        ------
        AuthorizationError
            *user* is not signed in as the EM.
        ValidationError
            A field is empty or *current_pin* is wrong.
        """
        if user is None or user.role is not UserRole.EM:
            raise AuthorizationError("Please sign in as the EM first.")

        current_pin = (current_pin or "").strip()
        new_name = (new_name or "").strip()
        new_pin = (new_pin or "").strip()
        if not current_pin:
            raise ValidationError("Please enter your current PIN.")
        if not new_name:
            raise ValidationError("Please enter a new login name.")
        if not new_pin:
            raise ValidationError("Please enter a new PIN.")

        pin_ok = hmac.compare_digest(current_pin.encode("utf-8"), self._em_pin.encode("utf-8"))
        if not (self._em_pin and pin_ok):
            logger.info("em_credentials_rejected", email=user.email)
            raise ValidationError("The current PIN is incorrect.")

        self._em_name = new_name
        self._em_pin = new_pin
        logger.info("em_credentials_updated", email=user.email)
