"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ───────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. **Environment variables**: e.g., JWT_SECRET=...
#   2. **.env file**: key=value lines in the project root .env file
#
# Field ``jwt_secret`` maps to env var ``JWT_SECRET``.  Defaults apply
# when neither source sets a value.
#
# Secrets (JWT secret, EM PIN, Google private key) live here and never in
# config/config.yaml, which is checked in.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Used only when JWT_SECRET is unset.  Startup logs a warning; setting a
# strong secret is a deployment responsibility.
DEVELOPMENT_FALLBACK_SECRET = "instructor-hub-dev-secret-change-in-production"


class Settings(BaseSettings):
    """Instructor Hub application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Session signing ===
    jwt_secret: str = ""

    # === EM (education manager) login ===
    # Empty name or PIN disables EM login entirely.
    em_login_name: str = ""
    em_login_pin: str = ""
    em_contact_email: str = "em@localhost"

    # === Google service account (Sheets directory + Gmail delivery) ===
    google_service_account_email: str = ""
    google_service_account_private_key: str = ""
    google_delegate_email: str = ""  # Gmail sends on behalf of this mailbox
    google_login_spreadsheet_id: str = ""
    instructor_sheet_name: str = "Instructors"
    mail_from: str = ""

    # === Credential recovery ===
    # Email-only PIN reset is a weaker factor than the code-verified path;
    # a security review may switch it off without a deploy of new code.
    allow_email_only_pin_reset: bool = True

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def effective_jwt_secret(self) -> str:
        """Return the configured signing secret, or the development fallback."""
        return self.jwt_secret or DEVELOPMENT_FALLBACK_SECRET

    def google_private_key(self) -> str:
        """Return the service-account PEM with escaped newlines restored."""
        return self.google_service_account_private_key.replace("\\n", "\n")

    def has_google_credentials(self) -> bool:
        """True when both service-account fields are configured."""
        return bool(self.google_service_account_email and self.google_service_account_private_key)
