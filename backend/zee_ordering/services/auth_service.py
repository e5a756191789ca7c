import hmac
import secrets
from typing import Optional

from zee_ordering.adapters.smtp_mailer import SmtpMailer
from zee_ordering.config import Settings, settings as default_settings
from zee_ordering.utils.logger import get_logger

log = get_logger("auth")

RECOVERY_SUBJECT = "Zee Ordering admin access"


class AuthConfigurationError(Exception):
    """A server-side setting needed for this operation is missing."""
    pass


class MissingCredentials(Exception):
    pass


class InvalidCredentials(Exception):
    pass


class RecoveryNotAllowed(Exception):
    pass


def verify_admin_credentials(email: str, password: str, settings: Settings) -> bool:
    """
    Email matches trimmed and case-insensitively, password must match
    exactly. Always False while the admin pair is not configured.
    """
    if not settings.auth_configured:
        return False
    if not email or not password:
        return False
    email_ok = email.strip().lower() == settings.ADMIN_EMAIL.strip().lower()
    password_ok = hmac.compare_digest(
        password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8")
    )
    return email_ok and password_ok


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


class AuthService:
    def __init__(self, settings: Optional[Settings] = None, mailer=None):
        self.settings = settings or default_settings
        self.mailer = mailer

    def login(self, email: Optional[str], password: Optional[str]) -> str:
        """Check the admin pair and return a fresh session token."""
        if not self.settings.auth_configured:
            raise AuthConfigurationError("Admin auth is not configured on this server.")
        email = (email or "").strip()
        password = password or ""
        if not email or not password:
            raise MissingCredentials("Missing email or password.")
        if not verify_admin_credentials(email, password, self.settings):
            log.warning("Login rejected for %s", email)
            raise InvalidCredentials("Invalid credentials.")
        log.info("Login accepted for %s", email)
        return new_session_token()

    def send_recovery(self, email: Optional[str]) -> None:
        """
        Mail the owner a reminder of the admin login id. The password itself
        is never sent; the owner resets ADMIN_PASSWORD on the server.
        """
        email = (email or "").strip().lower()
        if not email:
            raise MissingCredentials("Missing email.")
        owner = self.settings.OWNER_EMAIL.strip().lower()
        if not owner or email != owner:
            log.warning("Recovery refused for %s", email)
            raise RecoveryNotAllowed("This email is not authorized for admin reset.")
        if not self.settings.auth_configured:
            raise AuthConfigurationError("Admin credentials are not configured on the server.")
        if not self.settings.smtp_configured:
            raise AuthConfigurationError(
                "SMTP is not configured on the server (SMTP_HOST/USER/PASS)."
            )

        text = (
            f"A credential reminder was requested for {self.settings.BRAND_NAME}.\n\n"
            f"Admin email/ID: {self.settings.ADMIN_EMAIL}\n\n"
            "The password is not sent by email. To change it, set a new ADMIN_PASSWORD "
            "environment variable on the server and restart it."
        )
        mailer = self.mailer or SmtpMailer(self.settings)
        mailer.send(self.settings.OWNER_EMAIL.strip(), RECOVERY_SUBJECT, text)
        log.info("Recovery reminder sent to owner address")
