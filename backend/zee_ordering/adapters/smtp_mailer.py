import smtplib
from email.message import EmailMessage

from zee_ordering.config import Settings


class MailerError(Exception):
    pass


class SmtpMailer:
    """
    Plain SMTP sender. Port 465 uses implicit TLS, every other port
    upgrades with STARTTLS.
    """

    def __init__(self, settings: Settings, timeout: float = 20.0):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASS
        self.sender = settings.SMTP_FROM
        self.timeout = timeout

    def send(self, to: str, subject: str, text: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        try:
            if self.port == 465:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                    smtp.login(self.user, self.password)
                    smtp.send_message(msg)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                    smtp.starttls()
                    smtp.login(self.user, self.password)
                    smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailerError(f"Could not send mail via {self.host}:{self.port}: {e}")
