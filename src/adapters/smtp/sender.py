"""
SMTP notification adapter - Implements NotificationDispatcher protocol.

Sends the account confirmation email through a plain SMTP relay,
optionally upgraded with STARTTLS and authenticated when credentials
are configured. Any transport failure surfaces as NotificationError so
the pipeline can roll the registration back.
"""

import logging
import smtplib
from email.mime.text import MIMEText

from src.adapters.smtp.links import CONFIRMATION_BODY, CONFIRMATION_SUBJECT, confirmation_link
from src.domain.exceptions import NotificationError
from src.domain.models import User

logger = logging.getLogger(__name__)


class SmtpNotificationDispatcher:
    """Implements NotificationDispatcher protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        confirmation_url: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.sender = sender
        self.confirmation_url = confirmation_url
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def send_confirmation_email(self, user: User) -> None:
        if not user.confirmation_token:
            raise NotificationError(f"User {user.id} has no confirmation token")

        link = confirmation_link(self.confirmation_url, user.confirmation_token)
        msg = MIMEText(CONFIRMATION_BODY.format(first_name=user.first_name, link=link), "plain")
        msg["From"] = self.sender
        msg["To"] = user.email
        msg["Subject"] = CONFIRMATION_SUBJECT

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Confirmation email to {user.email} failed: {e}")
            raise NotificationError(f"Could not send confirmation email to {user.email}") from e

        logger.info(f"Confirmation email sent to {user.email}")
