"""
Console notification adapter - Implements NotificationDispatcher protocol.

This module provides a console-based implementation of the domain's
notification port, logging confirmation links instead of mailing them
for development and demo purposes.
"""

import logging

from src.adapters.smtp.links import confirmation_link
from src.domain.exceptions import NotificationError
from src.domain.models import User

logger = logging.getLogger(__name__)


class ConsoleNotificationDispatcher:
    """
    Implements NotificationDispatcher protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints confirmation links to stdout.
    """

    def __init__(self, confirmation_url: str) -> None:
        self._confirmation_url = confirmation_url

    def send_confirmation_email(self, user: User) -> None:
        """
        Log the confirmation link to console (simulates email delivery).

        In production, this would be replaced with the SMTP adapter.
        The link is logged at INFO level to be visible in docker-compose logs.

        Args:
            user: Persisted user carrying its confirmation token

        Raises:
            NotificationError: User has no confirmation token
        """
        if not user.confirmation_token:
            raise NotificationError(f"User {user.id} has no confirmation token")

        link = confirmation_link(self._confirmation_url, user.confirmation_token)
        logger.info("[CONFIRMATION] Email: %s Link: %s", user.email, link)
