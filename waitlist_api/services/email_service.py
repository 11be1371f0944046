import logging
from urllib.parse import quote

from waitlist_api.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Confirmation delivery.

    No mail provider is wired in yet: messages are only logged, and the
    confirmation link itself is only logged in development.
    """

    def __init__(self):
        self.sender = settings.EMAIL_FROM

    def confirmation_link(self, token: str) -> str:
        base = settings.FRONTEND_URL.rstrip("/")
        return f"{base}/confirm/{quote(token, safe='')}"

    def send_confirmation(self, to: str, token: str) -> bool:
        subject = "Confirm your spot on the waitlist"
        logger.info(f"Confirmation email queued from {self.sender}: {subject!r} (delivery stubbed)")
        if settings.is_development:
            logger.debug(f"Confirmation link for {to}: {self.confirmation_link(token)}")
        return True
