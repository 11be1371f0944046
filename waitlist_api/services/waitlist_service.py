import logging

from waitlist_api.core.exceptions import AlreadyConfirmedError, ConflictError, NotFoundError, ValidationError
from waitlist_api.schemas.waitlist import ResendConfirmationRequest, WaitlistEmail, WaitlistJoin
from waitlist_api.services.email_service import EmailService
from waitlist_api.services.storage import IStorage
from waitlist_api.utils.audit import audit

logger = logging.getLogger(__name__)


class WaitlistService:
    def __init__(self, storage: IStorage, email: EmailService = None):
        self.storage = storage
        self.email = email or EmailService()

    def join(self, payload: WaitlistJoin) -> WaitlistEmail:
        """Add a new unconfirmed entry and hand its token to delivery."""
        if self.storage.get_waitlist_email(payload.email):
            audit("WAITLIST_JOIN", email=payload.email, result="duplicate")
            raise ConflictError("Email already registered for waitlist")

        # The storage constraint still catches a concurrent duplicate
        entry = self.storage.add_to_waitlist(payload)
        sent = self.email.send_confirmation(entry.email, entry.confirmation_token)
        audit("WAITLIST_JOIN", email=entry.email, entry_id=entry.id, result="created", sent=bool(sent))
        return entry

    def count(self) -> int:
        return self.storage.get_waitlist_count()

    def confirm(self, token: str) -> WaitlistEmail:
        if not token or not token.strip():
            raise ValidationError("Confirmation token is required", error_code="missing_token")

        entry = self.storage.confirm_email(token)
        if entry is None:
            audit("WAITLIST_CONFIRM", result="invalid_token")
            raise NotFoundError("Invalid or expired confirmation token")

        audit("WAITLIST_CONFIRM", email=entry.email, entry_id=entry.id, result="success")
        return entry

    def resend(self, payload: ResendConfirmationRequest) -> str:
        """Issue a replacement token for an unconfirmed entry and return it."""
        entry = self.storage.get_waitlist_email(payload.email)
        if entry is None:
            audit("WAITLIST_RESEND", email=payload.email, result="not_found")
            raise NotFoundError("Email not found in waitlist")
        if entry.confirmed:
            audit("WAITLIST_RESEND", email=payload.email, entry_id=entry.id, result="already_confirmed")
            raise AlreadyConfirmedError()

        token = self.storage.regenerate_confirmation_token(payload.email)
        sent = self.email.send_confirmation(payload.email, token)
        audit("WAITLIST_RESEND", email=payload.email, entry_id=entry.id, result="resent", sent=bool(sent))
        return token
