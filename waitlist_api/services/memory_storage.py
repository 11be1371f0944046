from typing import Dict, Optional

from waitlist_api.core.exceptions import AlreadyConfirmedError, ConflictError, NotFoundError
from waitlist_api.core.types import new_id, utcnow
from waitlist_api.schemas.user import User, UserCreate
from waitlist_api.schemas.waitlist import WaitlistEmail, WaitlistJoin
from waitlist_api.services.storage import IStorage, generate_confirmation_token


class MemStorage(IStorage):
    """Process-local storage for development and tests.

    Nothing survives a restart, and lookups by username or token scan
    every stored value. Not safe for concurrent writers.
    """

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.waitlist_emails: Dict[str, WaitlistEmail] = {}

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, user: UserCreate) -> User:
        if self.get_user_by_username(user.username):
            raise ConflictError("Username already exists", details=user.username)
        created = User(id=new_id(), **user.model_dump())
        self.users[created.id] = created
        return created

    def add_to_waitlist(self, entry: WaitlistJoin) -> WaitlistEmail:
        if entry.email in self.waitlist_emails:
            raise ConflictError("Email already registered for waitlist")
        created = WaitlistEmail(
            id=new_id(),
            email=entry.email,
            created_at=utcnow(),
            confirmed=False,
            confirmation_token=generate_confirmation_token(),
        )
        self.waitlist_emails[created.email] = created
        return created

    def get_waitlist_email(self, email: str) -> Optional[WaitlistEmail]:
        return self.waitlist_emails.get(email)

    def get_waitlist_email_by_token(self, token: str) -> Optional[WaitlistEmail]:
        if not token:
            return None
        return next(
            (w for w in self.waitlist_emails.values() if w.confirmation_token == token),
            None,
        )

    def get_waitlist_count(self) -> int:
        return len(self.waitlist_emails)

    def confirm_email(self, token: str) -> Optional[WaitlistEmail]:
        existing = self.get_waitlist_email_by_token(token)
        if existing is None or existing.confirmed:
            return None
        confirmed = existing.model_copy(update={
            "confirmed": True,
            "confirmed_at": utcnow(),
            "confirmation_token": None,
        })
        self.waitlist_emails[confirmed.email] = confirmed
        return confirmed

    def regenerate_confirmation_token(self, email: str) -> str:
        existing = self.waitlist_emails.get(email)
        if existing is None:
            raise NotFoundError("Email not found in waitlist")
        if existing.confirmed:
            raise AlreadyConfirmedError()
        token = generate_confirmation_token()
        self.waitlist_emails[email] = existing.model_copy(update={"confirmation_token": token})
        return token
