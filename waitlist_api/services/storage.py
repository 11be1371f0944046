"""
Storage interface for users and waitlist emails.

Routes only ever talk to an ``IStorage``; which backend sits behind it is
decided once per process from ``settings.STORAGE_BACKEND``.
"""
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Optional

from waitlist_api.core.config import settings
from waitlist_api.schemas.user import User, UserCreate
from waitlist_api.schemas.waitlist import WaitlistEmail, WaitlistJoin

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("memory", "database")


def generate_confirmation_token() -> str:
    """Unguessable single-use confirmation token."""
    return secrets.token_urlsafe(settings.CONFIRMATION_TOKEN_BYTES)


class IStorage(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(self, user: UserCreate) -> User:
        """Persist a new user. Raises ConflictError if the username is taken."""

    @abstractmethod
    def add_to_waitlist(self, entry: WaitlistJoin) -> WaitlistEmail:
        """Persist a new unconfirmed entry with a fresh token.

        Raises ConflictError if the email is already on the waitlist.
        """

    @abstractmethod
    def get_waitlist_email(self, email: str) -> Optional[WaitlistEmail]:
        ...

    @abstractmethod
    def get_waitlist_email_by_token(self, token: str) -> Optional[WaitlistEmail]:
        ...

    @abstractmethod
    def get_waitlist_count(self) -> int:
        ...

    @abstractmethod
    def confirm_email(self, token: str) -> Optional[WaitlistEmail]:
        """Confirm the unconfirmed entry holding ``token``.

        Returns the updated entry, or None when no unconfirmed entry has
        that token (unknown, replaced or already used).
        """

    @abstractmethod
    def regenerate_confirmation_token(self, email: str) -> str:
        """Replace the token of an unconfirmed entry and return the new one.

        Raises NotFoundError for unknown emails and AlreadyConfirmedError
        for confirmed ones.
        """


_storage: Optional[IStorage] = None


def create_storage(backend: str) -> IStorage:
    if backend == "memory":
        from waitlist_api.services.memory_storage import MemStorage
        return MemStorage()
    if backend == "database":
        from waitlist_api.core.database import SessionLocal, init_models
        from waitlist_api.services.database_storage import DatabaseStorage
        init_models()
        return DatabaseStorage(SessionLocal)
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {STORAGE_BACKENDS}")


def get_storage() -> IStorage:
    """Return the process-wide storage backend, building it on first use."""
    global _storage
    if _storage is None:
        _storage = create_storage(settings.STORAGE_BACKEND)
        logger.info(f"Using {settings.STORAGE_BACKEND} storage backend")
    return _storage


def reset_storage() -> None:
    global _storage
    _storage = None
