import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from waitlist_api.core.exceptions import AlreadyConfirmedError, ConflictError, DatabaseError, NotFoundError
from waitlist_api.core.types import is_uuid, utcnow
from waitlist_api.models.user import User as UserModel
from waitlist_api.models.waitlist_email import WaitlistEmail as WaitlistEmailModel
from waitlist_api.schemas.user import User, UserCreate
from waitlist_api.schemas.waitlist import WaitlistEmail, WaitlistJoin
from waitlist_api.services.storage import IStorage, generate_confirmation_token

logger = logging.getLogger(__name__)


class DatabaseStorage(IStorage):
    """Relational storage backed by SQLAlchemy.

    Every call runs in its own short-lived session and is committed before
    returning. Uniqueness of username, email and confirmation token is
    enforced by the table constraints.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Storage operation failed: {str(e)}")
            raise DatabaseError("Storage operation failed", details=str(e)) from e
        finally:
            db.close()

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        # Native UUID columns reject anything that is not a UUID
        if not is_uuid(user_id):
            return None
        with self._session() as db:
            row = db.query(UserModel).filter(UserModel.id == user_id).first()
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as db:
            row = db.query(UserModel).filter(UserModel.username == username).first()
            return User.model_validate(row) if row else None

    def create_user(self, user: UserCreate) -> User:
        with self._session() as db:
            row = UserModel(username=user.username, password=user.password)
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ConflictError("Username already exists", details=user.username) from e
            db.refresh(row)
            return User.model_validate(row)

    # Waitlist

    def add_to_waitlist(self, entry: WaitlistJoin) -> WaitlistEmail:
        with self._session() as db:
            row = WaitlistEmailModel(
                email=entry.email,
                confirmed=False,
                confirmation_token=generate_confirmation_token(),
            )
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                taken = db.query(WaitlistEmailModel.id).filter(WaitlistEmailModel.email == entry.email).first()
                if taken is None:
                    raise
                raise ConflictError("Email already registered for waitlist")
            db.refresh(row)
            return WaitlistEmail.model_validate(row)

    def get_waitlist_email(self, email: str) -> Optional[WaitlistEmail]:
        with self._session() as db:
            row = db.query(WaitlistEmailModel).filter(WaitlistEmailModel.email == email).first()
            return WaitlistEmail.model_validate(row) if row else None

    def get_waitlist_email_by_token(self, token: str) -> Optional[WaitlistEmail]:
        if not token:
            return None
        with self._session() as db:
            row = db.query(WaitlistEmailModel).filter(WaitlistEmailModel.confirmation_token == token).first()
            return WaitlistEmail.model_validate(row) if row else None

    def get_waitlist_count(self) -> int:
        with self._session() as db:
            return db.query(func.count(WaitlistEmailModel.id)).scalar() or 0

    def confirm_email(self, token: str) -> Optional[WaitlistEmail]:
        if not token:
            return None
        stmt = (
            update(WaitlistEmailModel)
            .where(
                WaitlistEmailModel.confirmation_token == token,
                WaitlistEmailModel.confirmed.is_(False),
            )
            .values(
                confirmed=True,
                confirmed_at=utcnow(),
                confirmation_token=None,
            )
            .execution_options(synchronize_session=False)
        )
        with self._session() as db:
            if db.get_bind().dialect.update_returning:
                row = db.execute(stmt.returning(*WaitlistEmailModel.__table__.c)).mappings().first()
                db.commit()
                return WaitlistEmail.model_validate(dict(row)) if row else None

            # No UPDATE ... RETURNING: pin the row by id, the token/confirmed guard still decides the winner
            candidate = (
                db.query(WaitlistEmailModel.id)
                .filter(
                    WaitlistEmailModel.confirmation_token == token,
                    WaitlistEmailModel.confirmed.is_(False),
                )
                .first()
            )
            if candidate is None:
                return None
            result = db.execute(stmt.where(WaitlistEmailModel.id == candidate.id))
            if result.rowcount != 1:
                db.rollback()
                return None
            db.commit()
            row = db.query(WaitlistEmailModel).filter(WaitlistEmailModel.id == candidate.id).first()
            return WaitlistEmail.model_validate(row)

    def regenerate_confirmation_token(self, email: str) -> str:
        token = generate_confirmation_token()
        stmt = (
            update(WaitlistEmailModel)
            .where(
                WaitlistEmailModel.email == email,
                WaitlistEmailModel.confirmed.is_(False),
            )
            .values(confirmation_token=token)
            .execution_options(synchronize_session=False)
        )
        with self._session() as db:
            result = db.execute(stmt)
            if result.rowcount == 1:
                db.commit()
                return token
            db.rollback()
            existing = db.query(WaitlistEmailModel.confirmed).filter(WaitlistEmailModel.email == email).first()
            if existing is None:
                raise NotFoundError("Email not found in waitlist")
            raise AlreadyConfirmedError()
