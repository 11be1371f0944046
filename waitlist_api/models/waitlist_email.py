from sqlalchemy import Column, String, Boolean, UniqueConstraint
from sqlalchemy.sql import func

from waitlist_api.core.database import Base
from waitlist_api.core.types import UTCDateTime, UUIDString, new_id, utcnow


class WaitlistEmail(Base):
    __tablename__ = "waitlist_emails"

    id = Column(UUIDString(), primary_key=True, default=new_id)
    email = Column(String, nullable=False, index=True)
    created_at = Column(UTCDateTime(), default=utcnow, server_default=func.now(), nullable=False)

    # Confirmation state
    confirmed = Column(Boolean, default=False, nullable=False)
    confirmation_token = Column(String, nullable=True)  # cleared once confirmed
    confirmed_at = Column(UTCDateTime(), nullable=True)

    __table_args__ = (
        UniqueConstraint('email', name='uq_waitlist_email'),
        UniqueConstraint('confirmation_token', name='uq_waitlist_confirmation_token'),
    )

    def __repr__(self):
        return f"<WaitlistEmail {self.email} confirmed={self.confirmed}>"
