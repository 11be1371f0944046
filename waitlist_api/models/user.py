from sqlalchemy import Column, String

from waitlist_api.core.database import Base
from waitlist_api.core.types import UUIDString, new_id


class User(Base):
    __tablename__ = "users"

    id = Column(UUIDString(), primary_key=True, default=new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    # Stored as given; no authentication flow reads it yet
    password = Column(String, nullable=False)

    def __repr__(self):
        return f"<User {self.username}>"
