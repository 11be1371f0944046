from datetime import datetime, timezone
from sqlalchemy import DateTime, String, TypeDecorator
from sqlalchemy.dialects import postgresql
import uuid


def new_id() -> str:
    """Random opaque identifier for new rows."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_uuid(value) -> bool:
    """True when ``value`` can be bound to a native UUID column."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class UUIDString(TypeDecorator):
    """
    Identifier column exposed to Python as a plain string.

    Uses PostgreSQL's UUID type when available, otherwise uses
    String(36). Values always come back as ``str`` so both storage
    backends hand out the same identifier type.
    """
    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(postgresql.UUID(as_uuid=False))
        else:
            return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return str(value)


class UTCDateTime(TypeDecorator):
    """
    Timestamp that is always UTC-aware in Python.

    SQLite drops tzinfo on the way in, so naive values read back are
    taken to be UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
