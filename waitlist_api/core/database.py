from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from waitlist_api.core.config import settings


def build_engine(database_url: str) -> Engine:
    """Create an engine with per-dialect connection settings."""
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}  # Allow SQLite to work with FastAPI
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # A private in-memory database only lives as long as its single connection
            sqlite_engine = create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
        else:
            sqlite_engine = create_engine(database_url, connect_args=connect_args)

        @event.listens_for(sqlite_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.close()

        return sqlite_engine

    # Postgres or others
    return create_engine(
        database_url,
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_models(bind: Engine = None) -> None:
    """Create any missing tables for the registered models."""
    # Import models so they are registered with Base
    from waitlist_api import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
