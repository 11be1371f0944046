#!/usr/bin/env python3
"""
Initialize database tables for the waitlist
"""
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from waitlist_api.core.config import settings
from waitlist_api.core.database import build_engine, init_models


def init_database():
    """Create users and waitlist_emails tables if they are missing"""
    engine = build_engine(settings.DATABASE_URL)
    print(f"Creating database tables on {engine.url.render_as_string(hide_password=True)}...")
    init_models(bind=engine)
    print("Tables created successfully!")


if __name__ == "__main__":
    init_database()
    print("Database initialization complete!")
