from pydantic_settings import BaseSettings
from typing import List
import os
from pathlib import Path


class Settings(BaseSettings):
    # Database - defaults to a local SQLite file, override with environment variable for production
    DATABASE_URL: str = "sqlite:///./waitlist.db"

    # Storage backend selected once at startup: "memory" or "database"
    STORAGE_BACKEND: str = "database"

    # "development" echoes regenerated confirmation tokens in API responses
    ENVIRONMENT: str = "production"

    # Confirmation tokens
    CONFIRMATION_TOKEN_BYTES: int = 32
    EMAIL_FROM: str = "Waitlist <noreply@example.com>"

    # App Settings
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://127.0.0.1:3000",
    ]
    # Base URL of the landing page, used to build confirmation links
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        # Use absolute path to .env file
        env_file = Path(__file__).parent.parent.parent / ".env"
        env_file_encoding = 'utf-8'


settings = Settings()
