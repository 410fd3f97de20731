# bookcafe/core/config.py
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings read from the environment and .env"""

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/books.db",
        description="Async SQLAlchemy database URL",
    )

    # Security
    SECRET_KEY: str = Field(
        default="change-me-cozy-book-cafe-session-secret",
        min_length=32,
        description="Key used to sign the session cookie",
    )

    # CORS
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:4000"],
        description="Origins allowed by CORS outside production",
    )

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMITS: List[str] = Field(
        default=["1000/hour"],
        description="Default slowapi limits applied to every route",
    )

    # App
    APP_NAME: str = Field(default="Cozy Book Cafe")
    ENVIRONMENT: str = Field(
        default="development",
        description="development or production",
    )
    DEBUG: bool = Field(default=False)
    HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=4000)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"
