# eats/core/config.py
import logging
import sys
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    DATABASE_URL: str = "sqlite://db.sqlite3"
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Eats API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "http://localhost:3000"

    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    PUBSUB_BACKEND: str = "memory"  # "memory" or "redis"
    REDIS_URL: str = "redis://localhost:6379/0"

    MAILGUN_API_KEY: str = ""
    MAILGUN_DOMAIN: str = ""
    MAILGUN_FROM_EMAIL: str = "Eats <no-reply@eats.local>"
    EMAIL_VERIFICATION_URL: str = "http://localhost:3000/confirm"

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS_ORIGINS string to list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Level comes from LOG_LEVEL; DEBUG mode forces debug output.
    """
    level = logging.DEBUG if settings.DEBUG else getattr(
        logging, settings.LOG_LEVEL.upper(), logging.INFO
    )

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("tortoise").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
