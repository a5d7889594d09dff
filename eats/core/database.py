# eats/core/database.py
import logging
from typing import Optional

from tortoise import Tortoise

from eats.core.config import settings

logger = logging.getLogger(__name__)

MODEL_MODULES = [
    "eats.models.user",
    "eats.models.restaurant",
    "eats.models.order",
]

# Tortoise names the asyncpg dialect "postgres"
URL_SCHEMES = {
    "postgresql://": "postgres://",
    "postgresql+asyncpg://": "postgres://",
}


def normalize_db_url(db_url: str) -> str:
    for scheme, tortoise_scheme in URL_SCHEMES.items():
        if db_url.startswith(scheme):
            return tortoise_scheme + db_url[len(scheme):]
    return db_url


def tortoise_config(db_url: Optional[str] = None) -> dict:
    """Tortoise config for the eats models on the given (or configured) database."""
    return {
        "connections": {"default": normalize_db_url(db_url or settings.DATABASE_URL)},
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
    }


async def init_db(db_url: Optional[str] = None) -> None:
    """Connect and create missing tables; there is no migration history."""
    config = tortoise_config(db_url)
    await Tortoise.init(config=config)
    await Tortoise.generate_schemas(safe=True)
    logger.info(f"Database ready: {config['connections']['default'].split('://', 1)[0]}")


async def close_db() -> None:
    await Tortoise.close_connections()
    logger.info("Database connections closed")
