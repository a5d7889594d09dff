# eats/core/redis_.py
"""Shared Redis connection for the redis event-channel backend."""
import logging
from typing import Optional

import redis.asyncio as redis

from eats.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    """
    Return the process-wide Redis client, connecting lazily.

    Subscriber connections stay idle between events, so they are
    health-checked instead of being dropped silently.
    """
    global _client

    if _client is None:
        _client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            encoding="utf-8",
            health_check_interval=30
        )
        logger.info("Redis client created")

    return _client


async def close_redis() -> None:
    global _client

    if _client is None:
        return

    await _client.aclose()
    _client = None
