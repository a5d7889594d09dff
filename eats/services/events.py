# eats/services/events.py
import logging
from functools import lru_cache

from eats.core.config import settings
from eats.core.pubsub import InMemoryPubSub, PubSub, RedisPubSub
from eats.core.redis_ import get_redis
from eats.schemas.order import CookedOrderEvent, OrderUpdateEvent, PendingOrderEvent

logger = logging.getLogger(__name__)

NEW_PENDING_ORDER = "NEW_PENDING_ORDER"
NEW_COOKED_ORDER = "NEW_COOKED_ORDER"
NEW_ORDER_UPDATE = "NEW_ORDER_UPDATE"

TOPIC_EVENTS = {
    NEW_PENDING_ORDER: PendingOrderEvent,
    NEW_COOKED_ORDER: CookedOrderEvent,
    NEW_ORDER_UPDATE: OrderUpdateEvent,
}


@lru_cache(maxsize=1)
def get_pubsub() -> PubSub:
    """
    Return the process-wide event channel.

    The backend is chosen by PUBSUB_BACKEND: ``memory`` broadcasts inside
    this worker only, ``redis`` fans out across workers.

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = settings.PUBSUB_BACKEND.lower()

    if backend == "memory":
        pubsub: PubSub = InMemoryPubSub()
    elif backend == "redis":
        pubsub = RedisPubSub(get_redis(), TOPIC_EVENTS)
    else:
        raise ValueError(f"Unknown PUBSUB_BACKEND: {settings.PUBSUB_BACKEND}")

    logger.info(f"Event channel backend: {pubsub.backend_name}")
    return pubsub


def reset_pubsub() -> None:
    """Drop the cached channel. Used by tests and on shutdown."""
    get_pubsub.cache_clear()
