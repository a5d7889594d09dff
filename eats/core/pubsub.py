# eats/core/pubsub.py
"""
Publish/subscribe channel for real-time events.

Delivery is best-effort and at-most-once per connected subscriber: events
published while nobody listens are dropped and nothing is replayed. Each
subscriber has its own unbounded buffer, so a slow subscriber never blocks
the publisher.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, Optional, Set, Type

import redis.asyncio as redis
from pydantic import BaseModel

logger = logging.getLogger(__name__)

EventFilter = Callable[[Any], bool]
EventResolver = Callable[[Any], Any]

_CLOSED = object()


class Subscription(ABC):
    """
    Async iterator over the events of one topic for one subscriber.

    ``filter`` is evaluated per event at delivery time; events it rejects
    are skipped for this subscriber only. ``resolve`` maps a delivered
    event to the value yielded to the consumer.
    """

    def __init__(
            self,
            topic: str,
            filter: Optional[EventFilter] = None,
            resolve: Optional[EventResolver] = None
    ):
        self.topic = topic
        self._filter = filter
        self._resolve = resolve
        self._closed = False

    @abstractmethod
    async def _next_event(self) -> Any:
        """Wait for the next raw event, return _CLOSED when finished."""

    @abstractmethod
    async def close(self) -> None:
        """Stop receiving events."""

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> Any:
        while not self._closed:
            event = await self._next_event()
            if event is _CLOSED:
                break
            if self._filter is not None and not self._filter(event):
                continue
            return self._resolve(event) if self._resolve else event
        raise StopAsyncIteration

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


class PubSub(ABC):
    """Abstract event channel."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend name."""

    @abstractmethod
    async def publish(self, topic: str, event: BaseModel) -> None:
        """Broadcast an event to every current subscriber of topic."""

    @abstractmethod
    async def subscribe(
            self,
            topic: str,
            filter: Optional[EventFilter] = None,
            resolve: Optional[EventResolver] = None
    ) -> Subscription:
        """Register a subscriber; events published after this call are delivered."""

    async def close(self) -> None:
        """Release backend resources."""


class InMemorySubscription(Subscription):

    def __init__(self, pubsub: "InMemoryPubSub", topic: str, filter=None, resolve=None):
        super().__init__(topic, filter, resolve)
        self._pubsub = pubsub
        self._queue: asyncio.Queue = asyncio.Queue()

    def push(self, event: Any) -> None:
        self._queue.put_nowait(event)

    async def _next_event(self) -> Any:
        return await self._queue.get()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._pubsub.remove(self)
        self._queue.put_nowait(_CLOSED)


class InMemoryPubSub(PubSub):
    """In-process broadcast for a single worker."""

    def __init__(self):
        self._subscriptions: Dict[str, Set[InMemorySubscription]] = defaultdict(set)

    @property
    def backend_name(self) -> str:
        return "memory"

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, ()))

    async def publish(self, topic: str, event: BaseModel) -> None:
        subscriptions = list(self._subscriptions.get(topic, ()))
        for subscription in subscriptions:
            subscription.push(event)
        logger.debug(f"Published {topic} to {len(subscriptions)} subscriber(s)")

    async def subscribe(self, topic: str, filter=None, resolve=None) -> InMemorySubscription:
        subscription = InMemorySubscription(self, topic, filter, resolve)
        self._subscriptions[topic].add(subscription)
        return subscription

    def remove(self, subscription: InMemorySubscription) -> None:
        self._subscriptions[subscription.topic].discard(subscription)

    async def close(self) -> None:
        for subscriptions in list(self._subscriptions.values()):
            for subscription in list(subscriptions):
                await subscription.close()
        self._subscriptions.clear()


class RedisSubscription(Subscription):

    def __init__(self, pubsub: redis.client.PubSub, event_type: Type[BaseModel], topic: str,
                 filter=None, resolve=None):
        super().__init__(topic, filter, resolve)
        self._pubsub = pubsub
        self._event_type = event_type
        self._messages = pubsub.listen()

    async def _next_event(self) -> Any:
        async for message in self._messages:
            if message["type"] == "message":
                return self._event_type.model_validate_json(message["data"])
        return _CLOSED

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._pubsub.unsubscribe(self.topic)
        await self._pubsub.aclose()


class RedisPubSub(PubSub):
    """
    Broadcast over Redis channels, shared by every worker.

    Events are pydantic models serialized as JSON; ``event_types`` maps
    each topic to the model used to validate incoming messages.
    """

    def __init__(self, client: redis.Redis, event_types: Dict[str, Type[BaseModel]]):
        self._client = client
        self._event_types = event_types

    @property
    def backend_name(self) -> str:
        return "redis"

    async def publish(self, topic: str, event: BaseModel) -> None:
        receivers = await self._client.publish(topic, event.model_dump_json())
        logger.debug(f"Published {topic} to {receivers} subscriber(s)")

    async def subscribe(self, topic: str, filter=None, resolve=None) -> RedisSubscription:
        if topic not in self._event_types:
            raise ValueError(f"Unknown topic: {topic}")
        pubsub = self._client.pubsub()
        await pubsub.subscribe(topic)
        return RedisSubscription(pubsub, self._event_types[topic], topic, filter, resolve)
