"""Event channel backends: broadcast, per-subscriber filters, no replay.

Invariants:
    - Events reach every subscriber registered before the publish
    - A filter drops events for its own subscriber only
    - Events published with nobody listening are gone
    - Publishing never waits on a subscriber that doesn't read
    - The Redis backend carries the same events as JSON and unsubscribes on close
"""

import asyncio

import pytest
from pydantic import BaseModel

from eats.core.config import settings
from eats.core.pubsub import InMemoryPubSub, RedisPubSub
from eats.services import events
from eats.services.events import get_pubsub, reset_pubsub


class Ping(BaseModel):
    owner_id: int
    text: str = "ping"


async def next_event(subscription, timeout: float = 1.0):
    return await asyncio.wait_for(subscription.__anext__(), timeout)


async def test_every_subscriber_receives_event():
    pubsub = InMemoryPubSub()
    first = await pubsub.subscribe("TOPIC")
    second = await pubsub.subscribe("TOPIC")

    await pubsub.publish("TOPIC", Ping(owner_id=1))

    assert (await next_event(first)).owner_id == 1
    assert (await next_event(second)).owner_id == 1


async def test_filter_drops_events_for_that_subscriber_only():
    pubsub = InMemoryPubSub()
    mine = await pubsub.subscribe("TOPIC", filter=lambda event: event.owner_id == 1)
    theirs = await pubsub.subscribe("TOPIC", filter=lambda event: event.owner_id == 2)

    await pubsub.publish("TOPIC", Ping(owner_id=1))

    assert (await next_event(mine)).owner_id == 1
    with pytest.raises(asyncio.TimeoutError):
        await next_event(theirs, timeout=0.05)


async def test_resolve_maps_delivered_event():
    pubsub = InMemoryPubSub()
    subscription = await pubsub.subscribe("TOPIC", resolve=lambda event: event.text)

    await pubsub.publish("TOPIC", Ping(owner_id=1, text="hello"))

    assert await next_event(subscription) == "hello"


async def test_events_before_subscribe_are_not_replayed():
    pubsub = InMemoryPubSub()
    await pubsub.publish("TOPIC", Ping(owner_id=1, text="missed"))

    subscription = await pubsub.subscribe("TOPIC")
    await pubsub.publish("TOPIC", Ping(owner_id=1, text="seen"))

    assert (await next_event(subscription)).text == "seen"


async def test_topics_are_isolated():
    pubsub = InMemoryPubSub()
    subscription = await pubsub.subscribe("A")

    await pubsub.publish("B", Ping(owner_id=1))

    with pytest.raises(asyncio.TimeoutError):
        await next_event(subscription, timeout=0.05)


async def test_slow_subscriber_does_not_block_publisher():
    pubsub = InMemoryPubSub()
    subscription = await pubsub.subscribe("TOPIC")

    await asyncio.wait_for(
        asyncio.gather(*(pubsub.publish("TOPIC", Ping(owner_id=i)) for i in range(500))),
        timeout=1.0,
    )

    assert (await next_event(subscription)).owner_id == 0


async def test_close_unregisters_and_ends_iteration():
    pubsub = InMemoryPubSub()
    subscription = await pubsub.subscribe("TOPIC")
    assert pubsub.subscriber_count("TOPIC") == 1

    await subscription.close()

    assert pubsub.subscriber_count("TOPIC") == 0
    assert [event async for event in subscription] == []


async def test_context_manager_closes_subscription():
    pubsub = InMemoryPubSub()

    async with await pubsub.subscribe("TOPIC"):
        assert pubsub.subscriber_count("TOPIC") == 1

    assert pubsub.subscriber_count("TOPIC") == 0


def test_get_pubsub_is_cached_in_memory_backend():
    assert isinstance(get_pubsub(), InMemoryPubSub)
    assert get_pubsub() is get_pubsub()


def test_get_pubsub_rejects_unknown_backend(monkeypatch):
    monkeypatch.setattr(settings, "PUBSUB_BACKEND", "carrier-pigeon")
    reset_pubsub()

    with pytest.raises(ValueError):
        get_pubsub()


class RedisChannelStub:
    """Connection-level pub/sub as returned by ``Redis.pubsub()``."""

    def __init__(self):
        self.channels = set()
        self.closed = False
        self.messages = asyncio.Queue()

    async def subscribe(self, channel):
        self.channels.add(channel)
        self.messages.put_nowait({"type": "subscribe", "channel": channel.encode(), "data": 1})

    async def unsubscribe(self, channel):
        self.channels.discard(channel)

    async def aclose(self):
        self.closed = True

    async def listen(self):
        while True:
            yield await self.messages.get()


class RedisStub:

    def __init__(self):
        self.published = []
        self.connections = []

    def pubsub(self):
        connection = RedisChannelStub()
        self.connections.append(connection)
        return connection

    async def publish(self, channel, data):
        self.published.append((channel, data))
        receivers = [c for c in self.connections if channel in c.channels]
        for connection in receivers:
            connection.messages.put_nowait({"type": "message", "channel": channel.encode(), "data": data.encode()})
        return len(receivers)


@pytest.fixture
def redis_stub():
    return RedisStub()


async def test_redis_event_round_trips_as_json(redis_stub):
    pubsub = RedisPubSub(redis_stub, {"TOPIC": Ping})
    subscription = await pubsub.subscribe("TOPIC")

    await pubsub.publish("TOPIC", Ping(owner_id=7, text="hello"))

    assert redis_stub.published == [("TOPIC", '{"owner_id":7,"text":"hello"}')]
    event = await next_event(subscription)
    assert isinstance(event, Ping)
    assert event == Ping(owner_id=7, text="hello")


async def test_redis_filter_applies_per_subscriber(redis_stub):
    pubsub = RedisPubSub(redis_stub, {"TOPIC": Ping})
    mine = await pubsub.subscribe("TOPIC", filter=lambda event: event.owner_id == 1)
    theirs = await pubsub.subscribe("TOPIC", filter=lambda event: event.owner_id == 2)

    await pubsub.publish("TOPIC", Ping(owner_id=1))

    assert (await next_event(mine)).owner_id == 1
    with pytest.raises(asyncio.TimeoutError):
        await next_event(theirs, timeout=0.05)


async def test_redis_close_unsubscribes(redis_stub):
    pubsub = RedisPubSub(redis_stub, {"TOPIC": Ping})
    subscription = await pubsub.subscribe("TOPIC")
    connection = redis_stub.connections[0]

    await subscription.close()

    assert connection.channels == set()
    assert connection.closed is True
    assert [event async for event in subscription] == []


async def test_redis_rejects_unknown_topic(redis_stub):
    pubsub = RedisPubSub(redis_stub, {"TOPIC": Ping})

    with pytest.raises(ValueError):
        await pubsub.subscribe("OTHER")

    assert redis_stub.connections == []


def test_get_pubsub_builds_redis_backend(monkeypatch, redis_stub):
    monkeypatch.setattr(settings, "PUBSUB_BACKEND", "redis")
    monkeypatch.setattr(events, "get_redis", lambda: redis_stub)
    reset_pubsub()

    pubsub = get_pubsub()

    assert isinstance(pubsub, RedisPubSub)
    assert pubsub.backend_name == "redis"
