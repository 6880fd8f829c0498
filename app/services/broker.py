"""Notification broker — per-hotel Redis pub/sub topics for live dashboards.

Each hotel has one channel, ``hotel:<hotel_id>:requests``. ``publish`` sends
a JSON envelope to it, so every worker process that holds a dashboard socket
for that hotel receives the event.

Every dashboard connection is a :class:`Subscriber` with its own Redis
``PubSub`` and a bounded outbound queue. A reader task drains the pubsub into
the queue; the socket handler in ``app.api.v1.realtime`` drains the queue.
Redis delivers a channel's messages in publish order, and the queue keeps it.

Delivery is best-effort and at-most-once: a subscriber that is not joined
when an event is published never sees it, and a subscriber whose queue is
full is dropped from its topic. Dashboards reconcile by re-fetching the
request list after (re)joining.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections import defaultdict
from typing import Any

from redis.asyncio import Redis, from_url
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from app.core.config import get_settings

logger = logging.getLogger(__name__)

NEW_REQUEST = "newRequest"
REQUEST_UPDATED = "requestUpdated"


def channel_for(hotel_id: uuid.UUID | str) -> str:
    return f"hotel:{hotel_id}:requests"


class Subscriber:
    """One live connection's mailbox and its Redis subscription."""

    __slots__ = ("id", "queue", "user_id", "pubsub", "reader")

    def __init__(self, max_pending: int | None = None, user_id: uuid.UUID | None = None) -> None:
        self.id = uuid.uuid4().hex
        self.user_id = user_id
        self.queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(
            maxsize=max_pending or get_settings().realtime_max_pending
        )
        self.pubsub: PubSub | None = None
        self.reader: asyncio.Task | None = None

    def deliver(self, message: dict[str, Any]) -> bool:
        """Enqueue without waiting. False when the mailbox is full."""
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    def close(self) -> None:
        """Wake the writer with a sentinel so it can exit."""
        try:
            self.queue.put_nowait(None)
        except asyncio.QueueFull:
            # Writer is behind; drain so the sentinel fits.
            while not self.queue.empty():
                self.queue.get_nowait()
            self.queue.put_nowait(None)

    def __repr__(self) -> str:
        return f"<Subscriber {self.id}>"


class NotificationBroker:
    """Redis fan-out plus this process's topic membership table."""

    def __init__(self, redis: Redis | None = None, redis_url: str | None = None) -> None:
        self._redis = redis
        self._redis_url = redis_url
        self._topics: dict[str, set[Subscriber]] = defaultdict(set)
        self._membership: dict[Subscriber, str] = {}

    @property
    def redis(self) -> Redis:
        if self._redis is None:
            self._redis = from_url(
                self._redis_url or get_settings().redis_url, decode_responses=True
            )
        return self._redis

    @staticmethod
    def _key(hotel_id: uuid.UUID | str) -> str:
        return str(hotel_id)

    async def join(self, subscriber: Subscriber, hotel_id: uuid.UUID | str) -> None:
        """Put the subscriber in exactly one topic, leaving any previous one."""
        await self.leave(subscriber)
        key = self._key(hotel_id)

        pubsub = self.redis.pubsub()
        await pubsub.subscribe(channel_for(key))
        subscriber.pubsub = pubsub
        subscriber.reader = asyncio.create_task(self._pump(subscriber, pubsub, key))

        self._topics[key].add(subscriber)
        self._membership[subscriber] = key
        logger.info("Subscriber %s joined hotel %s", subscriber.id, key)

    async def leave(self, subscriber: Subscriber) -> None:
        """Drop the subscriber's topic and Redis subscription. Idempotent."""
        key = self._membership.pop(subscriber, None)
        if key is not None:
            members = self._topics.get(key)
            if members is not None:
                members.discard(subscriber)
                if not members:
                    del self._topics[key]

        pubsub, reader = subscriber.pubsub, subscriber.reader
        subscriber.pubsub = subscriber.reader = None
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            await asyncio.gather(reader, return_exceptions=True)
        if pubsub is not None:
            try:
                await pubsub.unsubscribe()
                await pubsub.aclose()
            except RedisError:
                logger.warning("Closing pubsub of subscriber %s failed", subscriber.id)

        if key is not None:
            logger.info("Subscriber %s left hotel %s", subscriber.id, key)

    def topic_of(self, subscriber: Subscriber) -> str | None:
        return self._membership.get(subscriber)

    def members(self, hotel_id: uuid.UUID | str) -> list[Subscriber]:
        """Subscribers of one hotel connected to this process."""
        return list(self._topics.get(self._key(hotel_id), ()))

    async def publish(self, hotel_id: uuid.UUID | str, event: str, payload: Any) -> int:
        """Fan an event out to every subscriber of one hotel, on every worker.

        Returns the number of Redis subscriptions that received it.
        """
        message = json.dumps({"event": event, "data": payload}, default=str)
        receivers = await self.redis.publish(channel_for(hotel_id), message)
        logger.debug("Published %s to %d subscriber(s) of hotel %s", event, receivers, hotel_id)
        return receivers

    async def _pump(self, subscriber: Subscriber, pubsub: PubSub, key: str) -> None:
        """Move channel messages into the subscriber's mailbox."""
        try:
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                if subscriber.deliver(json.loads(message["data"])):
                    continue
                logger.warning(
                    "Dropping subscriber %s from hotel %s: outbound queue full",
                    subscriber.id, key,
                )
                await self.leave(subscriber)
                subscriber.close()
                return
        except RedisError:
            logger.exception("Redis subscription of subscriber %s (hotel %s) failed", subscriber.id, key)
            await self.leave(subscriber)
            subscriber.close()

    async def aclose(self) -> None:
        """Leave every local subscriber and close the Redis client."""
        for subscriber in list(self._membership):
            await self.leave(subscriber)
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


broker = NotificationBroker()


def get_broker() -> NotificationBroker:
    """FastAPI dependency returning the process-wide broker."""
    return broker
