"""Change notifications for the score history."""

import asyncio
import enum
import inspect
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from reports.records import ScoreRecord, StoredScoreRecord

logger = logging.getLogger(__name__)


class ChangeKind(str, enum.Enum):
    """What happened to the score history."""

    UPDATED = "updated"  # A record was appended
    CLEARED = "cleared"  # Every record was removed


@dataclass(frozen=True)
class ChangeEvent:
    """
    Published once per successful write to the store.

    `snapshot` holds the full history (newest first) after an update and is
    None for a clear.
    """

    key: str
    kind: ChangeKind
    snapshot: tuple[ScoreRecord, ...] | None = None


Listener = Callable[[ChangeEvent], Awaitable[None] | None]


class Subscription:
    """Handle returned by `subscribe`; call `cancel()` to stop receiving events."""

    def __init__(self, notifier: "ChangeNotifier", listener: Listener):
        self._notifier = notifier
        self.listener = listener
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self._notifier._remove(self)
            self.active = False


class ChangeNotifier(ABC):
    """A single named topic carrying store change events."""

    def __init__(self, topic: str):
        self.topic = topic
        self._subscriptions: list[Subscription] = []

    def subscribe(self, listener: Listener) -> Subscription:
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    async def _deliver(self, event: ChangeEvent) -> None:
        """Hand an event to every current listener, isolating their failures."""
        for subscription in list(self._subscriptions):
            try:
                result = subscription.listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.exception(f"Change listener failed on {self.topic}: {e}")

    @abstractmethod
    async def publish(self, event: ChangeEvent) -> None:
        """Publish one event on the topic."""
        pass

    async def close(self) -> None:
        """Release any resources held by the notifier."""
        self._subscriptions.clear()


class InMemoryChangeNotifier(ChangeNotifier):
    """Delivers events to listeners in the current process."""

    async def publish(self, event: ChangeEvent) -> None:
        logger.debug(f"Publishing {event.kind.value} on {self.topic}")
        await self._deliver(event)


# =============================================================================
# Redis pub/sub
# =============================================================================


def encode_event(event: ChangeEvent) -> str:
    payload: dict[str, Any] = {"key": event.key, "kind": event.kind.value, "snapshot": None}
    if event.snapshot is not None:
        payload["snapshot"] = [
            StoredScoreRecord.from_record(record).model_dump(by_alias=True)
            for record in event.snapshot
        ]
    return json.dumps(payload)


def decode_event(data: str | bytes) -> ChangeEvent:
    payload = json.loads(data)
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    snapshot = payload.get("snapshot")
    if snapshot is not None:
        if not isinstance(snapshot, list):
            raise ValueError(f"Expected a snapshot array, got {type(snapshot).__name__}")
        snapshot = tuple(StoredScoreRecord.model_validate(item).to_record() for item in snapshot)
    return ChangeEvent(key=payload["key"], kind=ChangeKind(payload["kind"]), snapshot=snapshot)


class RedisChangeNotifier(ChangeNotifier):
    """
    Delivers events across processes through a Redis channel.

    Local listeners receive events (including this process's own) from the
    channel once `start()` has been awaited. A publish-only notifier, as used
    by the Celery worker, never needs to start.
    """

    def __init__(self, topic: str, client):
        super().__init__(topic)
        self.client = client
        self._pubsub = None
        self._reader: asyncio.Task | None = None

    @classmethod
    def from_url(cls, topic: str, redis_url: str) -> "RedisChangeNotifier":
        from redis import asyncio as aioredis

        return cls(topic, aioredis.from_url(redis_url))

    async def start(self) -> None:
        if self._reader is not None:
            return
        self._pubsub = self.client.pubsub()
        await self._pubsub.subscribe(self.topic)
        self._reader = asyncio.create_task(self._read_loop())
        logger.info(f"Listening for changes on {self.topic}")

    async def _read_loop(self) -> None:
        async for message in self._pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                event = decode_event(message["data"])
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Ignoring malformed change message on {self.topic}: {e}")
                continue
            await self._deliver(event)

    async def publish(self, event: ChangeEvent) -> None:
        logger.debug(f"Publishing {event.kind.value} on {self.topic} via Redis")
        await self.client.publish(self.topic, encode_event(event))

    async def close(self) -> None:
        if self._reader is not None:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        if self._pubsub is not None:
            await self._pubsub.unsubscribe(self.topic)
            await self._pubsub.aclose()
            self._pubsub = None
        await self.client.aclose()
        await super().close()


def notifier_topic(storage_key: str) -> str:
    return f"{storage_key}:changes"


def build_notifier(settings) -> ChangeNotifier:
    """Create the notifier selected by `settings.notifier_backend`."""
    topic = notifier_topic(settings.storage_key)
    backend = settings.notifier_backend.lower()
    if backend == "redis":
        return RedisChangeNotifier.from_url(topic, settings.redis_url)
    if backend == "memory":
        return InMemoryChangeNotifier(topic)
    raise ValueError(f"Unknown notifier backend: {settings.notifier_backend}")
