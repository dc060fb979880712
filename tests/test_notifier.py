"""Tests for change notifiers."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from reports.notifier import (
    ChangeEvent,
    ChangeKind,
    InMemoryChangeNotifier,
    RedisChangeNotifier,
    build_notifier,
    decode_event,
    encode_event,
    notifier_topic,
)
from reports.records import ScoreRecord

KEY = "ecoBrowseReports"


def _updated():
    return ChangeEvent(KEY, ChangeKind.UPDATED, (ScoreRecord(1000, "a.com", 0.5),))


# ---- InMemoryChangeNotifier ----


def test_each_subscriber_receives_event_once():
    notifier = InMemoryChangeNotifier(notifier_topic(KEY))
    first, second = [], []
    notifier.subscribe(first.append)
    notifier.subscribe(second.append)

    event = _updated()
    asyncio.run(notifier.publish(event))

    assert first == [event]
    assert second == [event]


def test_late_subscriber_misses_earlier_events():
    notifier = InMemoryChangeNotifier(notifier_topic(KEY))
    asyncio.run(notifier.publish(_updated()))

    late = []
    notifier.subscribe(late.append)

    assert late == []


def test_async_listeners_are_awaited():
    notifier = InMemoryChangeNotifier(notifier_topic(KEY))
    received = []

    async def listener(event):
        await asyncio.sleep(0)
        received.append(event.kind)

    notifier.subscribe(listener)
    asyncio.run(notifier.publish(ChangeEvent(KEY, ChangeKind.CLEARED)))

    assert received == [ChangeKind.CLEARED]


def test_cancelled_subscription_stops_delivery():
    notifier = InMemoryChangeNotifier(notifier_topic(KEY))
    received = []
    subscription = notifier.subscribe(received.append)

    subscription.cancel()
    subscription.cancel()
    asyncio.run(notifier.publish(_updated()))

    assert received == []
    assert notifier.subscriber_count == 0


def test_failing_listener_does_not_block_others():
    notifier = InMemoryChangeNotifier(notifier_topic(KEY))
    received = []

    def broken(event):
        raise RuntimeError("listener bug")

    notifier.subscribe(broken)
    notifier.subscribe(received.append)
    asyncio.run(notifier.publish(_updated()))

    assert len(received) == 1


def test_cleared_event_has_no_snapshot():
    event = ChangeEvent(KEY, ChangeKind.CLEARED)
    assert event.snapshot is None


# ---- event codec ----


def test_encode_uses_persisted_field_names():
    payload = json.loads(encode_event(_updated()))
    assert payload == {
        "key": KEY,
        "kind": "updated",
        "snapshot": [{"timestamp": 1000, "websiteUrl": "a.com", "carbonScore": 0.5}],
    }


def test_decode_restores_event():
    event = _updated()
    assert decode_event(encode_event(event)) == event
    assert decode_event(encode_event(ChangeEvent(KEY, ChangeKind.CLEARED))).snapshot is None


def test_decode_rejects_unknown_kind():
    with pytest.raises(ValueError):
        decode_event(json.dumps({"key": KEY, "kind": "renamed", "snapshot": None}))


# ---- RedisChangeNotifier ----


def test_redis_publish_sends_encoded_event():
    client = SimpleNamespace(publish=AsyncMock(), aclose=AsyncMock())
    notifier = RedisChangeNotifier("topic", client)

    event = _updated()
    asyncio.run(notifier.publish(event))

    client.publish.assert_awaited_once_with("topic", encode_event(event))


def test_redis_close_without_start_closes_client():
    client = SimpleNamespace(publish=AsyncMock(), aclose=AsyncMock())
    notifier = RedisChangeNotifier("topic", client)

    asyncio.run(notifier.close())

    client.aclose.assert_awaited_once()


class _FakePubSub:
    """Replays a fixed list of channel messages, then ends."""

    def __init__(self, messages):
        self.messages = messages
        self.subscribe = AsyncMock()
        self.unsubscribe = AsyncMock()
        self.aclose = AsyncMock()

    async def listen(self):
        for message in self.messages:
            yield message


def test_redis_reader_delivers_and_survives_bad_messages():
    event = _updated()
    pubsub = _FakePubSub(
        [
            {"type": "subscribe", "data": 1},
            {"type": "message", "data": b"[1, 2]"},
            {"type": "message", "data": b"not json"},
            {"type": "message", "data": json.dumps({"key": KEY, "kind": "updated", "snapshot": 5})},
            {"type": "message", "data": encode_event(event).encode()},
        ]
    )
    client = SimpleNamespace(pubsub=lambda: pubsub, publish=AsyncMock(), aclose=AsyncMock())
    notifier = RedisChangeNotifier("topic", client)
    received = []
    notifier.subscribe(received.append)

    async def run():
        await notifier.start()
        await notifier._reader
        await notifier.close()

    asyncio.run(run())

    assert received == [event]
    pubsub.subscribe.assert_awaited_once_with("topic")
    pubsub.aclose.assert_awaited_once()


@pytest.mark.parametrize("data", ["[1, 2]", "\"text\"", json.dumps({"key": KEY, "kind": "updated", "snapshot": {}})])
def test_decode_rejects_non_object_payloads(data):
    with pytest.raises(ValueError):
        decode_event(data)


# ---- build_notifier ----


def test_build_memory_notifier():
    settings = SimpleNamespace(storage_key=KEY, notifier_backend="memory", redis_url="")
    notifier = build_notifier(settings)
    assert isinstance(notifier, InMemoryChangeNotifier)
    assert notifier.topic == "ecoBrowseReports:changes"


def test_build_unknown_notifier():
    settings = SimpleNamespace(storage_key=KEY, notifier_backend="carrier-pigeon", redis_url="")
    with pytest.raises(ValueError, match="Unknown notifier backend"):
        build_notifier(settings)
