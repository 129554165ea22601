"""
Shared fixtures: an in-memory broker connection for discovery tests.
"""

import asyncio
from typing import Optional

import pytest

from mqtt_discovery.backends.base import ConnectionRef


def topic_matches(topic: str, pattern: str) -> bool:
    """MQTT wildcard matching for '+' and '#'."""
    topic_levels = topic.split("/")
    pattern_levels = pattern.split("/")
    for i, level in enumerate(pattern_levels):
        if level == "#":
            return True
        if i >= len(topic_levels):
            return False
        if level != "+" and level != topic_levels[i]:
            return False
    return len(topic_levels) == len(pattern_levels)


class FakeConnection:
    """
    Broker connection double.

    Subscriptions are acknowledged immediately unless auto_ack is False,
    in which case ack()/fail() settle the pending requests.
    """

    def __init__(self, fail_with: Optional[BaseException] = None, auto_ack: bool = True):
        self.fail_with = fail_with
        self.auto_ack = auto_ack
        self.subscribers: dict[str, list] = {}
        self.subscribe_calls: list[str] = []
        self.unsubscribe_calls: list[str] = []
        self.pending: list[asyncio.Future] = []
        self.refs: list[ConnectionRef] = []

    @property
    def is_connected(self) -> bool:
        return True

    def reference(self) -> ConnectionRef:
        ref = ConnectionRef(self)
        self.refs.append(ref)
        return ref

    def subscribe(self, topic, subscriber) -> asyncio.Future:
        self.subscribe_calls.append(topic)
        self.subscribers.setdefault(topic, []).append(subscriber)
        future = asyncio.get_running_loop().create_future()
        if self.fail_with is not None:
            future.set_exception(self.fail_with)
        elif self.auto_ack:
            future.set_result(None)
        else:
            self.pending.append(future)
        return future

    def unsubscribe(self, topic, subscriber) -> None:
        self.unsubscribe_calls.append(topic)
        subscribers = self.subscribers.get(topic, [])
        if subscriber in subscribers:
            subscribers.remove(subscriber)

    def ack(self) -> None:
        for future in self.pending:
            if not future.done():
                future.set_result(None)
        self.pending.clear()

    def fail(self, error: BaseException) -> None:
        for future in self.pending:
            if not future.done():
                future.set_exception(error)
        self.pending.clear()

    def publish(self, topic: str, payload) -> int:
        """Deliver a message to every matching subscriber."""
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        delivered = 0
        for pattern, subscribers in list(self.subscribers.items()):
            if not topic_matches(topic, pattern):
                continue
            for subscriber in list(subscribers):
                subscriber.on_message(topic, payload)
                delivered += 1
        return delivered

    def close(self) -> None:
        """Simulate the owner tearing the connection down."""
        for ref in self.refs:
            ref.clear()

    def active_topics(self) -> list[str]:
        return [t for t, subs in self.subscribers.items() if subs]


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def make_connection():
    """Factory for connections with custom subscribe behaviour."""
    return FakeConnection
