"""
Base protocol for broker connections.
"""

import weakref
from typing import Any, Awaitable, Optional, Protocol, runtime_checkable


@runtime_checkable
class MessageSubscriber(Protocol):
    """Receives messages for every topic matching a subscription."""

    def on_message(self, topic: str, payload: bytes) -> None:
        ...


class ConnectionRef:
    """
    Non-owning handle to a broker connection.

    Holding a ConnectionRef never keeps the connection alive. The owning
    connection clears every reference it handed out when it disconnects,
    so get() returning None means the connection is gone and any cleanup
    against it should be skipped.
    """

    def __init__(self, connection: Any = None):
        self._ref: Optional[weakref.ref] = (
            weakref.ref(connection) if connection is not None else None
        )

    def get(self) -> Optional["BrokerConnection"]:
        """Return the connection if it still exists, else None."""
        if self._ref is None:
            return None
        return self._ref()

    def clear(self) -> None:
        self._ref = None

    def __repr__(self) -> str:
        return f"ConnectionRef(alive={self.get() is not None})"


@runtime_checkable
class BrokerConnection(Protocol):
    """
    Protocol for publish/subscribe broker connections.

    Only subscription management is needed for discovery. Messages for a
    subscribed topic pattern are delivered to the subscriber's on_message.
    """

    @property
    def is_connected(self) -> bool:
        """Check if the connection is currently usable."""
        ...

    def subscribe(self, topic: str, subscriber: MessageSubscriber) -> Awaitable[None]:
        """
        Subscribe a subscriber to a topic pattern.

        Returns:
            Awaitable that completes once the broker acknowledged the
            subscription, or raises if the subscription failed.
        """
        ...

    def unsubscribe(self, topic: str, subscriber: MessageSubscriber) -> None:
        """Remove a subscriber from a topic pattern."""
        ...

    def reference(self) -> ConnectionRef:
        """Hand out a non-owning reference to this connection."""
        ...
