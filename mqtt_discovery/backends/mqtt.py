"""
MQTT broker connection for discovery subscriptions.

Wraps a single aiomqtt client and fans incoming messages out to every
subscriber whose topic pattern matches.
"""

import asyncio
import logging
import threading
import weakref
from typing import Any, Optional

import aiomqtt

from .base import ConnectionRef, MessageSubscriber

logger = logging.getLogger("mqtt_discovery.backends.mqtt")


def _payload_bytes(payload: Any) -> bytes:
    if payload is None:
        return b""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return str(payload).encode("utf-8")


def _failed(future: asyncio.Future) -> bool:
    return future.done() and (future.cancelled() or future.exception() is not None)


class MQTTConnection:
    """MQTT-based broker connection with per-topic subscriber fan-out."""

    def __init__(
        self,
        broker_host: str = "localhost",
        broker_port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: Optional[str] = None,
        keepalive: int = 60,
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.username = username
        self.password = password
        self.client_id = client_id
        self.keepalive = keepalive
        self._client: Optional[aiomqtt.Client] = None
        self._connected = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._message_task: Optional[asyncio.Task] = None
        self._lock = threading.Lock()
        self._subscribers: dict[str, set[MessageSubscriber]] = {}
        self._subscriptions: dict[str, asyncio.Future] = {}
        self._background: set[asyncio.Future] = set()
        self._refs: "weakref.WeakSet[ConnectionRef]" = weakref.WeakSet()

    @property
    def backend_type(self) -> str:
        return "mqtt"

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """Connect to the MQTT broker and start dispatching messages."""
        try:
            self._client = aiomqtt.Client(
                hostname=self.broker_host,
                port=self.broker_port,
                username=self.username,
                password=self.password,
                identifier=self.client_id,
                keepalive=self.keepalive,
            )
            await self._client.__aenter__()
            self._connected = True
            self._loop = asyncio.get_running_loop()
            self._message_task = asyncio.create_task(self._message_loop())
            logger.info("MQTT connected to %s:%d", self.broker_host, self.broker_port)
        except Exception as e:
            logger.error("Failed to connect to MQTT broker: %s", e)
            self._client = None
            raise

    async def disconnect(self) -> None:
        """Disconnect from the MQTT broker."""
        for ref in list(self._refs):
            ref.clear()
        self._refs.clear()
        with self._lock:
            self._subscribers.clear()
            self._subscriptions.clear()

        if self._message_task and not self._message_task.done():
            self._message_task.cancel()
            try:
                await self._message_task
            except asyncio.CancelledError:
                pass
        self._message_task = None

        if self._client:
            try:
                await self._client.__aexit__(None, None, None)
            except Exception as e:
                logger.warning("Error during MQTT disconnect: %s", e)
            finally:
                self._connected = False
                self._client = None
            logger.info("MQTT disconnected")

    def reference(self) -> ConnectionRef:
        """Hand out a non-owning reference that disconnect() invalidates."""
        ref = ConnectionRef(self)
        self._refs.add(ref)
        return ref

    def subscribe(self, topic: str, subscriber: MessageSubscriber) -> asyncio.Future:
        """
        Register a subscriber for a topic pattern.

        The broker is only asked to subscribe for the first subscriber of a
        pattern. Later subscribers share the pending (or finished) request.

        Returns:
            Future completing when the broker acknowledged the subscription
        """
        if not self._connected or not self._client:
            raise RuntimeError("MQTT client not connected")

        with self._lock:
            self._subscribers.setdefault(topic, set()).add(subscriber)
            existing = self._subscriptions.get(topic)
            if existing is not None and not _failed(existing):
                return existing
            future = asyncio.ensure_future(self._broker_subscribe(topic))
            self._subscriptions[topic] = future
        return future

    def unsubscribe(self, topic: str, subscriber: MessageSubscriber) -> None:
        """
        Remove a subscriber from a topic pattern.

        Safe to call from any thread. The broker subscription is released
        once the last subscriber of a pattern is gone.
        """
        with self._lock:
            subscribers = self._subscribers.get(topic)
            if not subscribers or subscriber not in subscribers:
                return
            subscribers.discard(subscriber)
            if subscribers:
                return
            del self._subscribers[topic]
            self._subscriptions.pop(topic, None)

        if self._connected and self._client and self._loop and not self._loop.is_closed():
            self._run_in_loop(self._broker_unsubscribe(topic))

    def dispatch(self, topic: str, payload: Any) -> int:
        """
        Deliver a message to all subscribers with a matching pattern.

        Returns:
            Number of subscribers the message was delivered to
        """
        return self._dispatch(aiomqtt.Topic(topic), _payload_bytes(payload))

    def _dispatch(self, topic: aiomqtt.Topic, payload: bytes) -> int:
        with self._lock:
            targets = [(pattern, list(subs)) for pattern, subs in self._subscribers.items()]

        delivered = 0
        for pattern, subscribers in targets:
            if not topic.matches(pattern):
                continue
            for subscriber in subscribers:
                try:
                    subscriber.on_message(topic.value, payload)
                    delivered += 1
                except Exception:
                    logger.exception("Subscriber failed handling message on %s", topic.value)
        return delivered

    async def _message_loop(self) -> None:
        """Receive messages until cancelled or the connection drops."""
        try:
            async for message in self._client.messages:
                self._dispatch(message.topic, _payload_bytes(message.payload))
        except asyncio.CancelledError:
            logger.debug("MQTT message loop cancelled")
            raise
        except aiomqtt.MqttError as e:
            logger.error("MQTT message loop stopped: %s", e)
            self._connected = False

    async def _broker_subscribe(self, topic: str) -> None:
        await self._client.subscribe(topic)
        logger.info("MQTT subscribed to %s", topic)

    async def _broker_unsubscribe(self, topic: str) -> None:
        if not self._connected or not self._client:
            return
        try:
            await self._client.unsubscribe(topic)
            logger.info("MQTT unsubscribed from %s", topic)
        except aiomqtt.MqttError as e:
            logger.warning("Failed to unsubscribe from %s: %s", topic, e)

    def _run_in_loop(self, coro) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            task = asyncio.ensure_future(coro)
            self._background.add(task)
            task.add_done_callback(self._background.discard)
        else:
            asyncio.run_coroutine_threadsafe(coro, self._loop)
