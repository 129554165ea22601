"""
Discovery Session - listens for Home Assistant component configurations.

Subscribes to the wildcard discovery topic of a device, either for a
limited time or as a background discovery that runs until stopped, and
reports every valid component configuration to an observer.
"""

import asyncio
import logging
import threading
from typing import Optional, Protocol

from ..backends.base import BrokerConnection, ConnectionRef
from ..components import (
    AbstractComponent,
    ComponentFactory,
    InvalidConfigurationError,
    create_component,
)
from ..topic import CONFIG_SUFFIX, HaID, InvalidTopicError
from .models import DiscoveryResult, SessionState

logger = logging.getLogger("mqtt_discovery.discovery.session")

_CONFIG_TOPIC_END = "/" + CONFIG_SUFFIX


class ComponentObserver(Protocol):
    """Implement this to get notified of new components."""

    def component_discovered(self, ha_id: HaID, component: AbstractComponent) -> None:
        ...


class DiscoverySession:
    """
    One run of listening for component configuration announcements.

    The completion handle returned by start() resolves exactly once with
    a DiscoveryResult, no matter which of deadline, stop() or subscribe
    failure happens first. A lock guards every state transition so stop()
    may be called from any thread.
    """

    def __init__(
        self,
        thing_uid: str,
        component_factory: ComponentFactory = create_component,
    ):
        self.thing_uid = thing_uid
        self._factory = component_factory
        self._lock = threading.Lock()
        self._state = SessionState.CREATED
        self._topic = ""
        self._duration = 0.0
        self._observer: Optional[ComponentObserver] = None
        self._connection_ref = ConnectionRef()
        self._timer: Optional[asyncio.TimerHandle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._future: Optional[asyncio.Future] = None
        self._subscribe_future: Optional[asyncio.Future] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def is_running(self) -> bool:
        return self._state in (SessionState.SUBSCRIBING, SessionState.RUNNING)

    @property
    def has_timer(self) -> bool:
        return self._timer is not None

    @property
    def observer(self) -> Optional[ComponentObserver]:
        return self._observer

    @property
    def completion(self) -> Optional[asyncio.Future]:
        return self._future

    def start(
        self,
        connection: BrokerConnection,
        duration: float,
        topic_description: HaID,
        observer: ComponentObserver,
    ) -> asyncio.Future:
        """
        Start a components discovery.

        The topic description carries the object id (= device id) and
        optionally a node id; usually its component is the '+' wildcard.

        Args:
            connection: Broker connection to subscribe with
            duration: Seconds for the discovery to run. 0 disables the
                timeout, in which case stop() has to be called at some point.
            topic_description: Identifier the discovery topic is built from
            observer: Receives every discovered component

        Returns:
            Future resolving with a DiscoveryResult: FINISHED after the
            given duration (immediately if the duration is 0), STOPPED or
            FAILED otherwise. It never resolves with an exception.
        """
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")
        if observer is None:
            raise ValueError("observer is required")

        loop = asyncio.get_running_loop()
        with self._lock:
            if self._state is not SessionState.CREATED:
                raise RuntimeError(f"Discovery session already started ({self._state.value})")
            self._state = SessionState.SUBSCRIBING
            self._loop = loop
            self._future = loop.create_future()
            self._topic = topic_description.get_topic(CONFIG_SUFFIX)
            self._duration = duration
            self._observer = observer
            self._connection_ref = connection.reference()
        future = self._future

        logger.info(
            "Starting discovery on %s for %s (duration=%.1fs)",
            self._topic,
            self.thing_uid,
            duration,
        )

        # Subscribe to the wildcard topic and start receiving retained configs
        try:
            self._subscribe_future = asyncio.ensure_future(
                connection.subscribe(self._topic, self)
            )
        except Exception as e:
            self._subscribe_failed(e)
            return future

        self._subscribe_future.add_done_callback(self._on_subscribe_done)
        return future

    def stop(self) -> None:
        """
        Stop an ongoing discovery, or do nothing if none is running.

        The completion handle resolves with a STOPPED result unless it was
        already resolved.
        """
        if self._terminate(DiscoveryResult.stopped()):
            logger.info("Discovery on %s stopped", self._topic)

    def on_message(self, topic: str, payload: bytes) -> None:
        """Handle a message delivered for the subscribed wildcard topic."""
        if not topic.endswith(_CONFIG_TOPIC_END):
            return

        try:
            ha_id = HaID.from_topic(topic)
        except InvalidTopicError as e:
            logger.debug("Ignoring discovery message: %s", e)
            return

        try:
            config = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Configuration of %s is not UTF-8 text", ha_id)
            return

        try:
            component = self._factory(self.thing_uid, ha_id, config)
        except InvalidConfigurationError as e:
            logger.debug("Configuration of thing %s invalid: %s", ha_id.object_id, e)
            return

        logger.debug("Found thing %s component %s", ha_id.object_id, ha_id.component)
        observer = self._observer
        if observer is not None:
            observer.component_discovered(ha_id, component)

    def _on_subscribe_done(self, future: asyncio.Future) -> None:
        if future.cancelled():
            self._subscribe_failed(asyncio.CancelledError())
            return
        error = future.exception()
        if error is not None:
            self._subscribe_failed(error)
            return
        self._subscribe_succeeded()

    def _subscribe_succeeded(self) -> None:
        with self._lock:
            if self._state is not SessionState.SUBSCRIBING:
                # Stopped while the subscribe request was in flight
                logger.debug("Subscription to %s acknowledged after completion", self._topic)
                return
            self._state = SessionState.RUNNING
            arm_timer = self._duration > 0 and self._connection_ref.get() is not None
            if arm_timer:
                self._timer = self._loop.call_later(self._duration, self._deadline_reached)

        if not arm_timer:
            # No timeout -> complete immediately, keep listening until stop()
            self._resolve(DiscoveryResult.finished())

    def _subscribe_failed(self, error: BaseException) -> None:
        if self._terminate(DiscoveryResult.failed(self._topic, error)):
            logger.warning("Discovery subscription to %s failed: %s", self._topic, error)

    def _deadline_reached(self) -> None:
        with self._lock:
            if self._state is not SessionState.RUNNING:
                return
            self._state = SessionState.COMPLETED
            self._timer = None
            self._observer = None
            connection = self._connection_ref.get()
            self._connection_ref = ConnectionRef()

        if connection is not None:
            connection.unsubscribe(self._topic, self)
        logger.info("Discovery on %s finished", self._topic)
        self._resolve(DiscoveryResult.finished())

    def _terminate(self, result: DiscoveryResult) -> bool:
        """Shared cleanup of stop() and subscribe failure; False if nothing to do."""
        with self._lock:
            if self._state in (SessionState.CREATED, SessionState.COMPLETED):
                return False
            self._state = SessionState.COMPLETED
            timer = self._timer
            self._timer = None
            self._observer = None
            connection = self._connection_ref.get()
            self._connection_ref = ConnectionRef()

        if timer is not None:
            self._call_in_loop(timer.cancel)
        if connection is not None:
            connection.unsubscribe(self._topic, self)
        self._resolve(result)
        return True

    def _resolve(self, result: DiscoveryResult) -> None:
        self._call_in_loop(self._set_result, result)

    def _call_in_loop(self, callback, *args) -> None:
        """Run callback on the session loop, directly if already on it."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            callback(*args)
        else:
            loop.call_soon_threadsafe(callback, *args)

    def _set_result(self, result: DiscoveryResult) -> None:
        # Later resolution attempts are discarded
        if self._future is not None and not self._future.done():
            self._future.set_result(result)

    def __repr__(self) -> str:
        return f"DiscoverySession(thing_uid={self.thing_uid!r}, topic={self._topic!r}, state={self._state.value})"
