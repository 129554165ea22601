"""
Discovery Controller - runs discovery sessions against a broker connection.

Supports a time limited discovery that waits for the window to close and
a background discovery that keeps listening until stopped. Everything
found lands in a shared ComponentRegistry.
"""

import asyncio
import logging
from typing import Optional

from ..backends.base import BrokerConnection
from ..components import AbstractComponent, ComponentFactory, ComponentType, create_component
from ..config import settings
from ..topic import WILDCARD, HaID
from .models import DiscoveryResult
from .registry import ComponentRegistry
from .session import DiscoverySession

logger = logging.getLogger("mqtt_discovery.discovery.controller")


class DiscoveryController:
    """
    Owns the discovery sessions of one broker connection.

    Features:
    - Time limited discovery (discover)
    - Background discovery without timeout (start_background / stop_background)
    - Deduplicated registry of discovered components
    """

    def __init__(
        self,
        connection: BrokerConnection,
        thing_uid: Optional[str] = None,
        base_topic: Optional[str] = None,
        registry: Optional[ComponentRegistry] = None,
        component_factory: ComponentFactory = create_component,
    ):
        self._connection = connection
        self.thing_uid = thing_uid or settings.discovery.thing_uid
        self.base_topic = base_topic or settings.discovery.base_topic
        self.registry = registry if registry is not None else ComponentRegistry()
        self._factory = component_factory
        self._sessions: set[DiscoverySession] = set()
        self._background: Optional[DiscoverySession] = None

    @property
    def is_background_running(self) -> bool:
        return self._background is not None and self._background.is_running

    @property
    def active_sessions(self) -> int:
        count = len(self._sessions)
        if self.is_background_running:
            count += 1
        return count

    def _topic_description(self, object_id: str, node_id: str) -> HaID:
        return HaID.for_discovery(self.base_topic, object_id=object_id, node_id=node_id)

    async def discover(
        self,
        object_id: str = WILDCARD,
        node_id: str = "",
        duration: Optional[float] = None,
    ) -> DiscoveryResult:
        """
        Run a time limited discovery and wait until its window closes.

        Args:
            object_id: Device to discover components of ('+' for all)
            node_id: Optional node id of the device
            duration: Discovery window in seconds (config default if None)

        Returns:
            DiscoveryResult of the session
        """
        if duration is None:
            duration = settings.discovery.duration
        if duration <= 0:
            raise ValueError("Timed discovery needs a positive duration; use start_background()")

        session = DiscoverySession(self.thing_uid, self._factory)
        self._sessions.add(session)
        try:
            completion = session.start(
                self._connection,
                duration,
                self._topic_description(object_id, node_id),
                self.registry,
            )
            try:
                result = await asyncio.shield(completion)
            except asyncio.CancelledError:
                session.stop()
                raise
        finally:
            self._sessions.discard(session)

        logger.info(
            "Discovery on %s closed: %s (%d components known)",
            session.topic,
            result.status.value,
            len(self.registry),
        )
        return result

    async def start_background(self, object_id: str = WILDCARD, node_id: str = "") -> DiscoveryResult:
        """
        Start a discovery without timeout.

        Returns once the subscription is in place (FINISHED) or failed.
        """
        if self.is_background_running:
            raise RuntimeError("Background discovery already running")

        session = DiscoverySession(self.thing_uid, self._factory)
        self._background = session
        completion = session.start(
            self._connection,
            0,
            self._topic_description(object_id, node_id),
            self.registry,
        )
        try:
            result = await asyncio.shield(completion)
        except asyncio.CancelledError:
            session.stop()
            self._background = None
            raise
        if not result.ok:
            logger.warning("Background discovery failed to start: %s", result.error)
            self._background = None
        else:
            logger.info("Started background discovery on %s", session.topic)
        return result

    def stop_background(self) -> bool:
        """Stop the background discovery. Returns False if none was running."""
        session = self._background
        self._background = None
        if session is None or not session.is_running:
            return False
        session.stop()
        logger.info("Stopped background discovery")
        return True

    def shutdown(self) -> None:
        """Stop every session owned by this controller."""
        self.stop_background()
        for session in list(self._sessions):
            session.stop()
        self._sessions.clear()

    def list_components(self, component_type: Optional[ComponentType] = None) -> list[AbstractComponent]:
        if component_type is not None:
            return self.registry.list_by_type(component_type)
        return self.registry.list_all()


# Global controller instance
_discovery_controller: Optional[DiscoveryController] = None


def get_discovery_controller() -> Optional[DiscoveryController]:
    """Get the global discovery controller, if one was set up."""
    return _discovery_controller


def set_discovery_controller(controller: Optional[DiscoveryController]) -> None:
    """Install (or clear, with None) the global discovery controller."""
    global _discovery_controller
    _discovery_controller = controller
