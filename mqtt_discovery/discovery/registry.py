"""
Registry of components found by discovery.

Keeps the latest configuration per component and tells listeners about
components it has not seen before.
"""

import logging
from typing import Callable, Optional

from ..components import AbstractComponent, ComponentType
from ..topic import HaID

logger = logging.getLogger("mqtt_discovery.discovery.registry")

ComponentListener = Callable[[HaID, AbstractComponent], None]


class ComponentRegistry:
    """
    Registry of discovered components, keyed by component uid.

    Implements the component observer contract so a discovery session can
    report straight into it. Re-announced configurations replace the
    stored component without notifying listeners again.
    """

    def __init__(self):
        self._components: dict[str, AbstractComponent] = {}
        self._listeners: list[ComponentListener] = []

    def add_listener(self, listener: ComponentListener) -> None:
        """Call listener for every newly recognized component."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ComponentListener) -> bool:
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    def component_discovered(self, ha_id: HaID, component: AbstractComponent) -> None:
        is_new = component.uid not in self._components
        self._components[component.uid] = component

        if not is_new:
            logger.debug("Updated component: %s", component.uid)
            return

        logger.info(
            "Discovered component: %s (%s)",
            component.uid,
            component.component_type.value,
        )
        for listener in list(self._listeners):
            try:
                listener(ha_id, component)
            except Exception as e:
                logger.warning("Component listener failed for %s: %s", component.uid, e)

    def get(self, uid: str) -> Optional[AbstractComponent]:
        return self._components.get(uid)

    def list_all(self) -> list[AbstractComponent]:
        """Return all discovered components."""
        return list(self._components.values())

    def list_by_type(self, component_type: ComponentType) -> list[AbstractComponent]:
        """Return components of a specific kind."""
        return [
            c for c in self._components.values()
            if c.component_type == component_type
        ]

    def list_uids(self) -> list[str]:
        return list(self._components.keys())

    def remove(self, uid: str) -> bool:
        """Forget a component."""
        if uid in self._components:
            del self._components[uid]
            logger.info("Removed component: %s", uid)
            return True
        return False

    def clear(self) -> None:
        """Remove all discovered components."""
        self._components.clear()
        logger.info("Cleared all components")

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, uid: str) -> bool:
        return uid in self._components
