"""
Home Assistant MQTT component discovery.

Provides discovery sessions that listen on the wildcard discovery topic
of a device, plus a controller running timed and background discovery.
"""

from .controller import DiscoveryController, get_discovery_controller, set_discovery_controller
from .models import (
    DiscoveryError,
    DiscoveryResult,
    DiscoveryStatus,
    DiscoveryStopped,
    SessionState,
    SubscriptionFailed,
)
from .registry import ComponentListener, ComponentRegistry
from .session import ComponentObserver, DiscoverySession

__all__ = [
    "ComponentListener",
    "ComponentObserver",
    "ComponentRegistry",
    "DiscoveryController",
    "DiscoveryError",
    "DiscoveryResult",
    "DiscoverySession",
    "DiscoveryStatus",
    "DiscoveryStopped",
    "SessionState",
    "SubscriptionFailed",
    "get_discovery_controller",
    "set_discovery_controller",
]
