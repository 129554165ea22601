"""
Component kinds announced through Home Assistant MQTT discovery.

Import implementations here to make them available.
"""

from .base import (
    AbstractComponent,
    ChannelConfiguration,
    ComponentChannel,
    ComponentType,
    DeviceInfo,
    InvalidConfigurationError,
    UnsupportedComponentError,
    expand_config,
)
from .controls import AlarmControlPanel, Climate, Cover
from .factory import COMPONENT_CLASSES, ComponentFactory, create_component, supported_components
from .lights import Fan, Light
from .sensors import BinarySensor, Camera, Sensor
from .switches import Lock, Switch

__all__ = [
    # Base
    "AbstractComponent",
    "ChannelConfiguration",
    "ComponentChannel",
    "ComponentType",
    "DeviceInfo",
    "InvalidConfigurationError",
    "UnsupportedComponentError",
    "expand_config",
    # Factory
    "COMPONENT_CLASSES",
    "ComponentFactory",
    "create_component",
    "supported_components",
    # Kinds
    "AlarmControlPanel",
    "BinarySensor",
    "Camera",
    "Climate",
    "Cover",
    "Fan",
    "Light",
    "Lock",
    "Sensor",
    "Switch",
]
