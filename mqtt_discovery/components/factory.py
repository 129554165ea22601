"""
Component factory: turns a discovery payload into a typed component.
"""

import json
import logging
from typing import Callable

from pydantic import ValidationError

from ..topic import HaID
from .base import (
    AbstractComponent,
    ComponentType,
    InvalidConfigurationError,
    UnsupportedComponentError,
    expand_config,
)
from .controls import AlarmControlPanel, Climate, Cover
from .lights import Fan, Light
from .sensors import BinarySensor, Camera, Sensor
from .switches import Lock, Switch

logger = logging.getLogger("mqtt_discovery.components.factory")

ComponentFactory = Callable[[str, HaID, str], AbstractComponent]

COMPONENT_CLASSES: dict[str, type[AbstractComponent]] = {
    cls.component_type.value: cls
    for cls in (
        AlarmControlPanel,
        BinarySensor,
        Camera,
        Climate,
        Cover,
        Fan,
        Light,
        Lock,
        Sensor,
        Switch,
    )
}


def supported_components() -> list[ComponentType]:
    """Component kinds the factory can build."""
    return [cls.component_type for cls in COMPONENT_CLASSES.values()]


def create_component(thing_uid: str, ha_id: HaID, config_text: str) -> AbstractComponent:
    """
    Create a component from a discovery configuration payload.

    Args:
        thing_uid: Owner the component is discovered for
        ha_id: Identifier parsed from the discovery topic
        config_text: JSON configuration payload

    Returns:
        The parsed component

    Raises:
        UnsupportedComponentError: if the component kind is unknown
        InvalidConfigurationError: if the payload is empty, not a JSON
            object, or fails validation for the component kind
    """
    component_class = COMPONENT_CLASSES.get(ha_id.component)
    if component_class is None:
        raise UnsupportedComponentError(f"Component kind not supported: {ha_id.component}")

    if not config_text.strip():
        raise InvalidConfigurationError(f"Empty configuration for {ha_id}")

    try:
        raw = json.loads(config_text)
    except json.JSONDecodeError as e:
        raise InvalidConfigurationError(f"Configuration for {ha_id} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise InvalidConfigurationError(f"Configuration for {ha_id} is not a JSON object")

    try:
        config = component_class.config_class.model_validate(expand_config(raw))
    except ValidationError as e:
        raise InvalidConfigurationError(
            f"Invalid {ha_id.component} configuration for {ha_id}: {e.error_count()} error(s)"
        ) from e

    component = component_class(thing_uid, ha_id, config)
    logger.debug("Created %s component %s", ha_id.component, component.uid)
    return component
