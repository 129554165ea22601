"""
Base classes for components announced through MQTT discovery.

A component is a typed descriptor of one device capability (a switch, a
sensor, a light, ...) parsed from the JSON configuration a device retains
on its discovery topic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..topic import HaID


class InvalidConfigurationError(ValueError):
    """Raised when a discovery payload cannot be turned into a component."""


class UnsupportedComponentError(InvalidConfigurationError):
    """Raised for component kinds without an implementation."""


class ComponentType(str, Enum):
    """Component kinds supported by discovery."""
    ALARM_CONTROL_PANEL = "alarm_control_panel"
    BINARY_SENSOR = "binary_sensor"
    CAMERA = "camera"
    CLIMATE = "climate"
    COVER = "cover"
    FAN = "fan"
    LIGHT = "light"
    LOCK = "lock"
    SENSOR = "sensor"
    SWITCH = "switch"


# Abbreviated keys devices may use to keep retained payloads small
ABBREVIATIONS = {
    "act_t": "action_topic",
    "avty_t": "availability_topic",
    "bri_cmd_t": "brightness_command_topic",
    "bri_scl": "brightness_scale",
    "bri_stat_t": "brightness_state_topic",
    "clr_temp_cmd_t": "color_temp_command_topic",
    "clr_temp_stat_t": "color_temp_state_topic",
    "cmd_t": "command_topic",
    "curr_temp_t": "current_temperature_topic",
    "dev": "device",
    "dev_cla": "device_class",
    "exp_aft": "expire_after",
    "frc_upd": "force_update",
    "ic": "icon",
    "json_attr_t": "json_attributes_topic",
    "mode_cmd_t": "mode_command_topic",
    "mode_stat_t": "mode_state_topic",
    "off_dly": "off_delay",
    "opt": "optimistic",
    "pl_arm_away": "payload_arm_away",
    "pl_arm_home": "payload_arm_home",
    "pl_avail": "payload_available",
    "pl_cls": "payload_close",
    "pl_disarm": "payload_disarm",
    "pl_lock": "payload_lock",
    "pl_not_avail": "payload_not_available",
    "pl_off": "payload_off",
    "pl_on": "payload_on",
    "pl_open": "payload_open",
    "pl_stop": "payload_stop",
    "pl_unlk": "payload_unlock",
    "pos_t": "position_topic",
    "ret": "retain",
    "rgb_cmd_t": "rgb_command_topic",
    "rgb_stat_t": "rgb_state_topic",
    "set_pos_t": "set_position_topic",
    "spd_cmd_t": "speed_command_topic",
    "spd_stat_t": "speed_state_topic",
    "stat_clsd": "state_closed",
    "stat_off": "state_off",
    "stat_on": "state_on",
    "stat_open": "state_open",
    "stat_t": "state_topic",
    "t": "topic",
    "temp_cmd_t": "temperature_command_topic",
    "temp_stat_t": "temperature_state_topic",
    "uniq_id": "unique_id",
    "unit_of_meas": "unit_of_measurement",
    "val_tpl": "value_template",
}

DEVICE_ABBREVIATIONS = {
    "cns": "connections",
    "ids": "identifiers",
    "mdl": "model",
    "mf": "manufacturer",
    "sw": "sw_version",
}

BASE_TOPIC_KEY = "~"


def _is_topic_key(key: str) -> bool:
    return key == "topic" or key.endswith("_topic")


def expand_config(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Expand abbreviated keys and substitute the '~' base topic.

    A topic value starting with '~' gets the base topic prepended, one
    ending with '~' gets it appended.
    """
    base = raw.get(BASE_TOPIC_KEY)
    expanded: dict[str, Any] = {}

    for key, value in raw.items():
        if key == BASE_TOPIC_KEY:
            continue
        key = ABBREVIATIONS.get(key, key)

        if key == "device" and isinstance(value, dict):
            value = {DEVICE_ABBREVIATIONS.get(k, k): v for k, v in value.items()}
        elif isinstance(base, str) and _is_topic_key(key) and isinstance(value, str):
            if value.startswith(BASE_TOPIC_KEY):
                value = base + value[1:]
            elif value.endswith(BASE_TOPIC_KEY):
                value = value[:-1] + base

        expanded[key] = value

    return expanded


class DeviceInfo(BaseModel):
    """Physical device a component belongs to."""

    model_config = ConfigDict(extra="ignore")

    identifiers: list[str] = Field(default_factory=list)
    connections: list[list[str]] = Field(default_factory=list)
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    name: Optional[str] = None
    sw_version: Optional[str] = None

    @field_validator("identifiers", mode="before")
    @classmethod
    def single_identifier(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v


class ChannelConfiguration(BaseModel):
    """Configuration fields shared by every component kind."""

    model_config = ConfigDict(extra="ignore")

    name: str = "MQTT Component"
    icon: str = ""
    qos: int = Field(default=0, ge=0, le=2)
    retain: bool = False
    value_template: Optional[str] = None
    unique_id: Optional[str] = None
    availability_topic: Optional[str] = None
    payload_available: str = "online"
    payload_not_available: str = "offline"
    json_attributes_topic: Optional[str] = None
    device: Optional[DeviceInfo] = None


@dataclass
class ComponentChannel:
    """One observable/controllable value of a component."""
    channel_id: str
    state_topic: Optional[str] = None
    command_topic: Optional[str] = None
    unit: Optional[str] = None
    read_only: bool = False
    attributes: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel_id": self.channel_id,
            "state_topic": self.state_topic,
            "command_topic": self.command_topic,
            "unit": self.unit,
            "read_only": self.read_only,
            "attributes": self.attributes,
        }


class AbstractComponent:
    """
    Base class for discovered components.

    Subclasses declare their ComponentType, their configuration model and
    how the configuration maps onto channels.
    """

    component_type: ClassVar[ComponentType]
    config_class: ClassVar[type[ChannelConfiguration]] = ChannelConfiguration

    def __init__(self, thing_uid: str, ha_id: HaID, config: ChannelConfiguration):
        self.thing_uid = thing_uid
        self.ha_id = ha_id
        self.config = config
        self.channels: dict[str, ComponentChannel] = {
            channel.channel_id: channel for channel in self.build_channels()
        }

    @property
    def group_id(self) -> str:
        return self.ha_id.group_id(self.config.unique_id)

    @property
    def uid(self) -> str:
        """Unique identifier of this component within its owner."""
        return f"{self.thing_uid}:{self.group_id}"

    @property
    def name(self) -> str:
        return self.config.name

    def build_channels(self) -> list[ComponentChannel]:
        return []

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "type": self.component_type.value,
            "topic": self.ha_id.to_short_topic(),
            "unique_id": self.config.unique_id,
            "availability_topic": self.config.availability_topic,
            "device": self.config.device.model_dump() if self.config.device else None,
            "channels": {cid: ch.to_dict() for cid, ch in self.channels.items()},
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uid={self.uid!r}, name={self.name!r})"
