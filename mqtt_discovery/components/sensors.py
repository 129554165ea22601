"""
Read-only component kinds: sensors, binary sensors and cameras.
"""

from typing import Optional

from pydantic import Field

from .base import AbstractComponent, ChannelConfiguration, ComponentChannel, ComponentType


class SensorConfiguration(ChannelConfiguration):
    name: str = "MQTT Sensor"
    state_topic: str
    unit_of_measurement: str = ""
    device_class: Optional[str] = None
    force_update: bool = False
    expire_after: int = Field(default=0, ge=0)


class BinarySensorConfiguration(ChannelConfiguration):
    name: str = "MQTT Binary Sensor"
    state_topic: str
    device_class: Optional[str] = None
    payload_on: str = "ON"
    payload_off: str = "OFF"
    off_delay: Optional[int] = Field(default=None, ge=0)
    force_update: bool = False


class CameraConfiguration(ChannelConfiguration):
    name: str = "MQTT Camera"
    topic: str


class Sensor(AbstractComponent):
    """Numeric or text sensor value."""

    component_type = ComponentType.SENSOR
    config_class = SensorConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: SensorConfiguration = self.config
        return [
            ComponentChannel(
                channel_id="sensor",
                state_topic=config.state_topic,
                unit=config.unit_of_measurement or None,
                read_only=True,
                attributes={
                    "device_class": config.device_class,
                    "expire_after": config.expire_after,
                },
            )
        ]


class BinarySensor(AbstractComponent):
    """On/off sensor such as a door contact or motion detector."""

    component_type = ComponentType.BINARY_SENSOR
    config_class = BinarySensorConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: BinarySensorConfiguration = self.config
        return [
            ComponentChannel(
                channel_id="state",
                state_topic=config.state_topic,
                read_only=True,
                attributes={
                    "device_class": config.device_class,
                    "payload_on": config.payload_on,
                    "payload_off": config.payload_off,
                    "off_delay": config.off_delay,
                },
            )
        ]


class Camera(AbstractComponent):
    """Still image published as a binary payload."""

    component_type = ComponentType.CAMERA
    config_class = CameraConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        return [ComponentChannel(channel_id="camera", state_topic=self.config.topic, read_only=True)]
