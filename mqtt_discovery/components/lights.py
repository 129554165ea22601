"""
Light and fan component kinds.
"""

from typing import Optional

from pydantic import Field

from .base import AbstractComponent, ChannelConfiguration, ComponentChannel, ComponentType


class LightConfiguration(ChannelConfiguration):
    name: str = "MQTT Light"
    command_topic: str
    state_topic: Optional[str] = None
    brightness_command_topic: Optional[str] = None
    brightness_state_topic: Optional[str] = None
    brightness_scale: int = Field(default=255, gt=0)
    color_temp_command_topic: Optional[str] = None
    color_temp_state_topic: Optional[str] = None
    rgb_command_topic: Optional[str] = None
    rgb_state_topic: Optional[str] = None
    payload_on: str = "ON"
    payload_off: str = "OFF"
    optimistic: bool = False


class FanConfiguration(ChannelConfiguration):
    name: str = "MQTT Fan"
    command_topic: str
    state_topic: Optional[str] = None
    speed_command_topic: Optional[str] = None
    speed_state_topic: Optional[str] = None
    payload_on: str = "ON"
    payload_off: str = "OFF"


class Light(AbstractComponent):
    """
    Light with optional brightness, color temperature and RGB channels.

    Only the channels the configuration provides topics for are created.
    """

    component_type = ComponentType.LIGHT
    config_class = LightConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: LightConfiguration = self.config
        channels = [
            ComponentChannel(
                channel_id="on_off",
                state_topic=config.state_topic,
                command_topic=config.command_topic,
                attributes={"payload_on": config.payload_on, "payload_off": config.payload_off},
            )
        ]
        if config.brightness_command_topic:
            channels.append(ComponentChannel(
                channel_id="brightness",
                state_topic=config.brightness_state_topic,
                command_topic=config.brightness_command_topic,
                attributes={"scale": config.brightness_scale},
            ))
        if config.color_temp_command_topic:
            channels.append(ComponentChannel(
                channel_id="color_temp",
                state_topic=config.color_temp_state_topic,
                command_topic=config.color_temp_command_topic,
            ))
        if config.rgb_command_topic:
            channels.append(ComponentChannel(
                channel_id="rgb",
                state_topic=config.rgb_state_topic,
                command_topic=config.rgb_command_topic,
            ))
        return channels


class Fan(AbstractComponent):
    component_type = ComponentType.FAN
    config_class = FanConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: FanConfiguration = self.config
        channels = [
            ComponentChannel(
                channel_id="fan",
                state_topic=config.state_topic,
                command_topic=config.command_topic,
                attributes={"payload_on": config.payload_on, "payload_off": config.payload_off},
            )
        ]
        if config.speed_command_topic:
            channels.append(ComponentChannel(
                channel_id="speed",
                state_topic=config.speed_state_topic,
                command_topic=config.speed_command_topic,
            ))
        return channels
