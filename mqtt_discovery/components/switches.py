"""
Binary control component kinds: switches and locks.
"""

from typing import Optional

from .base import AbstractComponent, ChannelConfiguration, ComponentChannel, ComponentType


class SwitchConfiguration(ChannelConfiguration):
    name: str = "MQTT Switch"
    state_topic: Optional[str] = None
    command_topic: Optional[str] = None
    payload_on: str = "ON"
    payload_off: str = "OFF"
    state_on: Optional[str] = None
    state_off: Optional[str] = None
    optimistic: bool = False


class LockConfiguration(ChannelConfiguration):
    name: str = "MQTT Lock"
    command_topic: str
    state_topic: Optional[str] = None
    payload_lock: str = "LOCK"
    payload_unlock: str = "UNLOCK"
    optimistic: bool = False


class Switch(AbstractComponent):
    """Relay or any other on/off actuator."""

    component_type = ComponentType.SWITCH
    config_class = SwitchConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: SwitchConfiguration = self.config
        return [
            ComponentChannel(
                channel_id="switch",
                state_topic=config.state_topic,
                command_topic=config.command_topic,
                read_only=config.command_topic is None,
                attributes={
                    "payload_on": config.payload_on,
                    "payload_off": config.payload_off,
                    "state_on": config.state_on or config.payload_on,
                    "state_off": config.state_off or config.payload_off,
                },
            )
        ]


class Lock(AbstractComponent):
    component_type = ComponentType.LOCK
    config_class = LockConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: LockConfiguration = self.config
        return [
            ComponentChannel(
                channel_id="lock",
                state_topic=config.state_topic,
                command_topic=config.command_topic,
                attributes={
                    "payload_lock": config.payload_lock,
                    "payload_unlock": config.payload_unlock,
                },
            )
        ]
