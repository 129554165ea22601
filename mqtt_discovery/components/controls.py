"""
Multi-channel control component kinds: covers, climate devices and alarm panels.
"""

from typing import Optional

from pydantic import Field

from .base import AbstractComponent, ChannelConfiguration, ComponentChannel, ComponentType


class CoverConfiguration(ChannelConfiguration):
    name: str = "MQTT Cover"
    command_topic: Optional[str] = None
    state_topic: Optional[str] = None
    position_topic: Optional[str] = None
    set_position_topic: Optional[str] = None
    payload_open: str = "OPEN"
    payload_close: str = "CLOSE"
    payload_stop: str = "STOP"
    state_open: str = "open"
    state_closed: str = "closed"


class ClimateConfiguration(ChannelConfiguration):
    name: str = "MQTT HVAC"
    action_topic: Optional[str] = None
    current_temperature_topic: Optional[str] = None
    mode_command_topic: Optional[str] = None
    mode_state_topic: Optional[str] = None
    modes: list[str] = Field(default_factory=lambda: ["auto", "off", "cool", "heat", "dry", "fan_only"])
    temperature_command_topic: Optional[str] = None
    temperature_state_topic: Optional[str] = None
    min_temp: float = 7.0
    max_temp: float = 35.0


class AlarmControlPanelConfiguration(ChannelConfiguration):
    name: str = "MQTT Alarm"
    state_topic: str
    command_topic: str
    payload_arm_away: str = "ARM_AWAY"
    payload_arm_home: str = "ARM_HOME"
    payload_disarm: str = "DISARM"


class Cover(AbstractComponent):
    """Blinds, shutters, garage doors."""

    component_type = ComponentType.COVER
    config_class = CoverConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: CoverConfiguration = self.config
        channels = [
            ComponentChannel(
                channel_id="cover",
                state_topic=config.state_topic,
                command_topic=config.command_topic,
                read_only=config.command_topic is None,
                attributes={
                    "payload_open": config.payload_open,
                    "payload_close": config.payload_close,
                    "payload_stop": config.payload_stop,
                    "state_open": config.state_open,
                    "state_closed": config.state_closed,
                },
            )
        ]
        if config.position_topic or config.set_position_topic:
            channels.append(ComponentChannel(
                channel_id="position",
                state_topic=config.position_topic,
                command_topic=config.set_position_topic,
                unit="%",
                read_only=config.set_position_topic is None,
            ))
        return channels


class Climate(AbstractComponent):
    """HVAC unit; every topic is optional, channels follow the configuration."""

    component_type = ComponentType.CLIMATE
    config_class = ClimateConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: ClimateConfiguration = self.config
        channels = []
        if config.current_temperature_topic:
            channels.append(ComponentChannel(
                channel_id="current_temperature",
                state_topic=config.current_temperature_topic,
                read_only=True,
            ))
        if config.temperature_command_topic or config.temperature_state_topic:
            channels.append(ComponentChannel(
                channel_id="temperature",
                state_topic=config.temperature_state_topic,
                command_topic=config.temperature_command_topic,
                read_only=config.temperature_command_topic is None,
                attributes={"min": config.min_temp, "max": config.max_temp},
            ))
        if config.mode_command_topic or config.mode_state_topic:
            channels.append(ComponentChannel(
                channel_id="mode",
                state_topic=config.mode_state_topic,
                command_topic=config.mode_command_topic,
                read_only=config.mode_command_topic is None,
                attributes={"options": list(config.modes)},
            ))
        if config.action_topic:
            channels.append(ComponentChannel(
                channel_id="action",
                state_topic=config.action_topic,
                read_only=True,
            ))
        return channels


class AlarmControlPanel(AbstractComponent):
    component_type = ComponentType.ALARM_CONTROL_PANEL
    config_class = AlarmControlPanelConfiguration

    def build_channels(self) -> list[ComponentChannel]:
        config: AlarmControlPanelConfiguration = self.config
        return [
            ComponentChannel(channel_id="alarm", state_topic=config.state_topic, read_only=True),
            ComponentChannel(
                channel_id="arm",
                command_topic=config.command_topic,
                attributes={
                    "payload_arm_away": config.payload_arm_away,
                    "payload_arm_home": config.payload_arm_home,
                    "payload_disarm": config.payload_disarm,
                },
            ),
        ]
