"""
Tests for the component factory and component kinds.

Covers:
1. Factory: kind lookup, JSON handling, validation errors
2. Abbreviation and '~' base topic expansion
3. Channel mapping per component kind
"""

import json

import pytest

from mqtt_discovery.components import (
    BinarySensor,
    ComponentType,
    InvalidConfigurationError,
    Light,
    Sensor,
    Switch,
    UnsupportedComponentError,
    create_component,
    expand_config,
    supported_components,
)
from mqtt_discovery.topic import HaID

THING = "mqtt:homeassistant:broker"


def _create(topic: str, config) -> object:
    text = config if isinstance(config, str) else json.dumps(config)
    return create_component(THING, HaID.from_topic(topic), text)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestCreateComponent:
    """create_component: kind dispatch and rejection reasons."""

    def test_minimal_switch(self):
        component = _create("devices/switch/bedroom/config", {"name": "Bedroom Switch"})
        assert isinstance(component, Switch)
        assert component.name == "Bedroom Switch"
        assert component.component_type == ComponentType.SWITCH
        assert component.uid == f"{THING}:bedroom_switch"

    def test_default_name_per_kind(self):
        component = _create("homeassistant/sensor/t1/config", {"state_topic": "t1/state"})
        assert isinstance(component, Sensor)
        assert component.name == "MQTT Sensor"

    def test_unsupported_kind(self):
        with pytest.raises(UnsupportedComponentError):
            _create("homeassistant/vacuum/robot/config", {"name": "Robot"})

    def test_unsupported_kind_is_invalid_configuration(self):
        with pytest.raises(InvalidConfigurationError):
            _create("homeassistant/vacuum/robot/config", {"name": "Robot"})

    def test_invalid_json(self):
        with pytest.raises(InvalidConfigurationError):
            _create("homeassistant/switch/a/config", "{not json")

    def test_json_array_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            _create("homeassistant/switch/a/config", "[1, 2]")

    def test_empty_payload_rejected(self):
        # Empty retained payloads are how devices remove a component
        with pytest.raises(InvalidConfigurationError):
            _create("homeassistant/switch/a/config", "")

    def test_missing_required_topic(self):
        with pytest.raises(InvalidConfigurationError):
            _create("homeassistant/sensor/t1/config", {"name": "No topic"})

    def test_qos_out_of_range(self):
        with pytest.raises(InvalidConfigurationError):
            _create("homeassistant/switch/a/config", {"command_topic": "a/set", "qos": 3})

    def test_validation_error_chained(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            _create("homeassistant/lock/door/config", {"name": "Door"})
        assert exc_info.value.__cause__ is not None

    def test_unknown_keys_ignored(self):
        component = _create(
            "homeassistant/switch/a/config",
            {"command_topic": "a/set", "platform": "mqtt", "something_new": 1},
        )
        assert component.channels["switch"].command_topic == "a/set"

    def test_all_kinds_supported(self):
        kinds = {k.value for k in supported_components()}
        assert kinds == {t.value for t in ComponentType}


# ---------------------------------------------------------------------------
# Abbreviations and base topic
# ---------------------------------------------------------------------------


class TestExpandConfig:
    """expand_config: abbreviated keys and '~' substitution."""

    def test_abbreviations_expanded(self):
        expanded = expand_config({"stat_t": "a", "cmd_t": "b", "uniq_id": "u", "unit_of_meas": "C"})
        assert expanded == {
            "state_topic": "a",
            "command_topic": "b",
            "unique_id": "u",
            "unit_of_measurement": "C",
        }

    def test_base_topic_prefix(self):
        expanded = expand_config({"~": "tasmota/kitchen", "stat_t": "~/STATE"})
        assert expanded["state_topic"] == "tasmota/kitchen/STATE"
        assert "~" not in expanded

    def test_base_topic_suffix(self):
        expanded = expand_config({"~": "kitchen", "cmd_t": "cmnd/~"})
        assert expanded["command_topic"] == "cmnd/kitchen"

    def test_base_topic_only_in_topics(self):
        expanded = expand_config({"~": "kitchen", "name": "~ lamp"})
        assert expanded["name"] == "~ lamp"

    def test_device_abbreviations(self):
        expanded = expand_config({"dev": {"ids": ["abc"], "mf": "Tasmota", "mdl": "Sonoff", "sw": "9.1"}})
        assert expanded["device"] == {
            "identifiers": ["abc"],
            "manufacturer": "Tasmota",
            "model": "Sonoff",
            "sw_version": "9.1",
        }

    def test_abbreviated_payload_end_to_end(self):
        component = _create(
            "homeassistant/switch/kitchen/config",
            {
                "~": "tasmota/kitchen",
                "name": "Kitchen Relay",
                "stat_t": "~/STATE",
                "cmd_t": "~/POWER",
                "uniq_id": "kitchen_relay",
                "dev": {"ids": "abc123", "mf": "Tasmota"},
            },
        )
        channel = component.channels["switch"]
        assert channel.state_topic == "tasmota/kitchen/STATE"
        assert channel.command_topic == "tasmota/kitchen/POWER"
        assert component.uid == f"{THING}:kitchen_relay"
        assert component.config.device.identifiers == ["abc123"]
        assert component.config.device.manufacturer == "Tasmota"


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------


class TestChannels:
    """Channel mapping of individual component kinds."""

    def test_switch_without_command_topic_is_read_only(self):
        component = _create("homeassistant/switch/a/config", {"state_topic": "a/state"})
        assert component.channels["switch"].read_only is True

    def test_switch_state_payloads_default_to_commands(self):
        component = _create(
            "homeassistant/switch/a/config",
            {"command_topic": "a/set", "payload_on": "1", "payload_off": "0"},
        )
        attrs = component.channels["switch"].attributes
        assert attrs["state_on"] == "1"
        assert attrs["state_off"] == "0"

    def test_sensor_unit(self):
        component = _create(
            "homeassistant/sensor/t1/config",
            {"state_topic": "t1/state", "unit_of_measurement": "°C", "device_class": "temperature"},
        )
        channel = component.channels["sensor"]
        assert channel.unit == "°C"
        assert channel.read_only is True
        assert channel.attributes["device_class"] == "temperature"

    def test_binary_sensor_payloads(self):
        component = _create(
            "homeassistant/binary_sensor/door/config",
            {"state_topic": "door/state", "pl_on": "open", "pl_off": "closed"},
        )
        assert isinstance(component, BinarySensor)
        assert component.channels["state"].attributes["payload_on"] == "open"

    def test_light_optional_channels(self):
        basic = _create("homeassistant/light/lamp/config", {"command_topic": "lamp/set"})
        assert isinstance(basic, Light)
        assert list(basic.channels) == ["on_off"]

        dimmable = _create(
            "homeassistant/light/lamp/config",
            {"command_topic": "lamp/set", "bri_cmd_t": "lamp/bri/set", "bri_scl": 100},
        )
        assert list(dimmable.channels) == ["on_off", "brightness"]
        assert dimmable.channels["brightness"].attributes["scale"] == 100

    def test_climate_channels_follow_config(self):
        empty = _create("homeassistant/climate/hvac/config", {})
        assert empty.channels == {}

        full = _create(
            "homeassistant/climate/hvac/config",
            {
                "curr_temp_t": "hvac/temp",
                "temp_cmd_t": "hvac/target/set",
                "mode_stat_t": "hvac/mode",
                "modes": ["off", "heat"],
            },
        )
        assert set(full.channels) == {"current_temperature", "temperature", "mode"}
        assert full.channels["mode"].read_only is True
        assert full.channels["mode"].attributes["options"] == ["off", "heat"]

    def test_cover_position_channel(self):
        component = _create(
            "homeassistant/cover/blind/config",
            {"command_topic": "blind/set", "pos_t": "blind/pos", "set_pos_t": "blind/pos/set"},
        )
        assert component.channels["position"].unit == "%"
        assert component.channels["position"].read_only is False

    def test_alarm_panel_requires_both_topics(self):
        with pytest.raises(InvalidConfigurationError):
            _create("homeassistant/alarm_control_panel/home/config", {"state_topic": "alarm/state"})

    def test_camera_topic(self):
        component = _create("homeassistant/camera/door/config", {"topic": "door/image"})
        assert component.channels["camera"].state_topic == "door/image"

    def test_to_dict(self):
        component = _create(
            "homeassistant/sensor/hub/t1/config",
            {"name": "Temp", "state_topic": "t1/state", "availability_topic": "hub/status"},
        )
        data = component.to_dict()
        assert data["uid"] == f"{THING}:hub_t1_sensor"
        assert data["type"] == "sensor"
        assert data["topic"] == "sensor/hub/t1"
        assert data["availability_topic"] == "hub/status"
        assert data["device"] is None
        assert data["channels"]["sensor"]["state_topic"] == "t1/state"
