"""
MQTT Discovery - Home Assistant component discovery over MQTT.
"""

__version__ = "0.1.0"
