"""
Centralized configuration management using Pydantic Settings.

Configuration is loaded from environment variables with sensible defaults.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MQTTConfig(BaseSettings):
    """MQTT broker connection configuration."""

    model_config = SettingsConfigDict(env_prefix="MQTTD_MQTT_")

    host: str = Field(default="localhost", description="MQTT broker host")
    port: int = Field(default=1883, description="MQTT broker port")
    username: Optional[str] = Field(default=None, description="MQTT username")
    password: Optional[str] = Field(default=None, description="MQTT password")
    client_id: Optional[str] = Field(default=None, description="MQTT client identifier (random if unset)")
    keepalive: int = Field(default=60, description="Keepalive interval in seconds")


class DiscoveryConfig(BaseSettings):
    """Home Assistant component discovery configuration."""

    model_config = SettingsConfigDict(env_prefix="MQTTD_DISCOVERY_")

    base_topic: str = Field(default="homeassistant", description="Discovery prefix on the broker")
    thing_uid: str = Field(
        default="mqtt:homeassistant:local",
        description="Owner identifier attached to discovered components",
    )
    duration: float = Field(
        default=5.0,
        description="Default window of a timed discovery in seconds",
    )
    background: bool = Field(
        default=False,
        description="Start background discovery on application startup",
    )

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("duration must be > 0")
        return v

    @field_validator("base_topic")
    @classmethod
    def validate_base_topic(cls, v: str) -> str:
        v = v.strip("/")
        if not v or "/" in v:
            raise ValueError("base_topic must be a single topic level")
        return v


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_prefix="MQTTD_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # General
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Nested configs
    mqtt: MQTTConfig = Field(default_factory=MQTTConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return v


# Singleton settings instance
settings = Settings()
