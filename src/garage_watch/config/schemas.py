"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
Durations accept "30s" / "10m" style strings as well as plain seconds.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..utils.constants import (
    DEFAULT_BROADCAST_HOST,
    DEFAULT_BROADCAST_PORT,
    DEFAULT_CHECK_INTERVAL,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_IMAGE_PATH,
    DEFAULT_LOW_CONFIDENCE_DIR,
    DEFAULT_MAX_RETRIES,
    DEFAULT_NOTIFICATION_COOLDOWN,
    DEFAULT_RAM_DISK_SIZE_MB,
)
from .durations import parse_duration


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class CameraConfig(StrictModel):
    """Camera stream and frame capture settings."""

    url: str = Field(..., min_length=1, description="RTSP (or any OpenCV) stream URL")
    image_path: str = Field(
        default=DEFAULT_IMAGE_PATH, description="Where each captured frame is written"
    )
    ram_disk_size_mb: int = Field(default=DEFAULT_RAM_DISK_SIZE_MB, ge=1)


class ModelConfig(StrictModel):
    """Classifier settings."""

    path: str = Field(..., min_length=1, description="Classification model file (.pt)")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.endswith(".pt"):
            raise ValueError("Model file must be .pt format")
        return v


class DecisionConfig(StrictModel):
    """Confidence gate and grace window."""

    confidence_threshold: int = Field(default=DEFAULT_CONFIDENCE_THRESHOLD, ge=0, le=100)
    grace_period: float | None = Field(
        default=None, description="Seconds the door may stay open before alerting"
    )

    @field_validator("grace_period", mode="before")
    @classmethod
    def parse_grace_period(cls, v):
        if v is None or v == "":
            return None
        return parse_duration(v)

    @property
    def grace_enabled(self) -> bool:
        return self.grace_period is not None


class PollingConfig(StrictModel):
    """Poll loop timing and retry."""

    interval: float = Field(default=parse_duration(DEFAULT_CHECK_INTERVAL), gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)

    @field_validator("interval", mode="before")
    @classmethod
    def parse_interval(cls, v):
        return parse_duration(v)


class NotifierConfig(StrictModel):
    """A single push notification backend."""

    id: str = Field(..., min_length=1)
    type: Literal["pushover", "ntfy"]
    # pushover
    token: str | None = None
    user: str | None = None
    # ntfy
    topic: str | None = None
    server: str | None = None
    priority: str | None = None

    @model_validator(mode="after")
    def validate_credentials(self):
        if self.type == "pushover" and not (self.token and self.user):
            raise ValueError(f"Notifier '{self.id}': pushover requires token and user")
        if self.type == "ntfy" and not self.topic:
            raise ValueError(f"Notifier '{self.id}': ntfy requires topic")
        return self


class NotificationsConfig(StrictModel):
    """Alert suppression and push backends."""

    cooldown: float = Field(default=parse_duration(DEFAULT_NOTIFICATION_COOLDOWN))
    notifiers: list[NotifierConfig] = Field(default_factory=list)

    @field_validator("cooldown", mode="before")
    @classmethod
    def parse_cooldown(cls, v):
        return parse_duration(v)

    @model_validator(mode="after")
    def validate_unique_ids(self):
        ids = [n.id for n in self.notifiers]
        duplicates = {i for i in ids if ids.count(i) > 1}
        if duplicates:
            raise ValueError(f"Duplicate notifier ids: {sorted(duplicates)}")
        return self


class BroadcastConfig(StrictModel):
    """Local subscriber server."""

    enabled: bool = True
    host: str = DEFAULT_BROADCAST_HOST
    port: int = Field(default=DEFAULT_BROADCAST_PORT, ge=0, le=65535)


class StorageConfig(StrictModel):
    """Where low-confidence frames are kept for retraining."""

    low_confidence_dir: str = DEFAULT_LOW_CONFIDENCE_DIR


class Config(StrictModel):
    """Complete configuration schema."""

    camera: CameraConfig
    model: ModelConfig
    decision: DecisionConfig = Field(default_factory=DecisionConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    broadcast: BroadcastConfig = Field(default_factory=BroadcastConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
