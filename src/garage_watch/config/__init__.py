"""
Configuration loading and validation.

- load_config: YAML file (optional) + environment overrides + validation
- load_config_with_env: Apply environment variable overrides
- Config: Pydantic schema for the whole configuration
"""

from ..exceptions import ConfigValidationError
from .durations import format_duration, parse_duration
from .loader import find_config_file, load_config, load_config_with_env
from .schemas import (
    BroadcastConfig,
    CameraConfig,
    Config,
    DecisionConfig,
    ModelConfig,
    NotificationsConfig,
    NotifierConfig,
    PollingConfig,
    StorageConfig,
    validate_config_pydantic,
)

__all__ = [
    "BroadcastConfig",
    "CameraConfig",
    "Config",
    "ConfigValidationError",
    "DecisionConfig",
    "ModelConfig",
    "NotificationsConfig",
    "NotifierConfig",
    "PollingConfig",
    "StorageConfig",
    "find_config_file",
    "format_duration",
    "load_config",
    "load_config_with_env",
    "parse_duration",
    "validate_config_pydantic",
]
