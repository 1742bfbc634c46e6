"""
Configuration loading - YAML file plus environment variable overrides.

The file is optional: a deployment can be configured purely through the
environment (MODEL_PATH, RTSP_URL, GARAGE_CHECK_INTERVAL, ...). Values are
read once at startup.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigValidationError
from ..utils.constants import (
    ENV_BROADCAST_PORT,
    ENV_CHECK_INTERVAL,
    ENV_CONFIDENCE_THRESHOLD,
    ENV_GRACE_PERIOD,
    ENV_IMAGE_PATH,
    ENV_LOW_CONFIDENCE_DIR,
    ENV_MAX_RETRIES,
    ENV_MODEL_PATH,
    ENV_NOTIFICATION_COOLDOWN,
    ENV_NTFY_TOPIC,
    ENV_PUSHOVER_TOKEN,
    ENV_PUSHOVER_USER,
    ENV_RAM_DISK_SIZE,
    ENV_RTSP_URL,
)
from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "garage-watch.yaml"

# env var -> (section, key)
ENV_OVERRIDES = {
    ENV_RTSP_URL: ("camera", "url"),
    ENV_IMAGE_PATH: ("camera", "image_path"),
    ENV_RAM_DISK_SIZE: ("camera", "ram_disk_size_mb"),
    ENV_MODEL_PATH: ("model", "path"),
    ENV_CONFIDENCE_THRESHOLD: ("decision", "confidence_threshold"),
    ENV_GRACE_PERIOD: ("decision", "grace_period"),
    ENV_CHECK_INTERVAL: ("polling", "interval"),
    ENV_MAX_RETRIES: ("polling", "max_retries"),
    ENV_NOTIFICATION_COOLDOWN: ("notifications", "cooldown"),
    ENV_BROADCAST_PORT: ("broadcast", "port"),
    ENV_LOW_CONFIDENCE_DIR: ("storage", "low_confidence_dir"),
}


def find_config_file(config_path: str | None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (must exist if given)
    2. Current directory (garage-watch.yaml)
    3. ~/.config/garage-watch/config.yaml

    Returns:
        Path to config file, or None when running from the environment only

    Raises:
        ConfigValidationError: If an explicitly specified file does not exist
    """
    if config_path:
        specified = Path(config_path)
        if not specified.exists():
            raise ConfigValidationError(f"Specified config file not found: {config_path}")
        return specified

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "garage-watch" / "config.yaml",
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def load_config_with_env(config: dict, environ: dict | None = None) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Configuration with environment variables applied
    """
    environ = os.environ if environ is None else environ

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        logger.debug(f"Using {section}.{key} from environment: {env_name}")
        if not isinstance(config.get(section), dict):
            config[section] = {}
        config[section][key] = value

    notifications = config.get("notifications") or {}
    config["notifications"] = notifications
    notifiers = notifications.get("notifiers") or []
    notifications["notifiers"] = notifiers
    configured_types = {n.get("type") for n in notifiers if isinstance(n, dict)}

    token = environ.get(ENV_PUSHOVER_TOKEN)
    user = environ.get(ENV_PUSHOVER_USER)
    if token and user and "pushover" not in configured_types:
        notifiers.append({"id": "pushover", "type": "pushover", "token": token, "user": user})

    topic = environ.get(ENV_NTFY_TOPIC)
    if topic and "ntfy" not in configured_types:
        notifiers.append({"id": "ntfy", "type": "ntfy", "topic": topic})

    return config


def load_config(config_path: str | None = None, environ: dict | None = None) -> Config:
    """
    Load, override and validate configuration.

    Args:
        config_path: Optional explicit path to a YAML config file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated Config

    Raises:
        ConfigValidationError: If the file is unreadable or the result is invalid
    """
    config: dict = {}
    config_file = find_config_file(config_path)

    if config_file is not None:
        try:
            with open(config_file, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e
        if not isinstance(config, dict):
            raise ConfigValidationError(f"Config root must be a mapping: {config_file}")
        logger.info(f"Configuration loaded from {config_file}")

    config = load_config_with_env(config, environ)

    try:
        return validate_config_pydantic(config)
    except ValidationError as e:
        raise ConfigValidationError(format_validation_error(e)) from e


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one line per problem."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "config"
        lines.append(f"{location}: {item.get('msg')}")
    return "Invalid configuration:\n  " + "\n  ".join(lines)
