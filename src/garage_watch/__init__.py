"""
Garage Watch

Watches a garage door through a camera and an image classifier, and alerts
when it is left open. Low-confidence frames are kept for retraining.

Package structure:
  core/       - Decision engine (state machine, suppression, scheduler)
  capture/    - Camera frame grab and door classifier
  notifiers/  - Push notification backends (Pushover, ntfy)
  config/     - Configuration loading and validation
  utils/      - Constants and local state broadcast server
"""

__version__ = "1.0.0"

from .config import Config, ConfigValidationError, load_config
from .core import (
    DoorReading,
    DoorStateMachine,
    EngineState,
    LeadingDebouncePolicy,
    Observation,
    PeriodicResendPolicy,
    PollScheduler,
    StateBroadcaster,
)
from .exceptions import CaptureError, ClassificationError, GarageWatchError, StartupError

__all__ = [
    "CaptureError",
    "ClassificationError",
    "Config",
    "ConfigValidationError",
    "DoorReading",
    "DoorStateMachine",
    "EngineState",
    "GarageWatchError",
    "LeadingDebouncePolicy",
    "Observation",
    "PeriodicResendPolicy",
    "PollScheduler",
    "StartupError",
    "StateBroadcaster",
    "load_config",
]
