"""
Decision & notification engine.

Pure logic with injected collaborators: no camera, model or network imports
here, so everything in this package runs in tests as-is.
"""

from .broadcaster import StateBroadcaster
from .confidence import is_confident, is_low_confidence
from .door_state import DoorStateMachine
from .models import (
    CycleResult,
    CycleStatus,
    DoorReading,
    EngineState,
    Observation,
    StateChange,
)
from .scheduler import PollScheduler
from .suppression import LeadingDebouncePolicy, PeriodicResendPolicy

__all__ = [
    "CycleResult",
    "CycleStatus",
    "DoorReading",
    "DoorStateMachine",
    "EngineState",
    "LeadingDebouncePolicy",
    "Observation",
    "PeriodicResendPolicy",
    "PollScheduler",
    "StateBroadcaster",
    "StateChange",
    "is_confident",
    "is_low_confidence",
]
