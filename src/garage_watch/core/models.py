"""
Engine data models - observations, readings, state and cycle outcomes.
"""

import math
from dataclasses import dataclass
from enum import Enum

CLOSED_LABEL_MARKER = "closed"


@dataclass(frozen=True)
class Observation:
    """
    A single classifier result for one captured frame.

    Attributes:
        label: Class name reported by the model (e.g. "Closed", "open")
        confidence: Probability of that class, 0.0 - 1.0
    """

    label: str
    confidence: float


@dataclass(frozen=True)
class DoorReading:
    """Door state derived from an observation."""

    is_closed: bool
    confidence_percent: int
    label: str = ""

    @classmethod
    def from_observation(cls, observation: Observation) -> "DoorReading":
        """Any label containing "closed" (any case) means closed, anything else open."""
        return cls(
            is_closed=CLOSED_LABEL_MARKER in observation.label.lower(),
            confidence_percent=round_percent(observation.confidence),
            label=observation.label,
        )

    @property
    def friendly_state(self) -> str:
        return "closed" if self.is_closed else "open"


def round_percent(confidence: float) -> int:
    """Confidence as a whole percentage, halves rounded up."""
    return int(math.floor(confidence * 100 + 0.5))


@dataclass
class EngineState:
    """
    Mutable decision state, owned by the scheduler for the process lifetime.

    Attributes:
        previous_is_closed: Last confidently observed state, None until the first one
        grace_open_since: Wall-clock time an unconfirmed "open" was first seen
        last_low_confidence_alert_at: When the last immediate low-confidence alert went out
        last_error_alert_at: When the last immediate error alert went out

    Only the scheduler thread writes here. Timer-driven resends are tracked
    by the policies themselves (last_sent_at).
    """

    previous_is_closed: bool | None = None
    grace_open_since: float | None = None
    last_low_confidence_alert_at: float | None = None
    last_error_alert_at: float | None = None

    @property
    def grace_active(self) -> bool:
        return self.grace_open_since is not None


@dataclass(frozen=True)
class StateChange:
    """A door transition worth broadcasting and alerting on."""

    is_closed: bool
    reading: DoorReading
    confirmed_after_grace: bool = False


class CycleStatus(Enum):
    CONFIDENT = "confident"
    LOW_CONFIDENCE = "low_confidence"
    FAILED = "failed"


@dataclass
class CycleResult:
    """Outcome of one poll cycle."""

    status: CycleStatus
    reading: DoorReading | None = None
    event: StateChange | None = None
    error: Exception | None = None
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.status is not CycleStatus.FAILED
