"""
Door state machine - turns confident readings into state-change events.

An optional grace window debounces openings: a door that is opened and
closed again within the window (a car driving through) never alerts, while
a door that stays open past the window is confirmed open exactly once.
Closing is never delayed.
"""

import logging

from .models import DoorReading, EngineState, StateChange

logger = logging.getLogger(__name__)


class DoorStateMachine:
    """
    Hysteresis-gated door state tracker.

    The machine itself is stateless; all state lives in the EngineState
    passed to observe(), so tests can build any starting point directly.
    """

    def __init__(self, grace_period: float | None = None):
        """
        Args:
            grace_period: Seconds an opening must persist before it is
                reported. None disables the grace window.
        """
        self.grace_period = grace_period

    @property
    def grace_enabled(self) -> bool:
        return self.grace_period is not None

    def is_change(self, reading: DoorReading, state: EngineState) -> bool:
        """
        A first-ever "open" counts as a change, a first-ever "closed" does not:
        closed is the expected resting state, so startup stays quiet.
        """
        if state.previous_is_closed is None:
            return not reading.is_closed
        return state.previous_is_closed != reading.is_closed

    def grace_expired(self, state: EngineState, now: float) -> bool:
        if not self.grace_enabled or state.grace_open_since is None:
            return False
        return now - state.grace_open_since >= self.grace_period

    def observe(
        self, reading: DoorReading, state: EngineState, now: float
    ) -> StateChange | None:
        """
        Apply one confident reading.

        Args:
            reading: Confident door reading
            state: Engine state, updated in place
            now: Current wall-clock time in seconds

        Returns:
            The state change to broadcast and alert on, or None
        """
        event = None

        if self.is_change(reading, state):
            if not self.grace_enabled:
                event = StateChange(is_closed=reading.is_closed, reading=reading)
            elif state.grace_open_since is None:
                if reading.is_closed:
                    event = StateChange(is_closed=True, reading=reading)
                else:
                    state.grace_open_since = now
                    logger.info(
                        f"Door opened, waiting {self.grace_period:g}s before alerting"
                    )
            elif reading.is_closed:
                if self.grace_expired(state, now):
                    # Never seen open at or past the deadline, so it was never confirmed
                    logger.info("Door closed after an unconfirmed opening, no alert")
                else:
                    logger.info("Door closed again within grace window, ignoring opening")
                state.grace_open_since = None

        if self.grace_expired(state, now) and not reading.is_closed:
            open_for = now - state.grace_open_since
            logger.info(f"Door still open after {open_for:.0f}s, confirming")
            event = StateChange(is_closed=False, reading=reading, confirmed_after_grace=True)
            state.grace_open_since = None

        state.previous_is_closed = reading.is_closed
        return event
