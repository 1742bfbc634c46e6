"""
Tests for the door state machine (startup asymmetry and grace window).
"""

import unittest

from src.garage_watch.core.door_state import DoorStateMachine
from src.garage_watch.core.models import DoorReading, EngineState

OPEN = DoorReading(is_closed=False, confidence_percent=90, label="open")
CLOSED = DoorReading(is_closed=True, confidence_percent=90, label="closed")


class TestStartup(unittest.TestCase):
    """Test the first confident observation."""

    def test_first_open_emits(self):
        """Test a door already open at startup alerts."""
        state = EngineState()
        event = DoorStateMachine().observe(OPEN, state, now=0)

        self.assertIsNotNone(event)
        self.assertFalse(event.is_closed)
        self.assertFalse(state.previous_is_closed)

    def test_first_closed_is_silent(self):
        """Test a door closed at startup does not alert."""
        state = EngineState()
        event = DoorStateMachine().observe(CLOSED, state, now=0)

        self.assertIsNone(event)
        self.assertTrue(state.previous_is_closed)

    def test_first_open_with_grace_starts_window(self):
        state = EngineState()
        event = DoorStateMachine(grace_period=120).observe(OPEN, state, now=5)

        self.assertIsNone(event)
        self.assertEqual(state.grace_open_since, 5)
        self.assertFalse(state.previous_is_closed)


class TestWithoutGrace(unittest.TestCase):
    """Test immediate transitions when no grace window is configured."""

    def setUp(self):
        self.machine = DoorStateMachine()

    def test_every_flip_emits_once(self):
        state = EngineState(previous_is_closed=True)
        sequence = [CLOSED, OPEN, OPEN, CLOSED, CLOSED, OPEN]
        events = [self.machine.observe(r, state, now=i * 30) for i, r in enumerate(sequence)]

        emitted = [e.is_closed for e in events if e is not None]
        self.assertEqual(emitted, [False, True, False])
        self.assertEqual([e is not None for e in events], [False, True, False, True, False, True])

    def test_no_grace_state_ever_set(self):
        state = EngineState(previous_is_closed=True)
        self.machine.observe(OPEN, state, now=0)
        self.assertIsNone(state.grace_open_since)

    def test_event_carries_reading(self):
        state = EngineState(previous_is_closed=True)
        event = self.machine.observe(OPEN, state, now=0)
        self.assertIs(event.reading, OPEN)
        self.assertFalse(event.confirmed_after_grace)


class TestGraceWindow(unittest.TestCase):
    """Test the debounced opening."""

    def setUp(self):
        self.machine = DoorStateMachine(grace_period=120)
        self.state = EngineState(previous_is_closed=True)

    def test_closing_within_window_is_false_alarm(self):
        """Test open then closed inside the window emits nothing and clears it."""
        self.assertIsNone(self.machine.observe(OPEN, self.state, now=0))
        self.assertIsNone(self.machine.observe(OPEN, self.state, now=30))
        self.assertIsNone(self.machine.observe(CLOSED, self.state, now=119))

        self.assertIsNone(self.state.grace_open_since)
        self.assertTrue(self.state.previous_is_closed)

    def test_confirmed_open_exactly_once_at_expiry(self):
        """Test an opening that persists is confirmed once, at the deadline."""
        events = {}
        for t in range(0, 300, 30):
            events[t] = self.machine.observe(OPEN, self.state, now=t)

        fired = {t: e for t, e in events.items() if e is not None}
        self.assertEqual(list(fired), [120])
        self.assertFalse(fired[120].is_closed)
        self.assertTrue(fired[120].confirmed_after_grace)
        self.assertIsNone(self.state.grace_open_since)

    def test_closing_is_never_delayed(self):
        """Test a confirmed-open door closing alerts immediately."""
        self.state = EngineState(previous_is_closed=False)
        event = self.machine.observe(CLOSED, self.state, now=0)

        self.assertIsNotNone(event)
        self.assertTrue(event.is_closed)

    def test_new_opening_after_false_alarm_restarts_window(self):
        self.machine.observe(OPEN, self.state, now=0)
        self.machine.observe(CLOSED, self.state, now=60)
        self.assertIsNone(self.machine.observe(OPEN, self.state, now=90))

        self.assertEqual(self.state.grace_open_since, 90)
        self.assertIsNone(self.machine.observe(OPEN, self.state, now=200))
        event = self.machine.observe(OPEN, self.state, now=210)
        self.assertIsNotNone(event)

    def test_closed_after_unobserved_expiry_is_silent(self):
        """Test a window that expired unseen is dropped when the door is next seen closed."""
        self.machine.observe(OPEN, self.state, now=0)
        event = self.machine.observe(CLOSED, self.state, now=500)

        self.assertIsNone(event)
        self.assertIsNone(self.state.grace_open_since)
        self.assertTrue(self.state.previous_is_closed)

    def test_zero_grace_confirms_immediately(self):
        machine = DoorStateMachine(grace_period=0)
        event = machine.observe(OPEN, self.state, now=0)

        self.assertIsNotNone(event)
        self.assertTrue(event.confirmed_after_grace)
        self.assertIsNone(self.state.grace_open_since)

    def test_grace_expired_helper(self):
        self.assertFalse(self.machine.grace_expired(self.state, now=1000))
        self.state.grace_open_since = 10
        self.assertFalse(self.machine.grace_expired(self.state, now=129))
        self.assertTrue(self.machine.grace_expired(self.state, now=130))


if __name__ == "__main__":
    unittest.main()
