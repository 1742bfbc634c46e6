"""
State broadcaster - keeps local subscribers informed of the door state.

Subscribers come and go on transport threads; publishes come from the
scheduler thread. The registry is guarded by a lock and sends happen on a
snapshot. A second lock orders the state a new subscriber is answered with
against concurrent publishes, so every subscriber ends on the latest value.
"""

import logging
import threading
from typing import Protocol

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """Anything that can receive a door state. Raises OSError when gone."""

    def send_state(self, is_closed: bool) -> None: ...


class StateBroadcaster:
    """Registry of subscribers plus the last confirmed door state."""

    def __init__(self):
        self._subscribers: set[Subscriber] = set()
        self._lock = threading.Lock()
        # Held across a state write and its delivery; taken before _lock
        self._state_lock = threading.Lock()
        self._current: bool | None = None

    @property
    def current(self) -> bool | None:
        """Last confirmed is_closed value, None if not known yet."""
        return self._current

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, subscriber: Subscriber) -> None:
        """Register a subscriber and answer it with the current state, if known."""
        with self._state_lock:
            with self._lock:
                self._subscribers.add(subscriber)
            current = self._current
            if current is not None:
                self._send(subscriber, current)
        logger.debug(f"Subscriber connected ({self.subscriber_count} total)")

    def unsubscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers.discard(subscriber)

    def seed(self, is_closed: bool) -> None:
        """Set the initial state without broadcasting. No-op once known."""
        with self._state_lock:
            if self._current is None:
                self._current = is_closed

    def publish(self, is_closed: bool) -> int:
        """
        Record a confirmed state change and push it to every subscriber.

        Returns:
            Number of subscribers that received the update
        """
        with self._state_lock:
            self._current = is_closed
            with self._lock:
                subscribers = list(self._subscribers)
            delivered = sum(1 for s in subscribers if self._send(s, is_closed))
        logger.debug(f"Broadcast isClosed={is_closed} to {delivered} subscriber(s)")
        return delivered

    def _send(self, subscriber: Subscriber, is_closed: bool) -> bool:
        try:
            subscriber.send_state(is_closed)
            return True
        except OSError as e:
            logger.debug(f"Dropping subscriber after send failure: {e}")
            self.unsubscribe(subscriber)
            return False
        except Exception as e:
            logger.warning(f"Dropping misbehaving subscriber: {e}")
            self.unsubscribe(subscriber)
            return False
