"""
Notification suppression policies.

Two separate strategies, which behave differently under sustained triggering:

PeriodicResendPolicy (errors)
    Send on the first trigger, then at most one "still happening" resend
    each time the cooldown window elapses while triggers keep arriving.
    A condition that persists produces one alert per cooldown.

LeadingDebouncePolicy (low-confidence diagnostics)
    Send on the first trigger after a quiet period. Every further trigger
    pushes the deadline back, so nothing more is sent while triggers keep
    arriving faster than the cooldown. A trailing resend fires once they
    stop for a full cooldown. cancel() drops that pending resend so the next
    burst alerts immediately again.

Windows are timed with real timers (wall clock), independent of the poll
interval. Resends are delivered from the timer thread.
"""

import logging
import threading
import time
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def start_thread_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Default timer factory: a daemon threading.Timer, already started."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class _SuppressionPolicy:
    """Shared plumbing: lock, timer bookkeeping and safe delivery."""

    def __init__(
        self,
        name: str,
        cooldown: float,
        send: Callable[[Any], None],
        timer_factory: TimerFactory = start_thread_timer,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.cooldown = cooldown
        self._send = send
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: TimerHandle | None = None
        self._generation = 0
        self._pending: Any = None
        self._has_pending = False
        self.sent_count = 0
        self._clock = clock
        # Written from whichever thread delivers, under the lock
        self.last_sent_at: float | None = None

    @property
    def active(self) -> bool:
        """True while a cooldown window is running."""
        return self._timer is not None

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    def _start_timer(self) -> None:
        """Start (or restart) the cooldown timer. Caller holds the lock."""
        if self._timer is not None:
            self._timer.cancel()
        self._generation += 1
        generation = self._generation
        self._timer = self._timer_factory(
            self.cooldown, lambda: self._on_timer(generation)
        )

    def _stop_timer(self) -> None:
        """Caller holds the lock."""
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._generation += 1

    def _set_pending(self, payload: Any) -> None:
        self._pending = payload
        self._has_pending = True

    def _take_pending(self) -> Any:
        payload = self._pending
        self._pending = None
        self._has_pending = False
        return payload

    def _on_timer(self, generation: int) -> None:
        raise NotImplementedError

    def _deliver(self, payload: Any, reason: str) -> None:
        with self._lock:
            self.sent_count += 1
            self.last_sent_at = self._clock()
        logger.debug(f"{self.name}: sending {reason} notification")
        try:
            self._send(payload)
        except Exception as e:
            logger.error(f"{self.name}: notification failed: {e}", exc_info=True)

    def cancel(self) -> None:
        """Stop the window and forget any pending resend."""
        with self._lock:
            if self._has_pending:
                logger.debug(f"{self.name}: cancelled pending resend")
            self._take_pending()
            self._stop_timer()


class PeriodicResendPolicy(_SuppressionPolicy):
    """Leading send plus one resend per elapsed window while triggers persist."""

    def trigger(self, payload: Any) -> bool:
        """
        Report one occurrence of the condition.

        Returns:
            True if a notification was sent immediately
        """
        with self._lock:
            if self._timer is None:
                self._start_timer()
                send_now = True
            else:
                self._set_pending(payload)
                send_now = False

        if send_now:
            self._deliver(payload, "leading")
        else:
            logger.debug(f"{self.name}: suppressed, resend due when window elapses")
        return send_now

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            if not self._has_pending:
                return
            payload = self._take_pending()
            self._start_timer()

        self._deliver(payload, "resend")


class LeadingDebouncePolicy(_SuppressionPolicy):
    """Leading send; repeated triggers push the deadline back; cancel re-arms."""

    def trigger(self, payload: Any) -> bool:
        """
        Report one occurrence of the condition.

        Returns:
            True if a notification was sent immediately
        """
        with self._lock:
            send_now = self._timer is None
            if not send_now:
                self._set_pending(payload)
            self._start_timer()

        if send_now:
            self._deliver(payload, "leading")
        else:
            logger.debug(f"{self.name}: suppressed, cooldown pushed back")
        return send_now

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            if not self._has_pending:
                return
            payload = self._take_pending()

        self._deliver(payload, "trailing")
