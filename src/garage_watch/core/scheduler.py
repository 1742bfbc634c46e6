"""
Poll scheduler - the capture, classify, decide, notify, clean up loop.

One thread drives every cycle to completion before the next starts, so the
EngineState is never touched by two cycles at once. Each cycle body is
retried with exponential backoff; when every attempt fails the last error
goes out through the throttled error alert. The captured frame is removed
exactly once per cycle, whatever happened.
"""

import logging
import threading
import time
from typing import Any, Callable

from ..config.durations import format_duration
from ..notifiers import Alert, Notifier
from ..utils.constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_LOW_CONFIDENCE_DIR,
    DEFAULT_MAX_RETRIES,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
)
from .broadcaster import StateBroadcaster
from .confidence import is_low_confidence
from .door_state import DoorStateMachine
from .frame_store import delete_frame, save_low_confidence_frame
from .models import CycleResult, CycleStatus, DoorReading, EngineState, Observation, StateChange
from .suppression import (
    LeadingDebouncePolicy,
    PeriodicResendPolicy,
    TimerFactory,
    start_thread_timer,
)

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_TITLE = "I am not sure..."
ERROR_TITLE = "application error"


class PollScheduler:
    """
    Drives poll cycles and owns the engine state.

    Collaborators are injected so the whole engine runs without a camera,
    a model or the network:

        capture(camera_url, image_path)  -> writes a frame, raises on failure
        classify(image_path)             -> Observation, raises on failure
        notifier                         -> push notifications
        broadcaster                      -> local subscribers
    """

    def __init__(
        self,
        *,
        camera_url: str,
        image_path: str,
        capture: Callable[[str, str], Any],
        classify: Callable[[str], Observation],
        notifier: Notifier,
        broadcaster: StateBroadcaster | None = None,
        poll_interval: float = 30.0,
        confidence_threshold: int = DEFAULT_CONFIDENCE_THRESHOLD,
        grace_period: float | None = None,
        cooldown: float = 600.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_base_delay: float = RETRY_BASE_DELAY,
        low_confidence_dir: str = DEFAULT_LOW_CONFIDENCE_DIR,
        state: EngineState | None = None,
        clock: Callable[[], float] = time.time,
        timer_factory: TimerFactory = start_thread_timer,
        wait: Callable[[float], bool] | None = None,
        cleanup: Callable[[str], Any] = delete_frame,
    ):
        self.camera_url = camera_url
        self.image_path = image_path
        self.poll_interval = poll_interval
        self.confidence_threshold = confidence_threshold
        self.max_retries = max(1, max_retries)
        self.retry_base_delay = retry_base_delay
        self.low_confidence_dir = low_confidence_dir
        self.state = state or EngineState()
        self.door = DoorStateMachine(grace_period)
        self.broadcaster = broadcaster or StateBroadcaster()

        self._capture = capture
        self._classify = classify
        self._notifier = notifier
        self._clock = clock
        self._cleanup = cleanup

        self._stop = threading.Event()
        # wait(seconds) returns True when the loop should stop
        self._wait = wait or self._stop.wait

        # Resends run on timer threads, so the policies only ever call the notifier
        self.low_confidence_policy = LeadingDebouncePolicy(
            "low-confidence", cooldown, self._notifier.send_alert, timer_factory, clock
        )
        self.error_policy = PeriodicResendPolicy(
            "error", cooldown, self._notifier.send_alert, timer_factory, clock
        )

    @classmethod
    def from_config(cls, config, **collaborators) -> "PollScheduler":
        """Build a scheduler from a validated Config plus injected collaborators."""
        return cls(
            camera_url=config.camera.url,
            image_path=config.camera.image_path,
            poll_interval=config.polling.interval,
            max_retries=config.polling.max_retries,
            confidence_threshold=config.decision.confidence_threshold,
            grace_period=config.decision.grace_period,
            cooldown=config.notifications.cooldown,
            low_confidence_dir=config.storage.low_confidence_dir,
            **collaborators,
        )

    # Loop

    def run_forever(self) -> None:
        """Run a cycle now, then one every poll interval until stop() is called."""
        logger.info(
            f"Watching {self.camera_url} every {format_duration(self.poll_interval)} "
            f"(threshold {self.confidence_threshold}%, "
            f"grace {format_duration(self.door.grace_period) if self.door.grace_enabled else 'off'})"
        )
        try:
            while not self._stop.is_set():
                self.run_cycle()
                if self._stop.is_set():
                    break
                logger.info(f"Checking again in {format_duration(self.poll_interval)}")
                if self._wait(self.poll_interval):
                    break
        finally:
            self.shutdown()

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle. Never interrupts a cycle."""
        self._stop.set()

    def shutdown(self) -> None:
        """Cancel pending suppression timers."""
        self.low_confidence_policy.cancel()
        self.error_policy.cancel()
        logger.info("Scheduler stopped")

    # Cycle

    def run_cycle(self) -> CycleResult:
        """
        Run one complete cycle: retried body, error alert on failure, cleanup.

        Never raises.
        """
        try:
            result = self._run_with_retry()
            if not result.ok:
                if self._stop.is_set():
                    logger.info(f"Stopping, not alerting on last error: {result.error}")
                else:
                    self._report_error(result.error)
            return result
        except Exception as e:
            # Failure inside error reporting itself; keep the loop alive
            logger.error(f"Unexpected cycle error: {e}", exc_info=True)
            return CycleResult(CycleStatus.FAILED, error=e)
        finally:
            try:
                self._cleanup(self.image_path)
            except Exception as e:
                logger.warning(f"Frame cleanup failed: {e}")

    def _run_with_retry(self) -> CycleResult:
        last_error: Exception | None = None

        for attempt in range(1, self.max_retries + 1):
            try:
                result = self._attempt()
                result.attempts = attempt
                return result
            except Exception as e:
                last_error = e
                logger.warning(f"Cycle attempt {attempt}/{self.max_retries} failed: {e}")

            if attempt < self.max_retries:
                delay = min(self.retry_base_delay * (2 ** (attempt - 1)), RETRY_MAX_DELAY)
                if delay > 0 and self._wait(delay):
                    logger.info("Stop requested during retry backoff")
                    return CycleResult(CycleStatus.FAILED, error=last_error, attempts=attempt)

        logger.error(f"Cycle failed after {self.max_retries} attempts: {last_error}")
        return CycleResult(CycleStatus.FAILED, error=last_error, attempts=self.max_retries)

    def _attempt(self) -> CycleResult:
        self._capture(self.camera_url, self.image_path)
        observation = self._classify(self.image_path)
        reading = DoorReading.from_observation(observation)

        if is_low_confidence(reading, self.confidence_threshold):
            self._handle_low_confidence(reading)
            return CycleResult(CycleStatus.LOW_CONFIDENCE, reading=reading)

        event = self._handle_confident(reading)
        logger.info(
            f"I have {reading.confidence_percent}% confidence the garage door is "
            f"{reading.friendly_state} (class: {reading.label})"
        )
        return CycleResult(CycleStatus.CONFIDENT, reading=reading, event=event)

    # Decision paths

    def _handle_low_confidence(self, reading: DoorReading) -> None:
        saved_path = save_low_confidence_frame(
            self.image_path, self.low_confidence_dir, reading
        )
        where = f"Saved image to {saved_path}" if saved_path else "Could not save image"
        message = (
            f"Detected low confidence score of {reading.confidence_percent}% "
            f"({reading.label}). {where}"
        )
        logger.info(message)
        # Attach the kept copy: a delayed resend outlives the captured frame
        sent = self.low_confidence_policy.trigger(
            Alert(LOW_CONFIDENCE_TITLE, message, attachment=saved_path, tags=("shrug",))
        )
        if sent:
            self.state.last_low_confidence_alert_at = self._clock()

    def _handle_confident(self, reading: DoorReading) -> StateChange | None:
        # Confidence is back, so the next unsure burst should alert right away
        self.low_confidence_policy.cancel()

        event = self.door.observe(reading, self.state, self._clock())
        if event is not None:
            self._announce(event)
        elif not self.state.grace_active:
            self.broadcaster.seed(reading.is_closed)
        return event

    def _announce(self, event: StateChange) -> None:
        """State changes are already deduplicated, so they are never rate limited."""
        self.broadcaster.publish(event.is_closed)

        reading = event.reading
        message = f"Score: {reading.confidence_percent}% ({reading.label})"
        if event.confirmed_after_grace:
            message += f", open for over {format_duration(self.door.grace_period)}"

        logger.info("sending notification")
        # Must not raise: observe() has already recorded this change
        try:
            self._notifier.send_alert(
                Alert(
                    f"Garage Door is {reading.friendly_state}",
                    message,
                    attachment=self.image_path,
                    tags=() if event.is_closed else ("warning",),
                )
            )
        except Exception as e:
            logger.error(f"State change notification failed: {e}", exc_info=True)

    def _report_error(self, error: Exception | None) -> None:
        message = str(error) if error is not None else "unknown error"
        if not message and error is not None:
            message = type(error).__name__
        if self.error_policy.trigger(Alert(ERROR_TITLE, message, tags=("warning",))):
            self.state.last_error_alert_at = self._clock()
