"""
Test doubles: a manual clock with timers, recording notifiers and a scripted source.
"""

from src.garage_watch.core.models import Observation
from src.garage_watch.notifiers import Notifier


class _ManualTimer:
    def __init__(self, due, seq, callback):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualClock:
    """
    Deterministic wall clock.

    Doubles as a timer factory (call_later) and as the scheduler's wait():
    advancing time fires due timers in order.
    """

    def __init__(self, start=0.0):
        self.now = float(start)
        self._timers = []
        self._seq = 0

    def __call__(self):
        return self.now

    def call_later(self, delay, callback):
        self._seq += 1
        timer = _ManualTimer(self.now + delay, self._seq, callback)
        self._timers.append(timer)
        return timer

    def advance(self, seconds):
        self.advance_to(self.now + seconds)

    def advance_to(self, target):
        while True:
            due = [t for t in self._timers if not t.cancelled and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self._timers.remove(timer)
            self.now = max(self.now, timer.due)
            timer.callback()
        self.now = max(self.now, target)

    def wait(self, seconds):
        self.advance(seconds)
        return False

    @property
    def pending_timers(self):
        return [t for t in self._timers if not t.cancelled]


class RecordingNotifier(Notifier):
    """Keeps every notification with the clock time it was sent at."""

    def __init__(self, clock=None, succeed=True):
        self.sent = []
        self._clock = clock
        self._succeed = succeed

    @property
    def id(self):
        return "recording"

    def send(self, title, message, attachment=None, tags=()):
        at = self._clock() if self._clock else None
        self.sent.append(
            {"title": title, "message": message, "attachment": attachment, "at": at}
        )
        return self._succeed

    def titles(self):
        return [n["title"] for n in self.sent]


class FlakyNotifier(RecordingNotifier):
    """Raises on the first send, records every later one."""

    def __init__(self, clock=None):
        super().__init__(clock=clock)
        self.calls = 0

    def send(self, title, message, attachment=None, tags=()):
        self.calls += 1
        if self.calls == 1:
            raise ConnectionError("push service unreachable")
        return super().send(title, message, attachment, tags)


class ScriptedSource:
    """
    Plays back observations (or raises exceptions) one per classify call.

    capture() writes a small file so cleanup and frame copies have
    something real to work on.
    """

    def __init__(self, script, on_classify=None):
        self.script = list(script)
        self.captures = 0
        self.classifications = 0
        self._on_classify = on_classify

    def capture(self, camera_url, image_path):
        self.captures += 1
        with open(image_path, "wb") as f:
            f.write(b"\xff\xd8fake-jpeg\xff\xd9")

    def classify(self, image_path):
        self.classifications += 1
        if self._on_classify:
            self._on_classify(self.classifications)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        label, confidence = item
        return Observation(label=label, confidence=confidence)
