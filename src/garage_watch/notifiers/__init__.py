"""
Notifiers - Pluggable push notification backends.

Provides a common interface for different notification services:
- pushover: Push notifications via pushover.net (with image attachment)
- ntfy: Push notifications via ntfy.sh
- log: Fallback that only logs, used when nothing is configured

Transport failures never raise: they are logged and send() returns False.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

import requests

logger = logging.getLogger(__name__)

# Retry configuration
DEFAULT_MAX_RETRIES = 2
DEFAULT_BASE_DELAY = 1.0  # seconds
DEFAULT_TIMEOUT = 10  # seconds


@dataclass(frozen=True)
class Alert:
    """
    A notification ready to send.

    Attributes:
        title: Short headline
        message: Body text
        attachment: Optional path to an image to attach
        tags: Backend hints (ntfy renders known tags as emoji)
    """

    title: str
    message: str
    attachment: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)


def with_retry(
    func: Callable[[], requests.Response],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
) -> requests.Response:
    """
    Execute a request function with exponential backoff retry.

    Retries on transient network errors (timeout, connection error) and 5xx.
    Does NOT retry on 4xx client errors (bad token, unknown user, etc).

    Args:
        func: Callable that performs the request and returns Response
        max_retries: Maximum number of retry attempts (default: 2)
        base_delay: Initial delay in seconds, doubles each retry (default: 1.0)

    Returns:
        The last Response object

    Raises:
        requests.RequestException: If all retries exhausted on network errors
    """
    for attempt in range(max_retries + 1):
        try:
            response = func()
            if response.status_code < 500 or attempt >= max_retries:
                return response
            delay = base_delay * (2**attempt)
            logger.warning(
                f"Server error {response.status_code}, retry {attempt + 1}/{max_retries} in {delay}s"
            )
            time.sleep(delay)

        except (requests.Timeout, requests.ConnectionError) as e:
            if attempt >= max_retries:
                raise
            delay = base_delay * (2**attempt)
            logger.warning(
                f"Network error, retry {attempt + 1}/{max_retries} in {delay}s: {e}"
            )
            time.sleep(delay)

    raise requests.RequestException("Retry exhausted")


class Notifier(ABC):
    """
    Abstract base class for notification backends.

    All notifiers implement `send`, which receives a title, a message and
    an optional image path, and reports whether delivery succeeded.
    """

    @abstractmethod
    def send(
        self,
        title: str,
        message: str,
        attachment: str | None = None,
        tags: tuple[str, ...] = (),
    ) -> bool:
        """
        Send a notification.

        Args:
            title: Notification title
            message: Notification body
            attachment: Optional path to image file to attach
            tags: Optional backend hints

        Returns:
            True if notification was sent successfully
        """
        pass

    @property
    @abstractmethod
    def id(self) -> str:
        """Return the notifier ID from config."""
        pass

    def send_alert(self, alert: Alert) -> bool:
        return self.send(alert.title, alert.message, alert.attachment, alert.tags)


class LogNotifier(Notifier):
    """Notifier that only writes to the log."""

    def __init__(self, notifier_id: str = "log"):
        self._id = notifier_id

    @property
    def id(self) -> str:
        return self._id

    def send(self, title, message, attachment=None, tags=()) -> bool:
        suffix = f" [{attachment}]" if attachment else ""
        logger.info(f"Notification: {title} - {message}{suffix}")
        return True


class MultiNotifier(Notifier):
    """Fans a notification out to several backends."""

    def __init__(self, notifiers: list[Notifier]):
        self._notifiers = list(notifiers)

    @property
    def id(self) -> str:
        return "+".join(n.id for n in self._notifiers) or "none"

    def __len__(self) -> int:
        return len(self._notifiers)

    def send(self, title, message, attachment=None, tags=()) -> bool:
        """Returns True only if every backend succeeded."""
        success = True
        for notifier in self._notifiers:
            try:
                if not notifier.send(title, message, attachment, tags):
                    logger.warning(f"Notification failed for {notifier.id}")
                    success = False
            except Exception as e:
                logger.error(f"Notifier {notifier.id} error: {e}")
                success = False
        return success


def create_notifier(config: dict[str, Any]) -> Notifier:
    """
    Factory function to create a notifier from config.

    Args:
        config: Notifier configuration dict with 'type' field

    Returns:
        Configured Notifier instance

    Raises:
        ValueError: If notifier type is unknown
    """
    notifier_type = config.get("type")

    if notifier_type == "pushover":
        from .pushover import PushoverNotifier

        return PushoverNotifier(config)

    elif notifier_type == "ntfy":
        from .ntfy import NtfyNotifier

        return NtfyNotifier(config)

    else:
        raise ValueError(f"Unknown notifier type: {notifier_type}")


def create_notifiers(configs: list[dict[str, Any]]) -> MultiNotifier:
    """
    Create the configured notifiers, falling back to logging only.

    Args:
        configs: List of notifier configurations

    Returns:
        A MultiNotifier over every backend that could be created
    """
    notifiers: list[Notifier] = []
    for config in configs:
        try:
            notifier = create_notifier(config)
            notifiers.append(notifier)
            logger.debug(f"Created notifier: {notifier.id} ({config.get('type')})")
        except Exception as e:
            logger.error(f"Failed to create notifier {config.get('id')}: {e}")

    if not notifiers:
        logger.warning("No push notifier configured, alerts will only be logged")
        notifiers.append(LogNotifier())

    return MultiNotifier(notifiers)


__all__ = [
    "Alert",
    "LogNotifier",
    "MultiNotifier",
    "Notifier",
    "create_notifier",
    "create_notifiers",
    "with_retry",
]
