"""
Pushover Notifier - Push notifications via pushover.net.

Sends a multipart form with optional image attachment.
See: https://pushover.net/api
"""

import logging
import os
from typing import Any

import requests

from . import DEFAULT_TIMEOUT, Notifier, with_retry

logger = logging.getLogger(__name__)

PUSHOVER_ENDPOINT = "https://api.pushover.net/1/messages.json"


class PushoverNotifier(Notifier):
    """
    Notifier that sends push notifications via Pushover.

    Config options:
        id: Notifier identifier
        type: "pushover"
        token: Application API token (required)
        user: User or group key (required)
        priority: Optional Pushover priority (-2 .. 2)
    """

    def __init__(self, config: dict[str, Any]):
        self._id = config["id"]
        self._token = config["token"]
        self._user = config["user"]
        self._priority = config.get("priority")
        self._timeout = DEFAULT_TIMEOUT

    @property
    def id(self) -> str:
        return self._id

    def _post(self, form: dict[str, str], attachment: str | None) -> requests.Response:
        if not attachment:
            return requests.post(PUSHOVER_ENDPOINT, data=form, timeout=self._timeout)

        with open(attachment, "rb") as f:
            files = {"attachment": (os.path.basename(attachment), f, "image/jpeg")}
            return requests.post(
                PUSHOVER_ENDPOINT, data=form, files=files, timeout=self._timeout
            )

    def send(self, title, message, attachment=None, tags=()) -> bool:
        """
        Send notification to Pushover.

        A missing attachment file is dropped rather than failing the send.

        Returns:
            True if Pushover accepted the message
        """
        form = {
            "token": self._token,
            "user": self._user,
            "title": title,
            "message": message,
        }
        if self._priority is not None:
            form["priority"] = str(self._priority)

        if attachment and not os.path.exists(attachment):
            logger.warning(f"Image file not found: {attachment}")
            attachment = None

        try:
            response = with_retry(lambda: self._post(form, attachment))
        except requests.RequestException as e:
            logger.error(f"Pushover send error: {e}")
            return False
        except OSError as e:
            logger.error(f"Pushover attachment error: {e}")
            return False

        if not response.ok:
            logger.warning(f"Pushover send failed: {response.status_code} {response.text[:100]}")
            return False

        logger.debug(f"Pushover notification sent: {title}")
        return True
