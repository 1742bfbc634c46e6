"""
ntfy.sh Notifier - Push notifications via ntfy.sh service.

Sends notifications to ntfy.sh topics with optional image attachments.
See: https://ntfy.sh/
"""

import logging
import os
from datetime import datetime
from typing import Any

import requests

from . import DEFAULT_TIMEOUT, Notifier, with_retry

logger = logging.getLogger(__name__)

# ntfy.sh API endpoint
NTFY_BASE_URL = "https://ntfy.sh"


class NtfyNotifier(Notifier):
    """
    Notifier that sends push notifications via ntfy.sh.

    Config options:
        id: Notifier identifier
        type: "ntfy"
        topic: ntfy topic name (required)
        server: Self-hosted server URL (default https://ntfy.sh)
        priority: min/low/default/high/urgent
    """

    def __init__(self, config: dict[str, Any]):
        self._id = config["id"]
        self._topic = config["topic"]
        self._priority = config.get("priority") or "default"
        self._timeout = DEFAULT_TIMEOUT

        server = (config.get("server") or NTFY_BASE_URL).rstrip("/")
        self._url = f"{server}/{self._topic}"
        logger.debug(f"NtfyNotifier initialized: {self._id} -> {self._topic}")

    @property
    def id(self) -> str:
        return self._id

    def send(self, title, message, attachment=None, tags=()) -> bool:
        """
        Send notification to ntfy.

        With an attachment the image is the request body and the text rides
        in the Message header; otherwise the text is the body.

        Returns:
            True if notification was sent successfully
        """
        headers = {"Title": title, "Priority": self._priority}
        if tags:
            headers["Tags"] = ",".join(tags)

        if attachment and not os.path.exists(attachment):
            logger.warning(f"Image file not found: {attachment}")
            attachment = None

        try:
            if attachment:
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                headers["Filename"] = f"garage_{timestamp}.jpg"
                # Header values must be single-line
                headers["Message"] = message.replace("\n", " ")
                with open(attachment, "rb") as f:
                    body = f.read()
            else:
                body = message.encode("utf-8")

            response = with_retry(
                lambda: requests.post(
                    self._url, data=body, headers=headers, timeout=self._timeout
                )
            )
        except requests.RequestException as e:
            logger.error(f"ntfy send error: {e}")
            return False
        except OSError as e:
            logger.error(f"ntfy attachment error: {e}")
            return False

        if not response.ok:
            logger.warning(f"ntfy send failed: {response.status_code} {response.text}")
            return False

        logger.debug(f"ntfy notification sent to {self._topic}")
        return True
