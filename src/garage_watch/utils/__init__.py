"""
Utility modules for constants and the local broadcast transport.
"""

from .constants import (
    DEFAULT_BROADCAST_HOST,
    DEFAULT_BROADCAST_PORT,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_IMAGE_PATH,
    DEFAULT_MAX_RETRIES,
)

__all__ = [
    "DEFAULT_BROADCAST_HOST",
    "DEFAULT_BROADCAST_PORT",
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "DEFAULT_IMAGE_PATH",
    "DEFAULT_MAX_RETRIES",
]
