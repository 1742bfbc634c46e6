"""
Frame file handling - keeping low-confidence frames and removing the capture.
"""

import logging
import os
import re
import shutil
from datetime import datetime

from .models import DoorReading

logger = logging.getLogger(__name__)


def _safe_label(label: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "_", label).strip("_") or "unknown"


def save_low_confidence_frame(
    image_path: str, dest_dir: str, reading: DoorReading
) -> str | None:
    """
    Copy a frame the model was unsure about, for retraining later.

    Args:
        image_path: Captured frame
        dest_dir: Directory collecting low-confidence frames
        reading: The low-confidence reading (label and score go in the name)

    Returns:
        Path of the saved copy, or None if it could not be saved
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    filename = (
        f"low-score-{_safe_label(reading.label)}-"
        f"{reading.confidence_percent}-{timestamp}.jpg"
    )
    dest_path = os.path.join(dest_dir, filename)

    try:
        os.makedirs(dest_dir, exist_ok=True)
        shutil.copy2(image_path, dest_path)
        return dest_path
    except OSError as e:
        logger.warning(f"Failed to save low-confidence frame: {e}")
        return None


def delete_frame(image_path: str) -> bool:
    """
    Remove the captured frame. Best-effort: never raises.

    Returns:
        True if a file was removed
    """
    try:
        os.remove(image_path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Failed to delete frame {image_path}: {e}")
        return False
