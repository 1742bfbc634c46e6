"""
Confidence gate - splits readings into confident and low-confidence.
"""

from .models import DoorReading


def is_low_confidence(reading: DoorReading, threshold: int) -> bool:
    """
    Check whether a reading falls below the confidence threshold.

    Args:
        reading: Door reading with a whole-percent confidence
        threshold: Minimum confidence percent (0-100) to trust a reading

    Returns:
        True if the reading should take the diagnostic path
    """
    return reading.confidence_percent < threshold


def is_confident(reading: DoorReading, threshold: int) -> bool:
    return not is_low_confidence(reading, threshold)
