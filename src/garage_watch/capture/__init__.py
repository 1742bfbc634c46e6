"""
Observation source - camera frame capture and door classification.
"""

from .camera import capture_frame
from .classifier import DoorClassifier

__all__ = [
    "DoorClassifier",
    "capture_frame",
]
