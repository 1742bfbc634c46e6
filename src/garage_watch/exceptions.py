"""
Exception hierarchy for the garage door watcher.
"""


class GarageWatchError(Exception):
    """Base class for all garage watch errors."""


class CaptureError(GarageWatchError):
    """Raised when a frame cannot be grabbed from the camera stream."""


class ClassificationError(GarageWatchError):
    """Raised when the model cannot be loaded or cannot classify a frame."""


class StartupError(GarageWatchError):
    """Raised when a startup precondition fails. Fatal: the loop never starts."""


class ConfigValidationError(GarageWatchError):
    """Raised when config validation fails."""
