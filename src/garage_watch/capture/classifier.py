"""
Door classifier - runs an image classification model over a captured frame.

Uses an Ultralytics classification model (e.g. yolov8n-cls fine-tuned on
"open" / "closed" garage frames). The model is loaded on first use.
"""

import logging

import torch
from ultralytics import YOLO

from ..core.models import Observation
from ..exceptions import ClassificationError

logger = logging.getLogger(__name__)


class DoorClassifier:
    """Lazily-loaded classification model returning the top-1 class."""

    def __init__(self, model_path: str):
        if not model_path:
            raise ClassificationError("Model path must be provided")
        self.model_path = model_path
        self._model: YOLO | None = None
        self._device = "cuda" if torch.cuda.is_available() else "cpu"

    def _initialize_model(self) -> YOLO:
        if self._model is not None:
            return self._model

        try:
            model = YOLO(self.model_path, task="classify")
        except Exception as e:
            raise ClassificationError(f"Failed to load model {self.model_path}: {e}") from e

        logger.info(f"Model initialized: {self.model_path}")
        logger.info(f"Device: {self._device}, classes: {list(model.names.values())}")
        self._model = model
        return model

    def classify(self, image_path: str) -> Observation:
        """
        Classify a frame.

        Args:
            image_path: Path to the captured JPEG

        Returns:
            Observation with the top-1 label and its probability

        Raises:
            ClassificationError: If the model cannot load or produces no result
        """
        model = self._initialize_model()

        try:
            results = model.predict(image_path, device=self._device, verbose=False)
        except Exception as e:
            raise ClassificationError(f"Classification failed for {image_path}: {e}") from e

        if not results or results[0].probs is None:
            raise ClassificationError("Model returned no class probabilities")

        probs = results[0].probs
        label = results[0].names[int(probs.top1)]
        confidence = float(probs.top1conf)
        return Observation(label=label, confidence=confidence)
