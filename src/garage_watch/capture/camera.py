"""
Frame capture - grabs a single frame from the camera stream.
"""

import logging
import os

# RTSP over TCP; UDP drops packets on busy Wi-Fi and yields smeared frames
os.environ.setdefault("OPENCV_FFMPEG_CAPTURE_OPTIONS", "rtsp_transport;tcp")

import cv2

from ..exceptions import CaptureError

logger = logging.getLogger(__name__)


def capture_frame(camera_url: str, image_path: str) -> str:
    """
    Capture one frame from the stream and write it as a JPEG.

    Args:
        camera_url: Stream URL (rtsp://, http://, or device path)
        image_path: Destination file, overwritten if present

    Returns:
        The image path

    Raises:
        CaptureError: If the stream cannot be opened, read, or the frame written
    """
    if not camera_url:
        raise CaptureError("Camera URL is empty")
    if not image_path:
        raise CaptureError("Image path is empty")

    cap = cv2.VideoCapture(camera_url)
    try:
        if not cap.isOpened():
            raise CaptureError(f"Cannot connect to camera: {camera_url}")

        ret, frame = cap.read()
        if not ret or frame is None:
            raise CaptureError(f"Failed to read frame from camera: {camera_url}")

        if not cv2.imwrite(image_path, frame):
            raise CaptureError(f"Failed to write frame to {image_path}")

        logger.debug(f"Captured frame {frame.shape[1]}x{frame.shape[0]} -> {image_path}")
        return image_path
    finally:
        cap.release()
