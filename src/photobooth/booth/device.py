"""Camera device adapters."""

import logging
import sys
from typing import Protocol

import cv2
import numpy as np
from PIL import Image

from photobooth.domain.errors import CaptureFailure, DeviceUnavailable

logger = logging.getLogger(__name__)


class CaptureDevice(Protocol):
    """Interface for a camera stream."""

    def dimensions(self) -> tuple[int, int] | None:
        """Return the native (width, height), or None when not ready."""

    def read_frame(self) -> Image.Image:
        """Return the current frame as an RGB image."""

    def close(self) -> None:
        """Release the underlying device."""


class OpenCvCaptureDevice:
    """Webcam read through OpenCV's ``VideoCapture``."""

    def __init__(self, capture: cv2.VideoCapture) -> None:
        self._capture = capture

    @classmethod
    def open(cls, device_index: int = 0) -> "OpenCvCaptureDevice":
        """Open a webcam, preferring DirectShow on Windows."""
        if sys.platform == "win32":
            capture = cv2.VideoCapture(device_index, cv2.CAP_DSHOW)
            if not capture.isOpened():
                capture = cv2.VideoCapture(device_index)
        else:
            capture = cv2.VideoCapture(device_index)
        if not capture.isOpened():
            capture.release()
            raise DeviceUnavailable(f"Cannot open camera device {device_index}")
        logger.info("Camera opened", extra={"device_index": device_index})
        return cls(capture)

    def dimensions(self) -> tuple[int, int] | None:
        width = int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if width <= 0 or height <= 0:
            return None
        return width, height

    def read_frame(self) -> Image.Image:
        try:
            ok, frame = self._capture.read()
            if not ok or frame is None:
                raise CaptureFailure("Camera returned no frame")
            rgb = cv2.cvtColor(np.asarray(frame), cv2.COLOR_BGR2RGB)
        except cv2.error as exc:
            raise CaptureFailure(f"Camera read failed: {exc}") from exc
        return Image.fromarray(rgb)

    def close(self) -> None:
        self._capture.release()
