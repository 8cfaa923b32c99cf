# smartqr/services/scanner.py
"""
QR decoding for still images and live camera capture.

``decode_image`` reads uploaded image bytes. ``ScanSession`` pulls frames from
a camera, reports the first decoded text once and then releases the camera.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

import cv2
import numpy as np

from ..core.errors import CameraPermissionError, CameraUnavailableError, ScanError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# QR DECODING
# ---------------------------------------------------------
def decode_frame(img: np.ndarray) -> List[str]:
    detector = cv2.QRCodeDetector()
    results: List[str] = []

    # Try Multi QR
    try:
        ok, data, points, _ = detector.detectAndDecodeMulti(img)
    except cv2.error:
        ok, data = False, None

    if ok and data:
        results = [txt.strip() for txt in data if txt]
        if results:
            return results

    # Single fallback
    try:
        txt, _, _ = detector.detectAndDecode(img)
    except cv2.error:
        txt = ""
    if txt:
        results.append(txt.strip())
    return results


def decode_image(image_bytes: bytes) -> List[str]:
    np_arr = np.frombuffer(image_bytes or b"", np.uint8)
    img = cv2.imdecode(np_arr, cv2.IMREAD_COLOR) if np_arr.size else None
    if img is None:
        raise ScanError()
    return decode_frame(img)


# ---------------------------------------------------------
# CAMERA SESSION
# ---------------------------------------------------------
def camera_error_from(exc: BaseException):
    """Map a camera failure to permission-denied vs. busy/unavailable."""
    text = str(exc).lower()
    if isinstance(exc, PermissionError) or "permission" in text or "notallowed" in text:
        return CameraPermissionError()
    return CameraUnavailableError()


class ScanSession:
    def __init__(
        self,
        on_success: Callable[[str], Any],
        camera_index: int = 0,
        capture_factory: Callable[[int], Any] = cv2.VideoCapture,
    ):
        self.on_success = on_success
        self.camera_index = camera_index
        self.capture_factory = capture_factory
        self.capture = None
        self.result: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.capture is not None

    def start(self) -> "ScanSession":
        if self.active:
            return self
        try:
            capture = self.capture_factory(self.camera_index)
        except Exception as e:
            logger.warning("[SCAN] unable to open camera %s: %s", self.camera_index, e)
            raise camera_error_from(e) from e
        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError()
        self.capture = capture
        logger.info("[SCAN] camera %s started", self.camera_index)
        return self

    def stop(self) -> None:
        if self.capture is None:
            return
        capture, self.capture = self.capture, None
        capture.release()
        logger.info("[SCAN] camera %s stopped", self.camera_index)

    def process_frame(self, frame) -> Optional[str]:
        if self.result is not None or frame is None:
            return None
        try:
            texts = decode_frame(frame)
        except (cv2.error, ValueError, TypeError):
            # a frame that fails to decode is normal while the code is out of focus
            return None
        if not texts:
            return None
        self.result = texts[0]
        self.stop()
        self.on_success(self.result)
        return self.result

    def run(self, max_frames: Optional[int] = None) -> Optional[str]:
        self.start()
        frames = 0
        try:
            while self.active and (max_frames is None or frames < max_frames):
                ok, frame = self.capture.read()
                frames += 1
                if not ok:
                    continue
                if self.process_frame(frame) is not None:
                    break
        finally:
            self.stop()
        return self.result

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
