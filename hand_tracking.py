"""
Hand tracking source (MediaPipe Tasks API)

Pinch the index finger and thumb together to put the pen down; the index
fingertip is the pen. Anything else (no hand, open hand, no frame) is
reported as tracking loss.
"""

import os
import urllib.request
from typing import Callable, Optional

import cv2
import numpy as np

import config
from geometry import Point3
from logging_config import get_logger

logger = get_logger("hand_tracking")

# detect(rgb_frame, timestamp_ms) -> HandLandmarkerResult-like object
Detector = Callable[[np.ndarray, int], object]


def ensure_model(path: str = config.HAND_LANDMARKER_MODEL_PATH,
                 url: str = config.HAND_LANDMARKER_MODEL_URL) -> str:
    """Download the hand_landmarker model if it is not on disk yet."""
    if os.path.exists(path):
        return path
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    logger.info("Downloading hand_landmarker model to %s", path)
    urllib.request.urlretrieve(url, path)
    return path


def create_hand_landmarker(model_path: str = config.HAND_LANDMARKER_MODEL_PATH) -> Detector:
    """Build a MediaPipe HandLandmarker in VIDEO mode and return its detect call."""
    import mediapipe as mp
    from mediapipe.tasks import python
    from mediapipe.tasks.python import vision

    base_options = python.BaseOptions(model_asset_path=ensure_model(model_path))
    options = vision.HandLandmarkerOptions(
        base_options=base_options,
        num_hands=1,
        min_hand_detection_confidence=config.HAND_DETECTION_CONFIDENCE,
        min_hand_presence_confidence=config.HAND_TRACKING_CONFIDENCE,
        running_mode=vision.RunningMode.VIDEO,
    )
    landmarker = vision.HandLandmarker.create_from_options(options)

    def detect(rgb: np.ndarray, timestamp_ms: int):
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        return landmarker.detect_for_video(mp_image, timestamp_ms)

    return detect


class HandTrackingSource:
    """Tracking source backed by a camera and a hand landmark detector."""

    def __init__(
        self,
        capture,
        detect: Detector,
        pinch_threshold: float = config.PINCH_THRESHOLD_NORM,
        mirror: bool = True,
        frame_interval_ms: int = 1000 // config.CAMERA_FPS,
    ):
        self.capture = capture  # cv2.VideoCapture or anything with read()
        self.detect = detect
        self.pinch_threshold = pinch_threshold
        self.mirror = mirror
        self.frame_interval_ms = frame_interval_ms
        self.frame_count = 0
        self.last_frame = None
        self.pen_down = False

    def get_position(self) -> Optional[Point3]:
        ret, frame = self.capture.read()
        if not ret or frame is None:
            self.last_frame = None
            self._set_pen(False)
            return None

        if self.mirror:
            frame = cv2.flip(frame, 1)
        self.last_frame = frame
        return self.process_frame(frame)

    def process_frame(self, frame: np.ndarray) -> Optional[Point3]:
        """Index fingertip position if the pinch is held, else None."""
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

        # Detector needs strictly increasing timestamps
        self.frame_count += 1
        result = self.detect(rgb, self.frame_count * self.frame_interval_ms)

        hands = getattr(result, "hand_landmarks", None)
        if not hands:
            self._set_pen(False)
            return None

        hand_lms = hands[0]
        tip = hand_lms[config.INDEX_FINGER_TIP]
        thumb = hand_lms[config.THUMB_TIP]
        pinch_dist = np.hypot(tip.x - thumb.x, tip.y - thumb.y)

        if pinch_dist >= self.pinch_threshold:
            self._set_pen(False)
            return None

        self._set_pen(True)
        return Point3(float(tip.x), float(tip.y), float(tip.z))

    def _set_pen(self, down: bool):
        if down != self.pen_down:
            logger.debug("Pen %s", "down" if down else "up")
        self.pen_down = down

    def release(self):
        if hasattr(self.capture, "release"):
            self.capture.release()
