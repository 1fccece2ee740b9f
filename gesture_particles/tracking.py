"""Hand landmark detection with MediaPipe's HandLandmarker (live stream mode)."""

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import cv2
import mediapipe as mp
from mediapipe.tasks.python import vision

from gesture_particles.util import data_files

logger = logging.getLogger(__name__)

HAND_LANDMARKER_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "hand_landmarker/hand_landmarker/float16/latest/hand_landmarker.task"
)

# Path to the hand landmarker model
hand_landmarker_path = str(data_files / 'hand_landmarker.task')

LandmarkList = List[Tuple[float, float, float]]


def first_hand_landmarks(result) -> Optional[LandmarkList]:
    """(x, y, z) landmarks of the first detected hand, or None if there's no hand.

    Other hands in the result are ignored.
    """
    if not result.hand_landmarks:
        return None
    return [(lm.x, lm.y, lm.z) for lm in result.hand_landmarks[0]]


class HandTracker:
    """
    Asynchronous hand landmark detection.

    Frames go in through `detect_async`; MediaPipe calls back (on its own thread,
    at its own pace) and `on_landmarks` receives the first hand's landmarks, or None.

    Attributes:
        max_hands (int): Maximum number of hands to detect.
        detection_con (float): Minimum detection confidence threshold.
        presence_con (float): Minimum hand presence confidence threshold.
        track_con (float): Minimum tracking confidence threshold.
    """

    def __init__(
        self,
        on_landmarks: Callable[[Optional[LandmarkList]], None],
        *,
        max_hands=2,
        detection_con=0.5,
        presence_con=0.5,
        track_con=0.5,
        model_path=hand_landmarker_path,
    ):
        if not Path(model_path).exists():
            raise FileNotFoundError(
                f"Missing hand landmarker model: {model_path}. "
                f"Download it from {HAND_LANDMARKER_URL}"
            )
        self.on_landmarks = on_landmarks
        self.max_hands = max_hands
        self.detection_con = detection_con
        self.presence_con = presence_con
        self.track_con = track_con
        self._last_timestamp_ms = -1

        options = vision.HandLandmarkerOptions(
            base_options=mp.tasks.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.LIVE_STREAM,
            num_hands=self.max_hands,
            min_hand_detection_confidence=self.detection_con,
            min_hand_presence_confidence=self.presence_con,
            min_tracking_confidence=self.track_con,
            result_callback=self.handle_result,
        )
        self.landmarker = vision.HandLandmarker.create_from_options(options)
        logger.info("Hand landmarker loaded from %s", model_path)

    def handle_result(self, result, output_image, timestamp_ms: int) -> None:
        """Result callback: forward the first hand's landmarks."""
        self.on_landmarks(first_hand_landmarks(result))

    def next_timestamp_ms(self) -> int:
        """Monotonic, strictly increasing, as live stream mode requires."""
        timestamp_ms = max(int(time.monotonic() * 1000), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def detect_async(self, img) -> None:
        """Submit a BGR frame for detection. Returns immediately."""
        img_rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=img_rgb)
        self.landmarker.detect_async(mp_image, self.next_timestamp_ms())

    def close(self) -> None:
        self.landmarker.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
