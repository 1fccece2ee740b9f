"""Shared gesture and text state.

The detector's result callback writes it (from MediaPipe's thread) and the render
loop reads it once per tick. There is no locking: every write replaces whole
references, the last write wins, and a tick may see a slightly stale sample.
"""

from typing import Dict, Mapping, Optional, Sequence

from gesture_particles.hand_features import GestureSample, NO_HAND
from gesture_particles.util import format_float

DFLT_TEXT_MAP = {1: "HELLO", 2: "FUTURE", 3: "WORLD"}
DFLT_INITIAL_TEXT = "HELLO"
INITIAL_STATUS = "Initializing..."

text_maps = {
    "hello_future_world": DFLT_TEXT_MAP,
    "count": {1: "ONE", 2: "TWO", 3: "THREE", 4: "FOUR"},
}


class GestureState:
    """
    Latest gesture sample and the text it selected.

    Attributes:
        sample (GestureSample): The last published sample.
        text (str): The active text.
        landmarks: Landmarks of the last published hand, or None.
        status_text (str): Status line for display.
    """

    def __init__(
        self,
        *,
        text_map: Mapping[int, str] = DFLT_TEXT_MAP,
        initial_text: str = DFLT_INITIAL_TEXT,
    ):
        self.text_map = dict(text_map)
        self.sample = NO_HAND
        self.text = initial_text
        self.landmarks = None
        self.status_text = INITIAL_STATUS

    def publish(
        self, sample: GestureSample, landmarks: Optional[Sequence] = None
    ) -> None:
        """Record a new sample; a finger count found in the text map switches text."""
        text = self.text_map.get(sample.finger_count)
        if text is not None:
            self.text = text
        self.sample = sample
        self.landmarks = landmarks
        self.status_text = sample.status_text

    @property
    def finger_count(self) -> int:
        return self.sample.finger_count

    @property
    def grip_strength(self) -> float:
        return self.sample.grip_strength

    def overlay_fields(self) -> Dict[str, str]:
        """The values the UI shows, as display strings."""
        sample = self.sample
        return {
            "Debug Status": self.status_text,
            "Detected Fingers": str(sample.finger_count),
            "Grip Strength": format_float(sample.grip_strength),
            "Current Text": self.text,
        }
