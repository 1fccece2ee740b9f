"""Gesture quantification: finger count and grip strength from hand landmarks."""

from dataclasses import dataclass, asdict
from typing import Optional, Sequence, Dict

from gesture_particles.geometry import Point, landmark_distance, planar, clamp
from gesture_particles.util import HandLandmark, FINGER_JOINTS, format_status

NO_HAND_STATUS = "No hands detected"

# Curl mapping: curl = (1 - tip_to_mcp / palm_size) * slope, clamped to [0, 1].
# Empirical calibration: a ratio of 1 reads as open, 1 - 1/slope as closed.
DFLT_CURL_SLOPE = 2.0

Landmarks = Sequence[Point]


@dataclass(frozen=True)
class GestureSample:
    """What one frame's hand says: fingers held up, and how closed the fist is."""

    finger_count: int = 0
    grip_strength: float = 0.0
    status_text: str = NO_HAND_STATUS


NO_HAND = GestureSample()


# -------------------------------------------------------------------------------
# Hand feature extraction
# -------------------------------------------------------------------------------


def finger_is_extended(landmarks: Landmarks, finger: str) -> bool:
    """A finger is up when its tip is above its mid joint (image y grows downward).

    Only holds for an upright hand facing the camera.
    """
    tip, pip, _ = FINGER_JOINTS[finger]
    return landmarks[tip][1] < landmarks[pip][1]


def count_fingers(landmarks: Landmarks) -> int:
    """Number of extended non-thumb fingers (0 to 4)."""
    return sum(finger_is_extended(landmarks, finger) for finger in FINGER_JOINTS)


def palm_size(landmarks: Landmarks) -> float:
    """Wrist to middle finger knuckle, the scale reference for curl ratios."""
    return landmark_distance(
        planar(landmarks[HandLandmark.WRIST]),
        planar(landmarks[HandLandmark.MIDDLE_FINGER_MCP]),
    )


def finger_curls(
    landmarks: Landmarks, *, curl_slope: float = DFLT_CURL_SLOPE
) -> Dict[str, float]:
    """
    Curl of each non-thumb finger, in [0, 1].

    The tip-to-knuckle distance, relative to the palm size, is close to 1 for a
    stretched finger and shrinks as the finger folds into the palm.

    A degenerate hand (wrist on the middle knuckle) has no scale: every curl is 0.
    """
    palm = palm_size(landmarks)
    if palm == 0:
        return dict.fromkeys(FINGER_JOINTS, 0.0)
    curls = {}
    for finger, (tip, _, mcp) in FINGER_JOINTS.items():
        ratio = landmark_distance(planar(landmarks[tip]), planar(landmarks[mcp])) / palm
        curls[finger] = clamp((1.0 - ratio) * curl_slope, 0.0, 1.0)
    return curls


def grip_strength(landmarks: Landmarks, *, curl_slope: float = DFLT_CURL_SLOPE) -> float:
    """Mean finger curl: about 0 for an open hand, about 1 for a fist."""
    curls = finger_curls(landmarks, curl_slope=curl_slope)
    return sum(curls.values()) / len(curls)


def quantify(
    landmarks: Optional[Landmarks], *, curl_slope: float = DFLT_CURL_SLOPE
) -> GestureSample:
    """
    Compute the gesture sample of one hand.

    Args:
        landmarks: The 21 landmarks of the first detected hand, or None if no hand
            was detected.
        curl_slope: Slope of the tip-distance to curl mapping.

    Returns:
        GestureSample: finger count, grip strength and a status line.
    """
    if landmarks is None:
        return NO_HAND
    n_fingers = count_fingers(landmarks)
    grip = grip_strength(landmarks, curl_slope=curl_slope)
    return GestureSample(
        finger_count=n_fingers,
        grip_strength=grip,
        status_text=format_status(n_fingers, grip),
    )


def gesture_features(sample: GestureSample) -> dict:
    """The sample as a plain (json-friendly) dict."""
    return asdict(sample)


# Dictionary of available gesture quantifiers
gesture_quantifiers = {
    "quantify": quantify,
}
