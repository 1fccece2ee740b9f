import pytest

from gesture_particles.util import HandLandmark, FINGER_JOINTS

WRIST = (0.5, 0.9, 0.0)
KNUCKLES = {
    'index': (0.42, 0.6, 0.0),
    'middle': (0.5, 0.58, 0.0),  # palm size: 0.32
    'ring': (0.58, 0.6, 0.0),
    'pinky': (0.65, 0.63, 0.0),
}
THUMB = [(0.42, 0.85, 0.0), (0.36, 0.78, 0.0), (0.32, 0.72, 0.0), (0.29, 0.66, 0.0)]

OPEN = 'open'  # tip far above the knuckle
HALF = 'half'  # tip above the mid joint, but only part way out
CLOSED = 'closed'  # tip folded back below the knuckle


def finger_points(knuckle, pose):
    """(pip, dip, tip) for a finger pointing up from `knuckle`."""
    x, y, z = knuckle
    if pose == OPEN:
        return (x, y - 0.12, z), (x, y - 0.24, z), (x, y - 0.34, z)
    if pose == HALF:
        return (x, y - 0.1, z), (x, y - 0.18, z), (x, y - 0.24, z)
    return (x, y - 0.06, z), (x, y - 0.02, z), (x, y + 0.05, z)


def make_hand(**poses):
    """21 landmarks; fingers not mentioned are closed.

    >>> len(make_hand(index=OPEN))
    21
    """
    landmarks = [None] * 21
    landmarks[HandLandmark.WRIST] = WRIST
    landmarks[1:5] = THUMB
    for finger, (tip, pip, mcp) in FINGER_JOINTS.items():
        pip_point, dip_point, tip_point = finger_points(
            KNUCKLES[finger], poses.get(finger, CLOSED)
        )
        landmarks[mcp] = KNUCKLES[finger]
        landmarks[pip] = pip_point
        landmarks[pip + 1] = dip_point
        landmarks[tip] = tip_point
    return landmarks


@pytest.fixture
def open_hand():
    return make_hand(index=OPEN, middle=OPEN, ring=OPEN, pinky=OPEN)


@pytest.fixture
def fist():
    return make_hand()


@pytest.fixture(name='make_hand')
def make_hand_fixture():
    return make_hand
