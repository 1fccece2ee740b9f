"""Utils for gesture_particles."""

import json
from logging.config import dictConfig
from importlib.resources import files
from typing import TypeVar, Dict, Union

pkg_name = 'gesture_particles'
data_files = files(pkg_name) / 'data'

T = TypeVar('T')


def return_none(*args, **kwargs):
    """
    An empty function that returns None no matter the arguments.
    Often used as a "do nothing" general callback function.
    """
    return None


# --------------------------------------------------------------------------------------
# Constants


class HandLandmark:
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# (tip, pip, mcp) for the four non-thumb fingers
FINGER_JOINTS = {
    'index': (
        HandLandmark.INDEX_FINGER_TIP,
        HandLandmark.INDEX_FINGER_PIP,
        HandLandmark.INDEX_FINGER_MCP,
    ),
    'middle': (
        HandLandmark.MIDDLE_FINGER_TIP,
        HandLandmark.MIDDLE_FINGER_PIP,
        HandLandmark.MIDDLE_FINGER_MCP,
    ),
    'ring': (
        HandLandmark.RING_FINGER_TIP,
        HandLandmark.RING_FINGER_PIP,
        HandLandmark.RING_FINGER_MCP,
    ),
    'pinky': (
        HandLandmark.PINKY_TIP,
        HandLandmark.PINKY_PIP,
        HandLandmark.PINKY_MCP,
    ),
}


# --------------------------------------------------------------------------------------
# String utils


def format_float(value, ndigits=2):
    """
    >>> format_float(0.12345)
    '0.12'
    >>> format_float(1, ndigits=3)
    '1.000'
    """
    return f"{value:.{ndigits}f}"


def format_status(finger_count, grip_strength):
    """
    The status line shown while a hand is tracked.

    >>> format_status(2, 0.456)
    'Hand! Fingers: 2, Grip: 0.46'
    """
    return f"Hand! Fingers: {finger_count}, Grip: {format_float(grip_strength)}"


# --------------------------------------------------------------------------------------
# Object resolution


def resolve_object(
    obj: Union[str, T],
    *,
    object_map: Dict[str, T],
    expected_type: type = None,
    error_message: str = None,
) -> T:
    """
    Resolves an object by either returning it directly if it's of the correct type,
    or looking it up in a mapping if it's a string.

    Args:
        obj: The object to resolve. Can be a string (to be looked up in object_map)
             or the object itself (if it's already of type T).
        object_map: A dictionary mapping strings to objects of type T.
        expected_type: (Optional) The expected type of the resolved object.
        error_message: (Optional) A custom error message for raised errors.

    Returns:
        The resolved object of type T.

    Raises:
        TypeError: If obj (or what it resolves to) is not of the expected type.
        ValueError: If obj is a string but is not found in object_map.

    >>> resolve_object('one', object_map={'one': 1})
    1
    >>> resolve_object(2, object_map={'one': 1}, expected_type=int)
    2
    """
    if isinstance(obj, str):
        if obj in object_map:
            resolved_obj = object_map[obj]
        else:
            msg = error_message or f"Unknown object identifier: {obj}"
            raise ValueError(msg)
    elif expected_type is None or isinstance(obj, expected_type):
        resolved_obj = obj
    else:
        msg = error_message or f"Expected type {expected_type}, got {type(obj)}"
        raise TypeError(msg)

    if expected_type and not isinstance(resolved_obj, expected_type):
        msg = (
            error_message
            or f"Resolved object should be of type {expected_type}, got {type(resolved_obj)}"
        )
        raise TypeError(msg)

    return resolved_obj


# --------------------------------------------------------------------------------------
# Logging utilities


def configure_logging(level: str = "INFO") -> None:
    """Console logging for the interactive app."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": level,
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )


def print_json_if_possible(x):
    """Prints the input as json (falling back to its repr) and adds a newline."""
    try:
        x = json.dumps(x)
    except (TypeError, ValueError):
        pass
    print(x)
    print()
