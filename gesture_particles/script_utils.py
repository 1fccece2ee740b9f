"""Utility functions for running the gesture particles app."""

import logging
import time
from functools import partial
from collections.abc import Mapping
from typing import Union, Callable, Dict, Optional, Any

import cv2
import numpy as np

from gesture_particles.display import draw_particles, draw_overlay, draw_camera_preview
from gesture_particles.glyphs import (
    rasterize_text,
    glyph_fonts,
    DFLT_FONT,
    DFLT_FONT_SIZE,
)
from gesture_particles.hand_features import gesture_quantifiers, gesture_features
from gesture_particles.particles import (
    ParticleField,
    sway_angle,
    DFLT_PARTICLE_COUNT,
    DFLT_COLLAPSE_THRESHOLD,
    DFLT_BREATHING_THRESHOLD,
    DFLT_INTERPOLATION_RATE,
)
from gesture_particles.state import GestureState, text_maps
from gesture_particles.util import (
    resolve_object,
    return_none as do_nothing,
    print_json_if_possible,
    configure_logging,
)

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------------
# Object resolution
# -------------------------------------------------------------------------------

resolve_quantifier = partial(resolve_object, object_map=gesture_quantifiers)
resolve_text_map = partial(
    resolve_object, object_map=text_maps, expected_type=Mapping
)

# -------------------------------------------------------------------------------
# Keyboard handling functions
# -------------------------------------------------------------------------------

ESCAPE_KEY_ASCII = 27
BREAK_KEYS = {ESCAPE_KEY_ASCII, ord('q')}


class KeyboardBreakSignal(Exception):
    """Exception raised when a break key is pressed."""

    pass


def read_keyboard(wait_time: int = 1) -> int:
    """
    Read keyboard input with the specified wait time.

    Args:
        wait_time: Time to wait for keyboard input in milliseconds

    Returns:
        The key code, or 255 if no key was pressed
    """
    return cv2.waitKey(wait_time) & 0xFF


def keyboard_feature_vector(key_code: int) -> Dict[str, Any]:
    """
    Convert a key code into a feature vector with keyboard information.

    Raises:
        KeyboardBreakSignal: If a key that signals program termination is pressed
    """
    keyboard_fv = {
        'key_code': key_code,
        'key_pressed': 0 < key_code < 255,
        'is_escape': key_code == ESCAPE_KEY_ASCII,
        'timestamp': time.time(),
    }

    if keyboard_fv['key_code'] in BREAK_KEYS:
        raise KeyboardBreakSignal(f"Break key pressed: {key_code}")

    return keyboard_fv


# -------------------------------------------------------------------------------
# Camera handling functions
# -------------------------------------------------------------------------------


class CameraReadError(Exception):
    """Exception raised when camera read fails."""

    pass


def read_camera(cap: cv2.VideoCapture) -> Any:
    """
    Read a frame from the camera and flip it horizontally (mirror view).

    Raises:
        CameraReadError: If the camera read operation fails
    """
    success, img = cap.read()
    if not success:
        raise CameraReadError("Failed to read from camera")
    return cv2.flip(img, 1)


# -------------------------------------------------------------------------------
# Teardown
# -------------------------------------------------------------------------------


def release_quietly(name: str, release: Callable[[], Any]) -> None:
    """Call `release`, logging (not raising) any error: nothing can act on it."""
    try:
        release()
    except Exception:
        logger.exception("Failed to release %s", name)


# -------------------------------------------------------------------------------
# Main run function
# -------------------------------------------------------------------------------

DFLT_QUANTIFIER = "quantify"
DFLT_TEXT_MAP = "hello_future_world"
DFLT_WINDOW_NAME = "Gesture Particles"
DFLT_FRAME_SIZE = (1280, 720)


def render_frame(
    field: ParticleField,
    state: GestureState,
    frame: Optional[np.ndarray],
    elapsed: float,
    *,
    frame_size=DFLT_FRAME_SIZE,
    show_camera: bool = True,
) -> np.ndarray:
    """Draw the particles, the overlay and (optionally) the camera preview."""
    width, height = frame_size
    img = np.zeros((height, width, 3), dtype=np.uint8)
    draw_particles(img, field.positions, field.colors, rotation_z=sway_angle(elapsed))
    draw_overlay(img, state.overlay_fields())
    if show_camera and frame is not None:
        draw_camera_preview(img, frame, state.landmarks)
    return img


def run_gesture_particles(
    *,
    quantifier: Union[str, Callable] = DFLT_QUANTIFIER,
    text_map: Union[str, Mapping[int, str]] = DFLT_TEXT_MAP,
    n_particles: int = DFLT_PARTICLE_COUNT,
    camera_index: int = 0,
    model_path: Optional[str] = None,
    log_gestures: Optional[Callable] = None,
    window_name: str = DFLT_WINDOW_NAME,
    frame_size=DFLT_FRAME_SIZE,
    show_camera: bool = True,
    rasterize_kwargs: Optional[dict] = None,
    field_kwargs: Optional[dict] = None,
):
    """
    Run the gesture particles application.

    One tick per displayed frame: read the keyboard and the camera, hand the frame
    to the (asynchronous) detector, then move the particles according to whatever
    gesture state the detector last published, and draw.

    Args:
        quantifier: Gesture quantifier function or name
        text_map: Finger count to text mapping, or its name
        n_particles: Number of particles
        camera_index: OpenCV camera index
        model_path: Path to the hand landmarker model (None for the packaged one)
        log_gestures: Function called with every gesture sample (or None to disable)
        window_name: Title for the display window
        frame_size: (width, height) of the rendered frames
        show_camera: Whether to show the camera preview
        rasterize_kwargs: Extra keyword arguments for `rasterize_text`
        field_kwargs: Extra keyword arguments for `ParticleField`
    """
    # Imported here so that the rest of the module doesn't need mediapipe
    from gesture_particles.tracking import HandTracker

    quantifier = resolve_quantifier(quantifier)
    text_map = resolve_text_map(text_map)
    log_gestures = log_gestures or do_nothing

    state = GestureState(text_map=text_map)

    def on_landmarks(landmarks):
        sample = quantifier(landmarks)
        state.publish(sample, landmarks)
        log_gestures(gesture_features(sample))

    field = ParticleField(
        n_particles,
        rasterize=partial(rasterize_text, **(rasterize_kwargs or {})),
        **(field_kwargs or {}),
    )

    tracker_kwargs = {'model_path': model_path} if model_path else {}
    tracker = HandTracker(on_landmarks, **tracker_kwargs)
    cap = None
    try:
        cap = cv2.VideoCapture(camera_index)
        if not cap.isOpened():
            logger.error("Could not open camera %s", camera_index)
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
        logger.info("Running with %d particles, text map %s", n_particles, text_map)

        start = time.monotonic()
        while cap.isOpened():
            try:
                keyboard_feature_vector(read_keyboard())
                frame = read_camera(cap)
                tracker.detect_async(frame)

                elapsed = time.monotonic() - start
                field.tick(state.text, state.grip_strength, elapsed)

                img = render_frame(
                    field,
                    state,
                    frame,
                    elapsed,
                    frame_size=frame_size,
                    show_camera=show_camera,
                )
                cv2.imshow(window_name, img)

            except (CameraReadError, KeyboardBreakSignal) as e:
                logger.info("Stopping: %s", e)
                break
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        release_quietly("hand tracker", tracker.close)
        if cap is not None:
            release_quietly("camera", cap.release)
        release_quietly("windows", cv2.destroyAllWindows)


def gesture_particles_cli(
    # Core components
    quantifier: str = DFLT_QUANTIFIER,
    text_map: str = DFLT_TEXT_MAP,
    # Particles
    n_particles: int = DFLT_PARTICLE_COUNT,
    collapse_threshold: float = DFLT_COLLAPSE_THRESHOLD,
    breathing_threshold: float = DFLT_BREATHING_THRESHOLD,
    interpolation_rate: float = DFLT_INTERPOLATION_RATE,
    # Glyphs
    font: str = DFLT_FONT,
    font_size: int = DFLT_FONT_SIZE,
    # Input
    camera_index: int = 0,
    model_path: str = "",
    # Logging options
    log_gestures: bool = False,
    log_level: str = "INFO",
    # Display options
    window_name: str = DFLT_WINDOW_NAME,
    width: int = DFLT_FRAME_SIZE[0],
    height: int = DFLT_FRAME_SIZE[1],
    hide_camera: bool = False,
    # List available components
    list_quantifiers: bool = False,
    list_text_maps: bool = False,
    list_fonts: bool = False,
):
    """
    Run the gesture particles application with the specified parameters.

    Args:
        quantifier: Name of the gesture quantifier function
        text_map: Name of the finger count to text mapping
        n_particles: Number of particles
        collapse_threshold: Grip strength above which the particles collapse
        breathing_threshold: Grip strength below which the text breathes
        interpolation_rate: Fraction of the way to the target covered per frame
        font: Name of the glyph font
        font_size: Glyph height, in pixels of the text canvas
        camera_index: OpenCV camera index
        model_path: Path to the hand landmarker model (empty for the packaged one)
        log_gestures: Whether to print every gesture sample
        log_level: Logging level
        window_name: Title for the display window
        width: Window width
        height: Window height
        hide_camera: Don't show the camera preview
        list_quantifiers: List available gesture quantifiers and exit
        list_text_maps: List available text maps and exit
        list_fonts: List available glyph fonts and exit
    """
    if list_quantifiers:
        print("Available gesture quantifiers:")
        for name in sorted(gesture_quantifiers.keys()):
            print(f"  - {name}")
        return

    if list_text_maps:
        print("Available text maps:")
        for name in sorted(text_maps.keys()):
            print(f"  - {name}: {text_maps[name]}")
        return

    if list_fonts:
        print("Available glyph fonts:")
        for name in sorted(glyph_fonts.keys()):
            print(f"  - {name}")
        return

    configure_logging(log_level.upper())

    run_gesture_particles(
        quantifier=quantifier,
        text_map=text_map,
        n_particles=n_particles,
        camera_index=camera_index,
        model_path=model_path or None,
        log_gestures=print_json_if_possible if log_gestures else None,
        window_name=window_name,
        frame_size=(width, height),
        show_camera=not hide_camera,
        rasterize_kwargs={'font': font, 'font_size': font_size},
        field_kwargs={
            'collapse_threshold': collapse_threshold,
            'breathing_threshold': breathing_threshold,
            'interpolation_rate': interpolation_rate,
        },
    )
