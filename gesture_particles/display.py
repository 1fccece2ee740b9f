"""Display utilities: drawing the particle cloud and the overlay."""

import math
from typing import Union, Tuple, Dict, Optional, Sequence

import cv2
import numpy as np

# -------------------------------------------------------------------------------
# Types
# -------------------------------------------------------------------------------

Color = Union[Tuple[int, int, int], Tuple[int, int, int, int]]  # BGR or BGRA

# -------------------------------------------------------------------------------
# Defaults
# -------------------------------------------------------------------------------

DFLT_WIDTH = 1280
DFLT_HEIGHT = 720
DFLT_FOV_DEG = 75.0  # vertical field of view
DFLT_CAMERA_Z = 30.0
DFLT_NEAR = 0.1
DFLT_POINT_SIZE = 2
DFLT_OPACITY = 0.9

TITLE = "Gesture Particles"
INSTRUCTIONS = (
    "Open Hand: Show Text (1, 2, 3 fingers change text)",
    "Close Fist: Collapse particles to center",
)

# -------------------------------------------------------------------------------
# Particle cloud
# -------------------------------------------------------------------------------


def project_points(
    positions: np.ndarray,
    *,
    width: int = DFLT_WIDTH,
    height: int = DFLT_HEIGHT,
    fov: float = DFLT_FOV_DEG,
    camera_z: float = DFLT_CAMERA_Z,
    rotation_z: float = 0.0,
    near: float = DFLT_NEAR,
):
    """
    Perspective projection of world points seen by a camera on the z axis.

    The camera sits at (0, 0, camera_z) looking toward -z, with y up. The cloud is
    first rotated by `rotation_z` radians about the z axis.

    Returns:
        tuple: (pixels, visible) where pixels is an (n, 2) int array of (x, y)
        pixel coordinates and visible an (n,) bool mask of the points that are in
        front of the camera and inside the image.
    """
    cos_a, sin_a = math.cos(rotation_z), math.sin(rotation_z)
    x = positions[:, 0] * cos_a - positions[:, 1] * sin_a
    y = positions[:, 0] * sin_a + positions[:, 1] * cos_a
    depth = camera_z - positions[:, 2]

    in_front = depth > near
    safe_depth = np.where(in_front, depth, 1.0)
    focal = (height / 2) / math.tan(math.radians(fov) / 2)
    px = np.rint(width / 2 + focal * x / safe_depth)
    py = np.rint(height / 2 - focal * y / safe_depth)

    visible = in_front & (px >= 0) & (px < width) & (py >= 0) & (py < height)
    pixels = np.column_stack([np.where(visible, px, 0), np.where(visible, py, 0)])
    return pixels.astype(int), visible


def draw_particles(
    img: np.ndarray,
    positions: np.ndarray,
    colors: np.ndarray,
    *,
    point_size: int = DFLT_POINT_SIZE,
    opacity: float = DFLT_OPACITY,
    **projection_kwargs,
):
    """
    Draw particles on a BGR image, blending additively (overlaps get brighter).

    Args:
        img: The image to draw on (modified in place).
        positions: (n, 3) world positions.
        colors: (n, 3) RGB colors in [0, 1].
        point_size: Side, in pixels, of each particle's square splat.
        opacity: Scale applied to the colors before adding them.
        projection_kwargs: Passed on to `project_points` (fov, camera_z, ...).

    Returns:
        img: The image with the particles drawn.
    """
    h, w = img.shape[:2]
    pixels, visible = project_points(positions, width=w, height=h, **projection_kwargs)
    pixels = pixels[visible]
    bgr = (colors[visible][:, ::-1] * (255.0 * opacity)).astype(np.float32)

    layer = np.zeros((h, w, 3), dtype=np.float32)
    np.add.at(layer, (pixels[:, 1], pixels[:, 0]), bgr)
    if point_size > 1:
        layer = cv2.dilate(layer, np.ones((point_size, point_size), np.uint8))

    img[:] = np.clip(img.astype(np.float32) + layer, 0, 255).astype(np.uint8)
    return img


# -------------------------------------------------------------------------------
# Overlay
# -------------------------------------------------------------------------------


def display_features_on_image(
    img: np.ndarray,
    features: Union[dict, Sequence[tuple]],
    *,
    font=cv2.FONT_HERSHEY_SIMPLEX,
    font_scale: float = 0.6,
    color: Color = (255, 255, 255),
    thickness: int = 1,
    float_format: str = ".2f",
    x_pos=20,
    y_pos=30,
    y_increment=26,
    bg_color: Color = (40, 40, 40, 160),  # Dark grey, semi-transparent (BGR + alpha)
):
    """
    Display features on the image with a semi-transparent background.

    Lines whose key is None are written as-is (no "key: " prefix), which serves
    for titles and free text lines.

    Args:
        img: The image to draw on
        features: Dictionary of features, or sequence of (key, value) pairs
        font: Font type to use
        font_scale: Size of the font
        color: Text color in BGR format
        thickness: Line thickness of text
        float_format: Format string for float values
        x_pos: Starting x position for text
        y_pos: Starting y position for text
        y_increment: Vertical space between lines
        bg_color: Background color (BGR + alpha) where alpha is 0-255
    """
    if not features:
        return img

    if isinstance(features, dict):
        features = features.items()
    lines = [_feature_line(key, value, float_format) for key, value in features]

    # Process bg_color to separate BGR and alpha
    if len(bg_color) == 4:
        bg_rgb = bg_color[:3]
        alpha = bg_color[3] / 255.0  # Convert to 0-1 range
    else:
        bg_rgb = bg_color
        alpha = 0.5  # Default alpha

    # One background panel behind all the lines
    padding = 8
    widths = [cv2.getTextSize(line, font, font_scale, thickness)[0][0] for line in lines]
    (_, text_height), _ = cv2.getTextSize("Ag", font, font_scale, thickness)
    overlay = img.copy()
    cv2.rectangle(
        overlay,
        (x_pos - padding, y_pos - text_height - padding),
        (
            x_pos + max(widths) + padding,
            y_pos + (len(lines) - 1) * y_increment + padding,
        ),
        bg_rgb,
        -1,  # Filled rectangle
    )
    cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0, img)

    # Draw text on top
    for idx, line in enumerate(lines):
        cv2.putText(
            img,
            line,
            (x_pos, y_pos + idx * y_increment),
            font,
            font_scale,
            color,
            thickness,
            cv2.LINE_AA,
        )

    return img


def _feature_line(key, value, float_format):
    if isinstance(value, float):
        value = f"{value:{float_format}}"
    if key is None:
        return str(value)
    return f"{key}: {value}"


def overlay_lines(fields: Dict[str, str]) -> list:
    """Title, instructions, then the given fields, as (key, value) pairs."""
    return (
        [(None, TITLE)]
        + [(None, line) for line in INSTRUCTIONS]
        + list(fields.items())
    )


def draw_overlay(img: np.ndarray, fields: Dict[str, str], **kwargs):
    """Draw the title, instructions and state fields panel."""
    return display_features_on_image(img, overlay_lines(fields), **kwargs)


# -------------------------------------------------------------------------------
# Camera preview
# -------------------------------------------------------------------------------


def draw_landmarks(img: np.ndarray, landmarks: Optional[Sequence], *, color=(0, 255, 0)):
    """Draw normalized landmarks as dots on the image."""
    if not landmarks:
        return img
    h, w = img.shape[:2]
    for lm in landmarks:
        cv2.circle(img, (int(lm[0] * w), int(lm[1] * h)), 3, color, -1, cv2.LINE_AA)
    return img


def draw_camera_preview(
    img: np.ndarray,
    frame: np.ndarray,
    landmarks: Optional[Sequence] = None,
    *,
    scale: float = 0.25,
    margin: int = 20,
):
    """Paste a small copy of the camera frame, with landmarks, in the bottom right."""
    h, w = img.shape[:2]
    preview_w = int(w * scale)
    preview_h = int(frame.shape[0] * preview_w / frame.shape[1])
    if preview_w <= 0 or preview_h + margin > h or preview_w + margin > w:
        return img
    preview = cv2.resize(frame, (preview_w, preview_h))
    preview = draw_landmarks(preview, landmarks)
    img[h - margin - preview_h : h - margin, w - margin - preview_w : w - margin] = preview
    return img
