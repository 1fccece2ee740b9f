"""Text to point-cloud rasterization."""

import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------------
# Defaults
# -------------------------------------------------------------------------------

DFLT_CANVAS_WIDTH = 1024
DFLT_CANVAS_HEIGHT = 512
DFLT_FONT_SIZE = 100  # pixel height of the glyphs
DFLT_FONT = "simplex"
DFLT_STROKE_THICKNESS = 10  # thick strokes, our "bold"
DFLT_STRIDE = 4
DFLT_LUMINANCE_THRESHOLD = 128
DFLT_PIXEL_SCALE = 0.05  # world units per canvas pixel

glyph_fonts = {
    "simplex": cv2.FONT_HERSHEY_SIMPLEX,
    "duplex": cv2.FONT_HERSHEY_DUPLEX,
    "complex": cv2.FONT_HERSHEY_COMPLEX,
    "triplex": cv2.FONT_HERSHEY_TRIPLEX,
}


def render_text_canvas(
    text: str,
    *,
    width: int = DFLT_CANVAS_WIDTH,
    height: int = DFLT_CANVAS_HEIGHT,
    font_size: int = DFLT_FONT_SIZE,
    font: str = DFLT_FONT,
    thickness: int = DFLT_STROKE_THICKNESS,
) -> np.ndarray:
    """
    Draw `text` in white on a black single-channel canvas, centered on both axes.

    Returns:
        np.ndarray: uint8 array of shape (height, width).
    """
    canvas = np.zeros((height, width), dtype=np.uint8)
    if not text:
        return canvas

    font_face = glyph_fonts[font]
    font_scale = cv2.getFontScaleFromHeight(font_face, font_size, thickness)
    (text_width, text_height), _ = cv2.getTextSize(
        text, font_face, font_scale, thickness
    )
    x, y = (width - text_width) // 2, (height + text_height) // 2
    cv2.putText(canvas, text, (x, y), font_face, font_scale, 255, thickness, cv2.LINE_AA)

    # The text size ignores the stroke overhang: shift so the ink itself sits on the
    # horizontal midline
    rows = np.nonzero(canvas.any(axis=1))[0]
    if len(rows):
        dy = int(height // 2 - (rows[0] + rows[-1]) // 2)
        if dy:
            canvas[:] = 0
            cv2.putText(
                canvas, text, (x, y + dy), font_face, font_scale, 255, thickness,
                cv2.LINE_AA,
            )
    return canvas


def rasterize_text(
    text: str,
    *,
    width: int = DFLT_CANVAS_WIDTH,
    height: int = DFLT_CANVAS_HEIGHT,
    font_size: int = DFLT_FONT_SIZE,
    font: str = DFLT_FONT,
    thickness: int = DFLT_STROKE_THICKNESS,
    stride: int = DFLT_STRIDE,
    threshold: int = DFLT_LUMINANCE_THRESHOLD,
    scale: float = DFLT_PIXEL_SCALE,
) -> np.ndarray:
    """
    Turn `text` into 3D "ink" coordinates.

    The text is drawn on a canvas that is then sampled every `stride` pixels; each
    sample brighter than `threshold` gives one point. Points are centered on the
    canvas midpoint, scaled by `scale`, have y pointing up, and z = 0.

    Args:
        text: The text to rasterize. The empty string gives no points.
        width, height: Canvas dimensions in pixels.
        font_size: Glyph height in pixels.
        font: Name of a Hershey font in `glyph_fonts`.
        thickness: Stroke thickness in pixels.
        stride: Sampling step, in pixels, along both axes.
        threshold: Luminance (0-255) a sample must exceed to count as ink.
        scale: World units per pixel.

    Returns:
        np.ndarray: Float array of shape (n_points, 3), in row-major scan order
        (top to bottom, then left to right).
    """
    if not text:
        return np.empty((0, 3), dtype=float)

    canvas = render_text_canvas(
        text,
        width=width,
        height=height,
        font_size=font_size,
        font=font,
        thickness=thickness,
    )
    # np.nonzero walks the samples in row-major order
    rows, cols = np.nonzero(canvas[::stride, ::stride] > threshold)
    x = (cols * stride - width / 2) * scale
    y = -(rows * stride - height / 2) * scale
    points = np.column_stack([x, y, np.zeros_like(x)]).astype(float)

    logger.debug("Rasterized %r into %d points", text, len(points))
    return points
