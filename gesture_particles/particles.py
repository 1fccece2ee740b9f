"""Particle field that flows between a text formation and a collapsed ball.

Every tick, each particle gets a target (`ParticleField.retarget`), then moves a
fixed fraction of the way toward it (`ParticleField.advance`). Targets come from one
of two formations:

* `Formation.TEXT`: the rasterized glyphs of the current text. Particles that the
  text doesn't need get a scattered spot in a cube around the text instead. While
  the hand is open, the text "breathes" along z.
* `Formation.COLLAPSE`: a small jittering ball at the origin. The jitter is
  redrawn on every tick, so the ball boils instead of freezing.

Which one applies is a hard threshold on grip strength (see `select_formation`),
not a blend.

The interpolation rate is per tick, not per second, so the apparent speed follows
the frame rate of the loop that calls `tick`.
"""

import enum
import logging
from typing import Callable, Optional

import numpy as np

from gesture_particles.glyphs import rasterize_text

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------------
# Defaults
# -------------------------------------------------------------------------------

DFLT_PARTICLE_COUNT = 8000
DFLT_COLLAPSE_THRESHOLD = 0.9
DFLT_BREATHING_THRESHOLD = 0.2
DFLT_INTERPOLATION_RATE = 0.1
DFLT_COLLAPSE_JITTER = 2.5  # half-width of the collapse cube
DFLT_TEXT_SCATTER = 25.0  # half-width of the cube for particles the text doesn't use
DFLT_INITIAL_SCATTER = 50.0  # half-width of the cube particles start in

BREATHING_AMPLITUDE = 0.5
BREATHING_TIME_FREQUENCY = 2.0
BREATHING_SPATIAL_FREQUENCY = 0.1

SWAY_AMPLITUDE = 0.02
SWAY_FREQUENCY = 0.5


class Formation(str, enum.Enum):
    TEXT = "text"
    COLLAPSE = "collapse"


def select_formation(
    grip_strength: float, *, collapse_threshold: float = DFLT_COLLAPSE_THRESHOLD
) -> Formation:
    """Collapse when the grip is strictly tighter than the threshold, else show text.

    >>> select_formation(0.95)
    <Formation.COLLAPSE: 'collapse'>
    >>> select_formation(0.9)
    <Formation.TEXT: 'text'>
    """
    if grip_strength > collapse_threshold:
        return Formation.COLLAPSE
    return Formation.TEXT


def sway_angle(elapsed: float) -> float:
    """Small rotation (radians, about z) rocking the whole cloud over time."""
    return float(np.sin(elapsed * SWAY_FREQUENCY) * SWAY_AMPLITUDE)


def pastel_cyan_colors(n: int, rng: np.random.Generator) -> np.ndarray:
    """(n, 3) RGB colors in [0, 1]: red in [0.5, 1], green in [0.8, 1], blue 1."""
    colors = np.empty((n, 3))
    colors[:, 0] = 0.5 + rng.random(n) * 0.5
    colors[:, 1] = 0.8 + rng.random(n) * 0.2
    colors[:, 2] = 1.0
    return colors


class ParticleField:
    """
    A fixed set of particles, each with a current position and a target.

    Attributes:
        positions (np.ndarray): (n, 3) current positions, updated in place.
        targets (np.ndarray): (n, 3) targets of the last `retarget`.
        colors (np.ndarray): (n, 3) RGB colors, set once at construction.
        text (str | None): Text the text formation was last built from.
        n_ink (int): How many particles the text formation places on glyphs.
    """

    def __init__(
        self,
        n_particles: int = DFLT_PARTICLE_COUNT,
        *,
        rasterize: Callable[[str], np.ndarray] = rasterize_text,
        collapse_threshold: float = DFLT_COLLAPSE_THRESHOLD,
        breathing_threshold: float = DFLT_BREATHING_THRESHOLD,
        interpolation_rate: float = DFLT_INTERPOLATION_RATE,
        collapse_jitter: float = DFLT_COLLAPSE_JITTER,
        text_scatter: float = DFLT_TEXT_SCATTER,
        initial_scatter: float = DFLT_INITIAL_SCATTER,
        seed: Optional[int] = None,
    ):
        if not 0 < interpolation_rate <= 1:
            raise ValueError(
                f"interpolation_rate must be in (0, 1], was {interpolation_rate}"
            )
        self.n_particles = n_particles
        self.rasterize = rasterize
        self.collapse_threshold = collapse_threshold
        self.breathing_threshold = breathing_threshold
        self.interpolation_rate = interpolation_rate
        self.collapse_jitter = collapse_jitter
        self.text_scatter = text_scatter

        self.rng = np.random.default_rng(seed)
        shape = (n_particles, 3)
        self.positions = self.rng.uniform(-initial_scatter, initial_scatter, shape)
        self.colors = pastel_cyan_colors(n_particles, self.rng)

        # Until a text is set, the "text" formation is pure scatter
        self.text = None
        self.n_ink = 0
        self.text_targets = self.rng.uniform(-text_scatter, text_scatter, shape)
        self.targets = self.text_targets.copy()

    def set_text(self, text: str) -> None:
        """Rebuild the text formation, if `text` differs from the current one."""
        if text == self.text:
            return
        ink = np.asarray(self.rasterize(text), dtype=float).reshape(-1, 3)
        n_ink = min(len(ink), self.n_particles)
        if len(ink) > self.n_particles:
            logger.warning(
                "Text %r needs %d particles, only %d available: truncating",
                text,
                len(ink),
                self.n_particles,
            )
        text_targets = np.empty((self.n_particles, 3))
        text_targets[:n_ink] = ink[:n_ink]
        text_targets[n_ink:] = self.rng.uniform(
            -self.text_scatter, self.text_scatter, (self.n_particles - n_ink, 3)
        )
        self.text_targets = text_targets
        self.text = text
        self.n_ink = n_ink
        logger.info("Text formation %r: %d ink particles", text, n_ink)

    def retarget(
        self, text: str, grip_strength: float, elapsed: float = 0.0
    ) -> Formation:
        """
        Recompute every particle's target for this tick.

        Args:
            text: The active text.
            grip_strength: Current grip strength, in [0, 1].
            elapsed: Seconds since start, drives the breathing motion.

        Returns:
            Formation: The formation the targets were taken from.
        """
        self.set_text(text)
        formation = select_formation(
            grip_strength, collapse_threshold=self.collapse_threshold
        )
        if formation is Formation.COLLAPSE:
            self.targets[:] = self.rng.uniform(
                -self.collapse_jitter, self.collapse_jitter, self.targets.shape
            )
        else:
            np.copyto(self.targets, self.text_targets)
            if grip_strength < self.breathing_threshold:
                self.targets[:, 2] += (
                    np.sin(
                        elapsed * BREATHING_TIME_FREQUENCY
                        + self.targets[:, 0] * BREATHING_SPATIAL_FREQUENCY
                    )
                    * BREATHING_AMPLITUDE
                )
        return formation

    def advance(self) -> None:
        """Move every particle a fixed fraction of the way to its target."""
        self.positions += (self.targets - self.positions) * self.interpolation_rate

    def tick(self, text: str, grip_strength: float, elapsed: float = 0.0) -> Formation:
        """One simulation step: retarget, then advance."""
        formation = self.retarget(text, grip_strength, elapsed)
        self.advance()
        return formation
