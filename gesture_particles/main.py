#!/usr/bin/env python
"""
Command-line interface for the gesture particles application.

Examples:
    # Run with default settings
    gesture-particles

    # Count from ONE to FOUR instead of HELLO / FUTURE / WORLD
    gesture-particles --text-map count

    # Fewer particles, and print every gesture sample
    gesture-particles --n-particles 4000 --log-gestures

    # Use a model file stored elsewhere
    gesture-particles --model-path ~/models/hand_landmarker.task
"""

import argh
from gesture_particles.script_utils import gesture_particles_cli


def dispatched_gesture_particles_cli():
    argh.dispatch_command(gesture_particles_cli)


if __name__ == "__main__":
    dispatched_gesture_particles_cli()
