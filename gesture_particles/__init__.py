"""

A cloud of particles that spells out text, and that you can crush with your hand.

A webcam watches your hand. Each frame, the hand's landmarks are boiled down to two
numbers: how many fingers are up, and how closed the hand is (grip strength).
The finger count picks the text (1: HELLO, 2: FUTURE, 3: WORLD), which is rasterized
into a point cloud the particles fly to. Close your fist and the particles collapse
into a small boiling ball at the center; open it and they go back to the text.

Here's what's in the package:

* geometry.py: Distances and small helpers over landmark points.
* hand_features.py: The gesture quantifier (finger count, grip strength).
* glyphs.py: Rasterizes text into 3D target points.
* particles.py: The particle field, and the text/collapse formation policy.
* state.py: The gesture and text state shared by the detector and the render loop.
* tracking.py: MediaPipe hand landmarker, in live stream mode.
* display.py: Draws the particle cloud, the overlay and the camera preview.
* script_utils.py: The run loop and the command-line interface.

The hand landmarker model is not shipped: put `hand_landmarker.task` in the
package's `data` folder, or point to it with `--model-path`.

"""

from gesture_particles.hand_features import GestureSample, quantify
from gesture_particles.glyphs import rasterize_text
from gesture_particles.particles import ParticleField, Formation, select_formation
from gesture_particles.state import GestureState
