import pytest

from gesture_particles.hand_features import GestureSample, quantify
from gesture_particles.particles import Formation, ParticleField
from gesture_particles.state import GestureState, DFLT_TEXT_MAP, text_maps


def sample(finger_count, grip=0.0):
    return GestureSample(finger_count, grip, f"{finger_count} fingers")


def test_initial_state():
    state = GestureState()
    assert state.text == "HELLO"
    assert state.finger_count == 0
    assert state.grip_strength == 0.0
    assert state.status_text == "Initializing..."
    assert state.landmarks is None


@pytest.mark.parametrize('n, text', [(1, "HELLO"), (2, "FUTURE"), (3, "WORLD")])
def test_finger_count_selects_text(n, text):
    state = GestureState(initial_text="START")
    state.publish(sample(n))
    assert state.text == text


@pytest.mark.parametrize('n', [0, 4])
def test_other_finger_counts_keep_the_text(n):
    state = GestureState()
    state.publish(sample(2))
    state.publish(sample(n))
    assert state.text == "FUTURE"


def test_last_write_wins():
    state = GestureState()
    state.publish(sample(3, 0.1), landmarks=[(0.0, 0.0)] * 21)
    state.publish(sample(1, 0.7))
    assert state.sample == sample(1, 0.7)
    assert state.text == "HELLO"
    assert state.grip_strength == 0.7
    assert state.landmarks is None
    assert state.status_text == "1 fingers"


def test_losing_the_hand_keeps_the_text():
    state = GestureState()
    state.publish(sample(3, 0.95))
    state.publish(quantify(None))
    assert state.text == "WORLD"
    assert state.grip_strength == 0.0
    assert state.status_text == "No hands detected"


def test_custom_text_map():
    state = GestureState(text_map=text_maps['count'], initial_text="")
    state.publish(sample(4))
    assert state.text == "FOUR"


def test_default_text_map():
    assert DFLT_TEXT_MAP == {1: "HELLO", 2: "FUTURE", 3: "WORLD"}


def test_overlay_fields():
    state = GestureState()
    state.publish(GestureSample(2, 0.456, "Hand! Fingers: 2, Grip: 0.46"))
    assert state.overlay_fields() == {
        "Debug Status": "Hand! Fingers: 2, Grip: 0.46",
        "Detected Fingers": "2",
        "Grip Strength": "0.46",
        "Current Text": "FUTURE",
    }


def test_two_fingers_spell_future(make_hand):
    state = GestureState()
    field = ParticleField(2000, seed=0)

    state.publish(quantify(make_hand(index='open', middle='open')))
    formation = field.tick(state.text, state.grip_strength)

    assert state.text == "FUTURE"
    assert field.text == "FUTURE"
    assert formation is Formation.TEXT


def test_fist_collapses_the_field(fist):
    state = GestureState()
    field = ParticleField(500, seed=0)

    state.publish(quantify(fist))
    formation = field.tick(state.text, state.grip_strength)

    assert state.text == "HELLO"
    assert formation is Formation.COLLAPSE
