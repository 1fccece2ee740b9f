import numpy as np
import pytest

from gesture_particles.glyphs import rasterize_text
from gesture_particles.particles import (
    DFLT_PARTICLE_COUNT,
    Formation,
    ParticleField,
    select_formation,
    sway_angle,
)


@pytest.fixture(scope='module')
def hello_points():
    return rasterize_text("HELLO")


@pytest.fixture
def field():
    return ParticleField(seed=0)


def fake_rasterizer(n_points):
    calls = []

    def rasterize(text):
        calls.append(text)
        return np.column_stack(
            [np.arange(n_points, dtype=float), np.ones(n_points), np.zeros(n_points)]
        )

    rasterize.calls = calls
    return rasterize


@pytest.mark.parametrize(
    'grip, expected',
    [
        (0.0, Formation.TEXT),
        (0.5, Formation.TEXT),
        (0.9, Formation.TEXT),
        (0.9000001, Formation.COLLAPSE),
        (0.95, Formation.COLLAPSE),
        (1.0, Formation.COLLAPSE),
    ],
)
def test_select_formation(grip, expected):
    assert select_formation(grip) is expected


def test_select_formation_threshold_is_tunable():
    assert select_formation(0.6, collapse_threshold=0.5) is Formation.COLLAPSE


def test_initial_state(field):
    assert field.positions.shape == (DFLT_PARTICLE_COUNT, 3)
    assert field.targets.shape == (DFLT_PARTICLE_COUNT, 3)
    assert np.all(np.abs(field.positions) <= 50)
    assert field.text is None


def test_colors_are_pastel_cyan(field):
    r, g, b = field.colors.T
    assert np.all((0.5 <= r) & (r <= 1.0))
    assert np.all((0.8 <= g) & (g <= 1.0))
    assert np.all(b == 1.0)


def test_colors_never_change(field):
    colors = field.colors.copy()
    for grip in (0.0, 0.5, 0.95):
        field.tick("HELLO", grip, elapsed=1.0)
    field.tick("WORLD", 0.0)
    assert np.array_equal(field.colors, colors)


def test_collapse_targets_stay_within_the_jitter_cube(field):
    formation = field.retarget("HELLO", 0.95)
    assert formation is Formation.COLLAPSE
    assert np.all(np.abs(field.targets) <= 2.5)


def test_collapse_targets_are_redrawn_every_tick(field):
    field.retarget("HELLO", 0.95)
    first = field.targets.copy()
    field.retarget("HELLO", 0.95)
    assert not np.array_equal(first, field.targets)
    assert np.all(np.abs(field.targets) <= 2.5)


def test_text_targets_follow_the_rasterized_text(field, hello_points):
    formation = field.retarget("HELLO", 0.5)
    assert formation is Formation.TEXT
    n = len(hello_points)
    assert field.n_ink == n
    assert np.array_equal(field.targets[:n], hello_points)
    # unused particles are scattered, not stacked on the origin
    rest = field.targets[n:]
    assert np.all(np.abs(rest) <= 25)
    assert len(np.unique(rest, axis=0)) == len(rest)


def test_open_hand_breathes_along_z(field, hello_points):
    elapsed = 1.3
    field.retarget("HELLO", 0.0, elapsed)
    n = len(hello_points)
    assert np.array_equal(field.targets[:n, :2], hello_points[:, :2])
    expected_z = np.sin(elapsed * 2 + hello_points[:, 0] * 0.1) * 0.5
    assert np.allclose(field.targets[:n, 2], expected_z)
    assert np.all(np.abs(field.targets[n:]) <= 25.5)


def test_no_breathing_between_thresholds(field):
    field.retarget("HELLO", 0.2, elapsed=0.7)
    assert np.array_equal(field.targets, field.text_targets)


def test_text_scatter_is_fixed_between_ticks(field, hello_points):
    field.retarget("HELLO", 0.5)
    first = field.targets.copy()
    field.retarget("HELLO", 0.95)
    field.retarget("HELLO", 0.5)
    assert np.array_equal(field.targets, first)


def test_text_is_rasterized_only_when_it_changes():
    rasterize = fake_rasterizer(10)
    field = ParticleField(100, rasterize=rasterize, seed=1)
    for _ in range(5):
        field.tick("HELLO", 0.5)
    field.tick("WORLD", 0.5)
    field.tick("WORLD", 0.95)
    assert rasterize.calls == ["HELLO", "WORLD"]


def test_long_text_is_truncated_to_the_particle_count():
    field = ParticleField(5, rasterize=fake_rasterizer(12), seed=2)
    field.retarget("LONG", 0.5)
    assert field.n_ink == 5
    assert np.array_equal(field.targets[:, 0], np.arange(5.0))


def test_empty_text_scatters_everything():
    field = ParticleField(50, seed=3)
    field.retarget("", 0.5)
    assert field.n_ink == 0
    assert np.all(np.abs(field.targets) <= 25)


def test_advance_moves_a_tenth_of_the_way(field):
    field.targets[:] = 0.0
    before = field.positions.copy()
    field.advance()
    assert np.allclose(field.positions, before * 0.9)


def test_advance_contracts_toward_target_without_overshoot():
    field = ParticleField(200, seed=4)
    target = np.array([1.0, -2.0, 3.0])
    field.targets[:] = target
    side = np.sign(field.positions - target)
    distance = np.linalg.norm(field.positions - target, axis=1)
    for _ in range(60):
        field.advance()
        new_distance = np.linalg.norm(field.positions - target, axis=1)
        assert np.all(new_distance < distance)
        assert np.all(np.sign(field.positions - target) == side)
        distance = new_distance
    assert distance.max() < 0.5


def test_positions_converge_on_the_text(hello_points):
    field = ParticleField(seed=5)
    for _ in range(200):
        field.tick("HELLO", 0.5)
    n = len(hello_points)
    assert np.allclose(field.positions[:n], hello_points, atol=1e-3)


def test_fist_gathers_everything_near_the_center():
    field = ParticleField(1000, seed=6)
    for i in range(100):
        field.tick("HELLO", 1.0, elapsed=i / 30)
    assert np.all(np.abs(field.positions) < 2.6)


def test_positions_stay_finite():
    field = ParticleField(500, seed=7)
    for i in range(50):
        grip = (i % 10) / 9
        field.tick("WORLD" if i % 2 else "HELLO", grip, elapsed=i * 0.033)
    assert np.all(np.isfinite(field.positions))
    assert np.all(np.isfinite(field.targets))


def test_interpolation_rate_must_be_a_fraction():
    with pytest.raises(ValueError):
        ParticleField(10, interpolation_rate=0.0)
    with pytest.raises(ValueError):
        ParticleField(10, interpolation_rate=1.5)


def test_same_seed_same_field():
    a = ParticleField(100, seed=8)
    b = ParticleField(100, seed=8)
    assert np.array_equal(a.positions, b.positions)
    assert np.array_equal(a.colors, b.colors)


def test_sway_angle_is_small():
    angles = [sway_angle(t) for t in np.linspace(0, 60, 500)]
    assert max(abs(a) for a in angles) <= 0.02
    assert sway_angle(0.0) == 0.0
