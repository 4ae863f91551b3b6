import math

import numpy as np
import pytest

from bounds import set_field_bounds
from particle import Particle


def test_initial_position_drawn_x_then_y(bounds, stub_rng):
    rng = stub_rng([0.01, 0.02])
    p = Particle("a", bounds, rng)
    assert p.get_pos() == (0.01, 0.02)
    assert rng.calls == 2
    assert np.array_equal(p.velocity, [0.0, 0.0])


def test_initial_position_clamped_exactly(bounds, stub_rng):
    p = Particle("a", bounds, stub_rng([0.9, 0.99]))
    assert p.get_pos() == (bounds.x_bound, bounds.y_bound)


def test_forced_position_skips_random_draw(bounds, stub_rng):
    rng = stub_rng()
    p = Particle("a", bounds, rng, position=(0.002, -0.003))
    assert p.get_pos() == (0.002, -0.003)
    assert rng.calls == 0


def test_uses_process_wide_bounds(bounds, stub_rng):
    set_field_bounds(bounds)
    p = Particle("a", rng=stub_rng([0.5, 0.5]))
    assert p.bounds == bounds
    assert p.get_pos() == (bounds.x_bound, bounds.y_bound)


def test_payload_kept(bounds):
    payload = object()
    p = Particle(payload, bounds, position=(0.0, 0.0))
    assert p.payload is payload


@pytest.mark.parametrize("x, y, expected", [
    (0.1, 0.0, (0.031, 0.0)),
    (-0.1, 0.0, (-0.031, 0.0)),
    (0.0, 0.1, (0.0, 0.053)),
    (0.0, -0.1, (0.0, -0.053)),
    (0.031, -0.053, (0.031, -0.053)),
    (0.01, -0.02, (0.01, -0.02)),
])
def test_set_position_clamped(bounds, x, y, expected):
    p = Particle("a", bounds, position=(0.0, 0.0))
    p.set_position_clamped(x, y)
    assert p.get_pos() == expected


def test_compute_physics_constant_acceleration(bounds):
    p = Particle("a", bounds, position=(0.0, 0.0))
    p.compute_physics(1.0, -2.0, 0.1)
    # a = -s / 5
    assert p.x == pytest.approx(-0.2 * 0.01 / 2)
    assert p.y == pytest.approx(0.4 * 0.01 / 2)
    assert p.velocity == pytest.approx([-0.02, 0.04])

    p.compute_physics(1.0, -2.0, 0.1)
    assert p.x == pytest.approx(-0.001 - 0.002 - 0.001)
    assert p.y == pytest.approx(0.002 + 0.004 + 0.002)
    assert p.velocity == pytest.approx([-0.04, 0.08])


def test_compute_physics_opposes_sensor(bounds):
    p = Particle("a", bounds, position=(0.0, 0.0))
    p.compute_physics(5.0, 5.0, 0.01)
    assert p.x < 0.0
    assert p.y < 0.0


def test_compute_physics_zero_dt_is_noop(bounds):
    p = Particle("a", bounds, position=(0.01, -0.01))
    p.compute_physics(3.0, -4.0, 0.1)
    before_pos, before_vel = p.position, p.velocity
    p.compute_physics(3.0, -4.0, 0.0)
    assert np.array_equal(p.position, before_pos)
    assert np.array_equal(p.velocity, before_vel)


def test_wall_absorbs_velocity_then_accelerates(bounds):
    p = Particle("a", bounds, position=(0.0, 0.0))
    p.compute_physics(-5.0, 0.0, 1.0)
    assert p.x == bounds.x_bound
    # Velocity was zeroed by the wall, then picked up a * dt.
    assert p.velocity[0] == pytest.approx(1.0)
    p.compute_physics(-5.0, 0.0, 1.0)
    assert p.x == bounds.x_bound


def test_no_collision_when_apart(bounds, stub_rng):
    rng = stub_rng()
    a = Particle("a", bounds, position=(0.0, 0.0))
    b = Particle("b", bounds, position=(0.01, 0.0))
    assert not b.collision_check(a, rng)
    assert rng.calls == 0
    assert a.get_pos() == (0.0, 0.0)
    assert b.get_pos() == (0.01, 0.0)


def test_collision_at_exact_diameter(bounds, stub_rng):
    a = Particle("a", bounds, position=(0.0, 0.0))
    b = Particle("b", bounds, position=(0.006, 0.0))
    assert b.collision_check(a, stub_rng())


def test_coincident_particles_separate_symmetrically(bounds, stub_rng):
    a = Particle("a", bounds, position=(0.0, 0.0))
    b = Particle("b", bounds, position=(0.0, 0.0))
    # Jitter of +2.5e-5 on x, none on y.
    assert b.collision_check(a, stub_rng([0.75, 0.5]))

    assert b.x == pytest.approx(0.5 * (0.006 - 2.5e-5))
    assert a.x == -b.x
    assert a.y == 0.0 and b.y == 0.0
    assert b.x - a.x == pytest.approx(0.006, abs=1e-4)


def test_coincident_particles_with_seeded_jitter(bounds, rng):
    a = Particle("a", bounds, position=(0.0, 0.0))
    b = Particle("b", bounds, position=(0.0, 0.0))
    assert b.collision_check(a, rng)
    distance = math.hypot(b.x - a.x, b.y - a.y)
    assert distance == pytest.approx(0.006, abs=1.5e-4)
    assert b.x == pytest.approx(-a.x)
    assert b.y == pytest.approx(-a.y)


def test_degenerate_collision_is_skipped(bounds, stub_rng, debug_logs):
    a = Particle("a", bounds, position=(0.0, 0.0))
    b = Particle("b", bounds, position=(0.0, 0.0))
    assert b.collision_check(a, stub_rng([0.5, 0.5]))
    assert a.get_pos() == (0.0, 0.0)
    assert b.get_pos() == (0.0, 0.0)
    assert "degenerate" in debug_logs.text


def test_collision_correction_is_clamped(bounds, stub_rng):
    a = Particle("a", bounds, position=(bounds.x_bound, 0.0))
    b = Particle("b", bounds, position=(bounds.x_bound, 0.0))
    assert b.collision_check(a, stub_rng([0.75, 0.5]))
    assert b.x == bounds.x_bound
    assert a.x == pytest.approx(bounds.x_bound - 0.5 * (0.006 - 2.5e-5))


def test_collision_defaults_to_own_generator(bounds, stub_rng):
    own = stub_rng([0.75, 0.5])
    a = Particle("a", bounds, position=(0.0, 0.0))
    b = Particle("b", bounds, own, position=(0.0, 0.0))
    assert b.collision_check(a)
    assert own.calls == 2
    assert b.x > 0.0 > a.x
