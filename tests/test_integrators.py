import math

import numpy as np

from tribody.integrators import semi_implicit_euler_step_arrays, step_bodies
from tribody.physics import Body


def _pair():
    return [
        Body("a", 1.0, [-1.0, 0.0, 0.0], [0.0, 0.0, 0.0]),
        Body("b", 1.0, [1.0, 0.0, 0.0], [0.0, 0.0, 0.0]),
    ]


def test_velocity_is_kicked_before_drift():
    bodies = _pair()
    step_bodies(bodies, 0.1, g_constant=1.0)

    # a = 1 / 2^2 = 0.25, v = 0.025, x = -1 + 0.025 * 0.1
    assert math.isclose(bodies[0].vel[0], 0.025, rel_tol=1e-12)
    assert math.isclose(bodies[0].pos[0], -0.9975, rel_tol=1e-12)
    assert math.isclose(bodies[1].pos[0], 0.9975, rel_tol=1e-12)


def test_accelerations_use_pre_step_positions():
    positions = np.array([[-1.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    velocities = np.array([[-10.0, 0.0, 0.0], [10.0, 0.0, 0.0]])
    masses = np.array([1.0, 1.0])

    _, vel = semi_implicit_euler_step_arrays(positions, velocities, masses, 1.0, 1.0)
    # the kick comes from distance 2, not from the drifted distance 22
    assert math.isclose(vel[0][0], -10.0 + 0.25, rel_tol=1e-12)


def test_zero_dt_leaves_state_unchanged():
    bodies = _pair()
    bodies[0].set_velocity([0.3, -0.2, 0.1])
    before = [(b.pos.copy(), b.vel.copy()) for b in bodies]
    for _ in range(5):
        step_bodies(bodies, 0.0, g_constant=1.0)
    for b, (p, v) in zip(bodies, before):
        assert np.array_equal(b.pos, p)
        assert np.array_equal(b.vel, v)


def test_integration_is_deterministic():
    def run():
        bodies = [
            Body("a", 1.0, [-5.0, 0.0, 0.0], [0.0, 0.0, 0.42]),
            Body("b", 1.0, [5.0, 0.0, 0.0], [0.0, 0.0, -0.42]),
            Body("c", 1.5, [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]),
        ]
        for _ in range(200):
            step_bodies(bodies, 0.05, g_constant=0.3)
        return np.array([b.pos for b in bodies]), np.array([b.vel for b in bodies])

    p1, v1 = run()
    p2, v2 = run()
    assert np.array_equal(p1, p2)
    assert np.array_equal(v1, v2)


def test_step_bodies_handles_empty_list():
    step_bodies([], 0.1)
