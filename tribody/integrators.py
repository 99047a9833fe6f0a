import math

import numpy as np

from . import constants as C


def stability_factor(mass_product: float) -> float:
    """Scale applied to the force of a pair with the given mass product.

    Heavy pairs are damped by ``1 / log10(mass_product / 10)`` once the
    product exceeds 100; lighter pairs are left untouched.
    """
    if mass_product > C.STABILITY_MASS_PRODUCT:
        return 1.0 / math.log10(mass_product / C.STABILITY_DIVISOR)
    return 1.0


def pairwise_force(pos_i, pos_j, mass_i, mass_j, g_constant=C.G_DEFAULT) -> np.ndarray:
    """Gravitational force exerted on body ``i`` by body ``j``.

    Coincident centres contribute no force.
    """
    r_vec = np.asarray(pos_j, dtype=float) - np.asarray(pos_i, dtype=float)
    dist_sq = float(np.dot(r_vec, r_vec))
    if dist_sq == 0:
        return np.zeros(3, dtype=np.float64)

    mass_product = mass_i * mass_j
    force_mag = g_constant * mass_product / dist_sq * stability_factor(mass_product)
    return force_mag * (r_vec / math.sqrt(dist_sq))


def pair_accelerations(body_i, body_j, g_constant=C.G_DEFAULT):
    """Return the accelerations ``(a_i, a_j)`` the two bodies impose on each other."""
    force = pairwise_force(body_i.pos, body_j.pos, body_i.mass, body_j.mass, g_constant)
    return force / body_i.mass, -force / body_j.mass


def compute_accelerations(
    positions: np.ndarray,
    masses: np.ndarray,
    g_constant: float = C.G_DEFAULT,
) -> np.ndarray:
    """Accumulate the acceleration of every body from all unique pairs.

    Each pair ``i < j`` is visited once; the force vector is computed once
    and applied with opposite signs so Newton's third law holds exactly.
    """
    positions = np.asarray(positions, dtype=float)
    masses = np.asarray(masses, dtype=float)
    n = len(masses)
    acc = np.zeros((n, 3), dtype=np.float64)

    for i in range(n):
        for j in range(i + 1, n):
            force = pairwise_force(positions[i], positions[j], masses[i], masses[j], g_constant)
            if not np.all(np.isfinite(force)):
                continue
            acc[i] += force / masses[i]
            acc[j] -= force / masses[j]
    return acc


def semi_implicit_euler_step_arrays(
    positions,
    velocities,
    masses,
    dt,
    g_constant=C.G_DEFAULT,
) -> tuple[np.ndarray, np.ndarray]:
    """Advance one symplectic Euler step.

    Accelerations come from the pre-step positions.  Every velocity is kicked
    first, then every position drifts with the kicked velocity.
    """
    positions = np.asarray(positions, dtype=float)
    velocities = np.asarray(velocities, dtype=float)

    acc = compute_accelerations(positions, masses, g_constant)
    vel_new = velocities + acc * dt
    pos_new = positions + vel_new * dt
    return pos_new, vel_new


def step_bodies(bodies, dt, g_constant=C.G_DEFAULT):
    """Integrate a list of :class:`~tribody.physics.Body` in place."""
    if not bodies:
        return

    positions = np.array([b.pos for b in bodies], dtype=float)
    velocities = np.array([b.vel for b in bodies], dtype=float)
    masses = np.array([b.mass for b in bodies], dtype=float)

    new_pos, new_vel = semi_implicit_euler_step_arrays(
        positions, velocities, masses, dt, g_constant
    )
    for body, p, v in zip(bodies, new_pos, new_vel):
        body.update_physics_state(p, v)
