import time
import numpy as np

from tribody.integrators import compute_accelerations
from tribody.constants import G_DEFAULT
from tribody.simulation import SimulationController


def compute_accelerations_vectorized(positions, masses, g_constant=G_DEFAULT):
    """Unclamped all-pairs reference, for light bodies only."""
    r_vec = positions[None, :, :] - positions[:, None, :]
    dist_sq = np.einsum("ijk,ijk->ij", r_vec, r_vec)
    np.fill_diagonal(dist_sq, np.inf)
    inv_dist3 = dist_sq ** -1.5
    return g_constant * np.einsum("ij,ijk->ik", masses[None, :] * inv_dist3, r_vec)


if __name__ == "__main__":
    np.random.seed(0)
    N = 200
    positions = np.random.random((N, 3)) * 100.0
    masses = np.random.random(N) * 0.5 + 0.5  # products stay below the clamp

    t0 = time.time()
    baseline = compute_accelerations_vectorized(positions, masses)
    t1 = time.time()
    pairwise = compute_accelerations(positions, masses)
    t2 = time.time()

    assert np.allclose(baseline, pairwise)
    print(f"Vectorized : {t1 - t0:.3f}s")
    print(f"Pairwise   : {t2 - t1:.3f}s")

    ctl = SimulationController()
    ctl.start()
    steps = 20000
    t0 = time.time()
    for _ in range(steps):
        ctl.step()
    elapsed = time.time() - t0
    print(f"Controller : {steps / elapsed:.0f} steps/s ({ctl.state.value})")
