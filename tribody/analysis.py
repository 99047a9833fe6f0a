from collections import deque
import csv
import os

import numpy as np

from . import constants as C


def total_momentum(bodies) -> np.ndarray:
    p = np.zeros(3, dtype=np.float64)
    for body in bodies:
        p += body.mass * body.vel
    return p


def system_energy(bodies, g_constant=C.G_DEFAULT):
    """Return kinetic, potential and total energy.

    The potential is plain Newtonian and ignores the stability clamp, so it is
    only a drift indicator for heavy configurations.
    """
    kinetic = 0.0
    potential = 0.0
    for body in bodies:
        kinetic += 0.5 * body.mass * float(np.dot(body.vel, body.vel))
    for i, bi in enumerate(bodies):
        for bj in bodies[i + 1:]:
            r = float(np.linalg.norm(bj.pos - bi.pos))
            if r == 0:
                continue
            potential -= g_constant * bi.mass * bj.mass / r
    return kinetic, potential, kinetic + potential


def calculate_center_of_mass(bodies):
    """Mass-weighted centre position and velocity, or ``(None, None)``."""
    total_mass = sum(b.mass for b in bodies)
    if total_mass <= 0:
        return None, None
    com_pos = sum(b.pos * b.mass for b in bodies) / total_mass
    com_vel = sum(b.vel * b.mass for b in bodies) / total_mass
    return com_pos, com_vel


class EnergyMonitor:
    """Track relative energy drift (in percent) against a baseline."""

    def __init__(self, max_points=500):
        self.history = deque(maxlen=max_points)
        self.initial_energy = None

    def set_initial_energy(self, bodies, g_constant=C.G_DEFAULT):
        _, _, self.initial_energy = system_energy(bodies, g_constant)
        self.history.clear()

    def update(self, bodies, g_constant=C.G_DEFAULT):
        if self.initial_energy is None or abs(self.initial_energy) < 1e-12:
            return
        _, _, current_energy = system_energy(bodies, g_constant)
        drift = ((current_energy - self.initial_energy) / abs(self.initial_energy)) * 100
        self.history.append(drift)

    @property
    def latest(self):
        return self.history[-1] if self.history else 0.0

    def export_csv(self, file, delimiter=","):
        """Export the recorded drift history to a CSV file.

        Parameters
        ----------
        file : str or file-like
            Destination filename or open file object.
        delimiter : str, optional
            Delimiter used between columns (default is ',').
        """
        close = False
        if isinstance(file, (str, bytes, os.PathLike)):
            f = open(file, "w", newline="")
            close = True
        else:
            f = file
        try:
            writer = csv.writer(f, delimiter=delimiter)
            writer.writerow(["step", "energy_drift_percent"])
            for i, drift in enumerate(self.history):
                writer.writerow([i, drift])
        finally:
            if close:
                f.close()
