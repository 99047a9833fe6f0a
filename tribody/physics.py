"""Body state for the three-body sandbox.

A :class:`Body` is a point mass with a position, a velocity, the snapshot used
by reset and a bounded trail of past positions.  Everything the controller
mutates during a step lives here; the force model and integrator work on
plain arrays built from these bodies.
"""
from collections import deque
import math

import numpy as np

from . import constants as C
from .errors import InvalidConfiguration


def as_vector(value, what="vector") -> np.ndarray:
    """Return ``value`` as a finite 3-D float vector.

    Values with fewer than three components are padded with zeros.  Anything
    longer, non-numeric or non-finite raises :class:`InvalidConfiguration`.
    """
    try:
        v = np.asarray(value, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{what} must be numeric, got {value!r}") from exc
    if v.size > 3:
        raise InvalidConfiguration(f"{what} has {v.size} components, expected 3")
    if v.size < 3:
        v = np.pad(v, (0, 3 - v.size))
    if not np.all(np.isfinite(v)):
        raise InvalidConfiguration(f"{what} must be finite, got {v.tolist()}")
    return v.copy()


def check_mass(mass) -> float:
    """Validate a mass and return it as a float."""
    try:
        m = float(mass)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"mass must be a number, got {mass!r}") from exc
    if not math.isfinite(m) or m <= 0:
        raise InvalidConfiguration(f"mass must be finite and > 0, got {mass!r}")
    return m


def clamp_trail_length(length) -> int:
    try:
        length = int(length)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"trail capacity must be an integer, got {length!r}") from exc
    if length < 1:
        raise InvalidConfiguration(f"trail capacity must be positive, got {length}")
    return max(C.MIN_TRAIL_LENGTH, min(length, C.MAX_TRAIL_LENGTH))


class Body:
    """Point mass with kinematic state, reset snapshot and trail."""

    def __init__(
        self,
        body_id,
        mass,
        pos,
        vel,
        max_trail_length=C.DEFAULT_TRAIL_LENGTH,
        name=None,
        color=None,
    ):
        """Create a body and start its trail at ``pos``.

        Parameters
        ----------
        body_id : str
            Identifier, stable across resets.
        mass : float
            Strictly positive mass.
        pos, vel : array-like
            Initial position and velocity.  Shorter vectors are zero padded.
        max_trail_length : int, optional
            Trail capacity, clamped to the configured limits.
        """
        self.id = str(body_id)
        self.mass = check_mass(mass)
        self.pos = as_vector(pos, f"position of {self.id}")
        self.vel = as_vector(vel, f"velocity of {self.id}")
        self.name = name if name else self.id
        self.color = tuple(color) if color is not None else C.WHITE

        self.max_trail_length = clamp_trail_length(max_trail_length)
        self.trail = deque(maxlen=self.max_trail_length)
        self.capture_initial_state()
        self.clear_trail()

    def __repr__(self):
        return (
            f"Body(id={self.id!r}, mass={self.mass}, pos={self.pos.tolist()}, "
            f"vel={self.vel.tolist()})"
        )

    @property
    def radius(self) -> float:
        return body_radius(self.mass)

    def capture_initial_state(self):
        """Remember the current position/velocity as the reset target."""
        self.initial_pos = self.pos.copy()
        self.initial_vel = self.vel.copy()

    def restore_initial_state(self):
        self.pos = self.initial_pos.copy()
        self.vel = self.initial_vel.copy()
        self.clear_trail()

    def update_physics_state(self, new_pos, new_vel):
        """Store integrator output without re-validating it."""
        self.pos = np.array(new_pos, dtype=float)
        self.vel = np.array(new_vel, dtype=float)

    def set_mass(self, mass):
        self.mass = check_mass(mass)

    def set_position(self, pos):
        self.pos = as_vector(pos, f"position of {self.id}")

    def set_velocity(self, vel):
        self.vel = as_vector(vel, f"velocity of {self.id}")

    # --- Trail ---
    def update_trail(self):
        """Append the current position, evicting the oldest point when full."""
        self.trail.append(self.pos.copy())

    def clear_trail(self):
        """Drop the history so the trail holds only the current position."""
        self.trail.clear()
        self.trail.append(self.pos.copy())

    def set_trail_length(self, length):
        self.max_trail_length = clamp_trail_length(length)
        self.trail = deque(self.trail, maxlen=self.max_trail_length)

    def trail_array(self) -> np.ndarray:
        if not self.trail:
            return np.zeros((0, 3))
        return np.array(self.trail, dtype=float)

    def to_config(self) -> dict:
        """Return a ``bodies_config`` entry describing the current state."""
        return {
            "id": self.id,
            "name": self.name,
            "mass": self.mass,
            "pos": self.pos.tolist(),
            "vel": self.vel.tolist(),
            "color": list(self.color),
        }

    @staticmethod
    def from_config(cfg, index=0, max_trail_length=C.DEFAULT_TRAIL_LENGTH):
        """Build a body from one ``bodies_config`` mapping."""
        try:
            mass = cfg["mass"]
        except (KeyError, TypeError) as exc:
            raise InvalidConfiguration(f"body #{index} has no mass") from exc
        return Body(
            cfg.get("id") or f"body-{index}",
            mass,
            cfg.get("pos", [0.0, 0.0, 0.0]),
            cfg.get("vel", [0.0, 0.0, 0.0]),
            max_trail_length=max_trail_length,
            name=cfg.get("name"),
            color=cfg.get("color", C.BODY_COLORS[index % len(C.BODY_COLORS)]),
        )


def body_radius(mass) -> float:
    """Collision radius for a body of the given mass.

    The light and heavy branches disagree at ``mass == 1`` (0.5 vs 0.45);
    both laws are kept exactly as they are.
    """
    if mass <= 1:
        return max(C.LIGHT_RADIUS_FLOOR, mass ** (1.0 / 3.0) * C.LIGHT_RADIUS_SCALE)
    return C.HEAVY_RADIUS_BASE + C.HEAVY_RADIUS_LOG_SCALE * math.log10(mass)
