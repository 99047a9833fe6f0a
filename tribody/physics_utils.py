from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Optional

import numpy as np

from . import constants as C
from .physics import body_radius


class TerminationCause(Enum):
    COLLISION = "collision"
    BOUNDARY_VIOLATION = "boundary_violation"


@dataclass(frozen=True)
class TerminationInfo:
    """Why and where a run ended.

    For a collision ``body_ids`` holds the pair and ``location`` the midpoint
    of their centres; for a boundary exit it holds the single offending body
    and its position.
    """

    cause: TerminationCause
    body_ids: tuple
    location: np.ndarray = field(compare=False)

    def to_dict(self):
        return {
            "cause": self.cause.value,
            "body_ids": list(self.body_ids),
            "location": self.location.tolist(),
        }


def detect_collision(bodies) -> Optional[TerminationInfo]:
    """Return the first overlapping pair, visiting pairs in ``i < j`` order."""
    radii = [body_radius(b.mass) for b in bodies]
    num_bodies = len(bodies)
    for i in range(num_bodies):
        for j in range(i + 1, num_bodies):
            body1, body2 = bodies[i], bodies[j]
            distance = float(np.linalg.norm(body2.pos - body1.pos))
            if distance < radii[i] + radii[j]:
                return TerminationInfo(
                    TerminationCause.COLLISION,
                    (body1.id, body2.id),
                    (body1.pos + body2.pos) / 2.0,
                )
    return None


def distance_from_axis(pos) -> float:
    """Distance from the vertical axis, measured in the ground plane."""
    a, b = C.GROUND_PLANE_AXES
    return math.hypot(pos[a], pos[b])


def check_boundary(bodies, boundary_radius=C.BOUNDARY_RADIUS) -> Optional[TerminationInfo]:
    """Return the first body whose disc pokes out of the arena, if any."""
    for body in bodies:
        if distance_from_axis(body.pos) + body_radius(body.mass) > boundary_radius:
            return TerminationInfo(
                TerminationCause.BOUNDARY_VIOLATION,
                (body.id,),
                body.pos.copy(),
            )
    return None


def record_trails(bodies):
    for body in bodies:
        body.update_trail()
