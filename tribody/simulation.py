"""Simulation controller: owns the bodies and the run state machine.

The controller is a plain object driven by explicit method calls.  A render
loop (or a test) feeds it real-time deltas through :meth:`step`, which turns
them into a bounded number of fixed-size physics steps, and reads back a
:class:`FrameResult` after every call.
"""
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
import logging
import math
from typing import Optional

import numpy as np

from . import constants as C
from .errors import IllegalTransition, InvalidConfiguration
from .integrators import step_bodies
from .physics import Body, clamp_trail_length
from .physics_utils import TerminationInfo, check_boundary, detect_collision, record_trails
from .presets import DEFAULT_PRESET, get_preset

logger = logging.getLogger(__name__)


class RunState(Enum):
    SETUP = "setup"
    RUNNING = "running"
    PAUSED = "paused"
    TERMINATED = "terminated"


def _finite(value, what) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{what} must be a number, got {value!r}") from exc
    if not math.isfinite(v):
        raise InvalidConfiguration(f"{what} must be finite, got {value!r}")
    return v


def _frozen(arr):
    arr.flags.writeable = False
    return arr


def _check_speed(multiplier) -> float:
    speed = _finite(multiplier, "speed multiplier")
    if speed < C.MIN_SPEED_FACTOR:
        raise InvalidConfiguration(f"speed multiplier must be >= 0, got {multiplier!r}")
    return min(speed, C.MAX_SPEED_FACTOR)


@dataclass
class SimulationOptions:
    g_constant: float = C.G_DEFAULT
    boundary_radius: float = C.BOUNDARY_RADIUS
    free_play: bool = C.FREE_PLAY
    trail_capacity: int = C.DEFAULT_TRAIL_LENGTH
    speed_multiplier: float = C.SPEED_FACTOR

    @classmethod
    def from_value(cls, value) -> "SimulationOptions":
        """Accept ``None``, an instance or a mapping of field names."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return replace(value)
        if isinstance(value, Mapping):
            known = {f.name for f in fields(cls)}
            unknown = set(value) - known
            if unknown:
                raise InvalidConfiguration(f"unknown options: {sorted(unknown)}")
            return cls(**value)
        raise InvalidConfiguration(f"options must be a mapping, got {type(value).__name__}")

    def validated(self) -> "SimulationOptions":
        g = _finite(self.g_constant, "G")
        if g < 0:
            raise InvalidConfiguration(f"G must be >= 0, got {self.g_constant!r}")
        radius = _finite(self.boundary_radius, "boundary radius")
        if radius <= 0:
            raise InvalidConfiguration(f"boundary radius must be > 0, got {self.boundary_radius!r}")
        return SimulationOptions(
            g_constant=g,
            boundary_radius=radius,
            free_play=bool(self.free_play),
            trail_capacity=clamp_trail_length(self.trail_capacity),
            speed_multiplier=_check_speed(self.speed_multiplier),
        )

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True, eq=False)
class BodySnapshot:
    id: str
    name: str
    mass: float
    radius: float
    position: np.ndarray
    velocity: np.ndarray
    trail: np.ndarray
    color: tuple = C.WHITE


@dataclass(frozen=True, eq=False)
class FrameResult:
    """Read-only view of the simulation handed back after every call."""

    bodies: tuple
    state: RunState
    termination: Optional[TerminationInfo] = None
    simulation_time: float = 0.0
    step_count: int = 0
    options: SimulationOptions = field(default_factory=SimulationOptions)

    def body(self, body_id) -> BodySnapshot:
        for snap in self.bodies:
            if snap.id == body_id:
                return snap
        raise KeyError(body_id)


class SimulationController:
    """Owns every :class:`~tribody.physics.Body` and decides when stepping is legal."""

    def __init__(self, bodies_config=None, options=None):
        self.bodies = []
        self.options = SimulationOptions()
        self.state = RunState.SETUP
        self.termination = None
        self.simulation_time = 0.0
        self.step_count = 0
        self._accumulator = 0.0
        self._terminal_frame = None
        if bodies_config is None:
            bodies_config = get_preset(DEFAULT_PRESET)
        self.initialize(bodies_config, options)

    # ------------------------------------------------------------------
    def initialize(self, bodies_config, options=None) -> FrameResult:
        """Replace all bodies and options and return to setup.

        Everything is validated first; on error the previous bodies, options
        and state are left untouched.
        """
        opts = SimulationOptions.from_value(options).validated()
        try:
            configs = list(bodies_config)
        except TypeError as exc:
            raise InvalidConfiguration("bodies_config must be a sequence of mappings") from exc
        if not configs:
            raise InvalidConfiguration("at least one body is required")

        bodies = [
            Body.from_config(cfg, index, max_trail_length=opts.trail_capacity)
            for index, cfg in enumerate(configs)
        ]
        ids = [b.id for b in bodies]
        if len(set(ids)) != len(ids):
            raise InvalidConfiguration(f"body ids must be unique, got {ids}")

        self.bodies = bodies
        self.options = opts
        self._enter_setup()
        logger.info(
            "Initialized %d bodies (G=%s, R=%s, free_play=%s)",
            len(bodies), opts.g_constant, opts.boundary_radius, opts.free_play,
        )
        return self.frame()

    def _enter_setup(self):
        self.state = RunState.SETUP
        self.termination = None
        self._terminal_frame = None
        self._accumulator = 0.0
        self.simulation_time = 0.0
        self.step_count = 0

    def _require(self, action, *allowed):
        if self.state not in allowed:
            logger.warning("Rejected %s while %s", action, self.state.value)
            raise IllegalTransition(action, self.state)

    def get_body(self, body_id) -> Body:
        for body in self.bodies:
            if body.id == body_id:
                return body
        logger.warning("Unknown body id %r", body_id)
        raise InvalidConfiguration(f"unknown body id {body_id!r}")

    # --- Editing -------------------------------------------------------
    def set_body_mass(self, body_id, mass) -> FrameResult:
        self._require("set mass", RunState.SETUP, RunState.PAUSED)
        self.get_body(body_id).set_mass(mass)
        return self.frame()

    def set_body_position(self, body_id, position) -> FrameResult:
        self._require("set position", RunState.SETUP, RunState.PAUSED)
        body = self.get_body(body_id)
        body.set_position(position)
        if self.state is RunState.SETUP:
            body.clear_trail()
        return self.frame()

    def set_body_velocity(self, body_id, velocity) -> FrameResult:
        self._require("set velocity", RunState.SETUP, RunState.PAUSED)
        self.get_body(body_id).set_velocity(velocity)
        return self.frame()

    # --- Transitions -----------------------------------------------------
    def start(self) -> FrameResult:
        self._require("start", RunState.SETUP)
        for body in self.bodies:
            body.capture_initial_state()
            body.clear_trail()
        self._enter_setup()
        self.state = RunState.RUNNING
        logger.info("Simulation started")
        return self.frame()

    def pause(self) -> FrameResult:
        self._require("pause", RunState.RUNNING)
        self.state = RunState.PAUSED
        return self.frame()

    def resume(self) -> FrameResult:
        self._require("resume", RunState.PAUSED)
        self._accumulator = 0.0
        self.state = RunState.RUNNING
        return self.frame()

    def stop(self) -> FrameResult:
        self._require("stop", RunState.RUNNING, RunState.PAUSED)
        self.state = RunState.SETUP
        self._accumulator = 0.0
        logger.info("Simulation stopped after %d steps", self.step_count)
        return self.frame()

    def reset(self, to_defaults: bool = False) -> FrameResult:
        """Return to setup with every body back at its captured snapshot.

        Legal from every state, not only after termination, so a running or
        paused run can be rewound too.  With ``to_defaults`` the factory
        default bodies are loaded instead; the current options are kept.
        """
        if to_defaults:
            return self.initialize(get_preset(DEFAULT_PRESET), self.options)
        for body in self.bodies:
            body.restore_initial_state()
        self._enter_setup()
        logger.info("Simulation reset")
        return self.frame()

    # --- Options -------------------------------------------------------
    def set_free_play(self, enabled) -> FrameResult:
        self.options = replace(self.options, free_play=bool(enabled))
        return self.frame()

    def set_speed(self, multiplier) -> FrameResult:
        self.options = replace(self.options, speed_multiplier=_check_speed(multiplier))
        return self.frame()

    def set_trail_capacity(self, capacity) -> FrameResult:
        capacity = clamp_trail_length(capacity)
        for body in self.bodies:
            body.set_trail_length(capacity)
        self.options = replace(self.options, trail_capacity=capacity)
        return self.frame()

    # --- Stepping --------------------------------------------------------
    def step(self, dt=None) -> FrameResult:
        """Advance the simulation.

        ``dt=None`` performs exactly one physics step.  A real-time delta in
        seconds is added to an accumulator and converted into whole
        sub-steps of ``SUBSTEP_INTERVAL``, at most ``MAX_SUBSTEPS_PER_TICK``
        per call; any backlog beyond that is dropped.  Outside the running
        state nothing changes and the current frame is returned.
        """
        if dt is not None:
            dt = _finite(dt, "dt")
            if dt < 0:
                raise InvalidConfiguration(f"dt must be >= 0, got {dt}")

        if self.state is RunState.TERMINATED:
            return self._terminal_frame
        if self.state is not RunState.RUNNING:
            return self.frame()

        if dt is None:
            substeps = 1
        else:
            self._accumulator += dt
            substeps = int(self._accumulator // C.SUBSTEP_INTERVAL)
            self._accumulator -= substeps * C.SUBSTEP_INTERVAL
            if substeps > C.MAX_SUBSTEPS_PER_TICK:
                logger.debug(
                    "Falling behind: dropping %d sub-steps", substeps - C.MAX_SUBSTEPS_PER_TICK
                )
                substeps = C.MAX_SUBSTEPS_PER_TICK
                self._accumulator = 0.0

        h = C.TIME_STEP_BASE * self.options.speed_multiplier
        if h == 0:
            return self.frame()

        for _ in range(substeps):
            if self._advance(h):
                return self._terminal_frame
        return self.frame()

    def _advance(self, h) -> bool:
        step_bodies(self.bodies, h, self.options.g_constant)
        self.simulation_time += h
        self.step_count += 1

        info = detect_collision(self.bodies)
        if info is None and not self.options.free_play:
            info = check_boundary(self.bodies, self.options.boundary_radius)
        if info is not None:
            self._terminate(info)
            return True

        record_trails(self.bodies)
        return False

    def _terminate(self, info):
        self.state = RunState.TERMINATED
        self.termination = info
        _frozen(info.location)
        self._accumulator = 0.0
        self._terminal_frame = self.frame()
        logger.info(
            "Terminated by %s of %s at step %d",
            info.cause.value, ", ".join(info.body_ids), self.step_count,
        )

    # --- Reading ---------------------------------------------------------
    def frame(self) -> FrameResult:
        snapshots = tuple(
            BodySnapshot(
                id=b.id,
                name=b.name,
                mass=b.mass,
                radius=b.radius,
                position=_frozen(b.pos.copy()),
                velocity=_frozen(b.vel.copy()),
                trail=_frozen(b.trail_array()),
                color=b.color,
            )
            for b in self.bodies
        )
        return FrameResult(
            bodies=snapshots,
            state=self.state,
            termination=self.termination,
            simulation_time=self.simulation_time,
            step_count=self.step_count,
            options=replace(self.options),
        )

    def export_config(self):
        """Current bodies as a ``bodies_config`` list."""
        return [b.to_config() for b in self.bodies]
