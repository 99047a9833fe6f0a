"""Three-body gravity sandbox core."""

from importlib.metadata import PackageNotFoundError, version

from .errors import IllegalTransition, InvalidConfiguration, SimulationError
from .physics import Body, body_radius
from .integrators import compute_accelerations, pair_accelerations, step_bodies
from .physics_utils import TerminationCause, TerminationInfo
from .simulation import (
    BodySnapshot,
    FrameResult,
    RunState,
    SimulationController,
    SimulationOptions,
)
from .presets import PRESETS, get_preset
from .state_manager import save_config, load_config

try:
    __version__ = version("tribody")
except PackageNotFoundError:
    # Fallback when package metadata is unavailable (e.g. running from source)
    __version__ = "0.0.0"

__all__ = [
    "Body",
    "body_radius",
    "compute_accelerations",
    "pair_accelerations",
    "step_bodies",
    "TerminationCause",
    "TerminationInfo",
    "BodySnapshot",
    "FrameResult",
    "RunState",
    "SimulationController",
    "SimulationOptions",
    "PRESETS",
    "get_preset",
    "save_config",
    "load_config",
    "SimulationError",
    "InvalidConfiguration",
    "IllegalTransition",
    "__version__",
]
