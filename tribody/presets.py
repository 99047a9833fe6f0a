"""Named starting configurations.

Every entry is a ``bodies_config`` list accepted by
:meth:`tribody.simulation.SimulationController.initialize`.  The ground plane
is ``x``/``z``; ``y`` is vertical.
"""
import copy

DEFAULT_PRESET = "Default"

PRESETS = {
    "Default": [
        {"id": "body-0", "name": "Alpha", "mass": 1.0, "pos": [-5.0, 0.0, 0.0], "vel": [0.0, 0.0, 0.42]},
        {"id": "body-1", "name": "Beta", "mass": 1.0, "pos": [5.0, 0.0, 0.0], "vel": [0.0, 0.0, -0.42]},
        {"id": "body-2", "name": "Gamma", "mass": 1.5, "pos": [0.0, 0.0, 0.0], "vel": [0.0, 0.0, 0.0]},
    ],
    # Chenciner-Montgomery choreography scaled to length 10 with G = 0.3.
    "Figure Eight": [
        {"id": "body-0", "name": "Alpha", "mass": 1.0, "pos": [9.700436, 0.0, -2.4308753], "vel": [0.0807487, 0.0, 0.0748879]},
        {"id": "body-1", "name": "Beta", "mass": 1.0, "pos": [-9.700436, 0.0, 2.4308753], "vel": [0.0807487, 0.0, 0.0748879]},
        {"id": "body-2", "name": "Gamma", "mass": 1.0, "pos": [0.0, 0.0, 0.0], "vel": [-0.1614974, 0.0, -0.1497758]},
    ],
    "Collision Course": [
        {"id": "body-0", "name": "Alpha", "mass": 2.0, "pos": [-12.0, 0.0, 0.0], "vel": [0.6, 0.0, 0.0]},
        {"id": "body-1", "name": "Beta", "mass": 2.0, "pos": [12.0, 0.0, 0.0], "vel": [-0.6, 0.0, 0.0]},
        {"id": "body-2", "name": "Gamma", "mass": 0.5, "pos": [0.0, 0.0, 20.0], "vel": [0.0, 0.0, 0.0]},
    ],
    # A light body swings past a bound pair and is flung outward.
    "Slingshot": [
        {"id": "body-0", "name": "Primary", "mass": 8.0, "pos": [-2.0, 0.0, 0.0], "vel": [0.0, 0.0, -0.15]},
        {"id": "body-1", "name": "Companion", "mass": 2.0, "pos": [8.0, 0.0, 0.0], "vel": [0.0, 0.0, 0.6]},
        {"id": "body-2", "name": "Probe", "mass": 0.3, "pos": [-35.0, 0.0, 12.0], "vel": [0.55, 0.0, -0.2]},
    ],
    "Heavy Anchor": [
        {"id": "body-0", "name": "Anchor", "mass": 200.0, "pos": [0.0, 0.0, 0.0], "vel": [0.0, 0.0, 0.0]},
        {"id": "body-1", "name": "Inner", "mass": 1.0, "pos": [15.0, 0.0, 0.0], "vel": [0.0, 0.0, 1.75]},
        {"id": "body-2", "name": "Outer", "mass": 1.0, "pos": [-25.0, 0.0, 0.0], "vel": [0.0, 0.3, -1.36]},
    ],
}


def get_preset(name):
    """Return a deep copy of the named preset."""
    if name not in PRESETS:
        raise KeyError(f"Preset '{name}' not found")
    return copy.deepcopy(PRESETS[name])
