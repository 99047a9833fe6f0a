"""Exceptions raised by the simulation core."""


class SimulationError(Exception):
    """Base class for every error raised by :mod:`tribody`."""


class InvalidConfiguration(SimulationError, ValueError):
    """A mass, vector, option or body id was rejected before any mutation."""


class IllegalTransition(SimulationError, RuntimeError):
    """The requested call is not allowed in the controller's current state."""

    def __init__(self, action, state):
        self.action = action
        self.state = state
        super().__init__(f"cannot {action} while {state.value}")
