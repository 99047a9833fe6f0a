from pathlib import Path
import json
import logging

from .errors import InvalidConfiguration
from .simulation import SimulationOptions

logger = logging.getLogger(__name__)


def save_config(filepath, controller):
    """Serialize the controller's bodies and options to a JSON file."""
    data = {
        "bodies": controller.export_config(),
        "options": controller.options.to_dict(),
    }
    path = Path(filepath)
    path.write_text(json.dumps(data, indent=2))
    logger.info("Saved %d bodies to %s", len(data["bodies"]), path)
    return path


def load_config(filepath):
    """Load ``(bodies_config, options)`` written by :func:`save_config`.

    The result is meant to be passed straight to
    :meth:`~tribody.simulation.SimulationController.initialize`, which does
    the full validation.
    """
    path = Path(filepath)
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidConfiguration(f"{path} is not valid JSON: {exc}") from exc

    # A bare list is accepted as bodies with default options.
    if isinstance(data, list):
        data = {"bodies": data}
    if not isinstance(data, dict) or not isinstance(data.get("bodies"), list):
        raise InvalidConfiguration(f"{path} has no 'bodies' list")

    options = SimulationOptions.from_value(data.get("options")).validated()
    logger.info("Loaded %d bodies from %s", len(data["bodies"]), path)
    return data["bodies"], options
