import json

import numpy as np
import pytest

from tribody.errors import InvalidConfiguration
from tribody.presets import get_preset
from tribody.simulation import SimulationController
from tribody.state_manager import load_config, save_config


def test_save_and_load_round_trip(tmp_path):
    ctl = SimulationController(get_preset("Figure Eight"), {"g_constant": 0.3, "free_play": True})
    ctl.set_body_mass("body-2", 1.25)
    path = save_config(tmp_path / "state.json", ctl)

    bodies_config, options = load_config(path)
    restored = SimulationController(bodies_config, options)

    assert options.free_play is True
    assert restored.get_body("body-2").mass == 1.25
    for a, b in zip(ctl.bodies, restored.bodies):
        assert a.id == b.id
        assert np.array_equal(a.pos, b.pos)
        assert np.array_equal(a.vel, b.vel)
        assert a.color == b.color


def test_load_accepts_bare_body_list(tmp_path):
    path = tmp_path / "bodies.json"
    path.write_text(json.dumps(get_preset("Default")))
    bodies_config, options = load_config(path)
    assert len(bodies_config) == 3
    assert options.g_constant == 0.3


def test_load_rejects_malformed_files(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(InvalidConfiguration):
        load_config(broken)

    no_bodies = tmp_path / "empty.json"
    no_bodies.write_text(json.dumps({"options": {}}))
    with pytest.raises(InvalidConfiguration):
        load_config(no_bodies)

    bad_options = tmp_path / "options.json"
    bad_options.write_text(json.dumps({"bodies": [], "options": {"speed_multiplier": -2}}))
    with pytest.raises(InvalidConfiguration):
        load_config(bad_options)


def test_load_rejects_non_utf8_file(tmp_path):
    binary = tmp_path / "binary.json"
    binary.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(InvalidConfiguration):
        load_config(binary)
