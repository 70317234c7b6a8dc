import math

import numpy as np
import pytest

from hyperion_sim import registry
from hyperion_sim.parameters import ParameterSet, ParameterSpec
from hyperion_sim.simulations import LorenzSimulation, NewtonsCradleSimulation, SpringMassSimulation
from hyperion_sim.types import SimulationStatus, Snapshot


def test_status_lifecycle():
    sim = SpringMassSimulation()
    assert sim.status is SimulationStatus.READY
    sim.advance(1 / 60)
    assert sim.status is SimulationStatus.RUNNING
    sim.pause()
    assert sim.status is SimulationStatus.PAUSED
    sim.resume()
    assert sim.status is SimulationStatus.RUNNING
    sim.reset()
    assert sim.status is SimulationStatus.READY


def test_pause_is_noop():
    sim = LorenzSimulation()
    for _ in range(10):
        sim.advance(1 / 60)
    sim.pause()
    before = sim.snapshot()
    after = sim.advance(1 / 60)
    assert after.time == before.time
    assert np.array_equal(after.state, before.state)
    assert after.status is SimulationStatus.PAUSED


def test_invalid_dt_ignored():
    sim = SpringMassSimulation()
    for dt in (0.0, -1.0, math.nan, math.inf):
        snap = sim.advance(dt)
        assert snap.time == 0.0
    assert sim.status is SimulationStatus.READY


def test_reset_idempotent():
    sim = LorenzSimulation()
    for _ in range(50):
        sim.advance(1 / 60)
    sim.reset()
    a = sim.snapshot()
    sim.reset()
    b = sim.snapshot()
    assert np.array_equal(a.state, b.state)
    assert a.time == b.time == 0.0
    assert dict(a.derived).keys() == dict(b.derived).keys()
    for name in a.history:
        assert np.array_equal(a.history[name][0], b.history[name][0])


def test_damping_clamped_to_minimum():
    sim = SpringMassSimulation()
    stored = sim.set_parameter("damping", -5)
    assert stored == 0.0
    assert sim.get_parameter("damping") == 0.0


def test_nan_falls_back_to_default():
    sim = SpringMassSimulation()
    assert sim.set_parameter("mass", math.nan) == 1.0


def test_unknown_parameter_raises():
    sim = SpringMassSimulation()
    with pytest.raises(ValueError):
        sim.set_parameter("no_such_parameter", 1.0)


def test_unknown_integrator_raises():
    with pytest.raises(ValueError):
        SpringMassSimulation(integrator="leapfrog9000")


def test_structural_change_resets_state():
    sim = SpringMassSimulation()
    for _ in range(30):
        sim.advance(1 / 60)
    sim.set_parameter("initial_position", 2.0)
    assert sim.time == 0.0
    assert sim.state[0] == 2.0
    assert sim.status is SimulationStatus.READY


def test_parameter_change_applies_from_next_advance():
    sim = SpringMassSimulation(params={"damping": 0.0})
    sim.advance(1 / 60)
    e_before = sim.derived["total_energy"]
    sim.set_parameter("spring_constant", 20.0)
    # nothing recomputed until the next advance
    assert sim.derived["total_energy"] == e_before
    sim.advance(1 / 60)
    assert sim.derived["angular_frequency"] == pytest.approx(math.sqrt(20.0))


def test_snapshot_is_immutable():
    sim = SpringMassSimulation()
    snap = sim.advance(1 / 60)
    with pytest.raises(ValueError):
        snap.state[0] = 99.0
    with pytest.raises(TypeError):
        snap.derived["position"] = 99.0
    sim.advance(1 / 60)
    assert snap.time < sim.time

    nested = Snapshot.build("x", 0.0, SimulationStatus.READY, np.zeros(1),
                            {"elements": {"Earth": {"e": 0.0167}}, "names": ["a"]}, {}, 0)
    with pytest.raises(TypeError):
        nested.derived["elements"]["Earth"]["e"] = 0.5
    assert nested.derived["names"] == ("a",)


def test_substeps_respect_max_step():
    sim = NewtonsCradleSimulation()
    sim.advance(1 / 60)
    # 1/60 s at no more than 1/600 s per sub-step
    assert sim.step_count == 10


def test_parameter_descriptors_consistent():
    for sim_id in registry.ids():
        cls = registry.get(sim_id)
        sim = cls()
        for spec in cls.parameter_specs:
            value = sim.get_parameter(spec.id)
            if spec.kind == "choice":
                assert value in spec.choices
            elif spec.kind == "bool":
                assert isinstance(value, bool)
            else:
                assert spec.min <= value <= spec.max, (sim_id, spec.id)
                assert spec.step > 0
        assert cls.formulas, sim_id


def test_int_parameters_rounded():
    specs = (ParameterSpec("n", "N", 1, 10, 1, 3, kind="int"),)
    params = ParameterSet(specs)
    assert params.set("n", 4.6) == 5
    assert params.set("n", 42) == 10


def test_invalid_choice_falls_back():
    specs = (ParameterSpec("mode", "Mode", kind="choice", default="a", choices=("a", "b")),)
    params = ParameterSet(specs)
    assert params.set("mode", "b") == "b"
    assert params.set("mode", "zzz") == "a"


def test_bad_schema_rejected():
    with pytest.raises(ValueError):
        ParameterSpec("x", "X", 0.0, 1.0, 0.1, 5.0)
    with pytest.raises(ValueError):
        ParameterSet((ParameterSpec("x", "X"), ParameterSpec("x", "X")))


def test_registry_catalog():
    cat = registry.catalog()
    titles = {e.id for entries in cat.values() for e in entries}
    assert titles == set(registry.ids())
    assert [e.id for e in cat["Chaos Theory"]] == ["double_pendulum", "lorenz"]
    with pytest.raises(KeyError):
        registry.get("gravitational_lensing")
    sim = registry.create("lorenz", params={"rho": 35.0})
    assert sim.get_parameter("rho") == 35.0


def test_toggle_pause_and_values():
    sim = SpringMassSimulation(params={"mass": 2.0})
    assert sim.toggle_pause() is SimulationStatus.PAUSED
    assert sim.is_paused
    assert sim.toggle_pause() is SimulationStatus.READY
    values = sim.params.as_dict()
    assert values["mass"] == 2.0
    values["mass"] = 5.0
    assert sim.get_parameter("mass") == 2.0


def test_bool_parameters_validated():
    from hyperion_sim.simulations import DoublePendulumSimulation

    sim = DoublePendulumSimulation()
    assert sim.set_parameter("show_comparison", False) is False
    assert sim.set_parameter("show_comparison", math.nan) is True
    assert sim.set_parameter("show_comparison", 0) is False
    assert sim.set_parameter("show_comparison", "false") is True
    assert sim.set_parameter("show_comparison", np.bool_(False)) is False
    assert sim.set_parameter("show_comparison", 2) is True
