import math

import numpy as np

from hyperion_sim.core.analysis import estimate_period
from hyperion_sim.simulations import SpringMassSimulation


def test_undamped_energy_conservation():
    """
    Undamped, undriven oscillator: E = ½mv² + ½kx² is constant.
    1000 frames of 1/60 s, one RK4 step each.
    """
    sim = SpringMassSimulation(params={"damping": 0.0})
    e0 = sim.snapshot()["total_energy"]
    for _ in range(1000):
        snap = sim.advance(1 / 60)
    drift = abs(snap["total_energy"] - e0) / e0
    print("energy", e0, "->", snap["total_energy"], "reldrift", drift)
    assert sim.step_count == 1000
    assert drift < 1e-3


def test_period_matches_analytic():
    """
    m = 1, k = 10, c = 0:  T = 2π·√(m/k) ≈ 1.987 s.
    Measured from upward zero crossings of x(t).
    """
    sim = SpringMassSimulation(params={"mass": 1.0, "spring_constant": 10.0, "damping": 0.0})
    times, xs = [0.0], [sim.snapshot()["position"]]
    for _ in range(600):
        snap = sim.advance(1 / 60)
        times.append(snap.time)
        xs.append(snap["position"])

    T = estimate_period(np.array(times), np.array(xs))
    T_exp = 2 * math.pi * math.sqrt(1.0 / 10.0)
    err = abs(T - T_exp) / T_exp
    print("period", T, "exp", T_exp, "relerr", err)
    assert err < 0.01
    assert abs(snap["period"] - T_exp) < 1e-12


def test_matches_analytic_solution():
    """
    x(t) = x0·cos(ω0·t) for x0 = 1, v0 = 0, no damping.
    """
    sim = SpringMassSimulation(params={"damping": 0.0})
    for _ in range(120):
        snap = sim.advance(1 / 60)
    w0 = math.sqrt(10.0)
    x_exp = math.cos(w0 * snap.time)
    print("x", snap["position"], "exp", x_exp)
    assert abs(snap["position"] - x_exp) < 1e-5


def test_damping_regimes():
    """ζ = c / (2√(km)) decides the regime label."""
    sim = SpringMassSimulation(params={"mass": 1.0, "spring_constant": 1.0})
    for c, label in [(0.0, "undamped"), (0.5, "underdamped"), (2.0, "critically damped")]:
        sim.set_parameter("damping", c)
        sim.advance(1 / 60)
        assert sim.derived["damping_regime"] == label
    sim.set_parameter("spring_constant", 0.1)
    sim.advance(1 / 60)
    # ζ = 2 / (2·√0.1) ≈ 3.16
    assert sim.derived["damping_regime"] == "overdamped"


def test_damped_energy_decreases():
    sim = SpringMassSimulation(params={"damping": 0.5})
    e0 = sim.snapshot()["total_energy"]
    for _ in range(300):
        snap = sim.advance(1 / 60)
    assert snap["total_energy"] < 0.5 * e0


def test_driven_resonance_grows():
    """
    Drive at the natural frequency with light damping: the amplitude
    builds up well beyond the static response F0/k.
    """
    f0 = math.sqrt(10.0) / (2 * math.pi)
    sim = SpringMassSimulation(params={
        "initial_position": 0.0, "damping": 0.0,
        "drive_amplitude": 1.0, "drive_frequency": f0,
    })
    peak = 0.0
    for _ in range(1200):
        snap = sim.advance(1 / 60)
        peak = max(peak, abs(snap["position"]))
    print("peak amplitude", peak)
    assert peak > 10 * (1.0 / 10.0)


def test_phase_history_bounded():
    sim = SpringMassSimulation()
    for _ in range(400):
        sim.advance(1 / 60)
    t, phase = sim.snapshot().history["phase"]
    assert len(t) == 300
    assert phase.shape == (300, 2)
    assert np.all(np.diff(t) > 0)
