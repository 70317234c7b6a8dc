import math

import numpy as np

from hyperion_sim.dynamics import lorenz
from hyperion_sim.simulations import DoublePendulumSimulation, LorenzSimulation


def test_lorenz_deterministic():
    """Same parameters, same frames -> bit-identical trajectories."""
    a = LorenzSimulation()
    b = LorenzSimulation()
    for _ in range(1000):
        sa = a.advance(1 / 60)
        sb = b.advance(1 / 60)
    assert np.array_equal(sa.state, sb.state)
    assert sa.step_count == sb.step_count


def test_lorenz_lyapunov_positive():
    """
    σ = 10, ρ = 28, β = 8/3 is chaotic; the largest Lyapunov exponent is
    about 0.9. The running estimate is positive after 5 s and settles
    towards that value by 30 s.
    """
    sim = LorenzSimulation()
    while sim.time < 5.0:
        snap = sim.advance(1 / 60)
    print("lyapunov at 5 s", snap["lyapunov_exponent"])
    assert snap["lyapunov_exponent"] > 0.0
    while sim.time < 30.0:
        snap = sim.advance(1 / 60)
    lam = snap["lyapunov_exponent"]
    print("lyapunov", lam, "renormalizations", len(sim.lyapunov.renormalizations))
    assert lam > 0.0
    assert snap["system_state"] == "chaotic"
    assert math.isfinite(snap["divergence_time"])


def test_lorenz_stays_on_attractor():
    sim = LorenzSimulation()
    for _ in range(600):
        snap = sim.advance(1 / 60)
    assert np.all(np.isfinite(snap.state))
    assert np.linalg.norm(snap.state) < 100.0


def test_lorenz_low_rho_settles_to_fixed_point():
    """ρ = 10 < 24.74: trajectories spiral into C+ or C-."""
    sim = LorenzSimulation(params={"rho": 10.0, "initial_x": 1.0})
    for _ in range(1800):
        snap = sim.advance(1 / 60)
    c = lorenz.LorenzCoefficients(sigma=10.0, rho=10.0, beta=8 / 3)
    dists = [np.linalg.norm(snap.state - np.array(fp)) for fp in lorenz.fixed_points(c)[1:]]
    print("distance to C+/C-", dists)
    assert min(dists) < 1e-2
    assert snap["system_state"] == "stable fixed points"


def test_lorenz_fixed_points():
    c = lorenz.LorenzCoefficients(sigma=10.0, rho=28.0, beta=8 / 3)
    pts = lorenz.fixed_points(c)
    assert len(pts) == 3
    for p in pts:
        assert np.allclose(lorenz.derivatives(np.array(p), 0.0, c), 0.0, atol=1e-12)
    assert lorenz.fixed_points(lorenz.LorenzCoefficients(10.0, 0.5, 8 / 3)) == [(0.0, 0.0, 0.0)]


def test_lorenz_speed_scales_span():
    sim = LorenzSimulation(params={"simulation_speed": 2.0, "time_step": 0.005})
    sim.advance(1 / 60)
    assert abs(sim.time - 2.0 / 60) < 1e-12
    # 2/60 s in steps of at most 0.005 s
    assert sim.step_count == 7


def test_lorenz_power_spectrum_refreshes():
    sim = LorenzSimulation()
    while sim.time < 6.0:
        snap = sim.advance(1 / 60)
    freqs = snap["spectrum_frequencies"]
    amps = snap["spectrum_amplitudes"]
    assert freqs.shape == amps.shape == (33,)
    assert np.all(amps >= 0.0)


def test_double_pendulum_energy_conserved_without_damping():
    sim = DoublePendulumSimulation(params={"damping": 0.0, "angle1": 1.0, "angle2": 0.5})
    e0 = sim.snapshot()["total_energy"]
    for _ in range(600):
        snap = sim.advance(1 / 60)
    drift = abs(snap["total_energy"] - e0) / abs(e0)
    print("double pendulum energy", e0, "->", snap["total_energy"], "reldrift", drift)
    assert drift < 1e-3


def test_double_pendulum_angles_wrapped():
    sim = DoublePendulumSimulation(params={"damping": 0.0, "angular_velocity2": 5.0})
    for _ in range(600):
        snap = sim.advance(1 / 60)
        assert -math.pi <= snap["angle1"] < math.pi
        assert -math.pi <= snap["angle2"] < math.pi


def test_double_pendulum_small_angle_frequency():
    """
    Small oscillations in the in-phase normal mode (m1 = m2, l1 = l2 = l):
        ω² = (g/l)·(2 - √2),   θ2 = √2·θ1
    """
    g, l = 9.81, 1.0
    a = 0.01
    sim = DoublePendulumSimulation(params={
        "damping": 0.0, "mass1": 10.0, "mass2": 10.0, "length1": l, "length2": l,
        "angle1": a, "angle2": math.sqrt(2) * a, "show_comparison": False,
    })
    w = math.sqrt(g / l * (2 - math.sqrt(2)))
    for _ in range(60):
        snap = sim.advance(1 / 60)
    th1_exp = a * math.cos(w * snap.time)
    print("theta1", snap["angle1"], "exp", th1_exp)
    assert abs(snap["angle1"] - th1_exp) < 2e-4


def test_double_pendulum_divergence_tracked():
    sim = DoublePendulumSimulation()
    for _ in range(1200):
        snap = sim.advance(1 / 60)
    assert "lyapunov_exponent" in snap.derived
    assert snap["separation"] <= 1e-2 + 1e-12
    assert len(sim.history["lyapunov"]) > 0


def test_double_pendulum_clear_trail():
    sim = DoublePendulumSimulation()
    for _ in range(30):
        sim.advance(1 / 60)
    sim.clear_trail()
    assert len(sim.history["trail"]) == 0
    sim.advance(1 / 60)
    assert len(sim.history["trail"]) == 1


def test_lorenz_clear_trajectory():
    sim = LorenzSimulation()
    for _ in range(30):
        sim.advance(1 / 60)
    sim.clear_trajectory()
    assert len(sim.history["trajectory"]) == 0
    assert len(sim.history["comparison"]) == 0
    assert len(sim.history["time_series"]) > 0


def test_lorenz_spectrum_includes_current_frame():
    """A refreshed spectrum is built from the 64 newest samples, this frame's included."""
    from hyperion_sim.core.analysis import power_spectrum

    sim = LorenzSimulation()
    prev = sim.snapshot()["spectrum_amplitudes"]
    refreshes = 0
    while sim.time < 12.0:
        snap = sim.advance(1 / 60)
        amps = snap["spectrum_amplitudes"]
        if amps.shape != prev.shape or not np.array_equal(amps, prev):
            t, v = sim.history["time_series"].arrays()
            assert t[-1] == snap.time
            _, expected = power_spectrum(v[-64:, 0], float(np.mean(np.diff(t[-64:]))))
            assert np.array_equal(amps, expected)
            refreshes += 1
        prev = amps
    assert refreshes >= 2
