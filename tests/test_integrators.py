import math

import numpy as np
import pytest

from hyperion_sim.core import analysis
from hyperion_sim.core.integrators import (
    euler_step,
    get_stepper,
    integrate_adaptive,
    rk4_adaptive_step,
    rk4_step,
    semi_implicit_euler_step,
)
from hyperion_sim.core.lyapunov import LyapunovEstimator
from hyperion_sim.history import HistoryBuffer
from hyperion_sim.util import clamp, guard, unit, wrap_angle


def decay(y, t, k):
    return -k * y


def oscillator(y, t, params):
    # [q, v] with unit mass and stiffness
    return np.array([y[1], -y[0]])


def _final_error(stepper, dt):
    y = np.array([1.0])
    t = 0.0
    for _ in range(int(round(1.0 / dt))):
        y = stepper(y, t, dt, decay, 1.0)
        t += dt
    return abs(y[0] - math.exp(-1.0))


def test_rk4_is_fourth_order():
    """Halving dt cuts the global error by about 2⁴ = 16."""
    ratio = _final_error(rk4_step, 0.1) / _final_error(rk4_step, 0.05)
    print("rk4 error ratio", ratio)
    assert 12.0 < ratio < 20.0


def test_euler_is_first_order():
    ratio = _final_error(euler_step, 0.01) / _final_error(euler_step, 0.005)
    assert 1.8 < ratio < 2.2


def test_semi_implicit_euler_energy_bounded():
    """
    Symplectic Euler keeps the oscillator energy within O(dt) of its
    initial value forever; forward Euler grows it by (1 + dt²) per step.
    """
    dt = 0.1
    y_si = np.array([1.0, 0.0])
    y_fe = y_si.copy()
    worst = 0.0
    for i in range(10_000):
        y_si = semi_implicit_euler_step(y_si, i * dt, dt, oscillator, None)
        y_fe = euler_step(y_fe, i * dt, dt, oscillator, None)
        worst = max(worst, abs(0.5 * (y_si @ y_si) - 0.5))
    print("symplectic worst energy error", worst)
    assert worst < 0.05
    assert 0.5 * (y_fe @ y_fe) > 10.0


def test_steppers_do_not_modify_input():
    y = np.array([1.0, 0.5])
    before = y.copy()
    for name in ("euler", "semi_implicit_euler", "rk4"):
        get_stepper(name)(y, 0.0, 0.1, oscillator, None)
        assert np.array_equal(y, before)


def test_unknown_stepper_raises():
    with pytest.raises(ValueError, match="Unknown integrator"):
        get_stepper("verlet9")


def test_adaptive_rejects_large_step():
    y = np.array([1.0])
    out, taken, dt_next = rk4_adaptive_step(y, 0.0, 1.0, decay, 50.0, tol=1e-9, dt_min=1e-6, dt_max=1.0)
    assert taken == 0.0
    assert out is y
    assert dt_next == 0.5


def test_integrate_adaptive_covers_span():
    y, h, steps = integrate_adaptive(
        np.array([1.0]), 0.0, 1.0, decay, 1.0, tol=1e-10, dt_min=1e-6, dt_max=0.5)
    print("adaptive steps", steps, "next h", h)
    assert abs(y[0] - math.exp(-1.0)) < 1e-7
    assert steps > 1
    assert 0.0 < h <= 0.5


def test_lyapunov_linear_system():
    """
    y' = diag(1, -1)·y: separations grow like eᵗ, so λ = 1.
    """
    rates = np.array([1.0, -1.0])
    primary = np.zeros(2)
    est = LyapunovEstimator(1e-8, 1e-6, np.array([1.0, 1.0]))
    est.seed(primary)
    dt = 0.01
    for _ in range(2000):
        est.step(primary, dt, lambda s: s * np.exp(rates * dt))
    print("lambda", est.exponent, "renormalizations", len(est.renormalizations))
    assert abs(est.exponent - 1.0) < 0.05
    assert len(est.renormalizations) >= 3
    assert abs(est.renormalizations[-1].local_exponent - 1.0) < 0.01
    assert est.distance <= est.threshold


def test_lyapunov_contracting_system():
    primary = np.zeros(1)
    est = LyapunovEstimator(1e-3, 1e-1, np.array([1.0]))
    est.seed(primary)
    for _ in range(100):
        est.step(primary, 0.01, lambda s: s * math.exp(-0.01))
    assert est.exponent < 0.0
    assert est.divergence_time() == math.inf


def test_lyapunov_collapsed_shadow_reseeded():
    primary = np.array([1.0, 2.0])
    est = LyapunovEstimator(1e-4, 1e-2, np.array([0.0, 1.0]))
    est.seed(primary)
    event = est.step(primary, 0.01, lambda s: primary.copy())
    assert event is None
    assert math.isclose(np.linalg.norm(est.shadow - primary), 1e-4, rel_tol=1e-9)


def test_lyapunov_rejects_bad_settings():
    with pytest.raises(ValueError):
        LyapunovEstimator(1e-2, 1e-3, np.array([1.0]))
    with pytest.raises(ValueError):
        LyapunovEstimator(1e-4, 1e-2, np.zeros(3))


def test_estimate_period_sine():
    t = np.arange(0.0, 10.0, 0.01)
    assert abs(analysis.estimate_period(t, np.sin(math.pi * t)) - 2.0) < 1e-3
    assert math.isnan(analysis.estimate_period(t, np.ones_like(t)))


def test_power_spectrum_peak():
    dt = 1 / 128
    t = np.arange(256) * dt
    freqs, amps = analysis.power_spectrum(3.0 + np.sin(2 * math.pi * 5.0 * t), dt)
    assert freqs.shape == (129,)
    k = int(np.argmax(amps))
    assert freqs[k] == 5.0
    assert abs(amps[k] - 0.5) < 1e-9
    assert amps[0] < 1e-12


def test_damping_regime():
    assert analysis.damping_regime(0.0) == "undamped"
    assert analysis.damping_regime(0.3) == "underdamped"
    assert analysis.damping_regime(1.01) == "critically damped"
    assert analysis.damping_regime(3.0) == "overdamped"


def test_history_buffer():
    h = HistoryBuffer(3)
    v = np.array([1.0, 2.0])
    assert h.append(0.0, v)
    v[0] = 99.0
    assert not h.append(0.0, v)
    for t in (1.0, 2.0, 3.0):
        h.append(t, np.array([t, t]))
    times, values = h.arrays()
    assert list(times) == [1.0, 2.0, 3.0]
    assert values.shape == (3, 2)
    assert h.tail(2)[0, 0] == 2.0
    h.clear()
    assert len(h) == 0 and h.last is None
    with pytest.raises(ValueError):
        HistoryBuffer(0)


def test_vector_helpers():
    v = unit(np.array([3.0, 0.0, 4.0, 0.0]))
    assert np.allclose(v, [0.6, 0.0, 0.8, 0.0])
    assert np.array_equal(unit(np.zeros(3)), np.zeros(3))
    assert clamp(-5.0, 0.0, 2.0) == 0.0
    assert abs(float(wrap_angle(-3 * math.pi / 2)) - math.pi / 2) < 1e-12
    assert guard(0.0) > 0.0 and guard(-1e-15) < 0.0
    assert guard(-2.0) == -2.0
