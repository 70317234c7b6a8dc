# MIT License (see LICENSE)
"""
Explicit ODE integrators over flat state vectors.

Every simulation writes its equations of motion as a derivative function

    f(state, t, params) -> dstate/dt

and hands it to one of the steppers below. Steppers are pure: they return
a new array and never modify ``state``.

Available integrators:
- euler_step: Forward Euler (first order, reference only)
- semi_implicit_euler_step: Symplectic Euler for [q..., v...] layouts
- rk4_step: Fixed-step 4th-order Runge-Kutta (high accuracy)
- rk4_adaptive_step: Adaptive RK4 with step-doubling error control

Reference:
    Runge-Kutta methods: https://en.wikipedia.org/wiki/Runge-Kutta_methods
    Semi-implicit Euler: https://en.wikipedia.org/wiki/Semi-implicit_Euler_method
"""
from __future__ import annotations
from typing import Any, Callable

import numpy as np

Derivatives = Callable[[np.ndarray, float, Any], np.ndarray]
Stepper = Callable[[np.ndarray, float, float, Derivatives, Any], np.ndarray]


def euler_step(y: np.ndarray, t: float, dt: float, f: Derivatives, params: Any) -> np.ndarray:
    """y(t+dt) = y + dt·f(y, t)."""
    return y + dt * f(y, t, params)


def semi_implicit_euler_step(
    y: np.ndarray,
    t: float,
    dt: float,
    f: Derivatives,
    params: Any,
) -> np.ndarray:
    """
    Symplectic Euler for second-order systems.

    The state must be laid out as all coordinates followed by all
    velocities, ``[q_0..q_{n-1}, v_0..v_{n-1}]``. Velocities are kicked
    first with the acceleration at the current state, then coordinates
    drift with the *new* velocities:

        v' = v + dt·a(q, v)
        q' = q + dt·v'

    Energy error stays bounded for conservative systems, which is why the
    pendulum chain uses it.

    Args:
        y: State vector [q..., v...] (even length).
        t: Current time.
        dt: Timestep.
        f: Derivative function; its second half must be the acceleration.
        params: Frozen coefficients passed through to f.
    """
    n = y.shape[0] // 2
    dy = f(y, t, params)
    out = y.copy()
    out[n:] = y[n:] + dt * dy[n:]
    # dq/dt evaluated at the kicked velocities
    dq = f(out, t + dt, params)[:n]
    out[:n] = y[:n] + dt * dq
    return out


def rk4_step(y: np.ndarray, t: float, dt: float, f: Derivatives, params: Any) -> np.ndarray:
    """
    Advance y by dt using classical 4th-order Runge-Kutta.

    RK4 evaluates derivatives at 4 points within the timestep and combines
    them with weights (1, 2, 2, 1)/6 to achieve O(dt⁵) local error.

    Args:
        y: State vector.
        t: Current time (time-dependent forcing uses it).
        dt: Timestep in seconds.
        f: Derivative function f(y, t, params).
        params: Frozen coefficients passed through to f.

    Reference:
        https://en.wikipedia.org/wiki/Runge-Kutta_methods#The_Runge-Kutta_method
    """
    half = 0.5 * dt
    k1 = f(y, t, params)
    k2 = f(y + half * k1, t + half, params)
    k3 = f(y + half * k2, t + half, params)
    k4 = f(y + dt * k3, t + dt, params)
    return y + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


def rk4_adaptive_step(
    y: np.ndarray,
    t: float,
    dt: float,
    f: Derivatives,
    params: Any,
    tol: float,
    dt_min: float,
    dt_max: float,
) -> tuple[np.ndarray, float, float]:
    """
    Adaptive RK4 using step-doubling for error estimation.

    Compares a single dt step against two dt/2 steps. If the difference
    exceeds tolerance, the step is rejected and dt is reduced.

    Deterministic acceptance rule (for reproducibility):
        Accept if error ≤ tol OR dt ≤ dt_min

    The next dt is scaled using the standard formula for RK4 (order 4):
        dt_new = dt × (tol / error)^(1/5)

    The error is measured relative to the state magnitude so that the same
    tolerance works for astronomical and laboratory units.

    Returns:
        Tuple (new_state, accepted_dt, suggested_next_dt):
        - new_state: y unchanged if rejected
        - accepted_dt: Actual time advanced (0 if rejected, dt if accepted)
        - suggested_next_dt: Recommended dt for next call
    """
    full = rk4_step(y, t, dt, f, params)
    half = rk4_step(y, t, 0.5 * dt, f, params)
    two_half = rk4_step(half, t + 0.5 * dt, 0.5 * dt, f, params)

    scale_ref = np.maximum(np.abs(y), 1.0)
    err = float(np.max(np.abs(two_half - full) / scale_ref))

    if err <= tol or dt <= dt_min:
        if err < 1e-18:
            scale = 2.0  # Error negligible, can safely double
        else:
            scale = float((tol / err) ** 0.2)
        scale = max(0.5, min(2.0, 0.9 * scale))
        dt_next = max(dt_min, min(dt_max, dt * scale))
        # Accept the two-half-steps result (the more accurate one)
        return two_half, dt, dt_next

    return y, 0.0, max(dt_min, dt * 0.5)


def integrate_adaptive(
    y: np.ndarray,
    t: float,
    span: float,
    f: Derivatives,
    params: Any,
    tol: float,
    dt_min: float,
    dt_max: float,
    dt_guess: float | None = None,
) -> tuple[np.ndarray, float, int]:
    """
    Cover exactly ``span`` seconds with adaptive RK4 steps.

    Returns:
        Tuple (new_state, suggested_next_dt, accepted_steps).
    """
    h = min(dt_max, dt_guess or dt_max)
    elapsed = 0.0
    steps = 0
    while elapsed < span:
        h_try = min(h, span - elapsed)
        y, taken, h_next = rk4_adaptive_step(y, t + elapsed, h_try, f, params, tol, dt_min, dt_max)
        if taken > 0.0:
            elapsed += taken
            steps += 1
        if taken == 0.0 or h_try == h:
            h = h_next
        else:
            # a truncated tail step says nothing about the next full step
            h = max(h, h_next)
    return y, h, steps


_STEPPERS: dict[str, Stepper] = {
    "euler": euler_step,
    "semi_implicit_euler": semi_implicit_euler_step,
    "rk4": rk4_step,
}


def get_stepper(name: str) -> Stepper:
    """Look up a fixed-step integrator by name."""
    try:
        return _STEPPERS[name]
    except KeyError:
        raise ValueError(f"Unknown integrator: {name}") from None
