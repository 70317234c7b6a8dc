# MIT License (see LICENSE)
"""
Planar N-body gravity.

State layout: per body [x, y, vx, vy], flattened in body order.

Acceleration of body i:

    a_i = Σ_{j≠i} G·m_j·(r_j - r_i) / (|r_j - r_i|² + ε²)^(3/2)

optionally scaled by the first post-Newtonian correction factor
1 + 3·G·m_j / (c²·r). Overlapping bodies merge inelastically, conserving
mass and momentum.

References:
    https://en.wikipedia.org/wiki/N-body_problem
    Softening: Aarseth, Gravitational N-Body Simulations (2003), §2.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
import logging
import math

import numpy as np

from ..constants import DEFAULT_SOFTENING, G_NEWTON, SPEED_OF_LIGHT, EPS

logger = logging.getLogger(__name__)


@dataclass
class Body:
    """
    One gravitating body.

    Attributes:
        name: Label for readouts.
        mass: Mass in kg (> 0).
        radius: Physical radius in m, used for merging.
        position: (x, y) in m.
        velocity: (vx, vy) in m/s.
    """
    name: str
    mass: float
    radius: float
    position: tuple[float, float]
    velocity: tuple[float, float]


@dataclass(frozen=True)
class GravityCoefficients:
    masses: np.ndarray
    G: float = G_NEWTON
    softening: float = DEFAULT_SOFTENING
    relativistic: bool = False
    c: float = SPEED_OF_LIGHT


def pack_state(bodies: list[Body]) -> np.ndarray:
    """Flatten bodies into a [x, y, vx, vy]·n state vector."""
    if not bodies:
        return np.zeros(0, dtype=np.float64)
    rows = [(b.position[0], b.position[1], b.velocity[0], b.velocity[1]) for b in bodies]
    return np.array(rows, dtype=np.float64).reshape(-1)


def unpack_state(y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Split a state vector into positions (n, 2) and velocities (n, 2) views."""
    s = y.reshape(-1, 4)
    return s[:, 0:2], s[:, 2:4]


def accelerations(pos: np.ndarray, c: GravityCoefficients) -> np.ndarray:
    """Vectorised pairwise accelerations, shape (n, 2)."""
    n = pos.shape[0]
    if n < 2:
        return np.zeros_like(pos)
    # d[i, j] = r_j - r_i
    d = pos[None, :, :] - pos[:, None, :]
    # floored so coincident unsoftened bodies get zero force, not NaN
    r2 = np.maximum(np.sum(d * d, axis=2) + c.softening * c.softening, EPS)
    r = np.sqrt(r2)
    factor = c.G * c.masses[None, :] / (r2 * r)
    if c.relativistic:
        factor = factor * (1.0 + 3.0 * c.G * c.masses[None, :] / (c.c * c.c * r))
    np.fill_diagonal(factor, 0.0)
    return np.einsum("ij,ijk->ik", factor, d)


def derivatives(y: np.ndarray, t: float, c: GravityCoefficients) -> np.ndarray:
    pos, vel = unpack_state(y)
    acc = accelerations(pos, c)
    return np.concatenate((vel, acc), axis=1).reshape(-1)


def merge(a: Body, b: Body) -> Body:
    """
    Perfectly inelastic merger of two bodies.

    Mass and momentum are conserved, the result sits at the centre of
    mass and keeps the combined volume: r = (r_a³ + r_b³)^(1/3).
    """
    m = a.mass + b.mass
    pa, pb = np.asarray(a.position), np.asarray(b.position)
    va, vb = np.asarray(a.velocity), np.asarray(b.velocity)
    pos = (a.mass * pa + b.mass * pb) / m
    vel = (a.mass * va + b.mass * vb) / m
    heavier, lighter = (a, b) if a.mass >= b.mass else (b, a)
    return Body(
        name=heavier.name if heavier.name == lighter.name else f"{heavier.name}+{lighter.name}",
        mass=m,
        radius=(a.radius ** 3 + b.radius ** 3) ** (1.0 / 3.0),
        position=(float(pos[0]), float(pos[1])),
        velocity=(float(vel[0]), float(vel[1])),
    )


def merge_overlapping(bodies: list[Body]) -> tuple[list[Body], int]:
    """
    Merge every pair of overlapping bodies.

    Repeats until no pair overlaps, since a merged body is larger and may
    swallow a third one.

    Returns:
        Tuple (new_bodies, merge_count). The input list is not modified.
    """
    out = list(bodies)
    merges = 0
    found = True
    while found and len(out) > 1:
        found = False
        for i in range(len(out)):
            for j in range(i + 1, len(out)):
                a, b = out[i], out[j]
                dx = a.position[0] - b.position[0]
                dy = a.position[1] - b.position[1]
                if math.hypot(dx, dy) < a.radius + b.radius:
                    logger.info("Merging bodies '%s' and '%s'", a.name, b.name)
                    out[i] = merge(a, b)
                    del out[j]
                    merges += 1
                    found = True
                    break
            if found:
                break
    return out, merges


def unique_names(bodies: list[Body]) -> list[Body]:
    """
    Copy of ``bodies`` with repeated names suffixed " (2)", " (3)", ...

    Names key the per-body trails, so they must be distinct.
    """
    seen: set[str] = set()
    out = []
    for b in bodies:
        name, k = b.name, 1
        while name in seen:
            k += 1
            name = f"{b.name} ({k})"
        seen.add(name)
        out.append(b if name == b.name else replace(b, name=name))
    return out


def bodies_from_state(template: list[Body], y: np.ndarray) -> list[Body]:
    """Copy ``template`` with positions and velocities taken from ``y``."""
    pos, vel = unpack_state(y)
    return [
        Body(b.name, b.mass, b.radius, (float(p[0]), float(p[1])), (float(v[0]), float(v[1])))
        for b, p, v in zip(template, pos, vel)
    ]


def orbital_elements(
    position: np.ndarray,
    velocity: np.ndarray,
    central_position: np.ndarray,
    central_velocity: np.ndarray,
    mu: float,
) -> dict[str, float]:
    """
    Two-body osculating elements of an orbit around a central mass.

    Args:
        position, velocity: State of the orbiting body.
        central_position, central_velocity: State of the central body.
        mu: Gravitational parameter G·(M + m).

    Returns:
        Dict with semi_major_axis (inf for unbound), eccentricity,
        period (inf for unbound), specific_energy, specific_angular_momentum.
    """
    r = np.asarray(position, dtype=np.float64) - np.asarray(central_position, dtype=np.float64)
    v = np.asarray(velocity, dtype=np.float64) - np.asarray(central_velocity, dtype=np.float64)
    r_mag = max(float(np.hypot(r[0], r[1])), EPS)
    v2 = float(v @ v)
    energy = 0.5 * v2 - mu / r_mag
    h = float(r[0] * v[1] - r[1] * v[0])
    # eccentricity vector e = ((v² - μ/r)·r - (r·v)·v) / μ
    e_vec = ((v2 - mu / r_mag) * r - float(r @ v) * v) / mu
    ecc = float(np.hypot(e_vec[0], e_vec[1]))
    if energy < 0.0:
        a = -mu / (2.0 * energy)
        period = 2.0 * math.pi * math.sqrt(a ** 3 / mu)
    else:
        a = math.inf
        period = math.inf
    return {
        "semi_major_axis": a,
        "eccentricity": ecc,
        "period": period,
        "specific_energy": energy,
        "specific_angular_momentum": h,
    }


def circular_speed(central_mass: float, distance: float, G: float = G_NEWTON) -> float:
    """v = √(G·M / r)."""
    return math.sqrt(G * central_mass / distance)


def to_center_of_mass_frame(bodies: list[Body]) -> list[Body]:
    """Shift positions and velocities so the total momentum is zero at the origin."""
    if not bodies:
        return []
    m = np.array([b.mass for b in bodies])
    pos = np.array([b.position for b in bodies], dtype=np.float64)
    vel = np.array([b.velocity for b in bodies], dtype=np.float64)
    pos -= (m[:, None] * pos).sum(axis=0) / m.sum()
    vel -= (m[:, None] * vel).sum(axis=0) / m.sum()
    return [
        Body(b.name, b.mass, b.radius, (float(p[0]), float(p[1])), (float(v[0]), float(v[1])))
        for b, p, v in zip(bodies, pos, vel)
    ]


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

SUN_MASS = 1.989e30


def solar_system() -> list[Body]:
    """Sun and the planets out to Jupiter on circular-ish orbits."""
    planets = [
        # name, mass, radius, distance, speed
        ("Mercury", 3.301e23, 2.440e6, 57.9e9, 47.36e3),
        ("Venus", 4.867e24, 6.052e6, 108.2e9, 35.02e3),
        ("Earth", 5.972e24, 6.371e6, 149.6e9, 29.78e3),
        ("Mars", 6.417e23, 3.390e6, 227.9e9, 24.07e3),
        ("Jupiter", 1.898e27, 6.991e7, 778.5e9, 13.07e3),
    ]
    bodies = [Body("Sun", SUN_MASS, 6.957e8, (0.0, 0.0), (0.0, 0.0))]
    for name, m, r, dist, speed in planets:
        bodies.append(Body(name, m, r, (dist, 0.0), (0.0, speed)))
    return to_center_of_mass_frame(bodies)


def earth_moon() -> list[Body]:
    return to_center_of_mass_frame([
        Body("Earth", 5.97e24, 6.371e6, (0.0, 0.0), (0.0, 0.0)),
        Body("Moon", 7.342e22, 1.737e6, (384_400e3, 0.0), (0.0, 1022.0)),
    ])


def binary_stars() -> list[Body]:
    """Two stars on a circular mutual orbit and a circumbinary planet."""
    m_a, m_b = 1.5e30, 1.2e30
    sep = 2e10
    v_rel = circular_speed(m_a + m_b, sep)
    total = m_a + m_b
    return to_center_of_mass_frame([
        Body("Star A", m_a, 7.0e8, (-sep * m_b / total, 0.0), (0.0, -v_rel * m_b / total)),
        Body("Star B", m_b, 6.0e8, (sep * m_a / total, 0.0), (0.0, v_rel * m_a / total)),
        Body("Planet", 6.0e24, 6.4e6, (0.0, 5e10), (-circular_speed(total, 5e10), 0.0)),
    ])


def three_body() -> list[Body]:
    """Three equal stars: a central one and two on opposite sides."""
    return to_center_of_mass_frame([
        Body("Star A", 1e30, 7.0e8, (0.0, 0.0), (0.0, 0.0)),
        Body("Star B", 1e30, 7.0e8, (3e10, 0.0), (0.0, 4e4)),
        Body("Star C", 1e30, 7.0e8, (-3e10, 0.0), (0.0, -4e4)),
    ])


def lagrange_points() -> list[Body]:
    """Sun, a Jupiter-mass planet and Trojans at L4/L5 (±60°)."""
    m_planet = 1.8982e27
    a = 778.5e9
    v = circular_speed(SUN_MASS + m_planet, a)
    bodies = [
        Body("Sun", SUN_MASS, 6.957e8, (0.0, 0.0), (0.0, 0.0)),
        Body("Jupiter", m_planet, 6.991e7, (a, 0.0), (0.0, v)),
    ]
    for name, sign in (("L4 Trojan", 1.0), ("L5 Trojan", -1.0)):
        ang = sign * math.pi / 3.0
        bodies.append(Body(
            name, 1e20, 1e5,
            (a * math.cos(ang), a * math.sin(ang)),
            (-v * math.sin(ang), v * math.cos(ang)),
        ))
    return to_center_of_mass_frame(bodies)


PRESETS = {
    "solar_system": solar_system,
    "earth_moon": earth_moon,
    "binary_stars": binary_stars,
    "three_body": three_body,
    "lagrange_points": lagrange_points,
}


def preset_bodies(name: str) -> list[Body]:
    try:
        return PRESETS[name]()
    except KeyError:
        raise ValueError(f"Unknown preset: {name}") from None
