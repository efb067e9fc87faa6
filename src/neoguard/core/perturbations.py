"""Perturbing accelerations on a geocentric orbit and their integration.

Each contributor returns a :class:`PerturbationAcceleration` in km/s²; the
total is their vector sum. Positions are geocentric equatorial in km,
velocities in km/s.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import numpy as np
from numpy.typing import NDArray
from scipy.integrate import solve_ivp

from neoguard.core.ephemeris import earth_heliocentric_position, mean_obliquity
from neoguard.utils.constants import (
    AU_KM,
    EARTH_J2,
    EARTH_MU_KM3_S2,
    EARTH_RADIUS_KM,
    EARTH_ROTATION_RAD_S,
    J2000_JD,
    MOON_MU_KM3_S2,
    SECONDS_PER_DAY,
    SOLAR_PRESSURE_1AU_N_M2,
    SPEED_OF_LIGHT_M_S,
    SUN_MU_KM3_S2,
)

logger = logging.getLogger(__name__)

PositionFunction = Callable[[float], NDArray[np.float64]]
"""Maps a Julian date to a geocentric position in km."""

SPEED_OF_LIGHT_KM_S = SPEED_OF_LIGHT_M_S / 1000.0

# Exponential atmosphere used for drag
SEA_LEVEL_DENSITY_KG_M3 = 1.225
SCALE_HEIGHT_KM = 8.5
DRAG_CUTOFF_ALT_KM = 1000.0


class PerturbationType(Enum):
    """Sources of perturbing acceleration."""

    J2_OBLATENESS = "j2_oblateness"
    LUNAR_GRAVITY = "lunar_gravity"
    SOLAR_GRAVITY = "solar_gravity"
    RELATIVISTIC = "relativistic"
    RADIATION_PRESSURE = "radiation_pressure"
    ATMOSPHERIC_DRAG = "atmospheric_drag"


@dataclass
class PerturbationConfig:
    """Which contributors to evaluate and the object's physical properties.

    Attributes:
        include_j2: Earth oblateness.
        include_lunar: Moon third-body gravity.
        include_solar: Sun third-body gravity.
        include_relativistic: Post-Newtonian correction.
        include_radiation_pressure: Solar radiation pressure (needs mass and area).
        include_drag: Atmospheric drag (needs mass and area).
        mass_kg: Object mass.
        area_m2: Cross-sectional area.
        reflectivity: Reflectivity coefficient; force scales with (1 + reflectivity).
        drag_coefficient: Drag coefficient.
    """

    include_j2: bool = True
    include_lunar: bool = True
    include_solar: bool = True
    include_relativistic: bool = False
    include_radiation_pressure: bool = False
    include_drag: bool = False
    mass_kg: float | None = None
    area_m2: float | None = None
    reflectivity: float = 1.0
    drag_coefficient: float = 2.2


@dataclass(frozen=True)
class PerturbationAcceleration:
    """One contributor's acceleration.

    Attributes:
        type: Contributor.
        acceleration: Vector in km/s².
        description: Human-readable label.
    """

    type: PerturbationType
    acceleration: NDArray[np.float64]
    description: str

    @property
    def magnitude(self) -> float:
        return float(np.linalg.norm(self.acceleration))

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "acceleration": self.acceleration.tolist(),
            "magnitude": self.magnitude,
            "description": self.description,
        }


@dataclass(frozen=True)
class OrbitState:
    """Geocentric state.

    Attributes:
        position_km: [x, y, z] in km.
        velocity_km_s: [vx, vy, vz] in km/s.
        jd: Julian date (TT).
    """

    position_km: NDArray[np.float64]
    velocity_km_s: NDArray[np.float64]
    jd: float

    def as_array(self) -> NDArray[np.float64]:
        return np.concatenate([self.position_km, self.velocity_km_s])


def j2_acceleration(position: NDArray[np.float64]) -> PerturbationAcceleration:
    """Gradient of the J2 zonal potential."""
    x, y, z = position
    r2 = float(position @ position)
    r = math.sqrt(r2)
    factor = -1.5 * EARTH_J2 * EARTH_MU_KM3_S2 * EARTH_RADIUS_KM**2 / r**5
    z2_r2 = z * z / r2
    acc = factor * np.array([
        x * (1.0 - 5.0 * z2_r2),
        y * (1.0 - 5.0 * z2_r2),
        z * (3.0 - 5.0 * z2_r2),
    ])
    return PerturbationAcceleration(PerturbationType.J2_OBLATENESS, acc, "Earth oblateness (J2) perturbation")


def third_body_acceleration(
    position: NDArray[np.float64],
    body_position: NDArray[np.float64],
    mu_body: float,
    kind: PerturbationType,
) -> PerturbationAcceleration:
    """Direct minus indirect attraction of a third body.

    ``a = μ[(r_b - r)/|r_b - r|³ - r_b/|r_b|³]``
    """
    to_body = body_position - position
    d3 = np.linalg.norm(to_body) ** 3
    rb3 = np.linalg.norm(body_position) ** 3
    acc = mu_body * (to_body / d3 - body_position / rb3)
    label = "Lunar" if kind == PerturbationType.LUNAR_GRAVITY else "Solar"
    return PerturbationAcceleration(kind, acc, f"{label} third-body perturbation")


def relativistic_acceleration(
    position: NDArray[np.float64], velocity: NDArray[np.float64]
) -> PerturbationAcceleration:
    """Schwarzschild term of the post-Newtonian correction."""
    r = float(np.linalg.norm(position))
    v2 = float(velocity @ velocity)
    rv = float(position @ velocity)
    mu = EARTH_MU_KM3_S2
    c2 = SPEED_OF_LIGHT_KM_S**2
    acc = mu / (c2 * r**3) * ((4.0 * mu / r - v2) * position + 4.0 * rv * velocity)
    return PerturbationAcceleration(PerturbationType.RELATIVISTIC, acc, "General relativistic correction")


def radiation_pressure_acceleration(
    position: NDArray[np.float64],
    sun_position: NDArray[np.float64],
    mass_kg: float,
    area_m2: float,
    reflectivity: float = 1.0,
) -> PerturbationAcceleration:
    """Cannonball solar radiation pressure, directed away from the Sun."""
    from_sun = position - sun_position
    distance = float(np.linalg.norm(from_sun))
    pressure = SOLAR_PRESSURE_1AU_N_M2 * (AU_KM / distance) ** 2
    magnitude = pressure * area_m2 * (1.0 + reflectivity) / mass_kg * 1e-3  # m/s² -> km/s²
    acc = magnitude * from_sun / distance
    return PerturbationAcceleration(PerturbationType.RADIATION_PRESSURE, acc, "Solar radiation pressure")


def drag_acceleration(
    position: NDArray[np.float64],
    velocity: NDArray[np.float64],
    mass_kg: float,
    area_m2: float,
    drag_coefficient: float = 2.2,
) -> PerturbationAcceleration:
    """Drag in an exponential atmosphere co-rotating with Earth.

    Returns a zero vector above ``DRAG_CUTOFF_ALT_KM``.
    """
    altitude = float(np.linalg.norm(position)) - EARTH_RADIUS_KM
    if altitude > DRAG_CUTOFF_ALT_KM:
        return PerturbationAcceleration(PerturbationType.ATMOSPHERIC_DRAG, np.zeros(3), "Atmospheric drag")

    density = SEA_LEVEL_DENSITY_KG_M3 * math.exp(-altitude / SCALE_HEIGHT_KM)
    omega = np.array([0.0, 0.0, EARTH_ROTATION_RAD_S])
    v_rel = (velocity - np.cross(omega, position)) * 1000.0  # m/s
    speed = float(np.linalg.norm(v_rel))
    acc = -0.5 * drag_coefficient * area_m2 / mass_kg * density * speed * v_rel * 1e-3
    return PerturbationAcceleration(PerturbationType.ATMOSPHERIC_DRAG, acc, "Atmospheric drag")


@dataclass(frozen=True)
class PerturbationResult:
    """All evaluated contributors and their sum.

    Attributes:
        contributions: One entry per enabled contributor.
        total: Vector sum in km/s².
    """

    contributions: list[PerturbationAcceleration] = field(default_factory=list)
    total: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    @property
    def magnitude(self) -> float:
        return float(np.linalg.norm(self.total))

    def dominant(self) -> PerturbationAcceleration | None:
        if not self.contributions:
            return None
        return max(self.contributions, key=lambda c: c.magnitude)


def compute_perturbations(
    position: NDArray[np.float64],
    velocity: NDArray[np.float64],
    config: PerturbationConfig | None = None,
    sun_position: NDArray[np.float64] | None = None,
    moon_position: NDArray[np.float64] | None = None,
) -> PerturbationResult:
    """Evaluate every enabled contributor at one state.

    Third-body and radiation terms are skipped when the body position they
    need is not supplied; radiation pressure and drag are skipped without
    mass and area.
    """
    config = config or PerturbationConfig()
    position = np.asarray(position, dtype=np.float64)
    velocity = np.asarray(velocity, dtype=np.float64)

    contributions: list[PerturbationAcceleration] = []
    if config.include_j2:
        contributions.append(j2_acceleration(position))
    if config.include_solar and sun_position is not None:
        contributions.append(
            third_body_acceleration(position, sun_position, SUN_MU_KM3_S2, PerturbationType.SOLAR_GRAVITY)
        )
    if config.include_lunar and moon_position is not None:
        contributions.append(
            third_body_acceleration(position, moon_position, MOON_MU_KM3_S2, PerturbationType.LUNAR_GRAVITY)
        )
    if config.include_relativistic:
        contributions.append(relativistic_acceleration(position, velocity))

    has_body = config.mass_kg is not None and config.area_m2 is not None
    if config.include_radiation_pressure and sun_position is not None and has_body:
        contributions.append(
            radiation_pressure_acceleration(
                position, sun_position, config.mass_kg, config.area_m2, config.reflectivity
            )
        )
    if config.include_drag and has_body:
        contributions.append(
            drag_acceleration(position, velocity, config.mass_kg, config.area_m2, config.drag_coefficient)
        )

    total = np.zeros(3)
    for c in contributions:
        total = total + c.acceleration

    return PerturbationResult(contributions=contributions, total=total)


# --- Simplified third-body ephemerides ---

def _ecliptic_to_equatorial(vec: NDArray[np.float64], jd: float) -> NDArray[np.float64]:
    eps = mean_obliquity(jd)
    c, s = math.cos(eps), math.sin(eps)
    x, y, z = vec
    return np.array([x, c * y - s * z, s * y + c * z])


def sun_position_geocentric(jd: float) -> NDArray[np.float64]:
    """Low-precision geocentric Sun position (equatorial, km)."""
    return _ecliptic_to_equatorial(-earth_heliocentric_position(jd), jd)


def moon_position_geocentric(jd: float) -> NDArray[np.float64]:
    """Low-precision geocentric Moon position (equatorial, km)."""
    d = jd - J2000_JD
    L = math.radians(218.316 + 13.176396 * d)
    M = math.radians(134.963 + 13.064993 * d)
    F = math.radians(93.272 + 13.229350 * d)
    lon = L + math.radians(6.289) * math.sin(M)
    lat = math.radians(5.128) * math.sin(F)
    r = 385001.0 - 20905.0 * math.cos(M)
    vec = r * np.array([math.cos(lat) * math.cos(lon), math.cos(lat) * math.sin(lon), math.sin(lat)])
    return _ecliptic_to_equatorial(vec, jd)


# --- Propagation ---

def _derivative(
    y: NDArray[np.float64],
    jd: float,
    config: PerturbationConfig,
    sun_fn: PositionFunction | None,
    moon_fn: PositionFunction | None,
) -> NDArray[np.float64]:
    position, velocity = y[:3], y[3:]
    r = np.linalg.norm(position)
    central = -EARTH_MU_KM3_S2 * position / r**3
    sun = sun_fn(jd) if sun_fn is not None else None
    moon = moon_fn(jd) if moon_fn is not None else None
    perturbation = compute_perturbations(position, velocity, config, sun, moon).total
    return np.concatenate([velocity, central + perturbation])


def rk4_step(
    state: OrbitState,
    step_s: float,
    config: PerturbationConfig,
    sun_fn: PositionFunction | None = None,
    moon_fn: PositionFunction | None = None,
) -> OrbitState:
    """Advance one classical Runge-Kutta step."""
    y0 = state.as_array()
    jd0 = state.jd
    half_day = step_s / 2.0 / SECONDS_PER_DAY
    full_day = step_s / SECONDS_PER_DAY

    k1 = _derivative(y0, jd0, config, sun_fn, moon_fn)
    k2 = _derivative(y0 + 0.5 * step_s * k1, jd0 + half_day, config, sun_fn, moon_fn)
    k3 = _derivative(y0 + 0.5 * step_s * k2, jd0 + half_day, config, sun_fn, moon_fn)
    k4 = _derivative(y0 + step_s * k3, jd0 + full_day, config, sun_fn, moon_fn)
    y1 = y0 + step_s / 6.0 * (k1 + 2.0 * k2 + 2.0 * k3 + k4)

    return OrbitState(position_km=y1[:3], velocity_km_s=y1[3:], jd=jd0 + full_day)


def propagate_orbit(
    initial: OrbitState,
    duration_s: float,
    step_s: float,
    config: PerturbationConfig | None = None,
    sun_fn: PositionFunction | None = None,
    moon_fn: PositionFunction | None = None,
    method: str = "rk4",
) -> list[OrbitState]:
    """Propagate a geocentric orbit under central gravity plus perturbations.

    Args:
        initial: Starting state.
        duration_s: Span to cover in seconds.
        step_s: Output spacing (and RK4 step) in seconds.
        config: Enabled perturbations; defaults to :class:`PerturbationConfig`.
        sun_fn: Sun position as a function of JD, for solar terms.
        moon_fn: Moon position as a function of JD, for lunar terms.
        method: ``"rk4"`` for fixed-step RK4, ``"adaptive"`` for scipy DOP853
            sampled on the same grid.

    Returns:
        States at ``initial.jd + k·step_s`` for k = 0..floor(duration/step).

    Raises:
        ValueError: On a non-positive step or unknown method.
    """
    if step_s <= 0:
        raise ValueError("Time step must be positive")
    config = config or PerturbationConfig()
    steps = int(math.floor(duration_s / step_s))

    if method == "rk4":
        states = [initial]
        current = initial
        for _ in range(steps):
            current = rk4_step(current, step_s, config, sun_fn, moon_fn)
            states.append(current)
        logger.debug("RK4 propagation: %d steps of %.1f s", steps, step_s)
        return states

    if method == "adaptive":
        t_eval = np.arange(steps + 1) * step_s
        jd0 = initial.jd
        sol = solve_ivp(
            lambda t, y: _derivative(y, jd0 + t / SECONDS_PER_DAY, config, sun_fn, moon_fn),
            (0.0, float(t_eval[-1])),
            initial.as_array(),
            method="DOP853",
            t_eval=t_eval,
            rtol=1e-10,
            atol=1e-9,
        )
        if not sol.success:
            logger.warning("Adaptive propagation stopped early: %s", sol.message)
        logger.debug("Adaptive propagation: %d function evaluations", sol.nfev)
        return [
            OrbitState(position_km=sol.y[:3, k].copy(), velocity_km_s=sol.y[3:, k].copy(), jd=jd0 + t / SECONDS_PER_DAY)
            for k, t in enumerate(sol.t)
        ]

    raise ValueError(f"Unknown propagation method: {method}")


# --- Planning helpers ---

def estimate_perturbation_magnitudes(semi_major_axis_km: float) -> dict[PerturbationType, float]:
    """Order-of-magnitude accelerations (km/s²) at a given orbital radius."""
    r = semi_major_axis_km
    mu = EARTH_MU_KM3_S2
    return {
        PerturbationType.J2_OBLATENESS: 1.5 * EARTH_J2 * mu * EARTH_RADIUS_KM**2 / r**4,
        # tidal acceleration of a third body at distance D: 2μr/D³
        PerturbationType.LUNAR_GRAVITY: 2.0 * MOON_MU_KM3_S2 * r / 384400.0**3,
        PerturbationType.SOLAR_GRAVITY: 2.0 * SUN_MU_KM3_S2 * r / AU_KM**3,
        PerturbationType.RELATIVISTIC: 4.0 * mu * mu / (SPEED_OF_LIGHT_KM_S**2 * r**3),
        PerturbationType.RADIATION_PRESSURE: 0.0,
        PerturbationType.ATMOSPHERIC_DRAG: 0.0,
    }


def significant_perturbations(semi_major_axis_km: float, threshold: float = 1e-9) -> list[PerturbationType]:
    """Contributors above ``threshold`` km/s², largest first."""
    magnitudes = estimate_perturbation_magnitudes(semi_major_axis_km)
    keep = [kind for kind, mag in magnitudes.items() if mag > threshold]
    return sorted(keep, key=lambda kind: magnitudes[kind], reverse=True)


ORBIT_REGIMES = ("LEO", "MEO", "GEO", "HEO", "interplanetary")


def create_perturbation_config(
    orbit_type: str,
    mass_kg: float | None = None,
    area_m2: float | None = None,
    reflectivity: float = 1.0,
    drag_coefficient: float = 2.2,
) -> PerturbationConfig:
    """Recommended contributor set for an orbit regime.

    Raises:
        ValueError: For an unknown regime.
    """
    has_body = mass_kg is not None and area_m2 is not None
    if orbit_type == "LEO":
        flags = dict(include_j2=True, include_lunar=False, include_solar=False, include_drag=True)
    elif orbit_type in ("MEO", "GEO", "HEO"):
        flags = dict(include_j2=True, include_lunar=True, include_solar=True, include_radiation_pressure=has_body)
    elif orbit_type == "interplanetary":
        flags = dict(
            include_j2=False,
            include_lunar=False,
            include_solar=True,
            include_relativistic=True,
            include_radiation_pressure=has_body,
        )
    else:
        raise ValueError(f"Unknown orbit type: {orbit_type}; expected one of {ORBIT_REGIMES}")

    return PerturbationConfig(
        mass_kg=mass_kg,
        area_m2=area_m2,
        reflectivity=reflectivity,
        drag_coefficient=drag_coefficient,
        **flags,
    )
