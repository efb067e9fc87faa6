"""Close approaches to Earth and minimum orbital intersection distance.

Close approaches are found by sampling the asteroid-Earth distance on a
fixed time grid and narrowing every local minimum with a three-point
bracket. The MOID is a pure geometry problem: a vectorized grid over both
true anomalies followed by an eight-neighbour hill climb.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Mapping

import numpy as np
from numpy.typing import NDArray

from neoguard.core.ephemeris import (
    CoordinateFrame,
    CoordinateVector,
    JulianDate,
    OrbitalElements,
    TimeScale,
    UncertainOrbitalElements,
    earth_heliocentric_position,
    ecliptic_to_equatorial_matrix,
    mean_obliquity,
    perifocal_to_frame_matrix,
    state_vector,
)
from neoguard.core.kepler import OrbitType, classify_orbit
from neoguard.core.uncertainty import UncertaintyValue
from neoguard.utils.constants import (
    AU_KM,
    EARTH_MASS_KG,
    EARTH_RADIUS_KM,
    EARTH_SOI_KM,
    GRAVITATIONAL_CONSTANT,
    J2000_JD,
    LUNAR_DISTANCE_KM,
    MEGATON_TNT_J,
    SECONDS_PER_DAY,
)

logger = logging.getLogger(__name__)

REFINE_MAX_ITERATIONS = 50
REFINE_TOLERANCE_DAYS = 1e-6
VELOCITY_STEP_DAYS = 0.001
IMPACT_PROBABILITY_WARNING = 1e-6

EARTH_ORBIT = OrbitalElements(
    semi_major_axis_au=1.0,
    eccentricity=0.0167086,
    inclination=0.0,
    raan=0.0,
    arg_periapsis=1.796593063,
    mean_anomaly=6.239996277,
    epoch=JulianDate(J2000_JD, TimeScale.TDB),
)
"""Mean J2000 ecliptic elements of Earth's orbit."""

_ELEMENT_NAMES = ("semi_major_axis", "eccentricity", "inclination", "raan", "arg_periapsis", "mean_anomaly")


@dataclass(frozen=True)
class CloseApproachResult:
    """A refined close approach to Earth.

    Attributes:
        date: Time of closest approach.
        distance: Geometric asteroid-Earth distance in km.
        relative_velocity: Relative speed in km/s.
        asteroid_position: Heliocentric asteroid position in km.
        earth_position: Heliocentric Earth position in km.
        relative_position: Asteroid minus Earth in km.
        impact_probability: Gaussian-disk probability estimate in [0, 1].
        focusing_factor: Gravitational focusing of Earth's capture cross
            section at this speed; 1.0 outside the sphere of influence.
        warnings: Notes on the result.
    """

    date: JulianDate
    distance: UncertaintyValue
    relative_velocity: UncertaintyValue
    asteroid_position: CoordinateVector
    earth_position: CoordinateVector
    relative_position: CoordinateVector
    impact_probability: float = 0.0
    focusing_factor: float = 1.0
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "jd": self.date.jd,
            "time_scale": self.date.time_scale.value,
            "distance_km": self.distance.to_dict(),
            "relative_velocity_km_s": self.relative_velocity.to_dict(),
            "relative_position_km": self.relative_position.as_array().tolist(),
            "impact_probability": self.impact_probability,
            "focusing_factor": self.focusing_factor,
            "classification": classify_approach(self.distance.value),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class MOIDResult:
    """Minimum orbital intersection distance between two orbits.

    Attributes:
        moid: Minimum distance in AU.
        asteroid_true_anomaly: Asteroid true anomaly at the minimum (rad).
        earth_true_anomaly: Earth true anomaly at the minimum (rad).
        asteroid_position: Asteroid position at the minimum in AU.
        earth_position: Earth position at the minimum in AU.
        iterations: Hill-climb rounds used after the grid search.
        converged: Whether the climb step shrank below tolerance.
        residual: Final angular step of the climb in radians.
    """

    moid: UncertaintyValue
    asteroid_true_anomaly: float
    earth_true_anomaly: float
    asteroid_position: CoordinateVector
    earth_position: CoordinateVector
    iterations: int
    converged: bool
    residual: float

    def to_dict(self) -> dict:
        return {
            "moid_au": self.moid.to_dict(),
            "moid_km": self.moid.value * AU_KM,
            "asteroid_true_anomaly": self.asteroid_true_anomaly,
            "earth_true_anomaly": self.earth_true_anomaly,
            "iterations": self.iterations,
            "converged": self.converged,
            "residual": self.residual,
        }


# --- Positions ---

def _frame_rotation(source: CoordinateFrame, target: CoordinateFrame) -> NDArray[np.float64]:
    """Rotation between the two heliocentric J2000 frames."""
    heliocentric = (CoordinateFrame.J2000_ECLIPTIC, CoordinateFrame.J2000_EQUATORIAL)
    if source not in heliocentric or target not in heliocentric:
        raise ValueError(f"Heliocentric J2000 elements required, got {source.value} and {target.value}")
    if source == target:
        return np.eye(3)
    matrix = ecliptic_to_equatorial_matrix(mean_obliquity(J2000_JD))
    return matrix if source == CoordinateFrame.J2000_ECLIPTIC else matrix.T


def _asteroid_position_km(elements: OrbitalElements, date: JulianDate) -> NDArray[np.float64]:
    return state_vector(elements, date).position_m / 1000.0


def _earth_position_km(date: JulianDate, frame: CoordinateFrame) -> NDArray[np.float64]:
    ecliptic = earth_heliocentric_position(date.to_scale(TimeScale.TDB).jd)
    return _frame_rotation(CoordinateFrame.J2000_ECLIPTIC, frame) @ ecliptic


def _relative_position_km(elements: OrbitalElements, date: JulianDate) -> NDArray[np.float64]:
    return _asteroid_position_km(elements, date) - _earth_position_km(date, elements.frame)


def _distance_km(elements: OrbitalElements, jd: float, time_scale: TimeScale) -> float:
    return float(np.linalg.norm(_relative_position_km(elements, JulianDate(jd, time_scale))))


# --- Close approaches ---

def find_close_approaches(
    elements: UncertainOrbitalElements,
    start: JulianDate,
    end: JulianDate,
    max_distance_au: float = 0.1,
    step_days: float = 1.0,
) -> list[CloseApproachResult]:
    """Scan a time window for close approaches to Earth.

    A sample is a minimum candidate when the distance drops into it and does
    not drop further at the next sample. Each candidate within
    ``max_distance_au`` is refined over the two steps around it.

    Args:
        elements: Asteroid elements with uncertainties.
        start: Start of the window.
        end: End of the window; converted to the time scale of ``start``.
        max_distance_au: Largest approach distance reported.
        step_days: Sampling interval.

    Returns:
        Approaches in time order.

    Raises:
        ValueError: On an empty window, a non-positive distance or step, or
            elements in a frame other than heliocentric J2000.
    """
    if end.time_scale != start.time_scale:
        end = end.to_scale(start.time_scale)
    if end.jd <= start.jd:
        raise ValueError("End date must be after start date")
    if max_distance_au <= 0:
        raise ValueError("Maximum distance must be positive")
    if step_days <= 0:
        raise ValueError(f"Time step must be positive, got {step_days}")

    nominal = elements.nominal()
    max_distance_km = max_distance_au * AU_KM
    steps = math.ceil((end.jd - start.jd) / step_days)
    logger.debug("Scanning %d samples from JD %.3f", steps + 1, start.jd)

    approaches: list[CloseApproachResult] = []
    window: list[tuple[float, float]] = []
    for k in range(steps + 1):
        jd = start.jd + k * step_days
        window.append((jd, _distance_km(nominal, jd, start.time_scale)))
        if len(window) < 3:
            continue
        window = window[-3:]
        (t0, d0), (_, d1), (t2, d2) = window
        if d1 < d0 and d1 <= d2 and d1 <= max_distance_km:
            date = _refine_minimum(nominal, t0, t2, start.time_scale)
            approaches.append(_approach_result(elements, date))

    logger.debug("Found %d close approaches", len(approaches))
    return approaches


def _refine_minimum(elements: OrbitalElements, t1: float, t2: float, time_scale: TimeScale) -> JulianDate:
    """Narrow a bracketed distance minimum by three-point comparison."""
    for _ in range(REFINE_MAX_ITERATIONS):
        t_mid = 0.5 * (t1 + t2)
        d1 = _distance_km(elements, t1, time_scale)
        d_mid = _distance_km(elements, t_mid, time_scale)
        d2 = _distance_km(elements, t2, time_scale)

        if d1 < d_mid:
            t2 = t_mid
        elif d2 < d_mid:
            t1 = t_mid
        else:
            if t2 - t1 < REFINE_TOLERANCE_DAYS:
                break
            quarter = 0.25 * (t2 - t1)
            t1, t2 = t_mid - quarter, t_mid + quarter
    return JulianDate(0.5 * (t1 + t2), time_scale)


def _approach_result(elements: UncertainOrbitalElements, date: JulianDate) -> CloseApproachResult:
    nominal = elements.nominal()
    warnings: list[str] = []

    asteroid = _asteroid_position_km(nominal, date)
    earth = _earth_position_km(date, nominal.frame)
    relative = asteroid - earth
    distance = float(np.linalg.norm(relative))

    if elements.covariance is not None:
        sigma = _covariance_distance_sigma(elements, date)
    else:
        rel = max(elements.semi_major_axis.relative_uncertainty, elements.eccentricity.relative_uncertainty)
        sigma = distance * rel

    later = _relative_position_km(nominal, date.add_days(VELOCITY_STEP_DAYS))
    velocity = (later - relative) / (VELOCITY_STEP_DAYS * SECONDS_PER_DAY)
    speed = float(np.linalg.norm(velocity))

    focusing = 1.0
    if distance < EARTH_SOI_KM and speed > 0:
        focusing = gravitational_focusing_factor(speed)
        warnings.append(f"Within Earth's sphere of influence; focusing factor {focusing:.3f}")

    probability = 0.0
    if sigma > 0 and distance < 3.0 * sigma:
        probability = min(1.0, EARTH_RADIUS_KM**2 / sigma**2)
        if probability > IMPACT_PROBABILITY_WARNING:
            warnings.append(f"Non-negligible impact probability: {probability:.2e}")

    frame = nominal.frame
    return CloseApproachResult(
        date=date,
        distance=UncertaintyValue(distance, sigma, "km", "Close approach calculation", "Distance at closest approach"),
        relative_velocity=UncertaintyValue(
            speed, 0.01 * speed, "km/s", "Numerical differentiation", "Relative velocity at closest approach"
        ),
        asteroid_position=CoordinateVector.from_array(asteroid, frame, date),
        earth_position=CoordinateVector.from_array(earth, frame, date),
        relative_position=CoordinateVector.from_array(relative, frame, date),
        impact_probability=probability,
        focusing_factor=focusing,
        warnings=warnings,
    )


def _covariance_distance_sigma(elements: UncertainOrbitalElements, date: JulianDate) -> float:
    """σ of the distance from J·C·Jᵀ, with J by central differences."""
    covariance = np.asarray(elements.covariance, dtype=float)
    if covariance.shape != (6, 6):
        raise ValueError(f"Covariance must be 6x6, got {covariance.shape}")

    nominal = elements.nominal()
    fields = ("semi_major_axis_au", "eccentricity", "inclination", "raan", "arg_periapsis", "mean_anomaly")
    jacobian = np.zeros(6)
    for k, name in enumerate(fields):
        x = getattr(nominal, name)
        h = 1e-6 * max(1.0, abs(x))
        plus = replace(nominal, **{name: x + h})
        minus = replace(nominal, **{name: x - h})
        d_plus = float(np.linalg.norm(_relative_position_km(plus, date)))
        d_minus = float(np.linalg.norm(_relative_position_km(minus, date)))
        jacobian[k] = (d_plus - d_minus) / (2.0 * h)

    variance = float(jacobian @ covariance @ jacobian)
    return math.sqrt(max(variance, 0.0))


def gravitational_focusing_factor(relative_velocity_km_s: float) -> float:
    """Enhancement ``1 + v_esc²/v²`` of Earth's impact cross section."""
    if relative_velocity_km_s <= 0:
        raise ValueError(f"Relative velocity must be positive, got {relative_velocity_km_s}")
    v_esc = math.sqrt(2.0 * GRAVITATIONAL_CONSTANT * EARTH_MASS_KG / (EARTH_RADIUS_KM * 1000.0)) / 1000.0
    return 1.0 + (v_esc / relative_velocity_km_s) ** 2


# --- MOID ---

def _orbit_points(elements: OrbitalElements, true_anomaly: NDArray[np.float64]) -> NDArray[np.float64]:
    """Positions (AU) along an orbit; unreachable anomalies of open orbits are inf."""
    e = elements.eccentricity
    if classify_orbit(e) == OrbitType.PARABOLIC:
        p = 2.0 * elements.semi_major_axis_au
    else:
        p = elements.semi_major_axis_au * (1.0 - e * e)

    denominator = 1.0 + e * np.cos(true_anomaly)
    reachable = denominator > 0
    r = np.where(reachable, p / np.where(reachable, denominator, 1.0), 0.0)
    planar = np.stack([r * np.cos(true_anomaly), r * np.sin(true_anomaly), np.zeros_like(r)], axis=-1)
    points = planar @ perifocal_to_frame_matrix(elements.raan, elements.inclination, elements.arg_periapsis).T
    points[~reachable] = np.inf
    return points


def _pair_distance(
    asteroid: OrbitalElements, earth: OrbitalElements, rotation: NDArray[np.float64], nu_a: float, nu_e: float
) -> float:
    a_point = _orbit_points(asteroid, np.array([nu_a]))[0]
    e_point = rotation @ _orbit_points(earth, np.array([nu_e]))[0]
    if not np.all(np.isfinite(a_point)):
        return math.inf
    return float(np.linalg.norm(a_point - e_point))


def calculate_moid(
    elements: UncertainOrbitalElements,
    earth: OrbitalElements = EARTH_ORBIT,
    resolution_deg: float = 1.0,
    max_refinement_steps: int = 200,
    tolerance_rad: float = 1e-9,
) -> MOIDResult:
    """Minimum distance between the asteroid's orbit and Earth's.

    Args:
        elements: Asteroid elements with uncertainties.
        earth: Elements of the second orbit; Earth's mean orbit by default.
        resolution_deg: Grid spacing in both true anomalies.
        max_refinement_steps: Cap on hill-climb rounds.
        tolerance_rad: Climb stops once its step falls below this.

    Returns:
        MOIDResult; the uncertainty scales the MOID by the larger relative
        uncertainty of a and e, which is an estimate rather than a
        propagated error.

    Raises:
        ValueError: If ``resolution_deg`` is not positive or a frame is not
            heliocentric J2000.
    """
    if resolution_deg <= 0:
        raise ValueError(f"Grid resolution must be positive, got {resolution_deg}")

    nominal = elements.nominal()
    rotation = _frame_rotation(earth.frame, nominal.frame)

    n = max(4, int(round(360.0 / resolution_deg)))
    grid = np.linspace(0.0, 2.0 * math.pi, n, endpoint=False)
    asteroid_points = _orbit_points(nominal, grid)
    earth_points = _orbit_points(earth, grid) @ rotation.T

    diff = asteroid_points[:, None, :] - earth_points[None, :, :]
    with np.errstate(invalid="ignore"):
        distances = np.sqrt(np.sum(diff * diff, axis=-1))
    distances[~np.isfinite(distances)] = np.inf
    i, j = np.unravel_index(np.argmin(distances), distances.shape)
    best = float(distances[i, j])
    nu_a, nu_e = float(grid[i]), float(grid[j])
    logger.debug("MOID grid minimum %.6e AU at nu_a=%.4f, nu_e=%.4f", best, nu_a, nu_e)

    step = 2.0 * math.pi / n
    converged = False
    iterations = 0
    neighbours = [(da, de) for da in (-1, 0, 1) for de in (-1, 0, 1) if (da, de) != (0, 0)]
    while iterations < max_refinement_steps:
        iterations += 1
        improved = False
        for da, de in neighbours:
            cand_a, cand_e = nu_a + da * step, nu_e + de * step
            d = _pair_distance(nominal, earth, rotation, cand_a, cand_e)
            if d < best:
                best, nu_a, nu_e = d, cand_a, cand_e
                improved = True
        if not improved:
            step *= 0.5
            if step < tolerance_rad:
                converged = True
                break

    if not converged:
        logger.warning("MOID refinement stopped after %d rounds (step %.3e rad)", iterations, step)

    nu_a %= 2.0 * math.pi
    nu_e %= 2.0 * math.pi
    a_point = _orbit_points(nominal, np.array([nu_a]))[0]
    e_point = rotation @ _orbit_points(earth, np.array([nu_e]))[0]

    rel = max(elements.semi_major_axis.relative_uncertainty, elements.eccentricity.relative_uncertainty)
    return MOIDResult(
        moid=UncertaintyValue(best, best * rel, "AU", "MOID calculation", "Minimum Orbital Intersection Distance"),
        asteroid_true_anomaly=nu_a,
        earth_true_anomaly=nu_e,
        asteroid_position=CoordinateVector.from_array(a_point, nominal.frame, elements.epoch),
        earth_position=CoordinateVector.from_array(e_point, nominal.frame, elements.epoch),
        iterations=iterations,
        converged=converged,
        residual=step,
    )


# --- Utilities ---

def distance_in_earth_radii(distance_km: float) -> float:
    return distance_km / EARTH_RADIUS_KM


def distance_in_lunar_distances(distance_km: float) -> float:
    return distance_km / LUNAR_DISTANCE_KM


def classify_approach(distance_km: float) -> str:
    """Descriptive class of an approach distance in km."""
    if distance_in_earth_radii(distance_km) < 1:
        return "Impact"
    if distance_in_earth_radii(distance_km) < 10:
        return "Extremely Close"
    lunar = distance_in_lunar_distances(distance_km)
    if lunar < 1:
        return "Very Close"
    if lunar < 10:
        return "Close"
    if lunar < 100:
        return "Moderate"
    return "Distant"


def torino_scale(impact_probability: float, energy_mt: float) -> int:
    """Simplified Torino rating from impact probability and energy (Mt TNT).

    ``round(log10 P + 0.5·log10 E - 3)`` clamped to 0..10. Not the official
    chart lookup.
    """
    if impact_probability <= 0 or energy_mt <= 0:
        return 0
    scale = math.log10(impact_probability) + 0.5 * math.log10(energy_mt) - 3.0
    return int(max(0, min(10, round(scale))))


def estimate_impact_energy(diameter_km: float, velocity_km_s: float, density_kg_m3: float = 2000.0) -> float:
    """Kinetic energy of a spherical impactor in megatons of TNT."""
    radius_m = diameter_km * 500.0
    mass = 4.0 / 3.0 * math.pi * radius_m**3 * density_kg_m3
    return 0.5 * mass * (velocity_km_s * 1000.0) ** 2 / MEGATON_TNT_J


def create_uncertain_orbital_elements(
    semi_major_axis_au: float,
    eccentricity: float,
    inclination_deg: float,
    raan_deg: float,
    arg_periapsis_deg: float,
    mean_anomaly_deg: float,
    epoch: JulianDate,
    uncertainties: Mapping[str, float] | None = None,
    frame: CoordinateFrame = CoordinateFrame.J2000_ECLIPTIC,
    covariance: NDArray[np.float64] | None = None,
) -> UncertainOrbitalElements:
    """Build :class:`UncertainOrbitalElements` from degrees.

    Args:
        uncertainties: One-sigma values keyed by ``semi_major_axis``,
            ``eccentricity``, ``inclination``, ``raan``, ``arg_periapsis``
            and ``mean_anomaly``; angles in degrees. Missing keys are exact.

    Raises:
        ValueError: On an unrecognised uncertainty key.
    """
    sigmas = dict(uncertainties or {})
    unknown = set(sigmas) - set(_ELEMENT_NAMES)
    if unknown:
        raise ValueError(f"Unknown orbital element(s): {', '.join(sorted(unknown))}")

    def angle(value_deg: float, name: str, label: str) -> UncertaintyValue:
        return UncertaintyValue(
            math.radians(value_deg), math.radians(sigmas.get(name, 0.0)), "rad", "User input", label
        )

    return UncertainOrbitalElements(
        semi_major_axis=UncertaintyValue(
            semi_major_axis_au, sigmas.get("semi_major_axis", 0.0), "AU", "User input", "Semi-major axis"
        ),
        eccentricity=UncertaintyValue(eccentricity, sigmas.get("eccentricity", 0.0), "1", "User input", "Eccentricity"),
        inclination=angle(inclination_deg, "inclination", "Inclination"),
        raan=angle(raan_deg, "raan", "Longitude of ascending node"),
        arg_periapsis=angle(arg_periapsis_deg, "arg_periapsis", "Argument of periapsis"),
        mean_anomaly=angle(mean_anomaly_deg, "mean_anomaly", "Mean anomaly at epoch"),
        epoch=epoch,
        frame=frame,
        covariance=covariance,
    )
