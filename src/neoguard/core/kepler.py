"""Kepler's equation for elliptical, parabolic and hyperbolic orbits.

Given a mean anomaly and eccentricity, solve for the eccentric (or hyperbolic)
anomaly and the true anomaly. Solvers never raise on non-convergence; they
return their best estimate with ``converged=False`` and a warning.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi

PARABOLIC_TOLERANCE = 1e-10
"""|e - 1| below which an orbit is treated as parabolic."""


class OrbitType(Enum):
    """Conic section selected by eccentricity."""

    ELLIPTICAL = "elliptical"
    PARABOLIC = "parabolic"
    HYPERBOLIC = "hyperbolic"


@dataclass
class KeplerSolverConfig:
    """Knobs for the Newton iterations.

    Attributes:
        tolerance: Convergence tolerance on the residual in radians.
        max_iterations: Hard iteration cap.
        adaptive_tolerance: Loosen the tolerance as e → 1 (elliptical only).
        stability_checks: Emit oscillation and vanishing-derivative warnings.
    """

    tolerance: float = 1e-12
    max_iterations: int = 100
    adaptive_tolerance: bool = True
    stability_checks: bool = True


@dataclass(frozen=True)
class KeplerResult:
    """Solution of Kepler's equation.

    Attributes:
        true_anomaly: True anomaly in radians.
        orbit_type: Conic selected by eccentricity.
        iterations: Newton iterations performed.
        converged: Whether the residual met the tolerance.
        residual: Final |f| of the governing equation.
        eccentric_anomaly: E for elliptical orbits, else None.
        hyperbolic_anomaly: H for hyperbolic orbits, else None.
        warnings: Stability and convergence notes.
    """

    true_anomaly: float
    orbit_type: OrbitType
    iterations: int
    converged: bool
    residual: float
    eccentric_anomaly: float | None = None
    hyperbolic_anomaly: float | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "true_anomaly": self.true_anomaly,
            "orbit_type": self.orbit_type.value,
            "iterations": self.iterations,
            "converged": self.converged,
            "residual": self.residual,
            "eccentric_anomaly": self.eccentric_anomaly,
            "hyperbolic_anomaly": self.hyperbolic_anomaly,
            "warnings": list(self.warnings),
        }


def classify_orbit(eccentricity: float) -> OrbitType:
    """Pick the conic section for an eccentricity.

    Raises:
        ValueError: If eccentricity is negative.
    """
    if eccentricity < 0.0:
        raise ValueError(f"Eccentricity cannot be negative: {eccentricity}")
    if abs(eccentricity - 1.0) < PARABOLIC_TOLERANCE:
        return OrbitType.PARABOLIC
    if eccentricity < 1.0:
        return OrbitType.ELLIPTICAL
    return OrbitType.HYPERBOLIC


def solve_kepler(
    mean_anomaly: float,
    eccentricity: float,
    config: KeplerSolverConfig | None = None,
) -> KeplerResult:
    """Solve Kepler's equation for any conic.

    Args:
        mean_anomaly: Mean anomaly in radians.
        eccentricity: Orbital eccentricity (>= 0).
        config: Solver settings; defaults to :class:`KeplerSolverConfig`.

    Returns:
        KeplerResult for the conic selected by ``eccentricity``.

    Raises:
        ValueError: If eccentricity is negative.
    """
    config = config or KeplerSolverConfig()
    orbit_type = classify_orbit(eccentricity)

    warnings: list[str] = []
    if 0.9 < eccentricity < 1.0:
        warnings.append(
            f"High eccentricity elliptical orbit (e={eccentricity:.6f}); convergence may be slow"
        )
    if abs(eccentricity - 1.0) < 1e-8:
        warnings.append(f"Near-parabolic orbit (e={eccentricity:.10f}); results may be numerically sensitive")

    if orbit_type == OrbitType.ELLIPTICAL:
        result = solve_elliptical(mean_anomaly, eccentricity, config, warnings)
    elif orbit_type == OrbitType.PARABOLIC:
        result = solve_parabolic(mean_anomaly, config, warnings)
    else:
        result = solve_hyperbolic(mean_anomaly, eccentricity, config, warnings)

    if not result.converged:
        logger.warning("Kepler solver did not converge: e=%.6f, M=%.6f", eccentricity, mean_anomaly)
    return result


def solve_elliptical(
    mean_anomaly: float,
    eccentricity: float,
    config: KeplerSolverConfig | None = None,
    warnings: list[str] | None = None,
) -> KeplerResult:
    """Newton-Raphson on ``E - e·sin(E) - M = 0`` for 0 <= e < 1."""
    config = config or KeplerSolverConfig()
    warnings = [] if warnings is None else warnings
    e = eccentricity

    M = mean_anomaly % TWO_PI
    if e == 0.0:
        return KeplerResult(
            true_anomaly=M,
            orbit_type=OrbitType.ELLIPTICAL,
            iterations=0,
            converged=True,
            residual=0.0,
            eccentric_anomaly=M,
            warnings=warnings,
        )

    if e < 0.8:
        E = M + e * math.sin(M)
    else:
        E = M + e if M < math.pi else M - e

    tol = config.tolerance
    if config.adaptive_tolerance:
        tol = max(tol, 1e-15 / (1.0 - e))

    f = E - e * math.sin(E) - M
    iterations = 0
    converged = abs(f) < tol
    previous_delta = 0.0

    while not converged and iterations < config.max_iterations:
        fp = 1.0 - e * math.cos(E)
        if abs(fp) < 1e-15:
            if config.stability_checks:
                warnings.append(f"Derivative vanished at iteration {iterations}; stopping")
            break

        delta = f / fp
        if abs(delta) > 0.5:
            delta *= 0.5

        if (
            config.stability_checks
            and iterations == 10
            and previous_delta * delta < 0.0
        ):
            warnings.append("Possible oscillation detected after 10 iterations")

        E -= delta
        previous_delta = delta
        iterations += 1
        f = E - e * math.sin(E) - M
        converged = abs(f) < tol

    if not converged:
        warnings.append(f"Failed to converge after {iterations} iterations (residual: {abs(f):.3e})")

    nu = eccentric_to_true_anomaly(E, e)
    logger.debug("Elliptical Kepler solve: e=%.6f, iterations=%d, residual=%.3e", e, iterations, abs(f))
    return KeplerResult(
        true_anomaly=nu,
        orbit_type=OrbitType.ELLIPTICAL,
        iterations=iterations,
        converged=converged,
        residual=abs(f),
        eccentric_anomaly=E,
        warnings=warnings,
    )


def solve_parabolic(
    mean_anomaly: float,
    config: KeplerSolverConfig | None = None,
    warnings: list[str] | None = None,
) -> KeplerResult:
    """Barker's equation ``tan(ν/2) + tan³(ν/2)/3 = M`` solved for ν.

    Newton iteration on ``D = tan(ν/2)``; no eccentric anomaly is defined.
    """
    config = config or KeplerSolverConfig()
    warnings = [] if warnings is None else warnings
    M = mean_anomaly

    D = M if abs(M) < 1.0 else math.copysign((3.0 * abs(M)) ** (1.0 / 3.0), M)
    tol = config.tolerance * max(1.0, abs(M))
    f = D + D**3 / 3.0 - M
    iterations = 0
    converged = abs(f) < tol

    while not converged and iterations < config.max_iterations:
        fp = 1.0 + D * D
        step = f / fp
        if abs(step) > 0.5 * (1.0 + abs(D)):
            step = math.copysign(0.5 * (1.0 + abs(D)), step)
        D -= step
        iterations += 1
        f = D + D**3 / 3.0 - M
        converged = abs(f) < tol

    if not converged:
        warnings.append(f"Failed to converge after {iterations} iterations (residual: {abs(f):.3e})")

    nu = 2.0 * math.atan(D)
    logger.debug("Parabolic Kepler solve: iterations=%d, residual=%.3e", iterations, abs(f))
    return KeplerResult(
        true_anomaly=nu,
        orbit_type=OrbitType.PARABOLIC,
        iterations=iterations,
        converged=converged,
        residual=abs(f),
        warnings=warnings,
    )


def solve_hyperbolic(
    mean_anomaly: float,
    eccentricity: float,
    config: KeplerSolverConfig | None = None,
    warnings: list[str] | None = None,
) -> KeplerResult:
    """Newton-Raphson on ``e·sinh(H) - H - M = 0`` for e > 1."""
    config = config or KeplerSolverConfig()
    warnings = [] if warnings is None else warnings
    e = eccentricity
    M = mean_anomaly

    if abs(M) < 1.0:
        # The linear and cubic truncations of e·sinh(H) - H both bound the
        # root from above; the smaller stays finite as e → 1.
        H = math.copysign(min(abs(M) / (e - 1.0), (6.0 * abs(M) / e) ** (1.0 / 3.0)), M)
    else:
        H = math.copysign(math.log(2.0 * abs(M) / e + 1.8), M)

    tol = config.tolerance * max(1.0, abs(M))
    f = e * math.sinh(H) - H - M
    iterations = 0
    converged = abs(f) < tol

    while not converged and iterations < config.max_iterations:
        fp = e * math.cosh(H) - 1.0
        if abs(fp) < 1e-15:
            if config.stability_checks:
                warnings.append(f"Derivative vanished at iteration {iterations}; stopping")
            break
        delta = f / fp
        if abs(delta) > 1.0:
            delta = math.copysign(1.0, delta)
        H -= delta
        iterations += 1
        f = e * math.sinh(H) - H - M
        converged = abs(f) < tol

    if not converged:
        warnings.append(f"Failed to converge after {iterations} iterations (residual: {abs(f):.3e})")

    nu = hyperbolic_to_true_anomaly(H, e)
    logger.debug("Hyperbolic Kepler solve: e=%.6f, iterations=%d, residual=%.3e", e, iterations, abs(f))
    return KeplerResult(
        true_anomaly=nu,
        orbit_type=OrbitType.HYPERBOLIC,
        iterations=iterations,
        converged=converged,
        residual=abs(f),
        hyperbolic_anomaly=H,
        warnings=warnings,
    )


# --- Anomaly conversions ---

def eccentric_to_true_anomaly(eccentric_anomaly: float, eccentricity: float) -> float:
    """True anomaly in [0, 2π) from the eccentric anomaly."""
    E, e = eccentric_anomaly, eccentricity
    denom = 1.0 - e * math.cos(E)
    cos_nu = (math.cos(E) - e) / denom
    sin_nu = math.sqrt(1.0 - e * e) * math.sin(E) / denom
    return math.atan2(sin_nu, cos_nu) % TWO_PI


def true_to_eccentric_anomaly(true_anomaly: float, eccentricity: float) -> float:
    """Eccentric anomaly in [0, 2π) from the true anomaly (elliptical orbits)."""
    nu, e = true_anomaly, eccentricity
    denom = 1.0 + e * math.cos(nu)
    cos_E = (e + math.cos(nu)) / denom
    sin_E = math.sqrt(1.0 - e * e) * math.sin(nu) / denom
    return math.atan2(sin_E, cos_E) % TWO_PI


def hyperbolic_to_true_anomaly(hyperbolic_anomaly: float, eccentricity: float) -> float:
    """True anomaly from the hyperbolic anomaly; same sign as H."""
    H, e = hyperbolic_anomaly, eccentricity
    denom = e * math.cosh(H) - 1.0
    cos_nu = (e - math.cosh(H)) / denom
    sin_nu = math.sqrt(e * e - 1.0) * math.sinh(H) / denom
    return math.atan2(sin_nu, cos_nu)


def true_to_mean_anomaly(true_anomaly: float, eccentricity: float) -> float:
    """Mean anomaly for a given true anomaly on any conic."""
    orbit_type = classify_orbit(eccentricity)
    e = eccentricity
    if orbit_type == OrbitType.ELLIPTICAL:
        E = true_to_eccentric_anomaly(true_anomaly, e)
        return (E - e * math.sin(E)) % TWO_PI
    if orbit_type == OrbitType.PARABOLIC:
        D = math.tan(true_anomaly / 2.0)
        return D + D**3 / 3.0
    H = 2.0 * math.atanh(math.sqrt((e - 1.0) / (e + 1.0)) * math.tan(true_anomaly / 2.0))
    return e * math.sinh(H) - H


# --- Orbital geometry ---

def orbital_radius(semi_major_axis: float, eccentricity: float, eccentric_anomaly: float) -> float:
    """Radius ``a(1 - e·cos E)`` for an elliptical orbit."""
    return semi_major_axis * (1.0 - eccentricity * math.cos(eccentric_anomaly))


def radius_from_true_anomaly(semi_major_axis: float, eccentricity: float, true_anomaly: float) -> float:
    """Conic radius from the true anomaly.

    For a parabola ``semi_major_axis`` is interpreted as the periapsis distance q,
    giving ``r = 2q / (1 + cos ν)``.
    """
    e = eccentricity
    if classify_orbit(e) == OrbitType.PARABOLIC:
        return 2.0 * semi_major_axis / (1.0 + math.cos(true_anomaly))
    p = semi_major_axis * (1.0 - e * e)
    return p / (1.0 + e * math.cos(true_anomaly))


def validate_orbital_elements(
    semi_major_axis: float,
    eccentricity: float,
    mean_anomaly: float,
) -> tuple[bool, list[str], list[str]]:
    """Check element consistency.

    Returns:
        Tuple of (is_valid, errors, warnings).
    """
    errors: list[str] = []
    warnings: list[str] = []

    if eccentricity < 0.0:
        errors.append("Eccentricity cannot be negative")
    elif eccentricity < 1.0 and semi_major_axis <= 0.0:
        errors.append("Semi-major axis must be positive for elliptical orbits")
    elif eccentricity > 1.0 + PARABOLIC_TOLERANCE and semi_major_axis >= 0.0:
        errors.append("Semi-major axis must be negative for hyperbolic orbits")

    if eccentricity > 10.0:
        warnings.append(f"Very high eccentricity (e={eccentricity}) may indicate a data error")

    if not math.isfinite(mean_anomaly):
        errors.append("Mean anomaly must be finite")

    return not errors, errors, warnings
