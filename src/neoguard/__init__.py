"""
NeoGuard: near-Earth object threat physics for Python.

Orbit propagation, close-approach and MOID search, impact consequence
models (crater, airblast, seismic) and deflection mission physics, with
measurement uncertainty carried through every calculation.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from neoguard.core.uncertainty import UncertaintyValue, propagate_linear, propagate_nonlinear, monte_carlo
from neoguard.core.kepler import solve_kepler, KeplerResult, OrbitType
from neoguard.core.ephemeris import JulianDate, TimeScale, CoordinateFrame, OrbitalElements, state_vector, transform
from neoguard.core.perturbations import compute_perturbations, propagate_orbit
from neoguard.core.approaches import find_close_approaches, calculate_moid, CloseApproachResult, MOIDResult
from neoguard.impact.crater import calculate_crater, CraterResult
from neoguard.impact.blast import calculate_blast_effects, BlastEffectsResult
from neoguard.impact.seismic import calculate_seismic_magnitude, SeismicResult
from neoguard.deflection.kinetic import calculate_momentum_transfer, KineticImpactResult
from neoguard.deflection.nuclear import calculate_nuclear_deflection, NuclearDeflectionResult
from neoguard.deflection.solar import calculate_solar_deflection, SolarDeflectionResult, SolarMethod
from neoguard.utils.lookup import UnknownKeyError

__all__ = [
    "__version__",
    "UncertaintyValue",
    "propagate_linear",
    "propagate_nonlinear",
    "monte_carlo",
    "solve_kepler",
    "KeplerResult",
    "OrbitType",
    "JulianDate",
    "TimeScale",
    "CoordinateFrame",
    "OrbitalElements",
    "state_vector",
    "transform",
    "compute_perturbations",
    "propagate_orbit",
    "find_close_approaches",
    "calculate_moid",
    "CloseApproachResult",
    "MOIDResult",
    "calculate_crater",
    "CraterResult",
    "calculate_blast_effects",
    "BlastEffectsResult",
    "calculate_seismic_magnitude",
    "SeismicResult",
    "calculate_momentum_transfer",
    "KineticImpactResult",
    "calculate_nuclear_deflection",
    "NuclearDeflectionResult",
    "calculate_solar_deflection",
    "SolarDeflectionResult",
    "SolarMethod",
    "UnknownKeyError",
]
