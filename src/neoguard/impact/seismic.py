"""Seismic effects of an impact.

Kinetic energy times a seismic efficiency gives the radiated seismic energy.
An empirical log-log fit anchored on Tunguska and Chelyabinsk turns that
into a moment magnitude, scaled by the target rigidity, and the Hanks &
Kanamori relation ``Mw = (2/3)(log10 M0 - 9.1)`` closes the chain. Ground
motion and intensity radii come from standard attenuation relations.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from neoguard.core.uncertainty import UncertaintyValue, Variable, multiply, propagate_nonlinear
from neoguard.impact.validity import ValidityBuilder, ValidityCheck
from neoguard.utils.constants import IMPACT_ENERGY_RANGE_J, STANDARD_GRAVITY_M_S2
from neoguard.utils.lookup import frozen, lookup

logger = logging.getLogger(__name__)

SEISMIC_EFFICIENCY = UncertaintyValue(
    1e-2, 5e-3, "1", "Ben-Menahem (1975); Springer & Kinnaman (1971)", "Seismic efficiency of a surface impact"
)
REFERENCE_RIGIDITY_PA = 3e10


class Formation(Enum):
    SEDIMENTARY = "sedimentary"
    IGNEOUS = "igneous"
    METAMORPHIC = "metamorphic"
    OCEANIC = "oceanic"


class Confidence(Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class GeologicalProperties:
    """Target rock properties for seismic propagation.

    Attributes:
        density: kg/m³.
        p_wave_velocity: m/s.
        s_wave_velocity: m/s.
        quality_factor: Attenuation Q.
        formation: Rock formation type.
    """

    density: UncertaintyValue
    p_wave_velocity: UncertaintyValue
    s_wave_velocity: UncertaintyValue
    quality_factor: UncertaintyValue
    formation: Formation

    @property
    def rigidity(self) -> float:
        """Shear modulus ``ρ·Vs²`` in Pa."""
        return self.density.value * self.s_wave_velocity.value**2


def _geology(density, vp, vs, q, formation, vel_src="IASP91 model"):
    return GeologicalProperties(
        density=UncertaintyValue(*density, "kg/m³", "Christensen & Mooney (1995)", "Rock density"),
        p_wave_velocity=UncertaintyValue(*vp, "m/s", vel_src, "P-wave velocity"),
        s_wave_velocity=UncertaintyValue(*vs, "m/s", vel_src, "S-wave velocity"),
        quality_factor=UncertaintyValue(*q, "1", "Aki & Richards (2002)", "Seismic quality factor"),
        formation=formation,
    )


GEOLOGICAL_PROPERTIES = frozen({
    "continental_crust": _geology((2700, 200), (6200, 300), (3600, 200), (600, 200), Formation.IGNEOUS),
    "oceanic_crust": _geology((2900, 150), (6800, 400), (3900, 250), (400, 150), Formation.OCEANIC),
    "sedimentary": _geology(
        (2400, 300), (4500, 500), (2600, 400), (200, 100), Formation.SEDIMENTARY, "Regional studies"
    ),
})


def get_geological_properties(name: str) -> GeologicalProperties:
    return lookup(GEOLOGICAL_PROPERTIES, name, "geological setting")


@dataclass(frozen=True)
class SeismicResult:
    """Seismic source and felt-area estimates.

    Attributes:
        seismic_energy: Radiated seismic energy in J.
        seismic_moment: Scalar moment in N·m.
        moment_magnitude: Mw.
        local_magnitude: Approximate ML.
        peak_ground_acceleration: PGA 1 km from the source in m/s².
        felt_radius: Radius of MMI ≥ III in km.
        damage_radius: Radius of MMI ≥ VI in km.
        scaling_law: Name of the law chain.
        validity: Range check of the input energy.
    """

    seismic_energy: UncertaintyValue
    seismic_moment: UncertaintyValue
    moment_magnitude: UncertaintyValue
    local_magnitude: UncertaintyValue
    peak_ground_acceleration: UncertaintyValue
    felt_radius: UncertaintyValue
    damage_radius: UncertaintyValue
    scaling_law: str
    validity: ValidityCheck

    def to_dict(self) -> dict:
        return {
            "seismic_energy_j": self.seismic_energy.to_dict(),
            "seismic_moment_nm": self.seismic_moment.to_dict(),
            "moment_magnitude": self.moment_magnitude.to_dict(),
            "local_magnitude": self.local_magnitude.to_dict(),
            "peak_ground_acceleration_m_s2": self.peak_ground_acceleration.to_dict(),
            "felt_radius_km": self.felt_radius.to_dict(),
            "damage_radius_km": self.damage_radius.to_dict(),
            "scaling_law": self.scaling_law,
            "validity": self.validity.to_dict(),
        }


@dataclass(frozen=True)
class GroundMotionResult:
    peak_ground_acceleration: UncertaintyValue
    peak_ground_velocity: UncertaintyValue
    mercalli_intensity: UncertaintyValue
    distance_km: float

    def to_dict(self) -> dict:
        return {
            "peak_ground_acceleration_m_s2": self.peak_ground_acceleration.to_dict(),
            "peak_ground_velocity_m_s": self.peak_ground_velocity.to_dict(),
            "mercalli_intensity": self.mercalli_intensity.to_dict(),
            "distance_km": self.distance_km,
        }


def _pga_m_s2(mw: float, distance_km: float) -> float:
    """Boore-Atkinson style PGA for rock sites."""
    return 10 ** (-3.512 + 0.904 * mw - 1.328 * math.log10(distance_km)) * STANDARD_GRAVITY_M_S2


def _log10(x: float) -> float:
    """``log10`` that returns -inf at zero and NaN below it."""
    if x > 0.0:
        return math.log10(x)
    return -math.inf if x == 0.0 else math.nan


def _intensity_radius_km(mw: float, threshold_offset: float, floor_km: float) -> float:
    return max(floor_km, 10 ** (-1.72 + 1.4 * mw - threshold_offset))


def calculate_seismic_magnitude(
    kinetic_energy: UncertaintyValue,
    geology: GeologicalProperties | str = "continental_crust",
) -> SeismicResult:
    """Moment magnitude and felt area of an impact.

    Args:
        kinetic_energy: Impact energy in J.
        geology: Target properties, or a key of :data:`GEOLOGICAL_PROPERTIES`.

    Returns:
        SeismicResult; energies outside 1e12-1e24 J are flagged invalid.

    Raises:
        UnknownKeyError: If ``geology`` names an unknown setting.
    """
    rock = get_geological_properties(geology) if isinstance(geology, str) else geology

    checks = ValidityBuilder()
    checks.check_finite(kinetic_energy=kinetic_energy.value)
    if kinetic_energy.value <= 0.0:
        checks.warn(
            f"Non-positive impact energy ({kinetic_energy.value:g} J) has no finite magnitude", invalidates=True
        )
    e_min, e_max = IMPACT_ENERGY_RANGE_J
    if not e_min <= kinetic_energy.value <= e_max:
        checks.warn(
            f"Energy {kinetic_energy.value:.2e} J outside validated range [{e_min:.0e}, {e_max:.0e}] J",
            invalidates=True,
        )
    checks.limit(
        "Seismic efficiency varies by an order of magnitude between targets",
        "Magnitude fit anchored on two airburst events",
        "Attenuation relations calibrated on tectonic earthquakes",
    )

    seismic_energy = multiply(kinetic_energy, SEISMIC_EFFICIENCY, "J", "Radiated seismic energy")

    def moment(x):
        magnitude = 0.67 * _log10(x["energy"]) - 4.8
        return 10 ** (1.5 * magnitude + 9.1) * x["density"] * x["vs"] ** 2 / REFERENCE_RIGIDITY_PA

    seismic_moment = propagate_nonlinear(
        [
            Variable("energy", seismic_energy),
            Variable("density", rock.density),
            Variable("vs", rock.s_wave_velocity),
        ],
        moment,
    ).to_uncertainty_value("N·m", "Kanamori & Anderson (1975)", "Seismic moment")

    magnitude = propagate_nonlinear(
        [Variable("m0", seismic_moment)], lambda x: 2.0 / 3.0 * (_log10(x["m0"]) - 9.1)
    ).to_uncertainty_value("Mw", "Hanks & Kanamori (1979)", "Moment magnitude")

    mw = [Variable("mw", magnitude)]
    local = propagate_nonlinear(mw, lambda x: x["mw"] + 0.1 * math.sin(x["mw"] - 5.0)).to_uncertainty_value(
        "ML", "Empirical Mw-ML conversion", "Local magnitude"
    )
    pga = propagate_nonlinear(mw, lambda x: _pga_m_s2(x["mw"], 1.0)).to_uncertainty_value(
        "m/s²", "Boore-Atkinson GMPE", "Peak ground acceleration at 1 km"
    )
    felt = propagate_nonlinear(mw, lambda x: _intensity_radius_km(x["mw"], 3.0, 1.0)).to_uncertainty_value(
        "km", "Bakun & Wentworth (1997)", "Felt radius (MMI ≥ III)"
    )
    damage = propagate_nonlinear(mw, lambda x: _intensity_radius_km(x["mw"], 6.0, 0.1)).to_uncertainty_value(
        "km", "Bakun & Wentworth (1997)", "Damage radius (MMI ≥ VI)"
    )

    validity = checks.build()
    validity.log("Seismic")
    logger.debug("Seismic: E=%.3e J -> Mw=%.2f", kinetic_energy.value, magnitude.value)

    return SeismicResult(
        seismic_energy=seismic_energy,
        seismic_moment=seismic_moment,
        moment_magnitude=magnitude,
        local_magnitude=local,
        peak_ground_acceleration=pga,
        felt_radius=felt,
        damage_radius=damage,
        scaling_law="Ben-Menahem (1975) with modern GMPE",
        validity=validity,
    )


def ground_motion_at_distance(magnitude: UncertaintyValue, distance_km: float) -> GroundMotionResult:
    """PGA, PGV and Mercalli intensity at a distance from the impact.

    Raises:
        ValueError: If ``distance_km`` is not positive.
    """
    if distance_km <= 0:
        raise ValueError("Distance must be positive")

    mw = [Variable("mw", magnitude)]
    # 5 km pseudo-depth keeps the near field finite
    pga = propagate_nonlinear(mw, lambda x: _pga_m_s2(x["mw"], distance_km + 5.0)).to_uncertainty_value(
        "m/s²", "Boore-Atkinson (2008) GMPE", "Peak ground acceleration"
    )
    pgv = propagate_nonlinear(
        mw, lambda x: 10 ** (-5.261 + 1.1 * x["mw"] - 1.5 * math.log10(distance_km + 5.0))
    ).to_uncertainty_value("m/s", "Campbell & Bozorgnia (2008)", "Peak ground velocity")
    mmi = propagate_nonlinear(
        mw, lambda x: max(1.0, min(12.0, 1.72 + 1.4 * x["mw"] - 3.0 * math.log10(distance_km)))
    ).to_uncertainty_value("MMI", "Bakun & Wentworth (1997)", "Modified Mercalli Intensity")

    return GroundMotionResult(
        peak_ground_acceleration=pga,
        peak_ground_velocity=pgv,
        mercalli_intensity=mmi,
        distance_km=distance_km,
    )


@dataclass(frozen=True)
class SeismicValidation:
    """Calculated magnitude against the range inferred for a historic event."""

    event: str
    is_valid: bool
    expected_range: tuple[float, float]
    calculated_value: float
    deviation: float
    confidence: Confidence

    def to_dict(self) -> dict:
        return {
            "event": self.event,
            "is_valid": self.is_valid,
            "expected_range": list(self.expected_range),
            "calculated_value": self.calculated_value,
            "deviation": self.deviation,
            "confidence": self.confidence.value,
        }


KNOWN_IMPACTS = frozen({
    "Tunguska_1908": (1.2e16, (4.5, 5.2)),
    "Chelyabinsk_2013": (2.1e15, (3.8, 4.2)),
    "Barringer_Crater": (1.5e16, (4.8, 5.5)),
})
"""Event energy in J and the magnitude range inferred for it."""


def validate_against_known_impacts(magnitude: UncertaintyValue, event: str) -> SeismicValidation:
    """Grade a magnitude against a historic event.

    HIGH within the half-width of the event's magnitude range, MEDIUM within
    1.5 half-widths, LOW beyond.

    Raises:
        UnknownKeyError: If ``event`` is not in :data:`KNOWN_IMPACTS`.
    """
    _, (low, high) = lookup(KNOWN_IMPACTS, event, "impact event")
    deviation = abs(magnitude.value - 0.5 * (low + high))
    tolerance = 0.5 * (high - low)

    if deviation <= tolerance:
        confidence = Confidence.HIGH
    elif deviation <= 1.5 * tolerance:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return SeismicValidation(
        event=event,
        is_valid=deviation <= 1.5 * tolerance,
        expected_range=(low, high),
        calculated_value=magnitude.value,
        deviation=deviation,
        confidence=confidence,
    )
