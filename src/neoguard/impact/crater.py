"""Impact crater formation.

Holsapple & Housen (2007) scaling: ``D = K1·(E_eff/(ρ·g))^μ`` with separate
constants for the strength- and gravity-dominated regimes. Oblique impacts
reduce the effective energy by ``sin(θ)^(1/3)``. Depth, volume, rim height,
ejecta and formation time follow from the diameter.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from neoguard.core.uncertainty import UncertaintyValue, Variable, multiply, propagate_nonlinear
from neoguard.impact.validity import ValidityBuilder, ValidityCheck, agreement_grade
from neoguard.utils.constants import STANDARD_GRAVITY_M_S2
from neoguard.utils.lookup import frozen, lookup

logger = logging.getLogger(__name__)

OBLIQUE_ANGLE_LIMIT_DEG = 15.0

EARTH_GRAVITY = UncertaintyValue(STANDARD_GRAVITY_M_S2, 0.0, "m/s²", "Standard", "Earth surface gravity")

RIM_HEIGHT_FACTOR = UncertaintyValue(0.07, 0.02, "1", "Melosh (1989)", "Rim height factor")
EJECTA_VOLUME_FACTOR = UncertaintyValue(20.0, 10.0, "1", "Melosh (1989)", "Ejecta volume factor")
EJECTA_RANGE_FACTOR = UncertaintyValue(2.5, 0.5, "1", "Melosh (1989)", "Ejecta range factor")


class ScalingRegime(Enum):
    """Which resistance controls crater growth."""

    STRENGTH = "strengthRegime"
    GRAVITY = "gravityRegime"


@dataclass(frozen=True)
class TargetMaterial:
    """Ground properties that control crater size.

    Attributes:
        name: Display name.
        density: Bulk density in kg/m³.
        strength: Cohesive strength in Pa.
        porosity: Pore fraction (0-1).
        description: What the material represents.
    """

    name: str
    density: UncertaintyValue
    strength: UncertaintyValue
    porosity: UncertaintyValue
    description: str = ""


@dataclass(frozen=True)
class ScalingParameters:
    """Fit constants of one scaling regime and the range they were fitted over."""

    k1: UncertaintyValue
    k2: UncertaintyValue
    mu: UncertaintyValue
    nu: UncertaintyValue
    energy_range_j: tuple[float, float]
    velocity_range_m_s: tuple[float, float]
    reference: str


def _material(name, density, strength, porosity, description, density_src, strength_src, porosity_src="Literature compilation"):
    return TargetMaterial(
        name=name,
        density=UncertaintyValue(*density, "kg/m³", density_src, f"{name} density"),
        strength=UncertaintyValue(*strength, "Pa", strength_src, f"{name} cohesive strength"),
        porosity=UncertaintyValue(*porosity, "1", porosity_src, f"{name} porosity"),
        description=description,
    )


TARGET_MATERIALS = frozen({
    "sedimentaryRock": _material(
        "Sedimentary Rock", (2400, 200), (50e6, 20e6), (0.15, 0.05),
        "Typical sedimentary rock target (sandstone, limestone)",
        "Melosh (1989)", "Holsapple & Housen (2007)",
    ),
    "crystallineRock": _material(
        "Crystalline Rock", (2700, 100), (200e6, 50e6), (0.05, 0.02),
        "Typical crystalline rock target (granite, basalt)",
        "Melosh (1989)", "Holsapple & Housen (2007)",
    ),
    "dryRegolith": _material(
        "Dry Regolith", (1800, 300), (1e3, 5e2), (0.4, 0.1),
        "Dry regolith or unconsolidated material",
        "Housen & Holsapple (2011)", "Housen & Holsapple (2011)",
    ),
    "wetSediment": _material(
        "Wet Sediment", (2000, 200), (10e3, 5e3), (0.3, 0.1),
        "Water-saturated sediment or mud",
        "Housen & Holsapple (2011)", "Housen & Holsapple (2011)",
    ),
    "ice": _material(
        "Ice", (917, 10), (5e6, 2e6), (0.0, 0.0),
        "Pure water ice",
        "CRC Handbook", "Schultz & Gault (1985)", "Assumed",
    ),
})

_HH2007 = "Holsapple, K.A. & Housen, K.R. (2007). A crater and its ejecta: An interpretation of Deep Impact"

SCALING_PARAMETERS = frozen({
    ScalingRegime.STRENGTH: ScalingParameters(
        k1=UncertaintyValue(1.88, 0.2, "1", "Holsapple & Housen (2007)", "Diameter scaling constant (strength)"),
        k2=UncertaintyValue(0.13, 0.02, "1", "Holsapple & Housen (2007)", "Depth scaling constant (strength)"),
        mu=UncertaintyValue(0.22, 0.02, "1", "Holsapple & Housen (2007)", "Scaling exponent (strength)"),
        nu=UncertaintyValue(0.4, 0.05, "1", "Holsapple & Housen (2007)", "Velocity scaling exponent"),
        energy_range_j=(1e6, 1e18),
        velocity_range_m_s=(1000.0, 30000.0),
        reference=_HH2007,
    ),
    ScalingRegime.GRAVITY: ScalingParameters(
        k1=UncertaintyValue(1.25, 0.15, "1", "Holsapple & Housen (2007)", "Diameter scaling constant (gravity)"),
        k2=UncertaintyValue(0.25, 0.03, "1", "Holsapple & Housen (2007)", "Depth scaling constant (gravity)"),
        mu=UncertaintyValue(0.165, 0.015, "1", "Holsapple & Housen (2007)", "Scaling exponent (gravity)"),
        nu=UncertaintyValue(0.4, 0.05, "1", "Holsapple & Housen (2007)", "Velocity scaling exponent"),
        energy_range_j=(1e12, 1e25),
        velocity_range_m_s=(5000.0, 50000.0),
        reference=_HH2007,
    ),
})


@dataclass(frozen=True)
class CraterResult:
    """Crater dimensions with uncertainties.

    Attributes:
        diameter: Final rim-to-rim diameter in m.
        depth: Depth in m.
        volume: Paraboloid volume in m³.
        rim_height: Rim height in m.
        ejecta_volume: Ejected volume in m³.
        ejecta_range: Extent of continuous ejecta in m.
        formation_time: Excavation time in s.
        regime: Scaling regime used.
        scaling_law: Name of the law and regime.
        target_material: Target name.
        impact_angle: Impact angle from horizontal in degrees.
        validity: Range check of the inputs.
    """

    diameter: UncertaintyValue
    depth: UncertaintyValue
    volume: UncertaintyValue
    rim_height: UncertaintyValue
    ejecta_volume: UncertaintyValue
    ejecta_range: UncertaintyValue
    formation_time: UncertaintyValue
    regime: ScalingRegime
    scaling_law: str
    target_material: str
    impact_angle: UncertaintyValue
    validity: ValidityCheck

    def to_dict(self) -> dict:
        return {
            "diameter_m": self.diameter.to_dict(),
            "depth_m": self.depth.to_dict(),
            "volume_m3": self.volume.to_dict(),
            "rim_height_m": self.rim_height.to_dict(),
            "ejecta_volume_m3": self.ejecta_volume.to_dict(),
            "ejecta_range_m": self.ejecta_range.to_dict(),
            "formation_time_s": self.formation_time.to_dict(),
            "regime": self.regime.value,
            "scaling_law": self.scaling_law,
            "target_material": self.target_material,
            "impact_angle_deg": self.impact_angle.to_dict(),
            "validity": self.validity.to_dict(),
        }


def get_target_material(name: str) -> TargetMaterial:
    return lookup(TARGET_MATERIALS, name, "target material")


def available_target_materials() -> list[str]:
    return list(TARGET_MATERIALS)


def determine_scaling_regime(energy_j: float, material: TargetMaterial, gravity_m_s2: float) -> ScalingRegime:
    """Strength regime while a rough size estimate is below ``sqrt(Y/(ρg))``.

    Without a positive energy and weight there is no size estimate; such
    inputs are treated as strength-dominated.
    """
    rho_g = material.density.value * gravity_m_s2
    if not (energy_j > 0.0 and rho_g > 0.0):
        return ScalingRegime.STRENGTH
    transition_diameter = math.sqrt(material.strength.value / rho_g)
    estimated_diameter = (energy_j / rho_g) ** 0.22
    if estimated_diameter < transition_diameter:
        return ScalingRegime.STRENGTH
    return ScalingRegime.GRAVITY


def _validate(
    energy: UncertaintyValue, velocity: UncertaintyValue, angle_deg: UncertaintyValue, params: ScalingParameters
) -> ValidityCheck:
    check = ValidityBuilder()
    check.check_finite(impact_energy=energy.value, impact_velocity=velocity.value, impact_angle=angle_deg.value)

    e_min, e_max = params.energy_range_j
    if energy.value < e_min:
        check.warn(f"Impact energy ({energy.value:.2e} J) is below validated range (>{e_min:.2e} J)", invalidates=True)
    if energy.value > e_max:
        check.warn(f"Impact energy ({energy.value:.2e} J) is above validated range (<{e_max:.2e} J)", invalidates=True)

    v_min, v_max = params.velocity_range_m_s
    if velocity.value < v_min:
        check.warn(f"Impact velocity ({velocity.value:g} m/s) is below validated range (>{v_min:g} m/s)")
    if velocity.value > v_max:
        check.warn(f"Impact velocity ({velocity.value:g} m/s) is above validated range (<{v_max:g} m/s)")

    if angle_deg.value < OBLIQUE_ANGLE_LIMIT_DEG:
        check.warn(f"Very oblique impact ({angle_deg.value:g}°): scaling laws less accurate for grazing impacts")
        check.limit("Scaling laws derived primarily for impact angles >15°")

    check.limit(
        "Scaling laws assume homogeneous target material",
        "Does not account for atmospheric effects or projectile fragmentation",
        "Derived from laboratory experiments and terrestrial crater data",
    )
    return check.build()


def angle_factor(angle_deg: UncertaintyValue) -> UncertaintyValue:
    """Oblique-impact energy factor ``sin(θ)^(1/3)``."""
    result = propagate_nonlinear(
        [Variable("angle", angle_deg)],
        lambda x: math.sin(math.radians(x["angle"])) ** (1.0 / 3.0),
    )
    return result.to_uncertainty_value("1", "Calculated", "Angle correction factor for oblique impact")


def calculate_crater(
    impact_energy: UncertaintyValue,
    impact_velocity: UncertaintyValue,
    impact_angle_deg: UncertaintyValue,
    projectile_density: UncertaintyValue,
    target: TargetMaterial | str,
    gravity: UncertaintyValue = EARTH_GRAVITY,
) -> CraterResult:
    """Crater produced by an impact.

    Args:
        impact_energy: Kinetic energy in J.
        impact_velocity: Impact speed in m/s (range check only).
        impact_angle_deg: Angle from the horizontal in degrees.
        projectile_density: Impactor density in kg/m³; carried for the
            record, the energy-based law does not use it.
        target: Material, or its key in :data:`TARGET_MATERIALS`.
        gravity: Surface gravity in m/s².

    Returns:
        CraterResult. Out-of-range inputs are reported in ``validity``.

    Raises:
        UnknownKeyError: If ``target`` names an unknown material.
    """
    material = get_target_material(target) if isinstance(target, str) else target
    regime = determine_scaling_regime(impact_energy.value, material, gravity.value)
    params = SCALING_PARAMETERS[regime]
    validity = _validate(impact_energy, impact_velocity, impact_angle_deg, params)

    effective_energy = multiply(impact_energy, angle_factor(impact_angle_deg), "J", "Angle-corrected impact energy")

    diameter = propagate_nonlinear(
        [
            Variable("k1", params.k1),
            Variable("energy", effective_energy),
            Variable("density", material.density),
            Variable("gravity", gravity),
            Variable("mu", params.mu),
        ],
        lambda x: x["k1"] * (x["energy"] / (x["density"] * x["gravity"])) ** x["mu"],
    ).to_uncertainty_value("m", "Holsapple & Housen (2007) scaling law", "Crater diameter")

    depth = multiply(diameter, params.k2, "m", "Crater depth")
    volume = propagate_nonlinear(
        [Variable("diameter", diameter), Variable("depth", depth)],
        lambda x: math.pi / 8.0 * x["diameter"] ** 2 * x["depth"],
    ).to_uncertainty_value("m³", "Paraboloid geometry", "Crater volume")

    formation_time = propagate_nonlinear(
        [Variable("diameter", diameter), Variable("gravity", gravity)],
        lambda x: math.sqrt(x["diameter"] / x["gravity"]),
    ).to_uncertainty_value("s", "Dimensional analysis", "Crater formation time")

    validity.log("Crater")
    logger.debug("Crater (%s): D=%.3e m, depth=%.3e m", regime.value, diameter.value, depth.value)

    return CraterResult(
        diameter=diameter,
        depth=depth,
        volume=volume,
        rim_height=multiply(diameter, RIM_HEIGHT_FACTOR, "m", "Rim height"),
        ejecta_volume=multiply(volume, EJECTA_VOLUME_FACTOR, "m³", "Ejecta volume"),
        ejecta_range=multiply(diameter, EJECTA_RANGE_FACTOR, "m", "Continuous ejecta range"),
        formation_time=formation_time,
        regime=regime,
        scaling_law=f"Holsapple & Housen (2007) - {regime.value}",
        target_material=material.name,
        impact_angle=impact_angle_deg,
        validity=validity,
    )


@dataclass(frozen=True)
class CraterComparison:
    """A modelled crater beside its observed size."""

    name: str
    observed_diameter_m: float
    observed_depth_m: float | None
    calculated: CraterResult
    diameter_ratio: float
    agreement: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "observed_diameter_m": self.observed_diameter_m,
            "observed_depth_m": self.observed_depth_m,
            "calculated": self.calculated.to_dict(),
            "diameter_ratio": self.diameter_ratio,
            "agreement": self.agreement,
        }


def validate_against_known_craters() -> list[CraterComparison]:
    """Run the model on well-studied craters (currently Barringer)."""
    barringer = calculate_crater(
        UncertaintyValue(1.5e16, 5e15, "J", "Kring (2007)", "Estimated impact energy"),
        UncertaintyValue(12000.0, 2000.0, "m/s", "Kring (2007)", "Estimated impact velocity"),
        UncertaintyValue(45.0, 15.0, "deg", "Assumed", "Typical impact angle"),
        UncertaintyValue(7800.0, 500.0, "kg/m³", "Iron meteorite", "Iron meteorite density"),
        "sedimentaryRock",
    )
    ratio = barringer.diameter.value / 1200.0
    return [
        CraterComparison(
            name="Barringer Crater (Meteor Crater)",
            observed_diameter_m=1200.0,
            observed_depth_m=170.0,
            calculated=barringer,
            diameter_ratio=ratio,
            agreement=agreement_grade(ratio),
        )
    ]
