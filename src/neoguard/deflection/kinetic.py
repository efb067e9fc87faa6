"""Kinetic impactor deflection.

The spacecraft delivers its own momentum ``m·v·cosθ`` along the impact
direction and the crater ejecta add ``(β-1)`` times as much again, with β
depending on the target composition (Holsapple & Housen 2012, calibrated
against DART). The target's velocity change is total momentum over mass.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from neoguard.core.uncertainty import UncertaintyValue, Variable, propagate_nonlinear
from neoguard.utils.constants import GRAVITATIONAL_CONSTANT, JULIAN_YEAR_S, SECONDS_PER_DAY
from neoguard.utils.lookup import frozen, lookup

logger = logging.getLogger(__name__)

EJECTA_CRATER_CONSTANT = 0.02
EJECTA_CRATER_EXPONENT = 1.0 / 3.4
OBLIQUE_IMPACT_RAD = math.pi / 3.0
HIGH_POROSITY = 0.5
SPACECRAFT_DENSITY_KG_M3 = 2700.0
OPTIMIZATION_GRID = 20

REFERENCES = (
    "Holsapple, K.A. & Housen, K.R. (2012). Momentum transfer in asteroid impacts",
    "Cheng, A.F. et al. (2023). DART mission results and momentum transfer efficiency",
    "Holsapple, K.A. & Housen, K.R. (2007). A crater and its ejecta: An interpretation of Deep Impact",
)


@dataclass(frozen=True)
class TargetMaterialProperties:
    """Bulk properties of an asteroid target.

    Attributes:
        density: kg/m³.
        strength: Compressive strength in Pa.
        porosity: Pore fraction (0-1).
        composition: ``"rocky"``, ``"metallic"`` or ``"carbonaceous"``.
        grain_size: Characteristic grain size in m.
    """

    density: UncertaintyValue
    strength: UncertaintyValue
    porosity: UncertaintyValue
    composition: str
    grain_size: UncertaintyValue


@dataclass(frozen=True)
class ImpactorProperties:
    """The spacecraft at impact.

    Attributes:
        mass: kg.
        velocity: Speed relative to the target in m/s.
        diameter: m.
        density: Bulk density in kg/m³.
        material: Structural material name.
    """

    mass: UncertaintyValue
    velocity: UncertaintyValue
    diameter: UncertaintyValue
    density: UncertaintyValue
    material: str = "aluminum"


@dataclass(frozen=True)
class ImpactGeometry:
    """Where and how the spacecraft hits.

    Attributes:
        impact_angle: Radians from the target's velocity direction (0 is head-on).
        target_radius: m.
        impact_location: ``"center"``, ``"edge"`` or ``"random"``.
    """

    impact_angle: UncertaintyValue
    target_radius: UncertaintyValue
    impact_location: str = "center"


@dataclass(frozen=True)
class MomentumTransferParameters:
    beta: UncertaintyValue
    mu: UncertaintyValue
    k: UncertaintyValue
    velocity_range_m_s: tuple[float, float] = (1000.0, 50000.0)
    mass_range_kg: tuple[float, float] = (1.0, 1e6)


MATERIAL_PROPERTIES = frozen({
    "rocky": TargetMaterialProperties(
        density=UncertaintyValue(2700, 300, "kg/m³", "Britt & Consolmagno 2003"),
        strength=UncertaintyValue(1e7, 5e6, "Pa", "Holsapple & Housen 2007"),
        porosity=UncertaintyValue(0.2, 0.1, "1", "Britt & Consolmagno 2003"),
        composition="rocky",
        grain_size=UncertaintyValue(0.001, 0.0005, "m", "Estimated"),
    ),
    "metallic": TargetMaterialProperties(
        density=UncertaintyValue(7800, 500, "kg/m³", "Britt & Consolmagno 2003"),
        strength=UncertaintyValue(5e8, 1e8, "Pa", "Engineering estimates"),
        porosity=UncertaintyValue(0.1, 0.05, "1", "Britt & Consolmagno 2003"),
        composition="metallic",
        grain_size=UncertaintyValue(0.01, 0.005, "m", "Estimated"),
    ),
    "carbonaceous": TargetMaterialProperties(
        density=UncertaintyValue(1400, 200, "kg/m³", "Britt & Consolmagno 2003"),
        strength=UncertaintyValue(1e6, 5e5, "Pa", "Holsapple & Housen 2007"),
        porosity=UncertaintyValue(0.3, 0.1, "1", "Britt & Consolmagno 2003"),
        composition="carbonaceous",
        grain_size=UncertaintyValue(0.0001, 0.00005, "m", "Estimated"),
    ),
})

MOMENTUM_TRANSFER_PARAMETERS = frozen({
    "rocky": MomentumTransferParameters(
        beta=UncertaintyValue(2.0, 0.5, "1", "Holsapple & Housen 2012"),
        mu=UncertaintyValue(0.4, 0.1, "1", "Holsapple & Housen 2012"),
        k=UncertaintyValue(0.2, 0.05, "1", "Holsapple & Housen 2012"),
    ),
    "metallic": MomentumTransferParameters(
        beta=UncertaintyValue(1.5, 0.3, "1", "Holsapple & Housen 2012"),
        mu=UncertaintyValue(0.3, 0.1, "1", "Holsapple & Housen 2012"),
        k=UncertaintyValue(0.15, 0.04, "1", "Holsapple & Housen 2012"),
    ),
    "carbonaceous": MomentumTransferParameters(
        beta=UncertaintyValue(3.0, 0.8, "1", "Holsapple & Housen 2012"),
        mu=UncertaintyValue(0.5, 0.15, "1", "Holsapple & Housen 2012"),
        k=UncertaintyValue(0.3, 0.08, "1", "Holsapple & Housen 2012"),
    ),
})


def get_material_properties(composition: str) -> TargetMaterialProperties:
    return lookup(MATERIAL_PROPERTIES, composition, "asteroid composition")


def get_momentum_transfer_parameters(composition: str) -> MomentumTransferParameters:
    return lookup(MOMENTUM_TRANSFER_PARAMETERS, composition, "composition for momentum transfer")


@dataclass(frozen=True)
class EjectaCrater:
    """Crater dug by the impactor and the material it throws out."""

    diameter: UncertaintyValue
    depth: UncertaintyValue
    ejecta_mass: UncertaintyValue
    ejecta_velocity: UncertaintyValue


@dataclass(frozen=True)
class KineticImpactResult:
    """Momentum budget of a kinetic impact.

    Attributes:
        direct_momentum: Impactor momentum along the impact direction (kg·m/s).
        ejecta_momentum: Extra momentum carried off by ejecta (kg·m/s).
        total_momentum: Sum of the two (kg·m/s).
        beta: Total over direct momentum.
        delta_v: Target velocity change in m/s.
        crater: Ejecta crater.
        impact_energy: Impactor kinetic energy in J.
        specific_energy: Impact energy per target mass in J/kg.
        within_validity_range: False if velocity or mass lie outside the fit.
        warnings: Problems with the inputs.
        references: Literature behind the model.
    """

    direct_momentum: UncertaintyValue
    ejecta_momentum: UncertaintyValue
    total_momentum: UncertaintyValue
    beta: UncertaintyValue
    delta_v: UncertaintyValue
    crater: EjectaCrater
    impact_energy: UncertaintyValue
    specific_energy: UncertaintyValue
    within_validity_range: bool
    warnings: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "direct_momentum_kg_m_s": self.direct_momentum.to_dict(),
            "ejecta_momentum_kg_m_s": self.ejecta_momentum.to_dict(),
            "total_momentum_kg_m_s": self.total_momentum.to_dict(),
            "beta": self.beta.to_dict(),
            "delta_v_m_s": self.delta_v.to_dict(),
            "crater_diameter_m": self.crater.diameter.to_dict(),
            "crater_depth_m": self.crater.depth.to_dict(),
            "ejecta_mass_kg": self.crater.ejecta_mass.to_dict(),
            "ejecta_velocity_m_s": self.crater.ejecta_velocity.to_dict(),
            "impact_energy_j": self.impact_energy.to_dict(),
            "specific_energy_j_kg": self.specific_energy.to_dict(),
            "within_validity_range": self.within_validity_range,
            "warnings": list(self.warnings),
            "references": list(self.references),
        }


def _validate(
    impactor: ImpactorProperties,
    target: TargetMaterialProperties,
    geometry: ImpactGeometry,
    params: MomentumTransferParameters,
) -> tuple[bool, list[str]]:
    warnings: list[str] = []
    valid = True

    v = impactor.velocity.value
    v_min, v_max = params.velocity_range_m_s
    if v < v_min:
        warnings.append(f"Impact velocity {v:g} m/s is below validated range ({v_min:g} m/s)")
        valid = False
    if v > v_max:
        warnings.append(f"Impact velocity {v:g} m/s is above validated range ({v_max:g} m/s)")
        valid = False

    m = impactor.mass.value
    m_min, m_max = params.mass_range_kg
    if m < m_min:
        warnings.append(f"Impactor mass {m:g} kg is below validated range ({m_min:g} kg)")
        valid = False
    if m > m_max:
        warnings.append(f"Impactor mass {m:g} kg is above validated range ({m_max:g} kg)")
        valid = False

    if geometry.impact_angle.value > OBLIQUE_IMPACT_RAD:
        warnings.append(
            f"Impact angle {math.degrees(geometry.impact_angle.value):.1f}° is quite oblique; "
            "momentum transfer efficiency may be reduced"
        )
    if target.porosity.value > HIGH_POROSITY:
        warnings.append(
            f"High target porosity ({target.porosity.value * 100:.1f}%) may affect momentum transfer efficiency"
        )
    for name, value in (("impactor mass", m), ("impact velocity", v)):
        if not math.isfinite(value):
            warnings.append(f"Non-finite {name} ({value}) propagates into the result")
    return valid, warnings


def _ejecta_crater(
    energy: UncertaintyValue, target: TargetMaterialProperties, geometry: ImpactGeometry
) -> EjectaCrater:
    """Gravity-regime crater on the target, ``D = 0.02·(E/(ρ·g))^(1/3.4)``."""

    def diameter_m(x):
        surface_gravity = GRAVITATIONAL_CONSTANT * x["density"] * 4.0 / 3.0 * math.pi * x["radius"]
        return EJECTA_CRATER_CONSTANT * (x["energy"] / (x["density"] * surface_gravity)) ** EJECTA_CRATER_EXPONENT

    diameter = propagate_nonlinear(
        [
            Variable("energy", energy),
            Variable("density", target.density),
            Variable("radius", geometry.target_radius),
        ],
        diameter_m,
    ).to_uncertainty_value("m", "Crater scaling", "Crater diameter")

    # Simple bowl: depth D/7, volume πD³/12
    depth = UncertaintyValue(diameter.value / 7.0, diameter.uncertainty / 7.0, "m", "Estimated from diameter", "Crater depth")
    ejecta_mass = propagate_nonlinear(
        [Variable("diameter", diameter), Variable("density", target.density)],
        lambda x: math.pi / 12.0 * x["diameter"] ** 3 * x["density"],
    ).to_uncertainty_value("kg", "Crater volume", "Ejecta mass")
    ejecta_velocity = propagate_nonlinear(
        [Variable("energy", energy), Variable("mass", ejecta_mass)],
        lambda x: 0.1 * math.sqrt(x["energy"] / x["mass"]),
    ).to_uncertainty_value("m/s", "Energy scaling", "Average ejecta velocity")

    return EjectaCrater(diameter=diameter, depth=depth, ejecta_mass=ejecta_mass, ejecta_velocity=ejecta_velocity)


def calculate_momentum_transfer(
    impactor: ImpactorProperties,
    target: TargetMaterialProperties | str,
    geometry: ImpactGeometry,
    target_mass: UncertaintyValue,
) -> KineticImpactResult:
    """Momentum delivered by a kinetic impactor and the resulting ΔV.

    Args:
        impactor: Spacecraft at impact.
        target: Target properties, or a composition key.
        geometry: Impact angle and target radius.
        target_mass: Target mass in kg.

    Returns:
        KineticImpactResult.

    Raises:
        UnknownKeyError: If the composition has no material or β entry.
    """
    material = get_material_properties(target) if isinstance(target, str) else target
    params = get_momentum_transfer_parameters(material.composition)
    valid, warnings = _validate(impactor, material, geometry, params)

    mass = Variable("mass", impactor.mass)
    velocity = Variable("velocity", impactor.velocity)
    angle = Variable("angle", geometry.impact_angle)
    beta = Variable("beta", params.beta)

    impact_energy = propagate_nonlinear(
        [mass, velocity], lambda x: 0.5 * x["mass"] * x["velocity"] ** 2
    ).to_uncertainty_value("J", "Kinetic energy", "Impact kinetic energy")
    direct = propagate_nonlinear(
        [mass, velocity, angle], lambda x: x["mass"] * x["velocity"] * math.cos(x["angle"])
    ).to_uncertainty_value("kg·m/s", "Impactor momentum", "Direct momentum transfer")
    ejecta = propagate_nonlinear(
        [beta, mass, velocity, angle],
        lambda x: (x["beta"] - 1.0) * x["mass"] * x["velocity"] * math.cos(x["angle"]),
    ).to_uncertainty_value("kg·m/s", "Momentum enhancement factor", "Ejecta momentum enhancement")
    total = propagate_nonlinear(
        [beta, mass, velocity, angle],
        lambda x: x["beta"] * x["mass"] * x["velocity"] * math.cos(x["angle"]),
    ).to_uncertainty_value("kg·m/s", "Combined momentum transfers", "Total momentum transfer")

    efficiency = UncertaintyValue(
        total.value / direct.value if direct.value != 0 else 0.0,
        params.beta.uncertainty,
        "1",
        "Total/direct momentum ratio",
        "Momentum transfer efficiency (β factor)",
    )

    delta_v = propagate_nonlinear(
        [beta, mass, velocity, angle, Variable("target_mass", target_mass)],
        lambda x: x["beta"] * x["mass"] * x["velocity"] * math.cos(x["angle"]) / x["target_mass"],
    ).to_uncertainty_value("m/s", "Momentum conservation", "Velocity change")
    specific_energy = propagate_nonlinear(
        [Variable("energy", impact_energy), Variable("target_mass", target_mass)],
        lambda x: x["energy"] / x["target_mass"],
    ).to_uncertainty_value("J/kg", "Energy per unit target mass", "Specific energy")

    if not valid:
        logger.warning("Kinetic impact outside validity range: %s", "; ".join(warnings))
    logger.debug("Kinetic impact: p=%.3e kg m/s, dV=%.3e m/s", total.value, delta_v.value)

    return KineticImpactResult(
        direct_momentum=direct,
        ejecta_momentum=ejecta,
        total_momentum=total,
        beta=efficiency,
        delta_v=delta_v,
        crater=_ejecta_crater(impact_energy, material, geometry),
        impact_energy=impact_energy,
        specific_energy=specific_energy,
        within_validity_range=valid,
        warnings=warnings,
        references=list(REFERENCES),
    )


@dataclass(frozen=True)
class SpacecraftOptimizationResult:
    optimal_mass: UncertaintyValue
    optimal_velocity: UncertaintyValue
    max_delta_v: UncertaintyValue
    launch_energy: UncertaintyValue
    mission_duration: UncertaintyValue
    cost_estimate: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "optimal_mass_kg": self.optimal_mass.to_dict(),
            "optimal_velocity_m_s": self.optimal_velocity.to_dict(),
            "max_delta_v_m_s": self.max_delta_v.to_dict(),
            "launch_energy_j": self.launch_energy.to_dict(),
            "mission_duration_s": self.mission_duration.to_dict(),
            "cost_estimate_usd": self.cost_estimate.to_dict(),
        }


def optimize_spacecraft(
    target: TargetMaterialProperties | str,
    geometry: ImpactGeometry,
    target_mass: UncertaintyValue,
    max_mass_kg: float,
    max_velocity_m_s: float,
    launch_capability_kg: float | None = None,
) -> SpacecraftOptimizationResult:
    """Grid search over spacecraft mass and speed for the largest ΔV.

    Masses run from 100 kg to ``max_mass_kg`` (capped by the launch
    capability when given) and speeds from 5 km/s to ``max_velocity_m_s``
    on a 20×20 grid.

    Raises:
        ValueError: If the mass or velocity ceiling is below the grid start.
    """
    mass_cap = min(max_mass_kg, launch_capability_kg) if launch_capability_kg is not None else max_mass_kg
    if mass_cap < 100.0:
        raise ValueError(f"Mass ceiling must be at least 100 kg, got {mass_cap}")
    if max_velocity_m_s < 5000.0:
        raise ValueError(f"Velocity ceiling must be at least 5000 m/s, got {max_velocity_m_s}")

    best: tuple[UncertaintyValue, ImpactorProperties] | None = None
    for mass in np.linspace(100.0, mass_cap, OPTIMIZATION_GRID):
        for velocity in np.linspace(5000.0, max_velocity_m_s, OPTIMIZATION_GRID):
            impactor = create_typical_spacecraft(float(mass), float(velocity))
            delta_v = calculate_momentum_transfer(impactor, target, geometry, target_mass).delta_v
            if best is None or delta_v.value > best[0].value:
                best = (delta_v, impactor)

    max_delta_v, impactor = best
    launch_energy = propagate_nonlinear(
        [Variable("mass", impactor.mass), Variable("velocity", impactor.velocity)],
        lambda x: 0.5 * x["mass"] * x["velocity"] ** 2,
    ).to_uncertainty_value("J", "Kinetic energy", "Launch energy required")

    logger.debug("Optimal impactor: %.1f kg at %.1f m/s", impactor.mass.value, impactor.velocity.value)
    return SpacecraftOptimizationResult(
        optimal_mass=impactor.mass,
        optimal_velocity=impactor.velocity,
        max_delta_v=max_delta_v,
        launch_energy=launch_energy,
        mission_duration=UncertaintyValue(
            JULIAN_YEAR_S, 30 * SECONDS_PER_DAY, "s", "Direct trajectory estimate", "Mission duration"
        ),
        cost_estimate=UncertaintyValue(
            500e6 + impactor.mass.value * 10000.0, 200e6, "USD", "Rough cost estimate", "Mission cost"
        ),
    )


def create_typical_spacecraft(mass_kg: float, velocity_m_s: float) -> ImpactorProperties:
    """Aluminium impactor with 10% mass and 5% velocity uncertainty."""
    return ImpactorProperties(
        mass=UncertaintyValue(mass_kg, mass_kg * 0.1, "kg", "Mission specification"),
        velocity=UncertaintyValue(velocity_m_s, velocity_m_s * 0.05, "m/s", "Mission specification"),
        diameter=UncertaintyValue((mass_kg / SPACECRAFT_DENSITY_KG_M3) ** (1.0 / 3.0) * 2.0, 0.1, "m", "Estimated from mass"),
        density=UncertaintyValue(SPACECRAFT_DENSITY_KG_M3, 100.0, "kg/m³", "Typical spacecraft density"),
        material="aluminum",
    )


def create_head_on_impact(target_radius_m: float) -> ImpactGeometry:
    return ImpactGeometry(
        impact_angle=UncertaintyValue(0.0, 0.1, "rad", "Head-on impact"),
        target_radius=UncertaintyValue(target_radius_m, target_radius_m * 0.1, "m", "Target specification"),
        impact_location="center",
    )


def create_dart_like_mission() -> ImpactorProperties:
    """Impactor matching the DART spacecraft at Dimorphos."""
    return ImpactorProperties(
        mass=UncertaintyValue(610.0, 30.0, "kg", "DART mission specification"),
        velocity=UncertaintyValue(6140.0, 100.0, "m/s", "DART impact velocity"),
        diameter=UncertaintyValue(1.2, 0.1, "m", "DART spacecraft dimensions"),
        density=UncertaintyValue(508.0, 50.0, "kg/m³", "DART bulk density"),
        material="aluminum",
    )
