"""Nuclear standoff deflection.

A device detonated above the target's surface deposits energy as X-rays,
neutrons, gamma rays and debris. X-rays and neutrons heat a thin surface
layer; the vaporized fraction blows off at roughly the target's escape
velocity and pushes the body the other way. Device debris adds a small
direct impulse. The detonation distance follows the empirical
``3·R·(Y/1 Mt)^0.3`` rule.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from neoguard.core.uncertainty import UncertaintyValue, Variable, add, propagate_nonlinear, quotient, scale
from neoguard.utils.constants import GRAVITATIONAL_CONSTANT, MEGATON_TNT_J, SPEED_OF_LIGHT_M_S, STEFAN_BOLTZMANN
from neoguard.utils.lookup import frozen, lookup

logger = logging.getLogger(__name__)

FRACTION_TOLERANCE = 0.1
MIN_EFFECTIVE_YIELD_MT = 0.001
MAX_YIELD_MT = 100.0

XRAY_AREAL_DENSITY_KG_M2 = 0.1
XRAY_COUPLING = 5.0
NEUTRON_AREAL_DENSITY_KG_M2 = 1.0
NEUTRON_HEATING_EFFICIENCY = 0.1
NEUTRON_MAX_VAPORIZED_FRACTION = 0.1
NEUTRON_COUPLING = 0.5
DEBRIS_COUPLING = 1e-4
EFFICIENCY_DISTANCE_SCALE_M = 1000.0

THERMAL_FRACTION = 0.3
SURFACE_EMISSIVITY = 0.9
HEATING_TIME_S = 1.0
STRESS_WAVE_FRACTION = 0.1
FRACTURE_STRENGTH_SCALE_PA = 1e6
SPALLED_FRACTION = 0.1

REFERENCES = (
    "Ahrens, T.J. & Harris, A.W. (1992). Deflection and fragmentation of near-Earth asteroids",
    "Glasstone, S. & Dolan, P.J. (1977). The Effects of Nuclear Weapons",
    "Solem, J.C. (2000). Nuclear explosive propulsion for interplanetary travel",
    "Wie, B. (2008). Dynamics and Control of Gravity Tractor Spacecraft",
)


@dataclass(frozen=True)
class NuclearDevice:
    """Nuclear explosive characteristics.

    Attributes:
        yield_mt: Yield in Mt TNT.
        mass: Device mass in kg.
        xray_fraction: Share of the yield released as X-rays.
        neutron_fraction: Share released as neutrons.
        gamma_fraction: Share released as gamma rays.
        debris_fraction: Share carried by device debris.
        device_type: ``"fission"``, ``"fusion"`` or ``"hybrid"``.
    """

    yield_mt: UncertaintyValue
    mass: UncertaintyValue
    xray_fraction: UncertaintyValue
    neutron_fraction: UncertaintyValue
    gamma_fraction: UncertaintyValue
    debris_fraction: UncertaintyValue
    device_type: str

    @property
    def total_fraction(self) -> float:
        return (
            self.xray_fraction.value
            + self.neutron_fraction.value
            + self.gamma_fraction.value
            + self.debris_fraction.value
        )


@dataclass(frozen=True)
class Vaporization:
    energy: UncertaintyValue
    temperature: UncertaintyValue


@dataclass(frozen=True)
class NuclearTarget:
    """Asteroid as seen by the blast.

    Attributes:
        mass: kg.
        radius: m.
        density: kg/m³.
        composition: ``"rocky"``, ``"metallic"`` or ``"carbonaceous"``.
        albedo: Geometric albedo.
        thermal_inertia: J m⁻² K⁻¹ s^-½.
        vaporization: Specific vaporization energy (J/kg) and temperature (K).
    """

    mass: UncertaintyValue
    radius: UncertaintyValue
    density: UncertaintyValue
    composition: str
    albedo: UncertaintyValue
    thermal_inertia: UncertaintyValue
    vaporization: Vaporization


@dataclass(frozen=True)
class NuclearGeometry:
    """Detonation placement.

    Attributes:
        standoff_distance: Distance from the surface in m.
        burst_height: Height above the surface in m (negative is subsurface).
        target_aspect_angle: Radians relative to the velocity vector.
        detonation_timing: ``"contact"``, ``"proximity"``, ``"standoff"`` or ``"subsurface"``.
    """

    standoff_distance: UncertaintyValue
    burst_height: UncertaintyValue
    target_aspect_angle: UncertaintyValue
    detonation_timing: str = "standoff"


@dataclass(frozen=True)
class _MaterialResponse:
    density: UncertaintyValue
    albedo: UncertaintyValue
    thermal_inertia: UncertaintyValue
    vaporization: Vaporization


NUCLEAR_DEVICES = frozen({
    "tactical": NuclearDevice(
        yield_mt=UncertaintyValue(0.01, 0.002, "Mt TNT", "Typical tactical weapon"),
        mass=UncertaintyValue(100, 20, "kg", "Estimated device mass"),
        xray_fraction=UncertaintyValue(0.75, 0.05, "1", "Glasstone & Dolan 1977"),
        neutron_fraction=UncertaintyValue(0.05, 0.01, "1", "Glasstone & Dolan 1977"),
        gamma_fraction=UncertaintyValue(0.15, 0.02, "1", "Glasstone & Dolan 1977"),
        debris_fraction=UncertaintyValue(0.05, 0.01, "1", "Glasstone & Dolan 1977"),
        device_type="fission",
    ),
    "strategic": NuclearDevice(
        yield_mt=UncertaintyValue(1.0, 0.1, "Mt TNT", "Typical strategic weapon"),
        mass=UncertaintyValue(300, 50, "kg", "Estimated device mass"),
        xray_fraction=UncertaintyValue(0.7, 0.05, "1", "Glasstone & Dolan 1977"),
        neutron_fraction=UncertaintyValue(0.08, 0.02, "1", "Glasstone & Dolan 1977"),
        gamma_fraction=UncertaintyValue(0.17, 0.03, "1", "Glasstone & Dolan 1977"),
        debris_fraction=UncertaintyValue(0.05, 0.01, "1", "Glasstone & Dolan 1977"),
        device_type="fusion",
    ),
    "thermonuclear": NuclearDevice(
        yield_mt=UncertaintyValue(10.0, 1.0, "Mt TNT", "High-yield thermonuclear"),
        mass=UncertaintyValue(1000, 200, "kg", "Estimated device mass"),
        xray_fraction=UncertaintyValue(0.65, 0.05, "1", "Glasstone & Dolan 1977"),
        neutron_fraction=UncertaintyValue(0.1, 0.02, "1", "Glasstone & Dolan 1977"),
        gamma_fraction=UncertaintyValue(0.2, 0.03, "1", "Glasstone & Dolan 1977"),
        debris_fraction=UncertaintyValue(0.05, 0.01, "1", "Glasstone & Dolan 1977"),
        device_type="fusion",
    ),
})

TARGET_RESPONSES = frozen({
    "rocky": _MaterialResponse(
        density=UncertaintyValue(2700, 300, "kg/m³", "Britt & Consolmagno 2003"),
        albedo=UncertaintyValue(0.15, 0.05, "1", "Typical S-type asteroid"),
        thermal_inertia=UncertaintyValue(50, 20, "J m⁻² K⁻¹ s⁻¹/²", "Delbo et al. 2007"),
        vaporization=Vaporization(
            energy=UncertaintyValue(8e6, 2e6, "J/kg", "Silicate vaporization"),
            temperature=UncertaintyValue(2500, 200, "K", "Silicate vaporization"),
        ),
    ),
    "metallic": _MaterialResponse(
        density=UncertaintyValue(7800, 500, "kg/m³", "Britt & Consolmagno 2003"),
        albedo=UncertaintyValue(0.25, 0.05, "1", "Typical M-type asteroid"),
        thermal_inertia=UncertaintyValue(200, 50, "J m⁻² K⁻¹ s⁻¹/²", "Delbo et al. 2007"),
        vaporization=Vaporization(
            energy=UncertaintyValue(6e6, 1e6, "J/kg", "Iron vaporization"),
            temperature=UncertaintyValue(3000, 200, "K", "Iron vaporization"),
        ),
    ),
    "carbonaceous": _MaterialResponse(
        density=UncertaintyValue(1400, 200, "kg/m³", "Britt & Consolmagno 2003"),
        albedo=UncertaintyValue(0.05, 0.02, "1", "Typical C-type asteroid"),
        thermal_inertia=UncertaintyValue(20, 10, "J m⁻² K⁻¹ s⁻¹/²", "Delbo et al. 2007"),
        vaporization=Vaporization(
            energy=UncertaintyValue(4e6, 1e6, "J/kg", "Carbonaceous vaporization"),
            temperature=UncertaintyValue(2000, 200, "K", "Carbonaceous vaporization"),
        ),
    ),
})


def get_nuclear_device(device_type: str) -> NuclearDevice:
    return lookup(NUCLEAR_DEVICES, device_type, "device type")


def available_device_types() -> list[str]:
    return list(NUCLEAR_DEVICES)


@dataclass(frozen=True)
class MechanismDeposition:
    """Energy deposited and momentum generated by one radiation channel."""

    energy: UncertaintyValue
    penetration_depth: UncertaintyValue
    heated_mass: UncertaintyValue
    vaporized_mass: UncertaintyValue
    momentum: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "energy_j": self.energy.to_dict(),
            "penetration_depth_m": self.penetration_depth.to_dict(),
            "heated_mass_kg": self.heated_mass.to_dict(),
            "vaporized_mass_kg": self.vaporized_mass.to_dict(),
            "momentum_kg_m_s": self.momentum.to_dict(),
        }


@dataclass(frozen=True)
class MomentumDeposition:
    xray: MechanismDeposition
    neutron: MechanismDeposition
    debris_momentum: UncertaintyValue
    total_momentum: UncertaintyValue
    vaporized_mass: UncertaintyValue
    ablation_velocity: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "xray": self.xray.to_dict(),
            "neutron": self.neutron.to_dict(),
            "debris_momentum_kg_m_s": self.debris_momentum.to_dict(),
            "total_momentum_kg_m_s": self.total_momentum.to_dict(),
            "vaporized_mass_kg": self.vaporized_mass.to_dict(),
            "ablation_velocity_m_s": self.ablation_velocity.to_dict(),
        }


@dataclass(frozen=True)
class NuclearDeflectionResult:
    """Outcome of a standoff detonation.

    Attributes:
        momentum_deposition: Per-mechanism momentum budget.
        momentum_transfer_efficiency: Momentum relative to the photon momentum ``E/c``,
            reduced with standoff distance.
        delta_v: Target velocity change in m/s.
        total_energy: Device energy in J.
        specific_energy: Energy per unit target mass in J/kg.
        surface_temperature: Peak surface temperature in K.
        thermal_penetration_depth: m.
        fracture_radius: Radius of structural damage in m.
        spallation_mass: kg.
        optimal_standoff_distance: m.
        momentum_coupling_coefficient: Momentum per unit areal energy in s/m.
        within_validity_range: False for yields large enough to fragment the target.
        warnings: Problems with the inputs.
        references: Literature behind the model.
    """

    momentum_deposition: MomentumDeposition
    momentum_transfer_efficiency: UncertaintyValue
    delta_v: UncertaintyValue
    total_energy: UncertaintyValue
    specific_energy: UncertaintyValue
    surface_temperature: UncertaintyValue
    thermal_penetration_depth: UncertaintyValue
    fracture_radius: UncertaintyValue
    spallation_mass: UncertaintyValue
    optimal_standoff_distance: UncertaintyValue
    momentum_coupling_coefficient: UncertaintyValue
    within_validity_range: bool
    warnings: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "momentum_deposition": self.momentum_deposition.to_dict(),
            "momentum_transfer_efficiency": self.momentum_transfer_efficiency.to_dict(),
            "delta_v_m_s": self.delta_v.to_dict(),
            "total_energy_j": self.total_energy.to_dict(),
            "specific_energy_j_kg": self.specific_energy.to_dict(),
            "surface_temperature_k": self.surface_temperature.to_dict(),
            "thermal_penetration_depth_m": self.thermal_penetration_depth.to_dict(),
            "fracture_radius_m": self.fracture_radius.to_dict(),
            "spallation_mass_kg": self.spallation_mass.to_dict(),
            "optimal_standoff_distance_m": self.optimal_standoff_distance.to_dict(),
            "momentum_coupling_coefficient_s_m": self.momentum_coupling_coefficient.to_dict(),
            "within_validity_range": self.within_validity_range,
            "warnings": list(self.warnings),
            "references": list(self.references),
        }


def _validate(device: NuclearDevice, target: NuclearTarget, geometry: NuclearGeometry) -> tuple[bool, list[str]]:
    warnings: list[str] = []
    valid = True

    total = device.total_fraction
    if abs(total - 1.0) > FRACTION_TOLERANCE:
        warnings.append(f"Energy fractions sum to {total:.2f}, should be close to 1.0")

    standoff = geometry.standoff_distance.value
    radius = target.radius.value
    for name, value in (
        ("Target mass", target.mass.value),
        ("Target radius", radius),
        ("Standoff distance", standoff),
    ):
        if value <= 0:
            warnings.append(f"{name} ({value:g}) must be positive")
            valid = False
    if standoff < radius:
        warnings.append(f"Standoff distance ({standoff:.1f}m) is less than target radius - may cause fragmentation")
    if standoff > radius * 10:
        warnings.append(f"Large standoff distance ({standoff:.1f}m) may reduce momentum transfer efficiency")

    yield_mt = device.yield_mt.value
    if yield_mt < MIN_EFFECTIVE_YIELD_MT:
        warnings.append(f"Very small nuclear yield ({yield_mt} Mt) may be ineffective for deflection")
    if yield_mt > MAX_YIELD_MT:
        warnings.append(f"Very large nuclear yield ({yield_mt} Mt) may cause fragmentation instead of deflection")
        valid = False

    for name, value in (("yield", yield_mt), ("target mass", target.mass.value), ("target radius", radius)):
        if not math.isfinite(value):
            warnings.append(f"Non-finite {name} ({value}) propagates into the result")
    return valid, warnings


def total_energy(device: NuclearDevice) -> UncertaintyValue:
    return scale(device.yield_mt, MEGATON_TNT_J, "J", "Total nuclear energy release")


def optimal_standoff_distance(device: NuclearDevice, target: NuclearTarget) -> UncertaintyValue:
    """Empirical best detonation distance, ``3·R·(Y/1 Mt)^0.3``."""
    return propagate_nonlinear(
        [Variable("radius", target.radius), Variable("yield", device.yield_mt)],
        lambda x: 3.0 * x["radius"] * x["yield"] ** 0.3,
    ).to_uncertainty_value("m", "Optimized for maximum momentum transfer", "Optimal standoff distance")


def _escape_velocity(target: NuclearTarget) -> float:
    return math.sqrt(2.0 * GRAVITATIONAL_CONSTANT * quotient(target.mass.value, target.radius.value))


def _ablation(
    channel: str,
    fraction: UncertaintyValue,
    energy: UncertaintyValue,
    target: NuclearTarget,
    areal_density: float,
    heating_efficiency: float,
    max_vaporized_fraction: float,
    coupling: float,
) -> MechanismDeposition:
    """Surface layer heated by one radiation channel and the momentum of its blow-off.

    The layer depth is ``areal_density/ρ``; the vaporized fraction is the
    deposited energy over what it takes to vaporize the heated layer,
    capped at ``max_vaporized_fraction``.
    """
    channel_energy = propagate_nonlinear(
        [Variable("energy", energy), Variable("fraction", fraction)],
        lambda x: x["energy"] * x["fraction"],
    ).to_uncertainty_value("J", f"{channel} energy fraction", f"Energy in {channel}")

    depth = propagate_nonlinear(
        [Variable("density", target.density)], lambda x: areal_density / x["density"]
    ).to_uncertainty_value("m", f"Estimated {channel} penetration", f"{channel} penetration depth")

    # Surface shell of depth areal_density/ρ holds areal_density·4πR² kg whatever the density.
    shell_volume = 4.0 * math.pi * target.radius.value**2 * depth.value
    heated_mass = UncertaintyValue(
        shell_volume * target.density.value * heating_efficiency,
        shell_volume * target.density.uncertainty * heating_efficiency,
        "kg",
        f"Mass heated by {channel}",
        f"{channel} heated mass",
    )

    vaporized_fraction = min(
        max_vaporized_fraction,
        quotient(channel_energy.value, heated_mass.value * target.vaporization.energy.value),
    )
    vaporized_mass = scale(heated_mass, vaporized_fraction, "kg", f"{channel} vaporized mass")
    momentum = scale(
        vaporized_mass, _escape_velocity(target) * coupling, "kg·m/s", f"Momentum from {channel} ablation"
    )
    return MechanismDeposition(channel_energy, depth, heated_mass, vaporized_mass, momentum)


def _debris_momentum(device: NuclearDevice, energy: UncertaintyValue) -> UncertaintyValue:
    return propagate_nonlinear(
        [
            Variable("energy", energy),
            Variable("fraction", device.debris_fraction),
            Variable("mass", device.mass),
        ],
        lambda x: x["mass"] * math.sqrt(2.0 * x["energy"] * x["fraction"] / x["mass"]) * DEBRIS_COUPLING,
    ).to_uncertainty_value("kg·m/s", "Debris impact momentum", "Momentum from debris impact")


def calculate_momentum_deposition(device: NuclearDevice, target: NuclearTarget) -> MomentumDeposition:
    energy = total_energy(device)
    xray = _ablation(
        "X-ray", device.xray_fraction, energy, target,
        XRAY_AREAL_DENSITY_KG_M2, 1.0, 1.0, XRAY_COUPLING,
    )
    neutron = _ablation(
        "neutron", device.neutron_fraction, energy, target,
        NEUTRON_AREAL_DENSITY_KG_M2, NEUTRON_HEATING_EFFICIENCY, NEUTRON_MAX_VAPORIZED_FRACTION, NEUTRON_COUPLING,
    )
    debris = _debris_momentum(device, energy)

    total_momentum = UncertaintyValue(
        xray.momentum.value + neutron.momentum.value + debris.value,
        math.sqrt(xray.momentum.uncertainty**2 + neutron.momentum.uncertainty**2 + debris.uncertainty**2),
        "kg·m/s",
        "Combined momentum from all mechanisms",
        "Total momentum transfer",
    )
    vaporized_mass = add(xray.vaporized_mass, neutron.vaporized_mass, "Total vaporized mass")

    if vaporized_mass.value > 0:
        ablation_velocity = propagate_nonlinear(
            [Variable("momentum", total_momentum), Variable("mass", vaporized_mass)],
            lambda x: x["momentum"] / x["mass"],
        ).to_uncertainty_value("m/s", "Calculated from momentum and mass", "Average ablation velocity")
    else:
        ablation_velocity = UncertaintyValue.exact(0.0, "m/s", "No vaporized mass", "Average ablation velocity")

    return MomentumDeposition(xray, neutron, debris, total_momentum, vaporized_mass, ablation_velocity)


def calculate_nuclear_deflection(
    device: NuclearDevice | str,
    target: NuclearTarget,
    geometry: NuclearGeometry,
) -> NuclearDeflectionResult:
    """Momentum imparted by a standoff nuclear detonation.

    Args:
        device: Device properties, or a device-type key
            (``"tactical"``, ``"strategic"``, ``"thermonuclear"``).
        target: Target body.
        geometry: Requested detonation placement. The momentum budget uses
            the optimized standoff; thermal effects and transfer efficiency
            use the requested one.

    Returns:
        NuclearDeflectionResult.

    Raises:
        UnknownKeyError: If ``device`` names an unknown device type.
    """
    if isinstance(device, str):
        device = get_nuclear_device(device)
    valid, warnings = _validate(device, target, geometry)

    energy = total_energy(device)
    standoff = optimal_standoff_distance(device, target)
    deposition = calculate_momentum_deposition(device, target)

    delta_v = propagate_nonlinear(
        [Variable("momentum", deposition.total_momentum), Variable("mass", target.mass)],
        lambda x: x["momentum"] / x["mass"],
    ).to_uncertainty_value("m/s", "Calculated from momentum conservation", "Velocity change from nuclear deflection")

    efficiency = propagate_nonlinear(
        [
            Variable("momentum", deposition.total_momentum),
            Variable("energy", energy),
            Variable("distance", geometry.standoff_distance),
        ],
        lambda x: x["momentum"] / (x["energy"] / SPEED_OF_LIGHT_M_S)
        / (1.0 + x["distance"] / EFFICIENCY_DISTANCE_SCALE_M),
    ).to_uncertainty_value("1", "Nuclear momentum transfer efficiency", "Efficiency of momentum transfer")

    specific_energy = UncertaintyValue(
        quotient(energy.value, target.mass.value),
        quotient(energy.uncertainty, target.mass.value),
        "J/kg",
        "Calculated specific energy",
        "Energy per unit mass",
    )

    flux = quotient(THERMAL_FRACTION * energy.value, 4.0 * math.pi * geometry.standoff_distance.value**2)
    temperature = (flux / (STEFAN_BOLTZMANN * SURFACE_EMISSIVITY)) ** 0.25
    surface_temperature = UncertaintyValue.from_relative(
        temperature, 0.2, "K", "Calculated from thermal flux", "Peak surface temperature"
    )
    diffusivity = target.thermal_inertia.value / (target.density.value * 1000.0)
    thermal_depth = UncertaintyValue.from_relative(
        math.sqrt(diffusivity * HEATING_TIME_S), 0.3, "m", "Thermal diffusion calculation", "Thermal penetration depth"
    )

    stress_energy = STRESS_WAVE_FRACTION * energy.value
    fracture = (stress_energy / (4.0 * math.pi * target.density.value * FRACTURE_STRENGTH_SCALE_PA)) ** (1.0 / 3.0)
    fracture_radius = UncertaintyValue.from_relative(
        fracture, 0.5, "m", "Stress wave propagation estimate", "Fracture radius"
    )
    spalled_volume = 4.0 / 3.0 * math.pi * fracture**3 * SPALLED_FRACTION
    spallation_mass = UncertaintyValue(
        spalled_volume * target.density.value,
        spalled_volume * target.density.uncertainty,
        "kg",
        "Spallation volume estimate",
        "Mass ejected by spallation",
    )

    # Energy spread over the facing hemisphere
    hemisphere = 2.0 * math.pi * target.radius.value**2
    coupling = propagate_nonlinear(
        [Variable("momentum", deposition.total_momentum), Variable("energy", energy)],
        lambda x: x["momentum"] / (x["energy"] / hemisphere),
    ).to_uncertainty_value("s/m", "Momentum per unit energy per unit area", "Momentum coupling coefficient")

    if not valid:
        logger.warning("Nuclear deflection outside validity range: %s", "; ".join(warnings))
    logger.debug(
        "Nuclear deflection: %.3g Mt, p=%.3e kg m/s, dV=%.3e m/s",
        device.yield_mt.value, deposition.total_momentum.value, delta_v.value,
    )

    return NuclearDeflectionResult(
        momentum_deposition=deposition,
        momentum_transfer_efficiency=efficiency,
        delta_v=delta_v,
        total_energy=energy,
        specific_energy=specific_energy,
        surface_temperature=surface_temperature,
        thermal_penetration_depth=thermal_depth,
        fracture_radius=fracture_radius,
        spallation_mass=spallation_mass,
        optimal_standoff_distance=standoff,
        momentum_coupling_coefficient=coupling,
        within_validity_range=valid,
        warnings=warnings,
        references=list(REFERENCES),
    )


def create_optimal_standoff_geometry(target_radius_m: float) -> NuclearGeometry:
    return NuclearGeometry(
        standoff_distance=UncertaintyValue(3.0 * target_radius_m, 0.5 * target_radius_m, "m", "Optimal standoff"),
        burst_height=UncertaintyValue(3.0 * target_radius_m, 0.5 * target_radius_m, "m", "Optimal standoff"),
        target_aspect_angle=UncertaintyValue(0.0, 0.1, "rad", "Head-on geometry"),
        detonation_timing="standoff",
    )


def create_nuclear_target(mass_kg: float, radius_m: float, composition: str = "rocky") -> NuclearTarget:
    """Target with 20% mass and 10% radius uncertainty and tabulated material response.

    Raises:
        UnknownKeyError: If the composition is not tabulated.
    """
    response = lookup(TARGET_RESPONSES, composition, "asteroid composition")
    return NuclearTarget(
        mass=UncertaintyValue.from_relative(mass_kg, 0.2, "kg", "Target specification"),
        radius=UncertaintyValue.from_relative(radius_m, 0.1, "m", "Target specification"),
        density=response.density,
        composition=composition,
        albedo=response.albedo,
        thermal_inertia=response.thermal_inertia,
        vaporization=response.vaporization,
    )
