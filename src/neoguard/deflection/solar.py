"""Solar radiation pressure deflection.

Sunlight carries momentum ``F/c`` per unit area. A sail or mirror parked
near the asteroid, or a change to the asteroid's own reflectivity, turns
that into a small steady force which, over years, adds up to a usable ΔV.

Four methods are modelled:

* ``solar_sail``: a reflecting sail tethered to the target, ``2·F·A·R/c``.
* ``surface_modification``: coating part of the surface, ``0.5·F·A/c``.
* ``concentrated_sunlight``: a mirror focusing light onto the target,
  concentration capped at 10×.
* ``albedo_modification``: a global albedo change, ``0.3·F·A/c``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from neoguard.core.uncertainty import UncertaintyValue, Variable, divide, propagate_nonlinear, quotient, scale
from neoguard.utils.constants import JULIAN_YEAR_S, SOLAR_CONSTANT_W_M2, SPEED_OF_LIGHT_M_S
from neoguard.utils.lookup import UnknownKeyError, frozen, lookup

logger = logging.getLogger(__name__)

SPEED_OF_LIGHT = UncertaintyValue.exact(SPEED_OF_LIGHT_M_S, "m/s", "CODATA 2018", "Speed of light")

OPTICAL_SUM_TOLERANCE = 0.1
MAX_SAIL_AREA_M2 = 1e5
FAR_SOLAR_DISTANCE_AU = 5.0
SURFACE_METHOD_MAX_RADIUS_M = 1000.0
MAX_CONCENTRATION = 10.0

# Fraction of the total force along the radial, tangential and normal directions
RADIAL_SHARE = 0.9
TANGENTIAL_SHARE = 0.1
NORMAL_SHARE = 0.01

SUPPORT_MASS_FACTOR = 1.5
COST_PER_KG_USD = 50000.0

REFERENCES = (
    "McInnes, C.R. (1999). Solar Sailing: Technology, Dynamics and Mission Applications",
    "Wie, B. (2008). Solar radiation pressure effects on asteroids",
    "Dachwald, B. et al. (2006). Parametric model and optimal control of solar sails",
    "Vulpetti, G. et al. (2014). Solar Sails: A Novel Approach to Interplanetary Travel",
)


class SolarMethod(Enum):
    """How sunlight is turned into a force on the target."""

    SOLAR_SAIL = "solar_sail"
    SURFACE_MODIFICATION = "surface_modification"
    CONCENTRATED_SUNLIGHT = "concentrated_sunlight"
    ALBEDO_MODIFICATION = "albedo_modification"


@dataclass(frozen=True)
class SailSpecification:
    """Optical and operational properties of a sail design."""

    reflectivity: UncertaintyValue
    absorptivity: UncertaintyValue
    transmissivity: UncertaintyValue
    efficiency: UncertaintyValue
    deployment_time: UncertaintyValue
    operational_lifetime: UncertaintyValue
    sail_type: str

    @property
    def optical_sum(self) -> float:
        return self.reflectivity.value + self.absorptivity.value + self.transmissivity.value


@dataclass(frozen=True)
class SolarSail:
    """A specific sail: its size plus a design.

    Attributes:
        area: Effective sail area in m².
        mass: Sail mass including support structure in kg.
        spec: Optical and operational design properties.
    """

    area: UncertaintyValue
    mass: UncertaintyValue
    spec: SailSpecification


@dataclass(frozen=True)
class SolarTarget:
    mass: UncertaintyValue
    radius: UncertaintyValue
    cross_sectional_area: UncertaintyValue
    albedo: UncertaintyValue
    thermal_inertia: UncertaintyValue
    rotation_period: UncertaintyValue
    obliquity: UncertaintyValue
    surface_roughness: UncertaintyValue
    composition: str = "rocky"


@dataclass(frozen=True)
class SolarEnvironment:
    """Illumination at the target.

    Attributes:
        solar_distance: AU.
        solar_flux: W/m².
        solar_constant: W/m² at 1 AU.
        seasonal_variation: Fractional flux swing over the orbit.
        solar_activity: Activity factor, 1 is average.
    """

    solar_distance: UncertaintyValue
    solar_flux: UncertaintyValue
    solar_constant: UncertaintyValue
    seasonal_variation: UncertaintyValue
    solar_activity: UncertaintyValue


@dataclass(frozen=True)
class SolarMission:
    duration: UncertaintyValue
    deployment_distance: UncertaintyValue
    operating_distance: UncertaintyValue
    orientation_accuracy: UncertaintyValue
    station_keeping: bool = True
    autonomous_operation: bool = True


def _sail_spec(
    efficiency: tuple[float, float],
    reflectivity: tuple[float, float],
    absorptivity: tuple[float, float],
    transmissivity: tuple[float, float],
    deployment_s: tuple[float, float],
    lifetime_yr: tuple[float, float],
    sail_type: str,
) -> SailSpecification:
    return SailSpecification(
        reflectivity=UncertaintyValue(*reflectivity, "1", f"{sail_type} sail material"),
        absorptivity=UncertaintyValue(*absorptivity, "1", f"{sail_type} sail material"),
        transmissivity=UncertaintyValue(*transmissivity, "1", f"{sail_type} sail material"),
        efficiency=UncertaintyValue(*efficiency, "1", f"{sail_type} sail design"),
        deployment_time=UncertaintyValue(*deployment_s, "s", f"{sail_type} sail deployment"),
        operational_lifetime=UncertaintyValue(
            lifetime_yr[0] * JULIAN_YEAR_S, lifetime_yr[1] * JULIAN_YEAR_S, "s", f"{lifetime_yr[0]:g} year lifetime"
        ),
        sail_type=sail_type,
    )


SAIL_SPECIFICATIONS = frozen({
    "flat": _sail_spec((0.85, 0.05), (0.88, 0.02), (0.1, 0.02), (0.02, 0.01), (3600, 600), (10, 2), "flat"),
    "parabolic": _sail_spec((0.92, 0.03), (0.95, 0.02), (0.04, 0.01), (0.01, 0.005), (7200, 1200), (15, 3), "parabolic"),
    "heliogyro": _sail_spec((0.8, 0.08), (0.85, 0.03), (0.12, 0.03), (0.03, 0.01), (1800, 300), (8, 2), "heliogyro"),
    "spinning": _sail_spec((0.75, 0.1), (0.82, 0.04), (0.15, 0.04), (0.03, 0.01), (900, 180), (5, 1), "spinning"),
})


def _environment(distance: tuple[float, float], flux: tuple[float, float], seasonal: tuple[float, float], label: str):
    return SolarEnvironment(
        solar_distance=UncertaintyValue(*distance, "AU", label),
        solar_flux=UncertaintyValue(*flux, "W/m²", f"Solar flux at {distance[0]:g} AU"),
        solar_constant=UncertaintyValue(SOLAR_CONSTANT_W_M2, 5.0, "W/m²", "Standard solar constant"),
        seasonal_variation=UncertaintyValue(*seasonal, "1", f"±{seasonal[0] * 100:g}% seasonal variation"),
        solar_activity=UncertaintyValue(1.0, 0.1, "1", "Average solar activity"),
    )


SOLAR_ENVIRONMENTS = frozen({
    "1_AU": _environment((1.0, 0.017), (1361.0, 5.0), (0.034, 0.005), "Earth orbit (±1.7% eccentricity)"),
    "1.5_AU": _environment((1.5, 0.1), (605.0, 20.0), (0.05, 0.01), "Mars-crossing region"),
    "2_AU": _environment((2.0, 0.2), (340.0, 15.0), (0.1, 0.02), "Asteroid belt"),
})


def get_sail_specification(sail_type: str) -> SailSpecification:
    return lookup(SAIL_SPECIFICATIONS, sail_type, "solar sail type")


def get_solar_environment(distance: str) -> SolarEnvironment:
    return lookup(SOLAR_ENVIRONMENTS, distance, "solar distance")


def _method(method: SolarMethod | str) -> SolarMethod:
    if isinstance(method, SolarMethod):
        return method
    try:
        return SolarMethod(method)
    except ValueError:
        raise UnknownKeyError("solar deflection method", method) from None


@dataclass(frozen=True)
class RadiationForce:
    """Force on the target and how it splits into orbital directions.

    Attributes:
        force: Total radiation pressure force in N.
        photon_momentum_flux: ``F/c`` in N/m².
        radial_force, tangential_force, normal_force: Components in N.
        radial_acceleration, tangential_acceleration, normal_acceleration: m/s².
        geometric_efficiency: Orientation and coverage factor.
        optical_efficiency: Reflective or albedo factor.
        overall_efficiency: Product of the above with the sail efficiency.
    """

    force: UncertaintyValue
    photon_momentum_flux: UncertaintyValue
    radial_force: UncertaintyValue
    tangential_force: UncertaintyValue
    normal_force: UncertaintyValue
    radial_acceleration: UncertaintyValue
    tangential_acceleration: UncertaintyValue
    normal_acceleration: UncertaintyValue
    geometric_efficiency: UncertaintyValue
    optical_efficiency: UncertaintyValue
    overall_efficiency: UncertaintyValue

    @property
    def total_acceleration(self) -> UncertaintyValue:
        components = (self.radial_acceleration, self.tangential_acceleration, self.normal_acceleration)
        return UncertaintyValue(
            math.sqrt(sum(c.value**2 for c in components)),
            math.sqrt(sum(c.uncertainty**2 for c in components)),
            "m/s²",
            "Total acceleration magnitude",
            "Total acceleration",
        )

    def to_dict(self) -> dict:
        return {
            "force_n": self.force.to_dict(),
            "photon_momentum_flux_n_m2": self.photon_momentum_flux.to_dict(),
            "radial_force_n": self.radial_force.to_dict(),
            "tangential_force_n": self.tangential_force.to_dict(),
            "normal_force_n": self.normal_force.to_dict(),
            "radial_acceleration_m_s2": self.radial_acceleration.to_dict(),
            "tangential_acceleration_m_s2": self.tangential_acceleration.to_dict(),
            "normal_acceleration_m_s2": self.normal_acceleration.to_dict(),
            "geometric_efficiency": self.geometric_efficiency.to_dict(),
            "optical_efficiency": self.optical_efficiency.to_dict(),
            "overall_efficiency": self.overall_efficiency.to_dict(),
        }


@dataclass(frozen=True)
class OrbitalElementChanges:
    """Coarse drift of each element accumulated over the mission."""

    semi_major_axis: UncertaintyValue
    eccentricity: UncertaintyValue
    inclination: UncertaintyValue
    argument_of_periapsis: UncertaintyValue
    longitude_of_ascending_node: UncertaintyValue
    mean_anomaly: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "semi_major_axis_m": self.semi_major_axis.to_dict(),
            "eccentricity": self.eccentricity.to_dict(),
            "inclination_rad": self.inclination.to_dict(),
            "argument_of_periapsis_rad": self.argument_of_periapsis.to_dict(),
            "longitude_of_ascending_node_rad": self.longitude_of_ascending_node.to_dict(),
            "mean_anomaly_rad": self.mean_anomaly.to_dict(),
        }


@dataclass(frozen=True)
class SeasonalVariations:
    max_deflection: UncertaintyValue
    min_deflection: UncertaintyValue
    average_deflection: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "max_deflection_m": self.max_deflection.to_dict(),
            "min_deflection_m": self.min_deflection.to_dict(),
            "average_deflection_m": self.average_deflection.to_dict(),
        }


@dataclass(frozen=True)
class SolarDeflectionResult:
    method: SolarMethod
    force: RadiationForce
    delta_v: UncertaintyValue
    delta_v_rate: UncertaintyValue
    orbital_element_changes: OrbitalElementChanges
    sail_area: UncertaintyValue
    total_system_mass: UncertaintyValue
    power_requirement: UncertaintyValue
    deflection_efficiency: UncertaintyValue
    cost_effectiveness: UncertaintyValue
    mission_feasibility: UncertaintyValue
    seasonal_variations: SeasonalVariations
    within_validity_range: bool
    warnings: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "method": self.method.value,
            "force": self.force.to_dict(),
            "delta_v_m_s": self.delta_v.to_dict(),
            "delta_v_rate_m_s_per_yr": self.delta_v_rate.to_dict(),
            "orbital_element_changes": self.orbital_element_changes.to_dict(),
            "sail_area_m2": self.sail_area.to_dict(),
            "total_system_mass_kg": self.total_system_mass.to_dict(),
            "power_requirement_w": self.power_requirement.to_dict(),
            "deflection_efficiency_m_kg": self.deflection_efficiency.to_dict(),
            "cost_effectiveness_m_usd": self.cost_effectiveness.to_dict(),
            "mission_feasibility": self.mission_feasibility.to_dict(),
            "seasonal_variations": self.seasonal_variations.to_dict(),
            "within_validity_range": self.within_validity_range,
            "warnings": list(self.warnings),
            "references": list(self.references),
        }


# --- Force models: each returns (force, geometric efficiency, optical efficiency) ---

_ForceModel = Callable[[SolarSail, SolarTarget, SolarEnvironment], tuple[UncertaintyValue, UncertaintyValue, UncertaintyValue]]


def _sail_force(sail: SolarSail, target: SolarTarget, env: SolarEnvironment):
    force = propagate_nonlinear(
        [
            Variable("flux", env.solar_flux),
            Variable("area", sail.area),
            Variable("reflectivity", sail.spec.reflectivity),
        ],
        lambda x: 2.0 * x["flux"] * x["area"] * x["reflectivity"] / SPEED_OF_LIGHT_M_S,
    ).to_uncertainty_value("N", "Solar sail radiation pressure force", "Solar sail force")
    geometric = UncertaintyValue(1.0, 0.1, "1", "Optimal sail orientation", "Geometric efficiency")
    return force, geometric, sail.spec.reflectivity


def _surface_force(sail: SolarSail, target: SolarTarget, env: SolarEnvironment):
    force = propagate_nonlinear(
        [Variable("flux", env.solar_flux), Variable("area", target.cross_sectional_area)],
        lambda x: x["flux"] * x["area"] * 0.5 / SPEED_OF_LIGHT_M_S,
    ).to_uncertainty_value("N", "Surface modification radiation pressure force", "Surface modification force")
    geometric = UncertaintyValue(0.5, 0.2, "1", "Partial surface coverage", "Geometric efficiency")
    optical = UncertaintyValue(0.5, 0.2, "1", "50% albedo increase", "Optical efficiency")
    return force, geometric, optical


def _concentrated_force(sail: SolarSail, target: SolarTarget, env: SolarEnvironment):
    force = propagate_nonlinear(
        [
            Variable("flux", env.solar_flux),
            Variable("mirror_area", sail.area),
            Variable("target_area", target.cross_sectional_area),
            Variable("reflectivity", sail.spec.reflectivity),
        ],
        lambda x: x["flux"] * x["target_area"] * min(MAX_CONCENTRATION, x["mirror_area"] / x["target_area"])
        * x["reflectivity"] / SPEED_OF_LIGHT_M_S,
    ).to_uncertainty_value("N", "Concentrated sunlight radiation pressure force", "Concentrated sunlight force")
    geometric = UncertaintyValue(0.8, 0.1, "1", "Mirror focusing", "Geometric efficiency")
    return force, geometric, sail.spec.reflectivity


def _albedo_force(sail: SolarSail, target: SolarTarget, env: SolarEnvironment):
    force = propagate_nonlinear(
        [Variable("flux", env.solar_flux), Variable("area", target.cross_sectional_area)],
        lambda x: x["flux"] * x["area"] * 0.3 / SPEED_OF_LIGHT_M_S,
    ).to_uncertainty_value("N", "Albedo modification radiation pressure force", "Albedo modification force")
    geometric = UncertaintyValue(0.3, 0.1, "1", "Partial coverage and orientation", "Geometric efficiency")
    optical = UncertaintyValue(0.3, 0.1, "1", "30% albedo change", "Optical efficiency")
    return force, geometric, optical


_FORCE_MODELS: dict[SolarMethod, _ForceModel] = {
    SolarMethod.SOLAR_SAIL: _sail_force,
    SolarMethod.SURFACE_MODIFICATION: _surface_force,
    SolarMethod.CONCENTRATED_SUNLIGHT: _concentrated_force,
    SolarMethod.ALBEDO_MODIFICATION: _albedo_force,
}

POWER_REQUIREMENTS = frozen({
    SolarMethod.SOLAR_SAIL: UncertaintyValue(100, 20, "W", "Attitude control and communications"),
    SolarMethod.SURFACE_MODIFICATION: UncertaintyValue(1000, 200, "W", "Surface modification equipment"),
    SolarMethod.CONCENTRATED_SUNLIGHT: UncertaintyValue(500, 100, "W", "Mirror control systems"),
    SolarMethod.ALBEDO_MODIFICATION: UncertaintyValue(2000, 400, "W", "Albedo modification systems"),
})


def calculate_radiation_force(
    method: SolarMethod | str,
    sail: SolarSail,
    target: SolarTarget,
    environment: SolarEnvironment,
) -> RadiationForce:
    """Radiation force on the target, split 90/10/1 % radial/tangential/normal.

    Raises:
        UnknownKeyError: If ``method`` is not a known deflection method.
    """
    method = _method(method)
    force, geometric, optical = _FORCE_MODELS[method](sail, target, environment)

    photon_flux = divide(
        environment.solar_flux, SPEED_OF_LIGHT, "N/m²", "Photon momentum flux"
    )
    radial = scale(force, RADIAL_SHARE, "N", "Radial force")
    tangential = scale(force, TANGENTIAL_SHARE, "N", "Tangential force")
    normal = scale(force, NORMAL_SHARE, "N", "Normal force")

    overall = propagate_nonlinear(
        [
            Variable("geometric", geometric),
            Variable("optical", optical),
            Variable("sail", sail.spec.efficiency),
        ],
        lambda x: x["geometric"] * x["optical"] * x["sail"],
    ).to_uncertainty_value("1", "Combined efficiency factors", "Overall system efficiency")

    return RadiationForce(
        force=force,
        photon_momentum_flux=photon_flux,
        radial_force=radial,
        tangential_force=tangential,
        normal_force=normal,
        radial_acceleration=divide(radial, target.mass, "m/s²", "Radial acceleration"),
        tangential_acceleration=divide(tangential, target.mass, "m/s²", "Tangential acceleration"),
        normal_acceleration=divide(normal, target.mass, "m/s²", "Normal acceleration"),
        geometric_efficiency=geometric,
        optical_efficiency=optical,
        overall_efficiency=overall,
    )


def _element_changes(delta_v: UncertaintyValue, force: RadiationForce) -> OrbitalElementChanges:
    # Order-of-magnitude sensitivities, not a Gauss-equation integration
    return OrbitalElementChanges(
        semi_major_axis=scale(delta_v, 1e8, "m", "Semi-major axis change"),
        eccentricity=scale(force.radial_acceleration, 1e-6, "1", "Eccentricity change"),
        inclination=scale(force.normal_acceleration, 1e-8, "rad", "Inclination change"),
        argument_of_periapsis=scale(delta_v, 1e-7, "rad", "Argument of periapsis change"),
        longitude_of_ascending_node=scale(force.normal_acceleration, 1e-9, "rad", "Longitude of ascending node change"),
        mean_anomaly=scale(delta_v, 1e-6, "rad", "Mean anomaly change"),
    )


def _seasonal_variations(force: UncertaintyValue, env: SolarEnvironment, mission: SolarMission) -> SeasonalVariations:
    base = force.value * mission.duration.value * 1000.0
    s = env.seasonal_variation.value
    return SeasonalVariations(
        max_deflection=UncertaintyValue(base * (1 + s), base * s * 0.5, "m", "Perihelion", "Maximum deflection"),
        min_deflection=UncertaintyValue(base * (1 - s), base * s * 0.5, "m", "Aphelion", "Minimum deflection"),
        average_deflection=UncertaintyValue(base, base * s * 0.3, "m", "Orbital average", "Average deflection"),
    )


def _validate(
    method: SolarMethod,
    sail: SolarSail,
    target: SolarTarget,
    env: SolarEnvironment,
    mission: SolarMission,
) -> tuple[bool, list[str]]:
    warnings: list[str] = []
    valid = True

    for name, value in (
        ("Mission duration", mission.duration.value),
        ("Target mass", target.mass.value),
        ("Sail mass", sail.mass.value),
    ):
        if value <= 0:
            warnings.append(f"{name} ({value:g}) must be positive")
            valid = False

    optical = sail.spec.optical_sum
    if abs(optical - 1.0) > OPTICAL_SUM_TOLERANCE:
        warnings.append(f"Optical properties sum to {optical:.2f}, should be close to 1.0")

    if sail.area.value > MAX_SAIL_AREA_M2:
        warnings.append(f"Very large sail area ({sail.area.value:.0f} m²) may be impractical to deploy")
        valid = False

    if env.solar_distance.value > FAR_SOLAR_DISTANCE_AU:
        warnings.append(
            f"Large solar distance ({env.solar_distance.value:.1f} AU) reduces solar radiation pressure significantly"
        )

    mission_years = mission.duration.value / JULIAN_YEAR_S
    if mission.duration.value > sail.spec.operational_lifetime.value:
        warnings.append(f"Mission duration ({mission_years:.1f} years) exceeds sail operational lifetime")
        valid = False

    if (
        method in (SolarMethod.SURFACE_MODIFICATION, SolarMethod.ALBEDO_MODIFICATION)
        and target.radius.value > SURFACE_METHOD_MAX_RADIUS_M
    ):
        warnings.append(f"Large target radius ({target.radius.value:.0f} m) makes surface modification challenging")

    for name, value in (("solar flux", env.solar_flux.value), ("target mass", target.mass.value)):
        if not math.isfinite(value):
            warnings.append(f"Non-finite {name} ({value}) propagates into the result")
    return valid, warnings


def calculate_solar_deflection(
    method: SolarMethod | str,
    sail: SolarSail,
    target: SolarTarget,
    environment: SolarEnvironment,
    mission: SolarMission,
) -> SolarDeflectionResult:
    """Velocity change from radiation pressure sustained over a mission.

    Args:
        method: Deflection method (enum or its string value).
        sail: Sail or mirror hardware. Used for mass and lifetime by every
            method, and for the force only by sail and mirror methods.
        target: Target asteroid.
        environment: Illumination at the target.
        mission: Mission duration and operating parameters.

    Returns:
        SolarDeflectionResult.

    Raises:
        UnknownKeyError: If ``method`` is not a known deflection method.
    """
    method = _method(method)
    valid, warnings = _validate(method, sail, target, environment, mission)

    force = calculate_radiation_force(method, sail, target, environment)
    delta_v = propagate_nonlinear(
        [Variable("acceleration", force.total_acceleration), Variable("time", mission.duration)],
        lambda x: x["acceleration"] * x["time"],
    ).to_uncertainty_value("m/s", "Calculated from acceleration and time", "Total velocity change")

    mission_years = mission.duration.value / JULIAN_YEAR_S
    delta_v_rate = UncertaintyValue(
        quotient(delta_v.value, mission_years),
        quotient(delta_v.uncertainty, mission_years),
        "m/s/yr",
        "Velocity change per year",
        "Delta-V rate",
    )

    system_mass = scale(sail.mass, SUPPORT_MASS_FACTOR, "kg", "Total system mass")
    power = POWER_REQUIREMENTS[method]

    deflection_efficiency = UncertaintyValue(
        quotient(delta_v.value * 1000.0, system_mass.value),
        quotient(delta_v.uncertainty * 1000.0, system_mass.value),
        "m/kg",
        "Deflection per unit system mass",
        "Deflection efficiency",
    )
    total_cost = system_mass.value * COST_PER_KG_USD
    cost_effectiveness = UncertaintyValue(
        quotient(delta_v.value * 1000.0, total_cost),
        quotient(delta_v.uncertainty * 1000.0, total_cost),
        "m/USD",
        "Deflection per dollar spent",
        "Cost effectiveness",
    )

    feasibility = 1.0
    if sail.area.value > 10000:
        feasibility *= 0.7
    if mission_years > 10:
        feasibility *= 0.8
    if power.value > 5000:
        feasibility *= 0.6

    if not valid:
        logger.warning("Solar deflection outside validity range: %s", "; ".join(warnings))
    logger.debug("Solar deflection (%s): F=%.3e N, dV=%.3e m/s", method.value, force.force.value, delta_v.value)

    return SolarDeflectionResult(
        method=method,
        force=force,
        delta_v=delta_v,
        delta_v_rate=delta_v_rate,
        orbital_element_changes=_element_changes(delta_v, force),
        sail_area=sail.area,
        total_system_mass=system_mass,
        power_requirement=power,
        deflection_efficiency=deflection_efficiency,
        cost_effectiveness=cost_effectiveness,
        mission_feasibility=UncertaintyValue(feasibility, 0.2, "1", "Mission feasibility assessment", "Feasibility score"),
        seasonal_variations=_seasonal_variations(force.force, environment, mission),
        within_validity_range=valid,
        warnings=warnings,
        references=list(REFERENCES),
    )


def create_flat_solar_sail(area_m2: float) -> SolarSail:
    """Flat sail at 10 g/m²."""
    return SolarSail(
        area=UncertaintyValue.from_relative(area_m2, 0.1, "m²", "Specified sail area"),
        mass=UncertaintyValue(area_m2 * 0.01, area_m2 * 0.002, "kg", "10 g/m² sail density"),
        spec=get_sail_specification("flat"),
    )


def create_solar_environment(distance_au: float) -> SolarEnvironment:
    """Environment at an arbitrary distance with inverse-square flux."""
    flux = SOLAR_CONSTANT_W_M2 / distance_au**2
    return SolarEnvironment(
        solar_distance=UncertaintyValue.from_relative(distance_au, 0.05, "AU", "Specified distance"),
        solar_flux=UncertaintyValue.from_relative(flux, 0.05, "W/m²", "Calculated from distance"),
        solar_constant=UncertaintyValue(SOLAR_CONSTANT_W_M2, 5.0, "W/m²", "Standard solar constant"),
        seasonal_variation=UncertaintyValue(0.05, 0.01, "1", "Typical seasonal variation"),
        solar_activity=UncertaintyValue(1.0, 0.1, "1", "Average solar activity"),
    )


def create_typical_mission(duration_years: float) -> SolarMission:
    return SolarMission(
        duration=UncertaintyValue(
            duration_years * JULIAN_YEAR_S, 0.5 * JULIAN_YEAR_S, "s", f"{duration_years:g} year mission"
        ),
        deployment_distance=UncertaintyValue(1000, 200, "m", "1 km deployment distance"),
        operating_distance=UncertaintyValue(500, 100, "m", "500 m operating distance"),
        orientation_accuracy=UncertaintyValue(0.01, 0.002, "rad", "Pointing accuracy"),
    )


def create_solar_target(mass_kg: float, radius_m: float, albedo: float, composition: str = "rocky") -> SolarTarget:
    cross_section = math.pi * radius_m**2
    return SolarTarget(
        mass=UncertaintyValue.from_relative(mass_kg, 0.2, "kg", "Target specification"),
        radius=UncertaintyValue.from_relative(radius_m, 0.1, "m", "Target specification"),
        cross_sectional_area=UncertaintyValue.from_relative(cross_section, 0.2, "m²", "Calculated"),
        albedo=UncertaintyValue.from_relative(albedo, 0.3, "1", "Specified albedo"),
        thermal_inertia=UncertaintyValue(50, 20, "J m⁻² K⁻¹ s⁻¹/²", "Typical thermal inertia"),
        rotation_period=UncertaintyValue(24 * 3600, 12 * 3600, "s", "Estimated rotation period"),
        obliquity=UncertaintyValue(0.1, 0.05, "rad", "Estimated obliquity"),
        surface_roughness=UncertaintyValue(0.5, 0.2, "1", "Moderate surface roughness"),
        composition=composition,
    )
