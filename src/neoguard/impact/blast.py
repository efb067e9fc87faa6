"""Airburst and surface-burst blast effects.

Impact energy is expressed as a TNT yield and run through Glasstone & Dolan
(1977) cube-root-type scaling: ``R = K·W^(1/3)`` for overpressure,
``W^0.4`` for the fireball and ``W^0.41`` for thermal radiation, each with a
correction for the ambient atmosphere and burst altitude.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from neoguard.core.uncertainty import UncertaintyValue, Variable, propagate_nonlinear
from neoguard.impact.validity import ValidityBuilder, ValidityCheck, agreement_grade
from neoguard.utils.constants import KILOTON_TNT_J, STANDARD_ATMOSPHERE_PA, STEFAN_BOLTZMANN
from neoguard.utils.lookup import frozen, lookup

logger = logging.getLogger(__name__)

SEA_LEVEL_DENSITY_KG_M3 = 1.225
AIR_GAMMA = 1.4
AIR_GAS_CONSTANT = 287.0
WIND_BEHIND_1PSI_SHOCK_M_S = 70.0
THERMAL_YIELD_FRACTION = 0.35
YIELD_RANGE_KT = (0.001, 20000.0)
HIGH_BURST_ALTITUDE_M = 50000.0

# K in R = K·W^(1/3) km, W in kt
OVERPRESSURE_SCALING = frozen({1: 2.2, 5: 1.0, 10: 0.7})
# K in R = K·W^0.41 km, keyed by fluence threshold in cal/cm²
THERMAL_SCALING = frozen({1: 1.9, 4: 1.2, 10: 0.8})


@dataclass(frozen=True)
class AtmosphericConditions:
    """Ambient air at the burst.

    Attributes:
        pressure: Pa.
        density: kg/m³.
        temperature: K.
        humidity: Relative humidity (0-1).
        description: Free text.
    """

    pressure: UncertaintyValue
    density: UncertaintyValue
    temperature: UncertaintyValue
    humidity: UncertaintyValue
    description: str = ""


STANDARD_ATMOSPHERE = AtmosphericConditions(
    pressure=UncertaintyValue(STANDARD_ATMOSPHERE_PA, 0.0, "Pa", "ISO 2533", "Standard atmospheric pressure"),
    density=UncertaintyValue(1.225, 0.01, "kg/m³", "ISO 2533", "Standard atmospheric density at sea level"),
    temperature=UncertaintyValue(288.15, 0.0, "K", "ISO 2533", "Standard atmospheric temperature"),
    humidity=UncertaintyValue(0.0, 0.0, "1", "Assumed", "Dry air"),
    description="Standard atmosphere (sea level, 15°C, dry air)",
)

HIGH_ALTITUDE_ATMOSPHERE = AtmosphericConditions(
    pressure=UncertaintyValue(26500.0, 1000.0, "Pa", "US Standard Atmosphere", "Pressure at 10 km altitude"),
    density=UncertaintyValue(0.414, 0.02, "kg/m³", "US Standard Atmosphere", "Density at 10 km altitude"),
    temperature=UncertaintyValue(223.15, 2.0, "K", "US Standard Atmosphere", "Temperature at 10 km altitude"),
    humidity=UncertaintyValue(0.0, 0.0, "1", "Assumed", "Dry air at altitude"),
    description="High altitude atmosphere (10 km, typical airburst altitude)",
)

ATMOSPHERES = frozen({
    "standard": STANDARD_ATMOSPHERE,
    "highAltitude": HIGH_ALTITUDE_ATMOSPHERE,
})


def get_atmospheric_conditions(name: str) -> AtmosphericConditions:
    return lookup(ATMOSPHERES, name, "atmospheric condition")


@dataclass(frozen=True)
class FireballEffects:
    radius: UncertaintyValue
    duration: UncertaintyValue
    temperature: UncertaintyValue
    luminosity: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "radius_m": self.radius.to_dict(),
            "duration_s": self.duration.to_dict(),
            "temperature_k": self.temperature.to_dict(),
            "luminosity_w": self.luminosity.to_dict(),
        }


@dataclass(frozen=True)
class AirblastEffects:
    """Overpressure radii and conditions at the 1 psi ring.

    Attributes:
        overpressure_radii: Radius in m keyed by overpressure in psi (1, 5, 10).
        dynamic_pressure: Dynamic pressure at the 1 psi radius in Pa.
        arrival_time: Shock arrival at the 1 psi radius in s.
    """

    overpressure_radii: dict[int, UncertaintyValue]
    dynamic_pressure: UncertaintyValue
    arrival_time: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "overpressure_radii_m": {f"{psi}psi": r.to_dict() for psi, r in self.overpressure_radii.items()},
            "dynamic_pressure_pa": self.dynamic_pressure.to_dict(),
            "arrival_time_s": self.arrival_time.to_dict(),
        }


@dataclass(frozen=True)
class ThermalEffects:
    """Thermal radiation radii.

    Attributes:
        radiation_radii: Radius in m keyed by fluence threshold in cal/cm²
            (1: first-degree, 4: second-degree, 10: third-degree burns).
        thermal_fluence: Fluence at the first-degree radius in J/m².
        pulse_width: Thermal pulse duration in s.
    """

    radiation_radii: dict[int, UncertaintyValue]
    thermal_fluence: UncertaintyValue
    pulse_width: UncertaintyValue

    def to_dict(self) -> dict:
        return {
            "radiation_radii_m": {f"{cal}cal_cm2": r.to_dict() for cal, r in self.radiation_radii.items()},
            "thermal_fluence_j_m2": self.thermal_fluence.to_dict(),
            "pulse_width_s": self.pulse_width.to_dict(),
        }


@dataclass(frozen=True)
class BlastEffectsResult:
    tnt_equivalent: UncertaintyValue
    fireball: FireballEffects
    airblast: AirblastEffects
    thermal: ThermalEffects
    validity: ValidityCheck
    scaling_method: str
    atmospheric_conditions: str

    def to_dict(self) -> dict:
        return {
            "tnt_equivalent_kt": self.tnt_equivalent.to_dict(),
            "fireball": self.fireball.to_dict(),
            "airblast": self.airblast.to_dict(),
            "thermal": self.thermal.to_dict(),
            "validity": self.validity.to_dict(),
            "scaling_method": self.scaling_method,
            "atmospheric_conditions": self.atmospheric_conditions,
        }


def energy_to_tnt(energy: UncertaintyValue) -> UncertaintyValue:
    """Energy in J to kilotons of TNT."""
    return UncertaintyValue(
        energy.value / KILOTON_TNT_J,
        energy.uncertainty / KILOTON_TNT_J,
        "kt",
        "Calculated from impact energy",
        "TNT equivalent yield",
    )


def _fireball(yield_kt: UncertaintyValue, altitude: UncertaintyValue, air: AtmosphericConditions) -> FireballEffects:
    variables = [Variable("yield", yield_kt), Variable("density", air.density)]
    if altitude.value > 0:
        variables.append(Variable("altitude", altitude))

    def radius_m(x):
        radius = 0.28 * x["yield"] ** 0.4 * 1000.0
        radius *= (SEA_LEVEL_DENSITY_KG_M3 / x["density"]) ** 0.2
        if x.get("altitude", 0.0) > 0:
            radius *= (1.0 + x["altitude"] / 10000.0) ** 0.1
        return radius

    radius = propagate_nonlinear(variables, radius_m).to_uncertainty_value(
        "m", "Glasstone & Dolan (1977) scaling", "Fireball radius"
    )
    duration = propagate_nonlinear(
        [Variable("yield", yield_kt)], lambda x: 0.44 * x["yield"] ** 0.4
    ).to_uncertainty_value("s", "Glasstone & Dolan (1977) scaling", "Fireball duration")
    temperature = UncertaintyValue(3500.0, 500.0, "K", "Glasstone & Dolan (1977)", "Peak fireball temperature")
    luminosity = propagate_nonlinear(
        [Variable("radius", radius), Variable("temperature", temperature)],
        lambda x: STEFAN_BOLTZMANN * 4.0 * math.pi * x["radius"] ** 2 * x["temperature"] ** 4,
    ).to_uncertainty_value("W", "Stefan-Boltzmann law", "Fireball luminosity")

    return FireballEffects(radius=radius, duration=duration, temperature=temperature, luminosity=luminosity)


def _airblast(yield_kt: UncertaintyValue, altitude: UncertaintyValue, air: AtmosphericConditions) -> AirblastEffects:
    altitude_factor = 1.0 + 0.1 * math.log(1.0 + altitude.value / 1000.0) if altitude.value > 0 else 1.0

    radii = {}
    for psi, k in OVERPRESSURE_SCALING.items():
        radii[psi] = propagate_nonlinear(
            [Variable("yield", yield_kt), Variable("pressure", air.pressure)],
            lambda x, k=k: (
                k * x["yield"] ** (1.0 / 3.0) * 1000.0
                * (STANDARD_ATMOSPHERE_PA / x["pressure"]) ** (1.0 / 3.0)
                * altitude_factor
            ),
        ).to_uncertainty_value("m", "Glasstone & Dolan (1977) scaling", f"Overpressure radius for {psi} psi")

    dynamic_pressure = propagate_nonlinear(
        [Variable("density", air.density)],
        lambda x: 0.5 * x["density"] * WIND_BEHIND_1PSI_SHOCK_M_S**2,
    ).to_uncertainty_value("Pa", "Shock wave theory", "Dynamic pressure at 1 psi overpressure radius")

    # The shock outruns sound early on; 1.2 c is its mean speed out to 1 psi.
    arrival_time = propagate_nonlinear(
        [Variable("radius", radii[1]), Variable("temperature", air.temperature)],
        lambda x: x["radius"] / (1.2 * math.sqrt(AIR_GAMMA * AIR_GAS_CONSTANT * x["temperature"])),
    ).to_uncertainty_value("s", "Blast wave propagation", "Arrival time at 1 psi overpressure radius")

    return AirblastEffects(overpressure_radii=radii, dynamic_pressure=dynamic_pressure, arrival_time=arrival_time)


def _thermal(yield_kt: UncertaintyValue, altitude: UncertaintyValue, air: AtmosphericConditions) -> ThermalEffects:
    radii = {}
    for cal, k in THERMAL_SCALING.items():
        radii[cal] = propagate_nonlinear(
            [Variable("yield", yield_kt), Variable("humidity", air.humidity)],
            lambda x, k=k: (
                k * x["yield"] ** 0.41 * 1000.0
                * math.sqrt(math.exp(-0.1 * x["humidity"] - altitude.value / 50000.0))
            ),
        ).to_uncertainty_value("m", "Glasstone & Dolan (1977) thermal scaling", f"Radius for {cal} cal/cm² fluence")

    fluence = propagate_nonlinear(
        [Variable("yield", yield_kt), Variable("radius", radii[1])],
        lambda x: x["yield"] * KILOTON_TNT_J * THERMAL_YIELD_FRACTION / (4.0 * math.pi * x["radius"] ** 2),
    ).to_uncertainty_value("J/m²", "Thermal energy distribution", "Thermal fluence at first-degree burn radius")

    def pulse_width_s(x):
        if x["yield"] < 0.0:
            return math.nan
        return max(0.2, 0.44 * x["yield"] ** 0.44)

    pulse_width = propagate_nonlinear([Variable("yield", yield_kt)], pulse_width_s).to_uncertainty_value(
        "s", "Glasstone & Dolan (1977) scaling", "Thermal pulse width"
    )

    return ThermalEffects(radiation_radii=radii, thermal_fluence=fluence, pulse_width=pulse_width)


def _validate(energy: UncertaintyValue, altitude: UncertaintyValue, yield_kt: UncertaintyValue) -> ValidityCheck:
    check = ValidityBuilder()
    check.check_finite(impact_energy=energy.value, burst_altitude=altitude.value)

    low, high = YIELD_RANGE_KT
    if yield_kt.value < low:
        check.warn(f"TNT equivalent ({yield_kt.value:.6f} kt) is below validated range (>{low} kt)", invalidates=True)
    if yield_kt.value > high:
        check.warn(f"TNT equivalent ({yield_kt.value:.0f} kt) is above validated range (<{high:,.0f} kt)", invalidates=True)
    if altitude.value > HIGH_BURST_ALTITUDE_M:
        check.warn(f"Burst altitude ({altitude.value:.0f} m) is very high; atmospheric effects may be underestimated")

    check.limit(
        "Scaling laws derived from nuclear weapons tests",
        "Assumes spherical symmetry and homogeneous atmosphere",
        "Does not account for terrain effects or meteorological conditions",
        "Thermal effects assume clear atmospheric conditions",
        "Overpressure scaling assumes ideal gas behavior",
    )
    return check.build()


def calculate_blast_effects(
    impact_energy: UncertaintyValue,
    burst_altitude: UncertaintyValue,
    atmosphere: AtmosphericConditions | str = STANDARD_ATMOSPHERE,
) -> BlastEffectsResult:
    """Fireball, airblast and thermal effects of an impact or airburst.

    Args:
        impact_energy: Energy released in J.
        burst_altitude: Height of the burst in m; 0 for a surface burst.
        atmosphere: Ambient air, or its key in :data:`ATMOSPHERES`.

    Returns:
        BlastEffectsResult. Yields outside 0.001-20000 kt are flagged invalid.

    Raises:
        UnknownKeyError: If ``atmosphere`` names an unknown condition.
    """
    air = get_atmospheric_conditions(atmosphere) if isinstance(atmosphere, str) else atmosphere
    yield_kt = energy_to_tnt(impact_energy)
    validity = _validate(impact_energy, burst_altitude, yield_kt)

    fireball = _fireball(yield_kt, burst_altitude, air)
    airblast = _airblast(yield_kt, burst_altitude, air)
    thermal = _thermal(yield_kt, burst_altitude, air)

    validity.log("Blast")
    logger.debug(
        "Blast: W=%.3e kt, fireball=%.3e m, 1 psi=%.3e m",
        yield_kt.value, fireball.radius.value, airblast.overpressure_radii[1].value,
    )

    return BlastEffectsResult(
        tnt_equivalent=yield_kt,
        fireball=fireball,
        airblast=airblast,
        thermal=thermal,
        validity=validity,
        scaling_method="Glasstone & Dolan (1977) nuclear effects scaling",
        atmospheric_conditions=air.description,
    )


@dataclass(frozen=True)
class BlastComparison:
    """A modelled airburst beside its observed damage extent."""

    name: str
    observed_blast_radius_m: float
    observed_thermal_radius_m: float
    calculated: BlastEffectsResult
    blast_ratio: float
    agreement: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "observed_blast_radius_m": self.observed_blast_radius_m,
            "observed_thermal_radius_m": self.observed_thermal_radius_m,
            "calculated": self.calculated.to_dict(),
            "blast_ratio": self.blast_ratio,
            "agreement": self.agreement,
        }


_KNOWN_EVENTS = (
    (
        "Chelyabinsk (2013)",
        UncertaintyValue(5e14, 1e14, "J", "Brown et al. (2013)", "Estimated impact energy"),
        UncertaintyValue(23000.0, 2000.0, "m", "Brown et al. (2013)", "Airburst altitude"),
        100000.0,
        50000.0,
    ),
    (
        "Tunguska (1908)",
        UncertaintyValue(1.2e16, 5e15, "J", "Boslough & Crawford (2008)", "Estimated impact energy"),
        UncertaintyValue(8000.0, 2000.0, "m", "Boslough & Crawford (2008)", "Estimated airburst altitude"),
        2000000.0,
        500000.0,
    ),
)


def validate_against_known_events() -> list[BlastComparison]:
    """Compare the 1 psi radius with observed damage for historic airbursts."""
    comparisons = []
    for name, energy, altitude, blast_radius, thermal_radius in _KNOWN_EVENTS:
        result = calculate_blast_effects(energy, altitude, HIGH_ALTITUDE_ATMOSPHERE)
        ratio = result.airblast.overpressure_radii[1].value / blast_radius
        comparisons.append(
            BlastComparison(
                name=name,
                observed_blast_radius_m=blast_radius,
                observed_thermal_radius_m=thermal_radius,
                calculated=result,
                blast_ratio=ratio,
                agreement=agreement_grade(ratio),
            )
        )
    return comparisons
