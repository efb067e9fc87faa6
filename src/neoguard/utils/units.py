"""Unit conversion over a fixed table of linear units.

Each unit maps to a dimension and a factor to that dimension's base SI unit.
Conversions are only allowed within one dimension.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Mapping, NamedTuple

from neoguard.core.uncertainty import UncertaintyValue
from neoguard.utils.constants import (
    AU_M,
    ELECTRON_VOLT_J,
    JULIAN_YEAR_S,
    KILOTON_TNT_J,
    LIGHT_YEAR_M,
    MEGATON_TNT_J,
    STANDARD_ATMOSPHERE_PA,
)

logger = logging.getLogger(__name__)


class UnitConversionError(ValueError):
    """Raised for a unit symbol that is not in the table."""


class DimensionalAnalysisError(ValueError):
    """Raised when converting between units of different dimensions."""


class UnitDefinition(NamedTuple):
    dimension: str
    factor: float  # multiply by this to reach the base unit


UNITS: Mapping[str, UnitDefinition] = MappingProxyType({
    # length (m)
    "m": UnitDefinition("length", 1.0),
    "km": UnitDefinition("length", 1e3),
    "cm": UnitDefinition("length", 1e-2),
    "mm": UnitDefinition("length", 1e-3),
    "AU": UnitDefinition("length", AU_M),
    "ly": UnitDefinition("length", LIGHT_YEAR_M),
    # time (s)
    "s": UnitDefinition("time", 1.0),
    "min": UnitDefinition("time", 60.0),
    "h": UnitDefinition("time", 3600.0),
    "day": UnitDefinition("time", 86400.0),
    "year": UnitDefinition("time", JULIAN_YEAR_S),
    # mass (kg)
    "kg": UnitDefinition("mass", 1.0),
    "g": UnitDefinition("mass", 1e-3),
    "t": UnitDefinition("mass", 1e3),
    # energy (J)
    "J": UnitDefinition("energy", 1.0),
    "kJ": UnitDefinition("energy", 1e3),
    "MJ": UnitDefinition("energy", 1e6),
    "GJ": UnitDefinition("energy", 1e9),
    "TJ": UnitDefinition("energy", 1e12),
    "kt TNT": UnitDefinition("energy", KILOTON_TNT_J),
    "Mt TNT": UnitDefinition("energy", MEGATON_TNT_J),
    "eV": UnitDefinition("energy", ELECTRON_VOLT_J),
    # velocity (m/s)
    "m/s": UnitDefinition("velocity", 1.0),
    "km/s": UnitDefinition("velocity", 1e3),
    "km/h": UnitDefinition("velocity", 1e3 / 3600.0),
    # acceleration (m/s²)
    "m/s²": UnitDefinition("acceleration", 1.0),
    "km/s²": UnitDefinition("acceleration", 1e3),
    # pressure (Pa)
    "Pa": UnitDefinition("pressure", 1.0),
    "kPa": UnitDefinition("pressure", 1e3),
    "MPa": UnitDefinition("pressure", 1e6),
    "GPa": UnitDefinition("pressure", 1e9),
    "atm": UnitDefinition("pressure", STANDARD_ATMOSPHERE_PA),
    "psi": UnitDefinition("pressure", 6894.757293168),
    # temperature (K)
    "K": UnitDefinition("temperature", 1.0),
    # angle (rad)
    "rad": UnitDefinition("angle", 1.0),
    "deg": UnitDefinition("angle", math.pi / 180.0),
    "arcmin": UnitDefinition("angle", math.pi / 10800.0),
    "arcsec": UnitDefinition("angle", math.pi / 648000.0),
    # dimensionless
    "1": UnitDefinition("dimensionless", 1.0),
})
"""Supported units keyed by symbol."""


def _lookup(unit: str) -> UnitDefinition:
    try:
        return UNITS[unit]
    except KeyError:
        raise UnitConversionError(f"Unknown unit: {unit}") from None


def conversion_factor(from_unit: str, to_unit: str) -> float:
    """Factor ``k`` such that ``value_in_to = k · value_in_from``.

    Raises:
        UnitConversionError: If either unit is unknown.
        DimensionalAnalysisError: If the units measure different dimensions.
    """
    src = _lookup(from_unit)
    dst = _lookup(to_unit)
    if src.dimension != dst.dimension:
        raise DimensionalAnalysisError(
            f"Cannot convert {from_unit} ({src.dimension}) to {to_unit} ({dst.dimension})"
        )
    return src.factor / dst.factor


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a plain number between two units of the same dimension."""
    if from_unit == to_unit:
        _lookup(from_unit)
        return value
    return value * conversion_factor(from_unit, to_unit)


def convert_uncertainty_value(quantity: UncertaintyValue, to_unit: str) -> UncertaintyValue:
    """Convert an :class:`UncertaintyValue`, scaling value and uncertainty alike."""
    factor = conversion_factor(quantity.unit, to_unit)
    return UncertaintyValue(
        quantity.value * factor,
        quantity.uncertainty * factor,
        to_unit,
        quantity.source,
        quantity.description,
    )


def are_compatible(unit_a: str, unit_b: str) -> bool:
    """Whether both units are known and share a dimension."""
    a = UNITS.get(unit_a)
    b = UNITS.get(unit_b)
    return a is not None and b is not None and a.dimension == b.dimension


def dimension_of(unit: str) -> str:
    return _lookup(unit).dimension


def format_value(value: float, unit: str, precision: int = 3) -> str:
    """Format a number with its unit, switching to scientific notation at extremes."""
    magnitude = abs(value)
    if magnitude != 0.0 and (magnitude >= 1e6 or magnitude < 1e-3):
        text = f"{value:.{precision}e}"
    else:
        text = f"{value:.{precision}f}"
    return text if unit == "1" else f"{text} {unit}"


def format_uncertainty_value(quantity: UncertaintyValue, precision: int = 3) -> str:
    """Format as ``value ± sigma unit``; exact values are marked ``(exact)``."""
    if quantity.uncertainty == 0.0:
        return f"{format_value(quantity.value, quantity.unit, precision)} (exact)"
    value_text = format_value(quantity.value, "1", precision)
    sigma_text = format_value(quantity.uncertainty, "1", precision)
    suffix = "" if quantity.unit == "1" else f" {quantity.unit}"
    return f"{value_text} ± {sigma_text}{suffix}"


# --- Convenience conversions ---

def joules_to_megatons(joules: float) -> float:
    return joules / MEGATON_TNT_J


def megatons_to_joules(megatons: float) -> float:
    return megatons * MEGATON_TNT_J


def joules_to_kilotons(joules: float) -> float:
    return joules / KILOTON_TNT_J


def au_to_km(au: float) -> float:
    return convert(au, "AU", "km")


def km_to_au(km: float) -> float:
    return convert(km, "km", "AU")


def deg_to_rad(deg: float) -> float:
    return math.radians(deg)


def rad_to_deg(rad: float) -> float:
    return math.degrees(rad)


def days_to_seconds(days: float) -> float:
    return days * 86400.0
