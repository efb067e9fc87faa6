"""Validation of the impact models against well-observed airbursts.

Each :class:`HistoricalEvent` carries the inferred impactor parameters and
the effects recorded on the ground. The blast and seismic models are run on
the impactor parameters and each prediction is compared with the observation
in units of their combined standard uncertainty.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from neoguard.core.uncertainty import UncertaintyValue, quotient
from neoguard.impact.blast import HIGH_ALTITUDE_ATMOSPHERE, calculate_blast_effects
from neoguard.impact.seismic import calculate_seismic_magnitude
from neoguard.utils.lookup import frozen, lookup

logger = logging.getLogger(__name__)

WITHIN_UNCERTAINTY_SIGMA = 2.0


class ValidationStatus(Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"
    POOR = "POOR"


@dataclass(frozen=True)
class ImpactParameters:
    """Impactor as reconstructed from the observations.

    Attributes:
        energy: J.
        altitude: Burst altitude in m.
        velocity: Entry velocity in m/s.
        angle: Entry angle from horizontal in degrees.
        diameter: m.
        mass: kg.
        composition: Free text.
    """

    energy: UncertaintyValue
    altitude: UncertaintyValue
    velocity: UncertaintyValue
    angle: UncertaintyValue
    diameter: UncertaintyValue
    mass: UncertaintyValue
    composition: str


@dataclass(frozen=True)
class ObservedEffects:
    """Ground truth; radii in m."""

    blast_radius: UncertaintyValue
    seismic_magnitude: UncertaintyValue
    thermal_radius: UncertaintyValue


@dataclass(frozen=True)
class HistoricalEvent:
    name: str
    date: str
    latitude_deg: float
    longitude_deg: float
    impact: ImpactParameters
    observed: ObservedEffects
    references: tuple[str, ...] = ()


@dataclass(frozen=True)
class Agreement:
    """Distance between a prediction and an observation.

    Attributes:
        sigma_deviation: ``|predicted - observed|`` over the quadrature sum of
            both uncertainties.
        percent_error: ``|predicted - observed|`` as a percentage of the
            observation.
        within_uncertainty: True within two combined sigma.
    """

    sigma_deviation: float
    percent_error: float
    within_uncertainty: bool

    def to_dict(self) -> dict:
        return {
            "sigma_deviation": self.sigma_deviation,
            "percent_error": self.percent_error,
            "within_uncertainty": self.within_uncertainty,
        }


@dataclass(frozen=True)
class ValidationResult:
    event: str
    parameter: str
    predicted: UncertaintyValue
    observed: UncertaintyValue
    agreement: Agreement
    status: ValidationStatus

    def to_dict(self) -> dict:
        return {
            "event": self.event,
            "parameter": self.parameter,
            "predicted": self.predicted.to_dict(),
            "observed": self.observed.to_dict(),
            "agreement": self.agreement.to_dict(),
            "status": self.status.value,
        }


TUNGUSKA = HistoricalEvent(
    name="Tunguska",
    date="1908-06-30",
    latitude_deg=60.886,
    longitude_deg=101.893,
    impact=ImpactParameters(
        energy=UncertaintyValue(5.0e16, 2.0e16, "J", "Boslough & Crawford (2008)", "Impact energy"),
        altitude=UncertaintyValue(8000.0, 2000.0, "m", "Chyba et al. (1993)", "Airburst altitude"),
        velocity=UncertaintyValue(20000.0, 5000.0, "m/s", "Hills & Goda (1993)", "Entry velocity"),
        angle=UncertaintyValue(45.0, 15.0, "deg", "Trajectory analysis", "Entry angle"),
        diameter=UncertaintyValue(60.0, 20.0, "m", "Derived from energy estimates", "Impactor diameter"),
        mass=UncertaintyValue(3.0e8, 1.5e8, "kg", "Assuming stony composition", "Impactor mass"),
        composition="Stony (S-type)",
    ),
    observed=ObservedEffects(
        blast_radius=UncertaintyValue(30000.0, 5000.0, "m", "Tree fall observations", "Blast radius"),
        seismic_magnitude=UncertaintyValue(5.0, 0.5, "Mw", "Seismic station records", "Seismic magnitude"),
        thermal_radius=UncertaintyValue(15000.0, 5000.0, "m", "Burn damage survey", "Thermal radius"),
    ),
    references=(
        "Boslough, M. B., & Crawford, D. A. (2008). Low-altitude airbursts and the impact threat. "
        "International Journal of Impact Engineering, 35(12), 1441-1448.",
        "Chyba, C. F., Thomas, P. J., & Zahnle, K. J. (1993). The 1908 Tunguska explosion: "
        "atmospheric disruption of a stony asteroid. Nature, 361(6407), 40-44.",
        "Hills, J. G., & Goda, M. P. (1993). The fragmentation of small asteroids in the atmosphere. "
        "The Astronomical Journal, 105(3), 1114-1144.",
    ),
)

CHELYABINSK = HistoricalEvent(
    name="Chelyabinsk",
    date="2013-02-15",
    latitude_deg=55.15,
    longitude_deg=61.41,
    impact=ImpactParameters(
        energy=UncertaintyValue(2.1e15, 3.0e14, "J", "Brown et al. (2013)", "Impact energy"),
        altitude=UncertaintyValue(23300.0, 700.0, "m", "Popova et al. (2013)", "Airburst altitude"),
        velocity=UncertaintyValue(19160.0, 150.0, "m/s", "Borovička et al. (2013)", "Entry velocity"),
        angle=UncertaintyValue(18.3, 0.5, "deg", "Trajectory analysis from videos", "Entry angle"),
        diameter=UncertaintyValue(19.8, 1.0, "m", "Popova et al. (2013)", "Impactor diameter"),
        mass=UncertaintyValue(1.3e7, 2.0e6, "kg", "Pre-atmospheric estimate", "Impactor mass"),
        composition="Ordinary chondrite (LL5)",
    ),
    observed=ObservedEffects(
        blast_radius=UncertaintyValue(100000.0, 10000.0, "m", "Window damage radius", "Blast radius"),
        seismic_magnitude=UncertaintyValue(4.2, 0.1, "Mw", "Regional seismic networks", "Seismic magnitude"),
        thermal_radius=UncertaintyValue(50000.0, 10000.0, "m", "Thermal radiation reports", "Thermal radius"),
    ),
    references=(
        "Brown, P., et al. (2013). A 500-kiloton airburst over Chelyabinsk and an enhanced hazard "
        "from small impactors. Nature, 503(7475), 238-241.",
        "Popova, O. P., et al. (2013). Chelyabinsk airburst, damage assessment, meteorite recovery, "
        "and characterization. Science, 342(6162), 1069-1073.",
        "Borovička, J., et al. (2013). The trajectory, structure and origin of the Chelyabinsk "
        "asteroidal impactor. Nature, 503(7475), 235-237.",
    ),
)

HISTORICAL_EVENTS = frozen({event.name.lower(): event for event in (TUNGUSKA, CHELYABINSK)})


def get_historical_events() -> list[HistoricalEvent]:
    return list(HISTORICAL_EVENTS.values())


def get_historical_event(name: str) -> HistoricalEvent:
    """Event by case-insensitive name.

    Raises:
        UnknownKeyError: If no event has that name.
    """
    return lookup(HISTORICAL_EVENTS, name.lower(), "historical event")


def compare_values(predicted: UncertaintyValue, observed: UncertaintyValue) -> Agreement:
    """Compare a prediction with an observation.

    Two exact values agree at zero sigma when equal and at infinite sigma
    otherwise. A zero observation gives an infinite percent error unless the
    prediction is also zero.
    """
    diff = abs(predicted.value - observed.value)
    combined = math.hypot(predicted.uncertainty, observed.uncertainty)
    sigma = 0.0 if diff == 0.0 else quotient(diff, combined)
    percent = 0.0 if diff == 0.0 else 100.0 * quotient(diff, abs(observed.value))
    return Agreement(
        sigma_deviation=sigma,
        percent_error=percent,
        within_uncertainty=sigma <= WITHIN_UNCERTAINTY_SIGMA,
    )


def validation_status(sigma_deviation: float) -> ValidationStatus:
    """EXCELLENT within 1σ, GOOD within 2σ, ACCEPTABLE within 3σ, else POOR.

    An undefined deviation (NaN) is POOR.
    """
    if sigma_deviation <= 1.0:
        return ValidationStatus.EXCELLENT
    if sigma_deviation <= 2.0:
        return ValidationStatus.GOOD
    if sigma_deviation <= 3.0:
        return ValidationStatus.ACCEPTABLE
    return ValidationStatus.POOR


def _result(event: HistoricalEvent, parameter: str, predicted, observed) -> ValidationResult:
    agreement = compare_values(predicted, observed)
    return ValidationResult(
        event=event.name,
        parameter=parameter,
        predicted=predicted,
        observed=observed,
        agreement=agreement,
        status=validation_status(agreement.sigma_deviation),
    )


def validate_blast_effects(event: HistoricalEvent) -> list[ValidationResult]:
    """Compare the 1 psi and first-degree-burn radii with the observed damage."""
    blast = calculate_blast_effects(event.impact.energy, event.impact.altitude, HIGH_ALTITUDE_ATMOSPHERE)
    return [
        _result(event, "Blast Radius", blast.airblast.overpressure_radii[1], event.observed.blast_radius),
        _result(event, "Thermal Effects", blast.thermal.radiation_radii[1], event.observed.thermal_radius),
    ]


def validate_seismic_effects(event: HistoricalEvent) -> list[ValidationResult]:
    seismic = calculate_seismic_magnitude(event.impact.energy)
    return [_result(event, "Seismic Magnitude", seismic.moment_magnitude, event.observed.seismic_magnitude)]


def validate_all_events(events: Iterable[HistoricalEvent] | None = None) -> list[ValidationResult]:
    """Blast and seismic results for each event, in event order.

    Args:
        events: Events to check; all of :data:`HISTORICAL_EVENTS` by default.
    """
    results = []
    for event in get_historical_events() if events is None else events:
        event_results = validate_blast_effects(event) + validate_seismic_effects(event)
        for r in event_results:
            logger.debug(
                "%s %s: %.2f sigma (%s)", r.event, r.parameter, r.agreement.sigma_deviation, r.status.value
            )
        results.extend(event_results)
    return results


def generate_validation_report(results: Iterable[ValidationResult]) -> str:
    """Markdown report with one section per event."""
    grouped: dict[str, list[ValidationResult]] = {}
    for result in results:
        grouped.setdefault(result.event, []).append(result)

    lines = ["# Historical Event Validation Report", ""]
    for event, event_results in grouped.items():
        lines += [f"## {event} Event Validation", ""]
        for r in event_results:
            p, o = r.predicted, r.observed
            lines += [
                f"### {r.parameter}",
                f"- **Predicted**: {p.value:.2e} ± {p.uncertainty:.2e} {p.unit}",
                f"- **Observed**: {o.value:.2e} ± {o.uncertainty:.2e} {o.unit}",
                f"- **Agreement**: {r.agreement.sigma_deviation:.2f}σ deviation "
                f"({r.agreement.percent_error:.1f}% error)",
                f"- **Status**: {r.status.value}",
                f"- **Within Uncertainty**: {'Yes' if r.agreement.within_uncertainty else 'No'}",
                "",
            ]
    return "\n".join(lines)
