"""Tests for airburst blast effects."""

from __future__ import annotations

import math

import pytest

from neoguard.core.uncertainty import UncertaintyValue
from neoguard.impact.blast import (
    HIGH_ALTITUDE_ATMOSPHERE,
    calculate_blast_effects,
    energy_to_tnt,
    validate_against_known_events,
)
from neoguard.utils.lookup import UnknownKeyError


SURFACE = UncertaintyValue(0.0, 0.0, "m")


@pytest.fixture
def megaton_burst():
    return calculate_blast_effects(UncertaintyValue(4.184e15, 4.184e14, "J"), SURFACE)


class TestBlastEffects:
    """Test fireball, overpressure and thermal scaling."""

    def test_tnt_equivalent(self):
        assert energy_to_tnt(UncertaintyValue(4.184e12, 0.0, "J")).value == pytest.approx(1.0)

    def test_overpressure_radii_ordered(self, megaton_burst):
        radii = megaton_burst.airblast.overpressure_radii
        assert radii[1].value > radii[5].value > radii[10].value

    def test_one_psi_radius_at_sea_level(self, megaton_burst):
        assert megaton_burst.airblast.overpressure_radii[1].value == pytest.approx(22000.0, rel=1e-6)

    def test_thermal_radii_ordered(self, megaton_burst):
        radii = megaton_burst.thermal.radiation_radii
        assert radii[1].value > radii[4].value > radii[10].value

    def test_fireball_grows_with_yield(self, megaton_burst):
        small = calculate_blast_effects(UncertaintyValue(4.184e12, 0.0, "J"), SURFACE)
        assert megaton_burst.fireball.radius.value > small.fireball.radius.value

    def test_yield_uncertainty_reaches_radii(self, megaton_burst):
        assert megaton_burst.airblast.overpressure_radii[1].uncertainty > 0

    def test_thin_air_extends_blast(self, megaton_burst):
        high = calculate_blast_effects(UncertaintyValue(4.184e15, 4.184e14, "J"), SURFACE, "highAltitude")
        assert high.airblast.overpressure_radii[1].value > megaton_burst.airblast.overpressure_radii[1].value

    def test_tiny_yield_invalid(self):
        result = calculate_blast_effects(UncertaintyValue(1e3, 0.0, "J"), SURFACE)
        assert not result.validity.is_valid

    def test_zero_energy_with_uncertainty(self):
        result = calculate_blast_effects(UncertaintyValue(0.0, 1e10, "J"), SURFACE)
        assert not result.validity.is_valid
        assert result.airblast.overpressure_radii[1].value == 0.0
        assert math.isfinite(result.airblast.overpressure_radii[1].uncertainty)
        assert result.thermal.pulse_width.value == pytest.approx(0.2)

    def test_negative_energy_is_invalid_not_an_error(self):
        result = calculate_blast_effects(UncertaintyValue(-1e15, 0.0, "J"), SURFACE)
        assert not result.validity.is_valid
        assert math.isnan(result.fireball.radius.value)
        assert math.isnan(result.thermal.pulse_width.value)

    def test_very_high_burst_warns(self):
        result = calculate_blast_effects(UncertaintyValue(4.184e15, 0.0, "J"), UncertaintyValue(60000.0, 0.0, "m"))
        assert result.validity.is_valid
        assert any("very high" in w for w in result.validity.warnings)

    def test_unknown_atmosphere(self):
        with pytest.raises(UnknownKeyError):
            calculate_blast_effects(UncertaintyValue(4.184e15, 0.0, "J"), SURFACE, "mars")

    def test_to_dict(self, megaton_burst):
        d = megaton_burst.to_dict()
        assert set(d["airblast"]["overpressure_radii_m"]) == {"1psi", "5psi", "10psi"}
        assert d["tnt_equivalent_kt"]["value"] == pytest.approx(1000.0)


class TestKnownEvents:
    def test_both_events_compared(self):
        comparisons = validate_against_known_events()
        assert [c.name for c in comparisons] == ["Chelyabinsk (2013)", "Tunguska (1908)"]
        for comparison in comparisons:
            assert comparison.blast_ratio > 0
            assert comparison.calculated.atmospheric_conditions == HIGH_ALTITUDE_ATMOSPHERE.description
