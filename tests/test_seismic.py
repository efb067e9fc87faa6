"""Tests for impact seismic effects."""

from __future__ import annotations

import math

import pytest

from neoguard.core.uncertainty import UncertaintyValue
from neoguard.impact.seismic import (
    Confidence,
    calculate_seismic_magnitude,
    get_geological_properties,
    ground_motion_at_distance,
    validate_against_known_impacts,
)
from neoguard.utils.lookup import UnknownKeyError


def energy(value):
    return UncertaintyValue.from_relative(value, 0.3, "J")


class TestSeismicMagnitude:
    """Test the energy to magnitude chain."""

    def test_magnitude_increases_with_energy(self):
        low = calculate_seismic_magnitude(energy(1e14))
        high = calculate_seismic_magnitude(energy(1e18))
        assert high.moment_magnitude.value > low.moment_magnitude.value

    def test_seismic_energy_uses_efficiency(self):
        result = calculate_seismic_magnitude(energy(1e16))
        assert result.seismic_energy.value == pytest.approx(1e14)

    def test_damage_radius_inside_felt_radius(self):
        result = calculate_seismic_magnitude(energy(1e18))
        assert result.damage_radius.value < result.felt_radius.value

    def test_rigid_rock_raises_magnitude(self):
        soft = calculate_seismic_magnitude(energy(1e16), "sedimentary")
        hard = calculate_seismic_magnitude(energy(1e16), "oceanic_crust")
        assert hard.moment_magnitude.value > soft.moment_magnitude.value

    def test_out_of_range_energy_invalid(self):
        result = calculate_seismic_magnitude(energy(1e6))
        assert not result.validity.is_valid
        assert math.isfinite(result.moment_magnitude.value)

    def test_zero_energy_gives_negative_infinite_magnitude(self):
        result = calculate_seismic_magnitude(UncertaintyValue(0.0, 0.0, "J"))
        assert result.moment_magnitude.value == -math.inf
        assert not result.validity.is_valid
        assert any("Non-positive" in w for w in result.validity.warnings)

    def test_zero_energy_with_uncertainty(self):
        result = calculate_seismic_magnitude(UncertaintyValue(0.0, 1e10, "J"))
        assert result.moment_magnitude.value == -math.inf
        assert not result.validity.is_valid

    def test_negative_energy_is_not_a_number(self):
        result = calculate_seismic_magnitude(energy(-1e15))
        assert math.isnan(result.moment_magnitude.value)
        assert not result.validity.is_valid

    def test_unknown_geology(self):
        with pytest.raises(UnknownKeyError, match="geological setting"):
            calculate_seismic_magnitude(energy(1e16), "lunar_regolith")

    def test_rigidity(self):
        rock = get_geological_properties("continental_crust")
        assert rock.rigidity == pytest.approx(2700 * 3600**2)

    def test_to_dict(self):
        d = calculate_seismic_magnitude(energy(1e16)).to_dict()
        assert d["validity"]["is_valid"] is True
        assert d["moment_magnitude"]["unit"] == "Mw"


class TestGroundMotion:
    def test_attenuates_with_distance(self):
        mw = UncertaintyValue(5.0, 0.2, "Mw")
        near = ground_motion_at_distance(mw, 10.0)
        far = ground_motion_at_distance(mw, 100.0)
        assert far.peak_ground_acceleration.value < near.peak_ground_acceleration.value
        assert far.mercalli_intensity.value < near.mercalli_intensity.value

    def test_intensity_clamped(self):
        result = ground_motion_at_distance(UncertaintyValue(9.0, 0.0, "Mw"), 0.01)
        assert result.mercalli_intensity.value == 12.0

    @pytest.mark.parametrize("distance", [0.0, -5.0])
    def test_rejects_non_positive_distance(self, distance):
        with pytest.raises(ValueError, match="Distance must be positive"):
            ground_motion_at_distance(UncertaintyValue(5.0, 0.2, "Mw"), distance)


class TestKnownImpacts:
    """Test grading against historic events."""

    @pytest.mark.parametrize(
        "event, energy_j",
        [("Tunguska_1908", 1.2e16), ("Chelyabinsk_2013", 2.1e15)],
    )
    def test_airbursts_graded_high(self, event, energy_j):
        magnitude = calculate_seismic_magnitude(energy(energy_j)).moment_magnitude
        validation = validate_against_known_impacts(magnitude, event)
        assert validation.confidence == Confidence.HIGH
        assert validation.is_valid

    def test_far_off_magnitude_graded_low(self):
        validation = validate_against_known_impacts(UncertaintyValue(8.0, 0.0, "Mw"), "Tunguska_1908")
        assert validation.confidence == Confidence.LOW
        assert not validation.is_valid

    def test_unknown_event(self):
        with pytest.raises(UnknownKeyError):
            validate_against_known_impacts(UncertaintyValue(5.0, 0.0, "Mw"), "Chicxulub")
