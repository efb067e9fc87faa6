"""Tests for crater scaling."""

from __future__ import annotations

import math

import pytest

from neoguard.core.uncertainty import UncertaintyValue
from neoguard.impact.crater import (
    ScalingRegime,
    angle_factor,
    available_target_materials,
    calculate_crater,
    determine_scaling_regime,
    get_target_material,
    validate_against_known_craters,
)
from neoguard.utils.lookup import UnknownKeyError


def energy(value):
    return UncertaintyValue.from_relative(value, 0.2, "J")


VELOCITY = UncertaintyValue(15000.0, 1000.0, "m/s")
VERTICAL = UncertaintyValue(90.0, 0.0, "deg")
DENSITY = UncertaintyValue(3000.0, 300.0, "kg/m³")


class TestRegime:
    def test_small_impact_in_strong_rock(self):
        rock = get_target_material("crystallineRock")
        assert determine_scaling_regime(1e8, rock, 9.81) == ScalingRegime.STRENGTH

    def test_large_impact_is_gravity_dominated(self):
        rock = get_target_material("crystallineRock")
        assert determine_scaling_regime(1e18, rock, 9.81) == ScalingRegime.GRAVITY

    def test_non_positive_energy_is_strength_dominated(self):
        rock = get_target_material("crystallineRock")
        assert determine_scaling_regime(-1e15, rock, 9.81) == ScalingRegime.STRENGTH
        assert determine_scaling_regime(0.0, rock, 9.81) == ScalingRegime.STRENGTH


class TestCalculateCrater:
    """Test crater dimensions."""

    def test_bigger_energy_bigger_crater(self):
        small = calculate_crater(energy(1e12), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        large = calculate_crater(energy(1e18), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        assert large.diameter.value > small.diameter.value
        assert large.regime == ScalingRegime.GRAVITY

    def test_oblique_impact_smaller(self):
        oblique = calculate_crater(energy(1e15), VELOCITY, UncertaintyValue(30.0, 0.0, "deg"), DENSITY, "sedimentaryRock")
        vertical = calculate_crater(energy(1e15), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        assert oblique.diameter.value < vertical.diameter.value

    def test_derived_dimensions(self):
        result = calculate_crater(energy(1e15), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        d = result.diameter.value
        assert result.depth.value == pytest.approx(d * 0.25)
        assert result.volume.value == pytest.approx(math.pi / 8.0 * d**2 * result.depth.value)
        assert result.rim_height.value == pytest.approx(0.07 * d)
        assert result.ejecta_range.value == pytest.approx(2.5 * d)
        assert result.formation_time.value == pytest.approx(math.sqrt(d / 9.80665))

    def test_uncertainty_propagated(self):
        result = calculate_crater(energy(1e15), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        assert result.diameter.uncertainty > 0
        assert result.volume.relative_uncertainty > result.diameter.relative_uncertainty

    def test_within_range_is_valid(self):
        result = calculate_crater(energy(1e15), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        assert result.validity.is_valid
        assert result.validity.limitations

    def test_energy_out_of_range_flagged(self):
        result = calculate_crater(energy(1e30), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        assert not result.validity.is_valid
        assert any("above validated range" in w for w in result.validity.warnings)
        assert result.diameter.value > 0

    def test_grazing_impact_warns(self):
        grazing = UncertaintyValue(10.0, 0.0, "deg")
        result = calculate_crater(energy(1e15), VELOCITY, grazing, DENSITY, "sedimentaryRock")
        assert any("oblique" in w for w in result.validity.warnings)
        assert result.validity.is_valid

    def test_negative_energy_is_invalid_not_an_error(self):
        result = calculate_crater(energy(-1e15), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock")
        assert not result.validity.is_valid
        assert math.isnan(result.diameter.value)

    def test_horizontal_impact_with_angle_uncertainty(self):
        horizontal = UncertaintyValue(0.0, 2.0, "deg")
        result = calculate_crater(energy(1e15), VELOCITY, horizontal, DENSITY, "sedimentaryRock")
        assert result.diameter.value == 0.0
        assert math.isfinite(angle_factor(horizontal).uncertainty)
        assert any("oblique" in w for w in result.validity.warnings)

    def test_non_finite_energy_flagged(self):
        result = calculate_crater(
            UncertaintyValue(math.inf, 0.0, "J"), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock"
        )
        assert any("Non-finite" in w for w in result.validity.warnings)

    def test_unknown_material(self):
        with pytest.raises(UnknownKeyError, match="Unknown target material: basaltFoam"):
            calculate_crater(energy(1e15), VELOCITY, VERTICAL, DENSITY, "basaltFoam")

    def test_material_object_accepted(self):
        ice = get_target_material("ice")
        result = calculate_crater(energy(1e15), VELOCITY, VERTICAL, DENSITY, ice)
        assert result.target_material == "Ice"

    def test_to_dict(self):
        d = calculate_crater(energy(1e15), VELOCITY, VERTICAL, DENSITY, "sedimentaryRock").to_dict()
        assert d["regime"] == "gravityRegime"
        assert d["validity"]["is_valid"] is True


def test_angle_factor_vertical_is_one():
    assert angle_factor(VERTICAL).value == pytest.approx(1.0)


def test_available_materials():
    assert "wetSediment" in available_target_materials()


def test_barringer_within_order_of_magnitude():
    (barringer,) = validate_against_known_craters()
    assert 0.05 < barringer.diameter_ratio < 20.0
    assert barringer.agreement in ("Good", "Fair", "Poor")
    assert barringer.to_dict()["observed_diameter_m"] == 1200.0
