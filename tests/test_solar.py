"""Tests for solar radiation pressure deflection."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from neoguard.core.uncertainty import UncertaintyValue
from neoguard.deflection.solar import (
    SolarMethod,
    SolarSail,
    calculate_radiation_force,
    calculate_solar_deflection,
    create_flat_solar_sail,
    create_solar_environment,
    create_solar_target,
    create_typical_mission,
    get_sail_specification,
    get_solar_environment,
)
from neoguard.utils.constants import SPEED_OF_LIGHT_M_S
from neoguard.utils.lookup import UnknownKeyError


@pytest.fixture
def sail():
    return create_flat_solar_sail(1000.0)


@pytest.fixture
def target():
    return create_solar_target(1e10, 100.0, 0.15)


@pytest.fixture
def earth_orbit():
    return get_solar_environment("1_AU")


class TestRadiationForce:
    """Test the force models."""

    def test_sail_force(self, sail, target, earth_orbit):
        force = calculate_radiation_force(SolarMethod.SOLAR_SAIL, sail, target, earth_orbit)
        assert force.force.value == pytest.approx(2.0 * 1361.0 * 1000.0 * 0.88 / SPEED_OF_LIGHT_M_S)
        assert force.photon_momentum_flux.value == pytest.approx(1361.0 / SPEED_OF_LIGHT_M_S)

    def test_component_split(self, sail, target, earth_orbit):
        force = calculate_radiation_force("solar_sail", sail, target, earth_orbit)
        total = force.force.value
        assert force.radial_force.value == pytest.approx(0.9 * total)
        assert force.tangential_force.value == pytest.approx(0.1 * total)
        assert force.normal_force.value == pytest.approx(0.01 * total)
        assert force.radial_acceleration.value == pytest.approx(0.9 * total / 1e10)

    def test_total_acceleration(self, sail, target, earth_orbit):
        force = calculate_radiation_force("solar_sail", sail, target, earth_orbit)
        expected = force.force.value / 1e10 * (0.9**2 + 0.1**2 + 0.01**2) ** 0.5
        assert force.total_acceleration.value == pytest.approx(expected)

    def test_concentration_capped(self, target, earth_orbit):
        mirror = create_flat_solar_sail(1e6)
        force = calculate_radiation_force("concentrated_sunlight", mirror, target, earth_orbit)
        area = target.cross_sectional_area.value
        assert force.force.value == pytest.approx(1361.0 * area * 10.0 * 0.88 / SPEED_OF_LIGHT_M_S)

    @pytest.mark.parametrize(
        "method, factor",
        [("surface_modification", 0.5), ("albedo_modification", 0.3)],
    )
    def test_surface_methods_use_target_area(self, sail, target, earth_orbit, method, factor):
        force = calculate_radiation_force(method, sail, target, earth_orbit)
        area = target.cross_sectional_area.value
        assert force.force.value == pytest.approx(1361.0 * area * factor / SPEED_OF_LIGHT_M_S)

    def test_overall_efficiency(self, sail, target, earth_orbit):
        force = calculate_radiation_force("albedo_modification", sail, target, earth_orbit)
        assert force.overall_efficiency.value == pytest.approx(0.3 * 0.3 * 0.85)

    def test_unknown_method(self, sail, target, earth_orbit):
        with pytest.raises(UnknownKeyError, match="Unknown solar deflection method: tractor_beam"):
            calculate_radiation_force("tractor_beam", sail, target, earth_orbit)


class TestSolarDeflection:
    """Test mission-level results."""

    def test_delta_v_grows_with_duration(self, sail, target, earth_orbit):
        one = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(1.0))
        two = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(2.0))
        assert two.delta_v.value == pytest.approx(2.0 * one.delta_v.value)
        assert two.delta_v_rate.value == pytest.approx(one.delta_v_rate.value)
        assert one.within_validity_range

    def test_system_mass_and_efficiency(self, sail, target, earth_orbit):
        result = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(5.0))
        assert result.total_system_mass.value == pytest.approx(15.0)
        assert result.deflection_efficiency.value == pytest.approx(result.delta_v.value * 1000.0 / 15.0)
        assert result.power_requirement.value == 100
        assert result.mission_feasibility.value == 1.0

    def test_element_changes(self, sail, target, earth_orbit):
        result = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(5.0))
        changes = result.orbital_element_changes
        assert changes.semi_major_axis.value == pytest.approx(result.delta_v.value * 1e8)
        assert changes.eccentricity.value == pytest.approx(result.force.radial_acceleration.value * 1e-6)

    def test_seasonal_ordering(self, sail, target, earth_orbit):
        seasonal = calculate_solar_deflection(
            "solar_sail", sail, target, earth_orbit, create_typical_mission(5.0)
        ).seasonal_variations
        assert seasonal.max_deflection.value > seasonal.average_deflection.value > seasonal.min_deflection.value

    def test_mission_beyond_lifetime_invalid(self, sail, target, earth_orbit):
        result = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(12.0))
        assert not result.within_validity_range
        assert any("operational lifetime" in w for w in result.warnings)
        assert result.mission_feasibility.value == pytest.approx(0.8)

    def test_huge_sail_invalid(self, target, earth_orbit):
        big = create_flat_solar_sail(2e5)
        result = calculate_solar_deflection("solar_sail", big, target, earth_orbit, create_typical_mission(5.0))
        assert not result.within_validity_range
        assert result.mission_feasibility.value == pytest.approx(0.7)

    def test_far_from_sun_warns(self, sail, target):
        result = calculate_solar_deflection(
            "solar_sail", sail, target, create_solar_environment(6.0), create_typical_mission(5.0)
        )
        assert any("Large solar distance" in w for w in result.warnings)
        assert result.within_validity_range

    def test_large_target_surface_method_warns(self, sail, earth_orbit):
        big = create_solar_target(1e13, 2000.0, 0.15)
        result = calculate_solar_deflection(
            SolarMethod.SURFACE_MODIFICATION, sail, big, earth_orbit, create_typical_mission(5.0)
        )
        assert any("surface modification" in w for w in result.warnings)

    def test_optical_sum_warning(self, target, earth_orbit):
        odd = SolarSail(
            area=UncertaintyValue(1000.0, 100.0, "m²"),
            mass=UncertaintyValue(10.0, 2.0, "kg"),
            spec=replace(get_sail_specification("flat"), reflectivity=UncertaintyValue(0.5, 0.02)),
        )
        result = calculate_solar_deflection("solar_sail", odd, target, earth_orbit, create_typical_mission(5.0))
        assert any("Optical properties sum" in w for w in result.warnings)

    def test_zero_duration_invalid(self, sail, target, earth_orbit):
        result = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(0.0))
        assert not result.within_validity_range
        assert any("Mission duration (0) must be positive" in w for w in result.warnings)
        assert result.delta_v.value == 0.0
        assert math.isnan(result.delta_v_rate.value)

    def test_zero_mass_target_invalid(self, sail, earth_orbit):
        weightless = create_solar_target(0.0, 100.0, 0.15)
        result = calculate_solar_deflection("solar_sail", sail, weightless, earth_orbit, create_typical_mission(5.0))
        assert not result.within_validity_range
        assert result.force.radial_acceleration.value == math.inf
        assert result.delta_v.value == math.inf

    def test_massless_sail_invalid(self, target, earth_orbit):
        sail = create_flat_solar_sail(0.0)
        result = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(5.0))
        assert not result.within_validity_range
        assert any("Sail mass (0) must be positive" in w for w in result.warnings)
        assert math.isnan(result.deflection_efficiency.value)

    def test_to_dict(self, sail, target, earth_orbit):
        d = calculate_solar_deflection("solar_sail", sail, target, earth_orbit, create_typical_mission(5.0)).to_dict()
        assert d["method"] == "solar_sail"
        assert "radial_force_n" in d["force"]
        assert len(d["references"]) == 4


class TestFactories:
    def test_inverse_square_flux(self):
        env = create_solar_environment(2.0)
        assert env.solar_flux.value == pytest.approx(1361.0 / 4.0)

    def test_unknown_environment(self):
        with pytest.raises(UnknownKeyError):
            get_solar_environment("10_AU")

    def test_unknown_sail_type(self):
        with pytest.raises(UnknownKeyError, match="solar sail type"):
            get_sail_specification("inflatable")

    def test_sail_lifetime_in_seconds(self):
        assert get_sail_specification("parabolic").operational_lifetime.value == pytest.approx(15 * 31557600.0)
