"""Tests for perturbing accelerations and orbit propagation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from neoguard.core.perturbations import (
    OrbitState,
    PerturbationConfig,
    PerturbationType,
    compute_perturbations,
    create_perturbation_config,
    drag_acceleration,
    j2_acceleration,
    moon_position_geocentric,
    propagate_orbit,
    radiation_pressure_acceleration,
    relativistic_acceleration,
    significant_perturbations,
    sun_position_geocentric,
    third_body_acceleration,
)
from neoguard.utils.constants import AU_KM, EARTH_MU_KM3_S2, EARTH_RADIUS_KM, J2000_JD


LEO_RADIUS_KM = EARTH_RADIUS_KM + 500.0


@pytest.fixture
def leo_state() -> OrbitState:
    """Circular equatorial orbit at 500 km."""
    v = math.sqrt(EARTH_MU_KM3_S2 / LEO_RADIUS_KM)
    return OrbitState(np.array([LEO_RADIUS_KM, 0.0, 0.0]), np.array([0.0, v, 0.0]), J2000_JD)


class TestContributors:
    """Test each acceleration term."""

    def test_j2_equatorial_points_inward(self):
        acc = j2_acceleration(np.array([LEO_RADIUS_KM, 0.0, 0.0]))
        assert acc.acceleration[0] < 0
        assert acc.acceleration[2] == 0.0
        assert acc.magnitude == pytest.approx(
            1.5 * 1.0826267e-3 * EARTH_MU_KM3_S2 * EARTH_RADIUS_KM**2 / LEO_RADIUS_KM**4, rel=1e-12
        )

    def test_j2_over_pole_points_outward_along_z(self):
        acc = j2_acceleration(np.array([0.0, 0.0, LEO_RADIUS_KM]))
        assert acc.acceleration[2] > 0

    def test_third_body_vanishes_at_origin(self):
        body = np.array([384400.0, 0.0, 0.0])
        acc = third_body_acceleration(np.zeros(3), body, 4902.8, PerturbationType.LUNAR_GRAVITY)
        np.testing.assert_allclose(acc.acceleration, 0.0, atol=1e-20)

    def test_third_body_tidal_stretch(self):
        """A satellite between Earth and the Moon is pulled toward the Moon."""
        body = np.array([384400.0, 0.0, 0.0])
        acc = third_body_acceleration(np.array([7000.0, 0.0, 0.0]), body, 4902.8, PerturbationType.LUNAR_GRAVITY)
        assert acc.acceleration[0] > 0
        assert acc.description.startswith("Lunar")

    def test_relativistic_is_tiny(self, leo_state):
        acc = relativistic_acceleration(leo_state.position_km, leo_state.velocity_km_s)
        assert 0 < acc.magnitude < 1e-10

    def test_radiation_pressure_at_one_au(self):
        sun = np.array([-AU_KM, 0.0, 0.0])
        acc = radiation_pressure_acceleration(np.zeros(3), sun, mass_kg=1000.0, area_m2=10.0, reflectivity=0.0)
        assert acc.acceleration[0] > 0
        assert acc.magnitude == pytest.approx(4.56e-6 * 10.0 / 1000.0 * 1e-3, rel=1e-9)

    def test_drag_above_cutoff_is_zero(self):
        acc = drag_acceleration(np.array([EARTH_RADIUS_KM + 2000.0, 0.0, 0.0]), np.array([0.0, 7.0, 0.0]), 100.0, 1.0)
        assert acc.magnitude == 0.0

    def test_drag_opposes_motion(self, leo_state):
        acc = drag_acceleration(leo_state.position_km, leo_state.velocity_km_s, 100.0, 1.0)
        assert acc.acceleration[1] < 0


class TestAggregate:
    """Test the summed perturbation."""

    def test_total_is_vector_sum(self, leo_state):
        result = compute_perturbations(
            leo_state.position_km,
            leo_state.velocity_km_s,
            PerturbationConfig(include_relativistic=True),
            sun_position=sun_position_geocentric(J2000_JD),
            moon_position=moon_position_geocentric(J2000_JD),
        )
        assert len(result.contributions) == 4
        np.testing.assert_allclose(result.total, sum(c.acceleration for c in result.contributions))
        assert result.dominant().type == PerturbationType.J2_OBLATENESS

    def test_third_body_skipped_without_ephemeris(self, leo_state):
        result = compute_perturbations(leo_state.position_km, leo_state.velocity_km_s)
        assert [c.type for c in result.contributions] == [PerturbationType.J2_OBLATENESS]

    def test_radiation_pressure_needs_mass_and_area(self, leo_state):
        config = PerturbationConfig(include_j2=False, include_radiation_pressure=True)
        result = compute_perturbations(
            leo_state.position_km, leo_state.velocity_km_s, config, sun_position=sun_position_geocentric(J2000_JD)
        )
        assert result.contributions == []
        assert result.magnitude == 0.0


class TestEphemerides:
    """Test the simplified Sun and Moon positions."""

    def test_sun_distance(self):
        assert np.linalg.norm(sun_position_geocentric(J2000_JD)) == pytest.approx(AU_KM, rel=0.02)

    def test_sun_in_january_is_south_of_equator(self):
        assert sun_position_geocentric(J2000_JD)[2] < 0

    def test_moon_distance(self):
        r = np.linalg.norm(moon_position_geocentric(J2000_JD + 10.0))
        assert 356000.0 < r < 407000.0


class TestPropagation:
    """Test RK4 and adaptive integration."""

    def test_two_body_energy_conserved(self, leo_state):
        config = PerturbationConfig(include_j2=False, include_lunar=False, include_solar=False)
        states = propagate_orbit(leo_state, 5700.0, 30.0, config)

        def energy(s):
            return 0.5 * s.velocity_km_s @ s.velocity_km_s - EARTH_MU_KM3_S2 / np.linalg.norm(s.position_km)

        assert energy(states[-1]) == pytest.approx(energy(states[0]), rel=1e-7)

    def test_output_grid(self, leo_state):
        states = propagate_orbit(leo_state, 600.0, 60.0)
        assert len(states) == 11
        assert states[-1].jd == pytest.approx(J2000_JD + 600.0 / 86400.0)

    def test_adaptive_matches_rk4(self, leo_state):
        rk4 = propagate_orbit(leo_state, 3000.0, 10.0)
        adaptive = propagate_orbit(leo_state, 3000.0, 10.0, method="adaptive")
        assert len(adaptive) == len(rk4)
        np.testing.assert_allclose(adaptive[-1].position_km, rk4[-1].position_km, atol=1e-3)

    def test_invalid_step(self, leo_state):
        with pytest.raises(ValueError, match="Time step must be positive"):
            propagate_orbit(leo_state, 100.0, 0.0)

    def test_unknown_method(self, leo_state):
        with pytest.raises(ValueError, match="Unknown propagation method"):
            propagate_orbit(leo_state, 100.0, 10.0, method="euler")


class TestPlanning:
    """Test regime recommendations."""

    def test_leo_dominated_by_j2(self):
        assert significant_perturbations(LEO_RADIUS_KM)[0] == PerturbationType.J2_OBLATENESS

    def test_interplanetary_config(self):
        config = create_perturbation_config("interplanetary", mass_kg=500.0, area_m2=5.0)
        assert not config.include_j2
        assert config.include_relativistic
        assert config.include_radiation_pressure

    def test_unknown_regime(self):
        with pytest.raises(ValueError, match="Unknown orbit type"):
            create_perturbation_config("lunar")
