"""Tests for close-approach search and MOID."""

from __future__ import annotations

import math

import numpy as np
import pytest

from neoguard.core.approaches import (
    EARTH_ORBIT,
    CloseApproachResult,
    calculate_moid,
    classify_approach,
    create_uncertain_orbital_elements,
    estimate_impact_energy,
    find_close_approaches,
    gravitational_focusing_factor,
    torino_scale,
)
from neoguard.core.ephemeris import CoordinateFrame, JulianDate, TimeScale
from neoguard.utils.constants import AU_KM, EARTH_RADIUS_KM, J2000_JD, LUNAR_DISTANCE_KM


EPOCH = JulianDate(J2000_JD, TimeScale.TDB)


def make_elements(a, e, i_deg=0.0, raan_deg=0.0, argp_deg=0.0, m_deg=0.0, **kwargs):
    return create_uncertain_orbital_elements(a, e, i_deg, raan_deg, argp_deg, m_deg, EPOCH, **kwargs)


@pytest.fixture(scope="module")
def earth_crosser():
    """Coplanar orbit with perihelion just inside 1 AU."""
    return make_elements(1.2, 0.2, uncertainties={"semi_major_axis": 1e-6, "eccentricity": 1e-6})


@pytest.fixture(scope="module")
def decade_of_approaches(earth_crosser):
    return find_close_approaches(earth_crosser, EPOCH, EPOCH.add_days(3652.5), max_distance_au=0.5)


class TestCloseApproaches:
    """Test the time scan."""

    def test_finds_approaches(self, decade_of_approaches):
        assert len(decade_of_approaches) >= 1
        assert all(isinstance(a, CloseApproachResult) for a in decade_of_approaches)

    def test_within_threshold_and_window(self, decade_of_approaches):
        for approach in decade_of_approaches:
            assert approach.distance.value <= 0.5 * AU_KM
            assert EPOCH.jd <= approach.date.jd <= EPOCH.jd + 3652.5

    def test_time_ordered(self, decade_of_approaches):
        dates = [a.date.jd for a in decade_of_approaches]
        assert dates == sorted(dates)

    def test_moid_bounds_every_approach(self, earth_crosser, decade_of_approaches):
        """No approach can be closer than the orbits ever come."""
        moid = calculate_moid(earth_crosser).moid.value
        closest = min(a.distance.value for a in decade_of_approaches) / AU_KM
        assert moid <= closest + 0.01

    def test_refined_minimum_is_local_minimum(self, earth_crosser, decade_of_approaches):
        approach = decade_of_approaches[0]
        nearby = find_close_approaches(
            earth_crosser, approach.date.add_days(-0.5), approach.date.add_days(0.5), max_distance_au=0.5, step_days=0.1
        )
        assert len(nearby) == 1
        assert nearby[0].date.jd == pytest.approx(approach.date.jd, abs=1e-3)

    def test_relative_geometry(self, decade_of_approaches):
        approach = decade_of_approaches[0]
        np.testing.assert_allclose(
            approach.relative_position.as_array(),
            approach.asteroid_position.as_array() - approach.earth_position.as_array(),
        )
        assert approach.relative_position.magnitude == pytest.approx(approach.distance.value)
        assert approach.relative_velocity.value > 0

    def test_uncertainty_from_elements(self, decade_of_approaches):
        approach = decade_of_approaches[0]
        rel = 1e-6 / 0.2
        assert approach.distance.uncertainty == pytest.approx(approach.distance.value * rel)

    def test_to_dict(self, decade_of_approaches):
        d = decade_of_approaches[0].to_dict()
        assert d["time_scale"] == "TDB"
        assert d["classification"] in ("Close", "Moderate", "Distant")

    def test_covariance_sigma(self):
        elements = make_elements(1.2, 0.2, covariance=np.eye(6) * 1e-12)
        approaches = find_close_approaches(elements, EPOCH, EPOCH.add_days(3652.5), max_distance_au=0.5)
        assert approaches[0].distance.uncertainty > 0

    def test_bad_covariance_shape(self):
        elements = make_elements(1.2, 0.2, covariance=np.eye(3))
        with pytest.raises(ValueError, match="6x6"):
            find_close_approaches(elements, EPOCH, EPOCH.add_days(3652.5), max_distance_au=0.5)

    def test_equatorial_elements_accepted(self):
        elements = make_elements(1.2, 0.2, frame=CoordinateFrame.J2000_EQUATORIAL)
        approaches = find_close_approaches(elements, EPOCH, EPOCH.add_days(1000.0), max_distance_au=1.0)
        assert all(a.asteroid_position.frame == CoordinateFrame.J2000_EQUATORIAL for a in approaches)

    def test_rejects_non_heliocentric_frame(self):
        elements = make_elements(1.2, 0.2, frame=CoordinateFrame.EARTH_FIXED)
        with pytest.raises(ValueError, match="Heliocentric J2000"):
            find_close_approaches(elements, EPOCH, EPOCH.add_days(10.0))

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            (dict(max_distance_au=0.0), "Maximum distance must be positive"),
            (dict(step_days=-1.0), "Time step must be positive"),
        ],
    )
    def test_invalid_arguments(self, earth_crosser, kwargs, message):
        with pytest.raises(ValueError, match=message):
            find_close_approaches(earth_crosser, EPOCH, EPOCH.add_days(10.0), **kwargs)

    def test_empty_window(self, earth_crosser):
        with pytest.raises(ValueError, match="End date must be after start date"):
            find_close_approaches(earth_crosser, EPOCH, EPOCH)

    def test_end_date_converted_to_start_time_scale(self, earth_crosser):
        start = JulianDate(J2000_JD, TimeScale.TT)
        # Numerically earlier, but about 20 s after the start once expressed in TT
        end = JulianDate(J2000_JD - 0.0005, TimeScale.UTC)
        assert find_close_approaches(earth_crosser, start, end) == []

    def test_end_date_before_start_across_time_scales(self, earth_crosser):
        start = JulianDate(J2000_JD, TimeScale.UTC)
        end = JulianDate(J2000_JD + 0.0005, TimeScale.TT)
        with pytest.raises(ValueError, match="End date must be after start date"):
            find_close_approaches(earth_crosser, start, end)


class TestMOID:
    """Test the minimum orbital intersection distance."""

    def test_more_eccentric_orbit_gets_closer(self):
        """Perihelion 1.2 AU stays clear; perihelion 0.75 AU crosses Earth's orbit."""
        far = calculate_moid(make_elements(1.5, 0.2))
        near = calculate_moid(make_elements(1.5, 0.5))
        assert far.moid.value > near.moid.value
        assert far.moid.value == pytest.approx(0.2, abs=0.02)
        assert near.moid.value < 1e-3

    def test_earth_orbit_against_itself(self):
        earth = EARTH_ORBIT
        elements = make_elements(
            earth.semi_major_axis_au, earth.eccentricity, 0.0, 0.0, math.degrees(earth.arg_periapsis)
        )
        result = calculate_moid(elements)
        assert result.moid.value < 1e-6
        assert result.converged

    def test_inclined_orbit_clears_earth(self):
        result = calculate_moid(make_elements(1.0, 0.0, i_deg=90.0, raan_deg=0.0))
        # Circular polar orbit of radius 1 AU meets the ecliptic at two nodes on Earth's path
        assert result.moid.value < 0.02

    def test_positions_match_moid(self):
        result = calculate_moid(make_elements(1.5, 0.2, i_deg=10.0, raan_deg=40.0, argp_deg=70.0))
        separation = result.asteroid_position.as_array() - result.earth_position.as_array()
        assert np.linalg.norm(separation) == pytest.approx(result.moid.value, rel=1e-9)

    def test_parabolic_orbit(self):
        result = calculate_moid(make_elements(0.5, 1.0))
        assert result.moid.value < 1e-3

    def test_hyperbolic_orbit(self):
        result = calculate_moid(make_elements(-1.0, 2.0))
        assert math.isfinite(result.moid.value)
        assert result.moid.value < 0.05

    def test_uncertainty_scales_with_elements(self):
        result = calculate_moid(make_elements(1.5, 0.2, uncertainties={"semi_major_axis": 0.015}))
        assert result.moid.uncertainty == pytest.approx(result.moid.value * 0.01)

    def test_invalid_resolution(self):
        with pytest.raises(ValueError, match="resolution"):
            calculate_moid(make_elements(1.5, 0.2), resolution_deg=0.0)

    def test_to_dict_reports_km(self):
        d = calculate_moid(make_elements(1.5, 0.2)).to_dict()
        assert d["moid_km"] == pytest.approx(d["moid_au"]["value"] * AU_KM)


class TestUtilities:
    """Test classification and scales."""

    @pytest.mark.parametrize(
        "distance_km, label",
        [
            (0.5 * EARTH_RADIUS_KM, "Impact"),
            (5 * EARTH_RADIUS_KM, "Extremely Close"),
            (0.5 * LUNAR_DISTANCE_KM, "Very Close"),
            (5 * LUNAR_DISTANCE_KM, "Close"),
            (50 * LUNAR_DISTANCE_KM, "Moderate"),
            (500 * LUNAR_DISTANCE_KM, "Distant"),
        ],
    )
    def test_classify(self, distance_km, label):
        assert classify_approach(distance_km) == label

    def test_torino_zero_for_no_threat(self):
        assert torino_scale(0.0, 1e6) == 0
        assert torino_scale(0.5, 0.0) == 0

    def test_torino_clamped(self):
        assert torino_scale(1.0, 1e8) == 1
        assert torino_scale(1.0, 1e30) == 10

    def test_impact_energy(self):
        assert estimate_impact_energy(1.0, 20.0) == pytest.approx(5.005e4, rel=1e-3)

    @pytest.mark.parametrize("diameter_km, velocity_km_s", [(0.05, 12.0), (0.3, 17.0), (1.0, 20.0), (10.0, 30.0)])
    def test_impact_energy_scaling(self, diameter_km, velocity_km_s):
        base = estimate_impact_energy(diameter_km, velocity_km_s)
        assert estimate_impact_energy(2 * diameter_km, velocity_km_s) == pytest.approx(8.0 * base)
        assert estimate_impact_energy(diameter_km, 2 * velocity_km_s) == pytest.approx(4.0 * base)
        assert estimate_impact_energy(diameter_km, velocity_km_s, 4000.0) == pytest.approx(2.0 * base)

    def test_focusing_factor(self):
        assert gravitational_focusing_factor(11.18) == pytest.approx(2.0, rel=0.01)
        assert gravitational_focusing_factor(1000.0) == pytest.approx(1.0, abs=1e-3)
        with pytest.raises(ValueError):
            gravitational_focusing_factor(0.0)

    def test_unknown_uncertainty_key(self):
        with pytest.raises(ValueError, match="Unknown orbital element"):
            make_elements(1.0, 0.1, uncertainties={"period": 1.0})

    def test_angles_converted_to_radians(self):
        elements = make_elements(1.0, 0.1, i_deg=90.0, uncertainties={"inclination": 1.0})
        assert elements.inclination.value == pytest.approx(math.pi / 2)
        assert elements.inclination.uncertainty == pytest.approx(math.radians(1.0))
