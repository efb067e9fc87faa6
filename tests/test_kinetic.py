"""Tests for kinetic impactor deflection."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from neoguard.core.uncertainty import UncertaintyValue
from neoguard.deflection.kinetic import (
    ImpactGeometry,
    calculate_momentum_transfer,
    create_dart_like_mission,
    create_head_on_impact,
    create_typical_spacecraft,
    get_material_properties,
    optimize_spacecraft,
)
from neoguard.utils.lookup import UnknownKeyError


DIMORPHOS_MASS = UncertaintyValue(4.3e9, 0.5e9, "kg", "DART team", "Dimorphos mass")


@pytest.fixture
def geometry():
    return create_head_on_impact(75.0)


@pytest.fixture
def dart(geometry):
    return calculate_momentum_transfer(create_dart_like_mission(), "rocky", geometry, DIMORPHOS_MASS)


class TestMomentumTransfer:
    """Test the momentum budget of a single impact."""

    def test_dart_momentum(self, dart):
        direct = 610.0 * 6140.0
        assert dart.direct_momentum.value == pytest.approx(direct)
        assert dart.ejecta_momentum.value == pytest.approx(direct)
        assert dart.total_momentum.value == pytest.approx(2.0 * direct)

    def test_dart_delta_v(self, dart):
        assert dart.delta_v.value == pytest.approx(2.0 * 610.0 * 6140.0 / 4.3e9)
        assert dart.delta_v.uncertainty > 0
        assert dart.within_validity_range
        assert dart.warnings == []

    def test_beta_matches_composition(self, geometry):
        impactor = create_typical_spacecraft(500.0, 10000.0)
        for composition, beta in (("rocky", 2.0), ("metallic", 1.5), ("carbonaceous", 3.0)):
            result = calculate_momentum_transfer(impactor, composition, geometry, DIMORPHOS_MASS)
            assert result.beta.value == pytest.approx(beta)

    def test_energy_scaling(self, geometry):
        base = calculate_momentum_transfer(create_typical_spacecraft(500.0, 6000.0), "rocky", geometry, DIMORPHOS_MASS)
        fast = calculate_momentum_transfer(create_typical_spacecraft(500.0, 12000.0), "rocky", geometry, DIMORPHOS_MASS)
        heavy = calculate_momentum_transfer(create_typical_spacecraft(1000.0, 6000.0), "rocky", geometry, DIMORPHOS_MASS)
        assert fast.impact_energy.value == pytest.approx(4.0 * base.impact_energy.value)
        assert heavy.impact_energy.value == pytest.approx(2.0 * base.impact_energy.value)
        assert fast.delta_v.value == pytest.approx(2.0 * base.delta_v.value)

    def test_oblique_impact_reduces_momentum(self):
        head_on = create_head_on_impact(75.0)
        oblique = ImpactGeometry(UncertaintyValue(math.radians(70.0), 0.05, "rad"), head_on.target_radius)
        impactor = create_dart_like_mission()
        straight = calculate_momentum_transfer(impactor, "rocky", head_on, DIMORPHOS_MASS)
        angled = calculate_momentum_transfer(impactor, "rocky", oblique, DIMORPHOS_MASS)
        assert angled.delta_v.value == pytest.approx(straight.delta_v.value * math.cos(math.radians(70.0)))
        assert any("oblique" in w for w in angled.warnings)
        assert angled.within_validity_range

    def test_specific_energy(self, dart):
        assert dart.specific_energy.value == pytest.approx(dart.impact_energy.value / 4.3e9)

    def test_ejecta_crater(self, dart):
        crater = dart.crater
        assert crater.diameter.value > 0
        assert crater.depth.value == pytest.approx(crater.diameter.value / 7.0)
        assert crater.ejecta_mass.value > 0
        assert crater.ejecta_velocity.value > 0

    def test_slow_impactor_out_of_range(self, geometry):
        result = calculate_momentum_transfer(create_typical_spacecraft(500.0, 500.0), "rocky", geometry, DIMORPHOS_MASS)
        assert not result.within_validity_range
        assert any("below validated range" in w for w in result.warnings)
        assert result.delta_v.value > 0

    def test_heavy_impactor_out_of_range(self, geometry):
        result = calculate_momentum_transfer(create_typical_spacecraft(2e6, 6000.0), "rocky", geometry, DIMORPHOS_MASS)
        assert not result.within_validity_range

    def test_porous_target_warns(self, geometry):
        porous = replace(get_material_properties("carbonaceous"), porosity=UncertaintyValue(0.6, 0.1))
        result = calculate_momentum_transfer(create_dart_like_mission(), porous, geometry, DIMORPHOS_MASS)
        assert any("porosity" in w for w in result.warnings)
        assert result.within_validity_range

    def test_unknown_composition(self, geometry):
        with pytest.raises(UnknownKeyError, match="Unknown asteroid composition: icy"):
            calculate_momentum_transfer(create_dart_like_mission(), "icy", geometry, DIMORPHOS_MASS)

    def test_untabulated_beta(self, geometry):
        mixed = replace(get_material_properties("rocky"), composition="mixed")
        with pytest.raises(UnknownKeyError, match="momentum transfer"):
            calculate_momentum_transfer(create_dart_like_mission(), mixed, geometry, DIMORPHOS_MASS)

    def test_to_dict(self, dart):
        d = dart.to_dict()
        assert d["beta"]["value"] == pytest.approx(2.0)
        assert d["within_validity_range"] is True
        assert len(d["references"]) == 3


class TestSpacecraftOptimization:
    """Test the mass/velocity grid search."""

    def test_optimum_at_ceiling(self, geometry):
        result = optimize_spacecraft("rocky", geometry, DIMORPHOS_MASS, 1000.0, 10000.0)
        assert result.optimal_mass.value == pytest.approx(1000.0)
        assert result.optimal_velocity.value == pytest.approx(10000.0)
        assert result.max_delta_v.value == pytest.approx(2.0 * 1000.0 * 10000.0 / 4.3e9)

    def test_launch_capability_caps_mass(self, geometry):
        result = optimize_spacecraft("rocky", geometry, DIMORPHOS_MASS, 1000.0, 10000.0, launch_capability_kg=500.0)
        assert result.optimal_mass.value == pytest.approx(500.0)

    def test_mission_estimates(self, geometry):
        result = optimize_spacecraft("rocky", geometry, DIMORPHOS_MASS, 1000.0, 10000.0)
        assert result.cost_estimate.value == pytest.approx(510e6)
        assert result.launch_energy.value == pytest.approx(0.5 * 1000.0 * 10000.0**2)
        assert result.to_dict()["mission_duration_s"]["value"] == pytest.approx(31557600.0)

    def test_mass_ceiling_too_low(self, geometry):
        with pytest.raises(ValueError, match="Mass ceiling"):
            optimize_spacecraft("rocky", geometry, DIMORPHOS_MASS, 50.0, 10000.0)

    def test_velocity_ceiling_too_low(self, geometry):
        with pytest.raises(ValueError, match="Velocity ceiling"):
            optimize_spacecraft("rocky", geometry, DIMORPHOS_MASS, 1000.0, 1000.0)
