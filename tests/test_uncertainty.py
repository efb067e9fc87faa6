"""Tests for uncertainty values and their propagation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from neoguard.core.uncertainty import (
    Distribution,
    UncertaintyValue,
    Variable,
    add,
    divide,
    monte_carlo,
    multiply,
    power,
    propagate_linear,
    propagate_nonlinear,
    scale,
    sqrt,
)


class TestUncertaintyValue:
    """Test the value container."""

    def test_negative_uncertainty_stored_as_magnitude(self):
        assert UncertaintyValue(1.0, -0.5).uncertainty == 0.5

    def test_undefined_uncertainty_stored_as_infinite(self):
        assert UncertaintyValue(1.0, math.nan).uncertainty == math.inf

    def test_relative_uncertainty(self):
        uv = UncertaintyValue(200.0, 10.0, "m")
        assert uv.relative_uncertainty == pytest.approx(0.05)

    def test_relative_uncertainty_of_zero_value(self):
        assert UncertaintyValue(0.0, 1.0).relative_uncertainty == 0.0

    def test_from_relative(self):
        uv = UncertaintyValue.from_relative(-50.0, 0.1, "kg")
        assert uv.value == -50.0
        assert uv.uncertainty == pytest.approx(5.0)

    def test_bounds(self):
        assert UncertaintyValue(10.0, 2.0).bounds == (8.0, 12.0)

    def test_to_dict(self):
        d = UncertaintyValue(1.5, 0.1, "m", "measured", "length").to_dict()
        assert d == {"value": 1.5, "uncertainty": 0.1, "unit": "m", "source": "measured", "description": "length"}


class TestLinearPropagation:
    """Test Σ cᵢ·xᵢ propagation."""

    def test_zero_uncertainty_inputs_give_zero(self):
        """Exact inputs propagate to an exact output."""
        variables = [
            Variable("a", UncertaintyValue.exact(3.0)),
            Variable("b", UncertaintyValue.exact(4.0)),
        ]
        result = propagate_linear(variables, {"a": 2.0, "b": -1.0})
        assert result.value == pytest.approx(2.0)
        assert result.uncertainty == 0.0

    def test_quadrature_sum(self):
        variables = [
            Variable("a", UncertaintyValue(1.0, 3.0)),
            Variable("b", UncertaintyValue(1.0, 4.0)),
        ]
        result = propagate_linear(variables, {"a": 1.0, "b": 1.0})
        assert result.uncertainty == pytest.approx(5.0)

    def test_full_positive_correlation_adds_linearly(self):
        variables = [
            Variable("a", UncertaintyValue(1.0, 3.0)),
            Variable("b", UncertaintyValue(1.0, 4.0)),
        ]
        result = propagate_linear(variables, {"a": 1.0, "b": 1.0}, {("a", "b"): 1.0})
        assert result.uncertainty == pytest.approx(7.0)

    def test_contributing_factors_sorted(self):
        variables = [
            Variable("small", UncertaintyValue(1.0, 1.0)),
            Variable("large", UncertaintyValue(1.0, 10.0)),
        ]
        result = propagate_linear(variables, {"small": 1.0, "large": 1.0})
        assert result.contributing_factors[0].name == "large"
        assert sum(f.percentage for f in result.contributing_factors) == pytest.approx(100.0)

    def test_empty_variables_rejected(self):
        with pytest.raises(ValueError, match="At least one variable"):
            propagate_linear([], {})


class TestNonlinearPropagation:
    """Test finite-difference propagation."""

    def test_product_matches_closed_form(self):
        a = UncertaintyValue(10.0, 1.0)
        b = UncertaintyValue(5.0, 0.5)
        result = propagate_nonlinear(
            [Variable("a", a), Variable("b", b)], lambda x: x["a"] * x["b"]
        )
        assert result.value == pytest.approx(50.0)
        assert result.uncertainty == pytest.approx(multiply(a, b).uncertainty, rel=1e-5)

    def test_partials(self):
        result = propagate_nonlinear(
            [Variable("x", UncertaintyValue(2.0, 0.1))], lambda v: v["x"] ** 3
        )
        assert result.partials["x"] == pytest.approx(12.0, rel=1e-5)
        assert result.uncertainty == pytest.approx(1.2, rel=1e-5)

    def test_exact_variable_not_perturbed(self):
        calls = []

        def f(x):
            calls.append(dict(x))
            return x["a"] + x["b"]

        propagate_nonlinear(
            [Variable("a", UncertaintyValue(1.0, 0.1)), Variable("b", UncertaintyValue.exact(2.0))], f
        )
        # Nominal plus two evaluations for the uncertain input only
        assert len(calls) == 3
        assert all(c["b"] == 2.0 for c in calls)

    def test_tiny_constant_not_stepped_past_zero(self):
        g = UncertaintyValue(6.6743e-11, 1.5e-15)
        result = propagate_nonlinear([Variable("g", g)], lambda x: math.sqrt(x["g"]))
        assert math.isfinite(result.uncertainty)
        assert result.uncertainty > 0

    def test_fractional_power_at_zero_uses_one_sided_difference(self):
        result = propagate_nonlinear(
            [Variable("yield", UncertaintyValue(0.0, 1e-3))], lambda x: x["yield"] ** 1.5
        )
        assert result.value == 0.0
        assert math.isfinite(result.partials["yield"])
        assert result.partials["yield"] == pytest.approx(0.0, abs=1e-3)

    def test_negative_base_fractional_power_is_nan(self):
        result = propagate_nonlinear(
            [Variable("yield", UncertaintyValue(-1e3, 10.0))], lambda x: x["yield"] ** 0.44
        )
        assert math.isnan(result.value)
        assert result.uncertainty == math.inf

    def test_log_of_zero_is_nan(self):
        result = propagate_nonlinear(
            [Variable("energy", UncertaintyValue.exact(0.0))], lambda x: math.log10(x["energy"])
        )
        assert math.isnan(result.value)
        assert result.uncertainty == 0.0

    def test_overflow_is_infinite(self):
        result = propagate_nonlinear([Variable("x", UncertaintyValue(400.0, 1.0))], lambda x: 10 ** x["x"])
        assert result.value == math.inf
        assert result.uncertainty == math.inf


class TestMonteCarlo:
    """Test sampling propagation."""

    def test_linear_function_mean_and_std(self):
        result = monte_carlo(
            [Variable("x", UncertaintyValue(10.0, 1.0))],
            lambda v: 2.0 * v["x"],
            samples=20000,
            seed=42,
        )
        assert result.mean == pytest.approx(20.0, abs=0.05)
        assert result.std == pytest.approx(2.0, rel=0.03)
        assert result.percentiles[5] < result.percentiles[50] < result.percentiles[95]

    def test_uniform_distribution_width(self):
        result = monte_carlo(
            [Variable("x", UncertaintyValue(0.0, 1.0), Distribution.UNIFORM)],
            lambda v: v["x"],
            samples=20000,
            seed=1,
        )
        assert result.std == pytest.approx(1.0, rel=0.03)

    def test_lognormal_requires_positive_value(self):
        with pytest.raises(ValueError, match="Lognormal"):
            monte_carlo(
                [Variable("x", UncertaintyValue(-1.0, 0.1), Distribution.LOGNORMAL)],
                lambda v: v["x"],
                samples=100,
            )

    def test_too_few_samples(self):
        with pytest.raises(ValueError, match="at least 100"):
            monte_carlo([Variable("x", UncertaintyValue(1.0, 0.1))], lambda v: v["x"], samples=10)

    def test_reproducible_with_seed(self):
        variables = [Variable("x", UncertaintyValue(1.0, 0.1))]
        a = monte_carlo(variables, lambda v: v["x"] ** 2, samples=500, seed=7)
        b = monte_carlo(variables, lambda v: v["x"] ** 2, samples=500, seed=7)
        assert a.mean == b.mean


class TestClosedFormHelpers:
    """Test arithmetic on independent values."""

    def test_add(self):
        result = add(UncertaintyValue(1.0, 0.3, "m"), UncertaintyValue(2.0, 0.4, "m"))
        assert result.value == 3.0
        assert result.uncertainty == pytest.approx(0.5)
        assert result.unit == "m"

    def test_multiply_with_zero_factor_keeps_other_term(self):
        result = multiply(UncertaintyValue(0.0, 0.1), UncertaintyValue(10.0, 1.0))
        assert result.value == 0.0
        assert result.uncertainty == pytest.approx(1.0)

    def test_divide(self):
        result = divide(UncertaintyValue(10.0, 1.0), UncertaintyValue(2.0, 0.0))
        assert result.value == 5.0
        assert result.uncertainty == pytest.approx(0.5)

    def test_divide_by_zero(self):
        result = divide(UncertaintyValue(1.0, 0.1), UncertaintyValue(0.0, 0.1))
        assert result.value == math.inf
        assert result.uncertainty == math.inf

    def test_divide_zero_by_zero(self):
        assert math.isnan(divide(UncertaintyValue(0.0), UncertaintyValue(0.0)).value)

    def test_divide_negative_by_zero(self):
        assert divide(UncertaintyValue(-2.0), UncertaintyValue(0.0)).value == -math.inf

    def test_power(self):
        result = power(UncertaintyValue(2.0, 0.02), 3)
        assert result.value == pytest.approx(8.0)
        assert result.uncertainty == pytest.approx(8.0 * 3 * 0.01)

    def test_sqrt_negative(self):
        result = sqrt(UncertaintyValue(-4.0, 0.1))
        assert math.isnan(result.value)
        assert result.uncertainty == math.inf

    def test_fractional_power_of_negative(self):
        result = power(UncertaintyValue(-8.0, 0.1), 1.0 / 3.0)
        assert math.isnan(result.value)

    def test_negative_power_of_zero(self):
        result = power(UncertaintyValue(0.0), -1.0)
        assert result.value == math.inf
        assert result.uncertainty == 0.0

    def test_scale(self):
        result = scale(UncertaintyValue(2.0, 0.5, "Mt TNT"), -4.184e15, "J")
        np.testing.assert_allclose([result.value, result.uncertainty], [-8.368e15, 2.092e15])
        assert result.unit == "J"
