"""Measurement uncertainty and its propagation.

Every physical quantity in the engine is carried as an :class:`UncertaintyValue`
(nominal value, one-sigma uncertainty, unit, provenance). Derived quantities are
computed with one of three propagators:

* :func:`propagate_linear` for linear combinations with known coefficients,
  with optional correlation terms.
* :func:`propagate_nonlinear` for arbitrary functions, first-order, with
  partial derivatives taken by symmetric finite differences.
* :func:`monte_carlo` for strongly nonlinear functions where first-order
  propagation is unreliable.

Products, quotients, sums and powers of independent values have closed-form
helpers (:func:`add`, :func:`multiply`, ...).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping, NamedTuple, Sequence

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


class Distribution(Enum):
    """Probability distribution assumed for an uncertain input."""

    NORMAL = "normal"
    UNIFORM = "uniform"
    TRIANGULAR = "triangular"
    LOGNORMAL = "lognormal"


@dataclass(frozen=True)
class UncertaintyValue:
    """A physical value with its one-sigma uncertainty.

    Attributes:
        value: Nominal value.
        uncertainty: One-sigma absolute uncertainty, always >= 0 (NaN is stored as infinity).
        unit: Unit symbol (see :mod:`neoguard.utils.units`).
        source: Where the number came from.
        description: What the number is.
    """

    value: float
    uncertainty: float = 0.0
    unit: str = "1"
    source: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))
        sigma = abs(float(self.uncertainty))
        # An undefined spread is an unbounded one
        object.__setattr__(self, "uncertainty", math.inf if math.isnan(sigma) else sigma)

    @classmethod
    def from_relative(
        cls,
        value: float,
        relative: float,
        unit: str = "1",
        source: str = "",
        description: str = "",
    ) -> UncertaintyValue:
        """Build a value whose uncertainty is a fraction of its magnitude."""
        return cls(value, abs(value) * relative, unit, source, description)

    @classmethod
    def exact(cls, value: float, unit: str = "1", source: str = "", description: str = "") -> UncertaintyValue:
        """Build a value with zero uncertainty."""
        return cls(value, 0.0, unit, source, description)

    @property
    def relative_uncertainty(self) -> float:
        """Uncertainty divided by ``|value|``; 0 when the value is 0."""
        if self.value == 0.0:
            return 0.0
        return self.uncertainty / abs(self.value)

    @property
    def bounds(self) -> tuple[float, float]:
        """One-sigma interval ``(value - σ, value + σ)``."""
        return self.value - self.uncertainty, self.value + self.uncertainty

    def with_value(self, value: float, uncertainty: float | None = None, **changes: str) -> UncertaintyValue:
        """Return a copy with a new value (and optionally uncertainty, unit, ...)."""
        return UncertaintyValue(
            value=value,
            uncertainty=self.uncertainty if uncertainty is None else uncertainty,
            unit=changes.get("unit", self.unit),
            source=changes.get("source", self.source),
            description=changes.get("description", self.description),
        )

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "uncertainty": self.uncertainty,
            "unit": self.unit,
            "source": self.source,
            "description": self.description,
        }

    def __str__(self) -> str:
        return f"{self.value:.6g} ± {self.uncertainty:.2g} {self.unit}"


class Variable(NamedTuple):
    """A named uncertain input to a propagation."""

    name: str
    value: UncertaintyValue
    distribution: Distribution = Distribution.NORMAL


@dataclass(frozen=True)
class ContributingFactor:
    """Share of the output variance attributable to one input.

    Attributes:
        name: Input variable name.
        contribution: Absolute contribution to the output sigma, ``|∂f/∂x·σx|``.
        percentage: Share of the output variance in percent.
    """

    name: str
    contribution: float
    percentage: float


@dataclass(frozen=True)
class PropagationResult:
    """Outcome of a first-order propagation.

    Attributes:
        value: Function value at the nominal inputs.
        uncertainty: Propagated one-sigma uncertainty.
        partials: Partial derivatives used, keyed by variable name.
        contributing_factors: Per-variable breakdown, largest first.
    """

    value: float
    uncertainty: float
    partials: dict[str, float] = field(default_factory=dict)
    contributing_factors: list[ContributingFactor] = field(default_factory=list)

    def to_uncertainty_value(self, unit: str = "1", source: str = "", description: str = "") -> UncertaintyValue:
        return UncertaintyValue(self.value, self.uncertainty, unit, source, description)


@dataclass(frozen=True)
class MonteCarloResult:
    """Outcome of a Monte Carlo propagation.

    Attributes:
        mean: Sample mean of the output.
        std: Sample standard deviation (ddof=1).
        samples: Number of samples drawn.
        percentiles: 5th, 50th and 95th percentiles of the output.
    """

    mean: float
    std: float
    samples: int
    percentiles: dict[int, float]

    def to_uncertainty_value(self, unit: str = "1", source: str = "Monte Carlo", description: str = "") -> UncertaintyValue:
        return UncertaintyValue(self.mean, self.std, unit, source, description)


def _require_variables(variables: Sequence[Variable]) -> None:
    if not variables:
        raise ValueError("At least one variable is required")


def _variance(
    variables: Sequence[Variable],
    partials: Mapping[str, float],
    correlations: Mapping[tuple[str, str], float] | None,
) -> tuple[float, list[ContributingFactor]]:
    """Accumulate Σ(∂σ)² plus correlated cross terms."""
    terms = {v.name: partials.get(v.name, 0.0) * v.value.uncertainty for v in variables}
    variance = sum(t * t for t in terms.values())

    if correlations:
        for (name_i, name_j), rho in correlations.items():
            if name_i == name_j or name_i not in terms or name_j not in terms:
                continue
            variance += 2.0 * terms[name_i] * terms[name_j] * rho

    factors = []
    for name, term in terms.items():
        share = (term * term / variance * 100.0) if 0.0 < variance < math.inf else 0.0
        factors.append(ContributingFactor(name=name, contribution=abs(term), percentage=share))
    factors.sort(key=lambda f: f.contribution, reverse=True)

    return variance, factors


def propagate_linear(
    variables: Sequence[Variable],
    partials: Mapping[str, float],
    correlations: Mapping[tuple[str, str], float] | None = None,
) -> PropagationResult:
    """Propagate uncertainty through ``f = Σ cᵢ·xᵢ``.

    Args:
        variables: Inputs of the combination.
        partials: Coefficient ``cᵢ = ∂f/∂xᵢ`` per variable name; missing names count as 0.
        correlations: Optional correlation coefficients keyed by ``(name_i, name_j)``.
            Each unordered pair should appear once.

    Returns:
        PropagationResult with value ``Σ cᵢ·xᵢ``.

    Raises:
        ValueError: If ``variables`` is empty.
    """
    _require_variables(variables)

    value = sum(partials.get(v.name, 0.0) * v.value.value for v in variables)
    variance, factors = _variance(variables, partials, correlations)

    return PropagationResult(
        value=value,
        uncertainty=math.sqrt(abs(variance)),
        partials={v.name: partials.get(v.name, 0.0) for v in variables},
        contributing_factors=factors,
    )


def _finite_difference_step(x: float) -> float:
    # Relative step keeps tiny constants (e.g. G) from being stepped past zero.
    return abs(x) * 1e-8 if x != 0.0 else 1e-8


def _evaluate(func: Callable[[Mapping[str, float]], float], point: Mapping[str, float]) -> float:
    """Evaluate ``func`` with IEEE semantics instead of Python's exceptions.

    A math domain error, a division by zero or a complex result (negative
    base under a fractional power) gives NaN; an overflow gives infinity.
    """
    try:
        result = func(point)
    except (ValueError, ZeroDivisionError):
        return math.nan
    except OverflowError:
        return math.inf
    if isinstance(result, complex):
        return math.nan
    return float(result)


def _partial(
    func: Callable[[Mapping[str, float]], float],
    nominal: Mapping[str, float],
    name: str,
    value: float,
) -> float:
    """Symmetric difference, one-sided where a step leaves the function's domain."""
    x = nominal[name]
    h = _finite_difference_step(x)
    upper = _evaluate(func, dict(nominal, **{name: x + h}))
    lower = _evaluate(func, dict(nominal, **{name: x - h}))

    if math.isfinite(upper) and math.isfinite(lower):
        return (upper - lower) / (2.0 * h)
    if not math.isfinite(value):
        return math.nan
    if math.isfinite(upper):
        return (upper - value) / h
    if math.isfinite(lower):
        return (value - lower) / h
    return math.nan


def propagate_nonlinear(
    variables: Sequence[Variable],
    func: Callable[[Mapping[str, float]], float],
    correlations: Mapping[tuple[str, str], float] | None = None,
) -> PropagationResult:
    """First-order propagation through an arbitrary function.

    Partial derivatives are estimated by symmetric finite differences around the
    nominal inputs. Inputs with zero uncertainty are not perturbed, so a
    function of exact inputs returns exactly zero uncertainty. At the edge of
    the function's domain (e.g. a fractional power at zero) the difference is
    taken on the side that stays inside it.

    Out-of-domain inputs never raise: the value comes back as NaN or infinity
    and the uncertainty as infinity.

    Args:
        variables: Named inputs.
        func: Callable taking a mapping of variable name to float.
        correlations: Optional correlation coefficients, as in :func:`propagate_linear`.

    Returns:
        PropagationResult with the function evaluated at the nominal inputs.

    Raises:
        ValueError: If ``variables`` is empty.
    """
    _require_variables(variables)

    nominal = {v.name: v.value.value for v in variables}
    value = _evaluate(func, nominal)

    partials: dict[str, float] = {}
    for v in variables:
        if v.value.uncertainty == 0.0:
            partials[v.name] = 0.0
            continue
        partials[v.name] = _partial(func, nominal, v.name, value)

    variance, factors = _variance(variables, partials, correlations)
    if not math.isfinite(variance):
        logger.debug("Non-finite propagated variance (value=%s)", value)

    return PropagationResult(
        value=value,
        uncertainty=math.sqrt(abs(variance)) if math.isfinite(variance) else math.inf,
        partials=partials,
        contributing_factors=factors,
    )


def _sample(variable: Variable, n: int, rng: np.random.Generator) -> NDArray[np.float64]:
    mu = variable.value.value
    sigma = variable.value.uncertainty

    if sigma == 0.0:
        return np.full(n, mu)

    dist = variable.distribution
    if dist == Distribution.NORMAL:
        return rng.normal(mu, sigma, size=n)
    if dist == Distribution.UNIFORM:
        half_width = sigma * math.sqrt(3.0)
        return rng.uniform(mu - half_width, mu + half_width, size=n)
    if dist == Distribution.TRIANGULAR:
        half_width = sigma * math.sqrt(6.0)
        return rng.triangular(mu - half_width, mu, mu + half_width, size=n)
    if dist == Distribution.LOGNORMAL:
        if mu <= 0.0:
            raise ValueError(f"Lognormal variable '{variable.name}' must have a positive value")
        s2 = math.log1p((sigma / mu) ** 2)
        return rng.lognormal(math.log(mu) - s2 / 2.0, math.sqrt(s2), size=n)

    raise ValueError(f"Unknown distribution: {dist}")


def monte_carlo(
    variables: Sequence[Variable],
    func: Callable[[Mapping[str, float]], float],
    samples: int = 10_000,
    seed: int | None = None,
) -> MonteCarloResult:
    """Propagate uncertainty by random sampling.

    Args:
        variables: Named inputs, each sampled from its own distribution.
        func: Callable taking a mapping of variable name to float.
        samples: Number of draws (at least 100).
        seed: Random seed for reproducibility.

    Returns:
        MonteCarloResult with sample mean, standard deviation and percentiles.

    Raises:
        ValueError: If ``variables`` is empty or ``samples`` < 100.
    """
    _require_variables(variables)
    if samples < 100:
        raise ValueError(f"Monte Carlo needs at least 100 samples, got {samples}")

    rng = np.random.default_rng(seed)
    draws = {v.name: _sample(v, samples, rng) for v in variables}

    outputs = np.empty(samples)
    for k in range(samples):
        outputs[k] = func({name: float(col[k]) for name, col in draws.items()})

    finite = outputs[np.isfinite(outputs)]
    if finite.size < samples:
        logger.warning("Monte Carlo discarded %d non-finite samples", samples - finite.size)

    p5, p50, p95 = np.percentile(finite, [5, 50, 95])
    logger.debug("Monte Carlo: %d samples, mean=%.6g", finite.size, finite.mean())
    return MonteCarloResult(
        mean=float(finite.mean()),
        std=float(finite.std(ddof=1)),
        samples=int(finite.size),
        percentiles={5: float(p5), 50: float(p50), 95: float(p95)},
    )


# --- Closed-form combinations of independent values ---

def add(a: UncertaintyValue, b: UncertaintyValue, description: str = "") -> UncertaintyValue:
    """Sum with absolute uncertainties in quadrature."""
    return UncertaintyValue(a.value + b.value, math.hypot(a.uncertainty, b.uncertainty), a.unit, "Sum", description)


def subtract(a: UncertaintyValue, b: UncertaintyValue, description: str = "") -> UncertaintyValue:
    """Difference with absolute uncertainties in quadrature."""
    return UncertaintyValue(a.value - b.value, math.hypot(a.uncertainty, b.uncertainty), a.unit, "Difference", description)


def multiply(
    a: UncertaintyValue, b: UncertaintyValue, unit: str | None = None, description: str = ""
) -> UncertaintyValue:
    """Product with relative uncertainties in quadrature."""
    # σ = |ab|·hypot(σa/a, σb/b), written so a zero factor does not drop the other term.
    sigma = math.hypot(a.uncertainty * b.value, b.uncertainty * a.value)
    return UncertaintyValue(a.value * b.value, sigma, unit or f"{a.unit}·{b.unit}", "Product", description)


def quotient(numerator: float, denominator: float) -> float:
    """``numerator / denominator`` with ±infinity (NaN for 0/0) at a zero denominator."""
    if denominator != 0.0:
        return numerator / denominator
    if numerator == 0.0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator * math.copysign(1.0, denominator))


def divide(
    a: UncertaintyValue, b: UncertaintyValue, unit: str | None = None, description: str = ""
) -> UncertaintyValue:
    """Quotient with relative uncertainties in quadrature.

    A zero divisor gives ±infinity (NaN for 0/0) with infinite uncertainty.
    """
    unit = unit or f"{a.unit}/{b.unit}"
    if b.value == 0.0:
        return UncertaintyValue(quotient(a.value, b.value), math.inf, unit, "Quotient", description)
    result = a.value / b.value
    sigma = math.hypot(a.uncertainty / b.value, result * b.uncertainty / b.value)
    return UncertaintyValue(result, sigma, unit, "Quotient", description)


def power(a: UncertaintyValue, exponent: float, unit: str | None = None, description: str = "") -> UncertaintyValue:
    """Raise to a fixed power: σ = |r·n·σa/a|.

    A negative base under a fractional exponent gives NaN and zero under a
    negative exponent gives infinity, as in IEEE arithmetic.
    """
    try:
        result = a.value ** exponent
    except (ZeroDivisionError, OverflowError):
        result = math.inf
    if isinstance(result, complex):
        result = math.nan

    if math.isfinite(result):
        sigma = abs(result * exponent * a.relative_uncertainty)
    else:
        sigma = math.inf if a.uncertainty > 0.0 else 0.0
    return UncertaintyValue(result, sigma, unit or f"{a.unit}^{exponent:g}", "Power", description)


def sqrt(a: UncertaintyValue, unit: str | None = None, description: str = "") -> UncertaintyValue:
    """Square root; NaN for a negative value."""
    return power(a, 0.5, unit or f"sqrt({a.unit})", description)


def scale(a: UncertaintyValue, factor: float, unit: str | None = None, description: str = "") -> UncertaintyValue:
    """Multiply by an exact constant."""
    return UncertaintyValue(
        a.value * factor, a.uncertainty * abs(factor), unit or a.unit, a.source, description or a.description
    )
