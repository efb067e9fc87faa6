"""Validity reports attached to empirical impact-model results."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidityCheck:
    """Whether a result lies inside its model's calibrated range.

    Out-of-range inputs never raise. They are recorded here so the caller
    still gets a number and can decide how far to trust it.

    Attributes:
        is_valid: False once any invalidating warning was added.
        warnings: Input-specific problems.
        limitations: Standing caveats of the model itself.
    """

    is_valid: bool = True
    warnings: tuple[str, ...] = ()
    limitations: tuple[str, ...] = ()

    def log(self, model: str) -> None:
        if not self.is_valid:
            logger.warning("%s result outside validity range: %s", model, "; ".join(self.warnings))

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "warnings": list(self.warnings),
            "limitations": list(self.limitations),
        }


class ValidityBuilder:
    """Collects warnings while a model runs; :meth:`build` freezes them."""

    def __init__(self) -> None:
        self._valid = True
        self._warnings: list[str] = []
        self._limitations: list[str] = []

    def warn(self, message: str, invalidates: bool = False) -> None:
        self._warnings.append(message)
        if invalidates:
            self._valid = False

    def limit(self, *limitations: str) -> None:
        self._limitations.extend(limitations)

    def check_finite(self, **values: float) -> None:
        """Flag non-finite inputs; they still flow through the arithmetic."""
        for name, value in values.items():
            if not math.isfinite(value):
                self.warn(f"Non-finite {name.replace('_', ' ')} ({value}) propagates into the result")

    def build(self) -> ValidityCheck:
        return ValidityCheck(self._valid, tuple(self._warnings), tuple(self._limitations))


def agreement_grade(ratio: float) -> str:
    """Grade a calculated/observed ratio: Good within 2×, Fair within 5×, else Poor."""
    if 0.5 < ratio < 2.0:
        return "Good"
    if 0.2 < ratio < 5.0:
        return "Fair"
    return "Poor"
