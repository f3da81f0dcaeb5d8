"""Summary statistics of per-match scores."""

from __future__ import annotations

import math
from collections.abc import Sequence

_Z_95 = 1.96


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def variance(values: Sequence[float], mean_value: float) -> float:
    """Sample variance around `mean_value`; 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return sum((value - mean_value) ** 2 for value in values) / (len(values) - 1)


def confidence_interval_95(values: Sequence[float], mean_value: float) -> tuple[float, float]:
    """Normal-approximation 95% confidence interval of the mean."""
    if len(values) < 2:
        return mean_value, mean_value
    standard_error = math.sqrt(variance(values, mean_value)) / math.sqrt(len(values))
    margin = _Z_95 * standard_error
    return mean_value - margin, mean_value + margin