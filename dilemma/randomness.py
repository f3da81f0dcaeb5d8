"""A seedable source of random numbers for matches and evolution."""

from __future__ import annotations

import random
from collections.abc import Sequence


class Random:
    """Random numbers; seeded for reproducible runs, otherwise from the system."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def reseed(self, seed: int) -> None:
        """Restart the sequence from the given seed."""
        self._rng.seed(seed)

    def next_double(self, min_inclusive: float = 0.0, max_exclusive: float = 1.0) -> float:
        """Return a float uniformly drawn from [min_inclusive, max_exclusive)."""
        return min_inclusive + (max_exclusive - min_inclusive) * self._rng.random()

    def next_bool(self, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be between 0 and 1, got {probability}")
        return self._rng.random() < probability

    def next_int(self, min_inclusive: int, max_inclusive: int) -> int:
        """Return an integer uniformly drawn from [min_inclusive, max_inclusive]."""
        if min_inclusive > max_inclusive:
            raise ValueError("empty range for next_int")
        return self._rng.randint(min_inclusive, max_inclusive)

    def sample_indices(self, weights: Sequence[float], count: int) -> list[int]:
        """Draw `count` indices, each with probability proportional to its weight."""
        if count <= 0 or not weights:
            return []
        if any(weight < 0.0 for weight in weights):
            raise ValueError("weights must not be negative")
        if sum(weights) <= 0.0:
            raise ValueError("weights must sum to a positive value")
        return self._rng.choices(range(len(weights)), weights=weights, k=count)