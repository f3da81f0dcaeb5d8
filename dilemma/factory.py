"""Creation of strategies by name."""

from __future__ import annotations

import functools
import re
from collections.abc import Callable

from .strategies import (
    AllC,
    AllD,
    ContriteTitForTat,
    Empath,
    Grim,
    Pavlov,
    Prober,
    RandomStrategy,
    Reflector,
    Strategy,
    TitForTat,
)

Creator = Callable[[], Strategy]

_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class UnknownStrategyError(ValueError):
    """Raised when no strategy is registered under a name."""


def parse_random_probability(name: str) -> float | None:
    """Return the probability of an ``RND`` or ``RND(p)`` name, or None for other names.

    Raises ValueError when the name starts like ``RND(p)`` but is malformed.
    """
    if name == "RND":
        return 0.5
    if len(name) <= 5 or not name.startswith("RND("):
        return None
    if not name.endswith(")"):
        raise ValueError(f"Invalid RND strategy format: {name}")
    parameter = name[4:-1]
    if not _NUMBER.fullmatch(parameter):
        raise ValueError(f"Invalid probability for RND strategy: {name}")
    probability = float(parameter)
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"RND probability must be between 0 and 1: {name}")
    return probability


class StrategyFactory:
    """A registry mapping names to strategy constructors."""

    def __init__(self) -> None:
        self._creators: dict[str, Creator] = {}

    def create(self, name: str) -> Strategy:
        """Build a fresh strategy; ``RND(p)`` names are always understood."""
        probability = parse_random_probability(name)
        if probability is not None:
            return RandomStrategy(probability)
        try:
            creator = self._creators[name]
        except KeyError:
            raise UnknownStrategyError(f"Unknown strategy: {name}") from None
        return creator()

    def has_strategy(self, name: str) -> bool:
        return name in self._creators

    def register(self, name: str, creator: Creator) -> None:
        """Register or replace the constructor for a name."""
        self._creators[name] = creator

    def available_strategies(self) -> list[str]:
        """Registered names in sorted order."""
        return sorted(self._creators)


def register_builtin_strategies(factory: StrategyFactory) -> None:
    """Register every built-in strategy under its command-line name."""
    builtins: dict[str, Creator] = {
        "ALLC": AllC,
        "ALLD": AllD,
        "TFT": TitForTat,
        "GRIM": Grim,
        "PAVLOV": Pavlov,
        "RND": lambda: RandomStrategy(0.5),
        "CTFT": ContriteTitForTat,
        "CONTRITE": ContriteTitForTat,
        "PROBER": Prober,
        "Empath": Empath,
        "Reflector": Reflector,
    }
    for name, creator in builtins.items():
        factory.register(name, creator)


@functools.lru_cache(maxsize=None)
def default_factory() -> StrategyFactory:
    """The shared factory holding the built-in strategies."""
    factory = StrategyFactory()
    register_builtin_strategies(factory)
    return factory