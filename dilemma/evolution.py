"""Evolution of a strategy population driven by tournament fitness."""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .config import Config
from .randomness import Random
from .result import Result
from .tournament import TournamentManager

_EPSILON = 1e-12
SHARES_FILE_NAME = "evolution_shares.csv"


@dataclass
class GenerationShare:
    """Counts and population shares of each strategy in one generation, by name."""

    generation: int = 0
    shares: list[tuple[str, float]] = field(default_factory=list)
    counts: list[tuple[str, int]] = field(default_factory=list)


@dataclass
class EvolutionOutcome:
    """Final tournament results and the share history of every generation."""

    results: list[Result] = field(default_factory=list)
    history: list[GenerationShare] = field(default_factory=list)


def _evaluation_config(base: Config) -> Config:
    return dataclasses.replace(
        base, generations=0, population_size=0, mutation_rate=0.0, evolve=False
    )


def _collect_fitness(names: Sequence[str], results: Sequence[Result], penalty: float) -> list[float]:
    by_name = {r.strategy: r.net_mean - penalty * r.complexity for r in results}
    return [by_name.get(name, 0.0) for name in names]


def initial_counts(names: Sequence[str], population: int) -> list[int]:
    """Spread the population as evenly as possible, earlier names taking the remainder."""
    n = len(names)
    if n == 0 or population <= 0:
        return [0] * n
    base, remainder = divmod(population, n)
    return [base + (1 if index < remainder else 0) for index in range(n)]


def compute_probabilities(counts: Sequence[int], fitness: Sequence[float]) -> list[float]:
    """Selection probabilities proportional to count times fitness above the minimum."""
    n = len(counts)
    if n == 0:
        return []
    min_fit = min(fitness, default=math.inf)
    fitness_at = list(fitness) + [0.0] * (n - len(fitness))
    weights = [
        max(fitness_at[index] - min_fit + _EPSILON, _EPSILON) * max(count, 0)
        for index, count in enumerate(counts)
    ]
    total = sum(weights)
    if total <= 0.0:
        weights = [float(max(count, 0)) for count in counts]
        total = sum(weights)
        if total <= 0.0:
            return [1.0 / n] * n
    return [weight / total for weight in weights]


def make_generation_share(
    generation: int, names: Sequence[str], counts: Sequence[int], population: int
) -> GenerationShare:
    """Record counts and shares of a generation, ordered by strategy name."""
    padded = list(counts) + [0] * (len(names) - len(counts))
    ordered = sorted(zip(names, padded), key=lambda pair: pair[0])
    total = float(max(population, 0))
    shares = [(name, count / total if total > 0.0 else 0.0) for name, count in ordered]
    return GenerationShare(generation=generation, shares=shares, counts=ordered)


def _share_for(names: Sequence[str], counts: Sequence[int], population: int, strategy: str) -> float:
    if population <= 0:
        return 0.0
    for name, count in zip(names, counts):
        if name == strategy:
            return count / population
    return 0.0


def write_evolution_shares_csv(config: Config, history: Sequence[GenerationShare]) -> Path | None:
    """Write every generation's counts and shares next to the output file.

    Returns the path written, or None when there is no history.
    """
    if not history:
        return None
    path = (
        Path(SHARES_FILE_NAME)
        if not config.output_file
        else Path(config.output_file).parent / SHARES_FILE_NAME
    )
    lines = ["generation,strategy,count,share"]
    for entry in history:
        counts = dict(entry.counts)
        lines.extend(
            f"{entry.generation},{name},{counts.get(name, 0)},{share:.6f}"
            for name, share in entry.shares
        )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as exc:
        raise OSError(f"Unable to write evolution share log: {path}") from exc
    return path


class EvolutionManager:
    """Runs generations of fitness-proportional selection with mutation."""

    def __init__(self, rng: Random | None = None) -> None:
        self.rng = rng if rng is not None else Random()

    def sample_next_generation(self, probabilities: Sequence[float], population: int) -> list[int]:
        """Draw the next generation's counts from the selection probabilities."""
        counts = [0] * len(probabilities)
        if not probabilities or population <= 0:
            return counts
        for index in self.rng.sample_indices(probabilities, population):
            counts[index] += 1
        return counts

    def mutate_counts(self, counts: Sequence[int], mutation_rate: float) -> list[int]:
        """Move a rounded fraction of each strategy's members to other strategies."""
        mutated = list(counts)
        n = len(mutated)
        if n <= 1 or mutation_rate <= 0.0:
            return mutated
        # Later strategies mutate from counts already changed by earlier ones.
        for index in range(n):
            current = mutated[index]
            if current <= 0:
                continue
            for _ in range(math.floor(current * mutation_rate + 0.5)):
                target = self.rng.next_int(0, n - 2)
                if target >= index:
                    target += 1
                mutated[index] -= 1
                mutated[target] += 1
        return mutated

    def run(self, config: Config) -> EvolutionOutcome:
        """Evolve the population; results carry each strategy's final share in `extra`."""
        outcome = EvolutionOutcome()
        if not config.evolve and config.generations <= 0:
            return outcome
        names = config.strategy_names
        if not names:
            return outcome

        population = max(config.population_size, 0)
        counts = initial_counts(names, population)
        tournament = TournamentManager()
        evaluation = _evaluation_config(config)
        last_results: list[Result] = []

        outcome.history.append(make_generation_share(0, names, counts, population))

        for generation in range(1, config.generations + 1):
            last_results = tournament.run(evaluation)
            fitness = _collect_fitness(names, last_results, config.complexity_penalty)
            probabilities = compute_probabilities(counts, fitness)
            counts = self.mutate_counts(
                self.sample_next_generation(probabilities, population), config.mutation_rate
            )
            outcome.history.append(make_generation_share(generation, names, counts, population))

        if not last_results:
            last_results = tournament.run(evaluation)
        for result in last_results:
            result.extra = _share_for(names, counts, population, result.strategy)

        outcome.results = last_results
        return outcome