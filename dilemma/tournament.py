"""Round-robin tournaments between named strategies."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from .config import Config
from .factory import StrategyFactory, default_factory
from .match import Match
from .move import MatchState, Move
from .randomness import Random
from .result import Result
from .stats import confidence_interval_95, mean, variance
from .strategies import Strategy


@dataclass
class MatchMetrics:
    """Behaviour of one player over one match."""

    cooperations: float = 0.0
    rounds: float = 0.0
    first_defection: int | None = None
    echo_length_sum: float = 0.0
    echo_samples: int = 0


@dataclass
class _Aggregate:
    scores: list[float] = field(default_factory=list)
    complexity: float | None = None
    cost: float | None = None
    cooperation_total: float = 0.0
    round_total: float = 0.0
    first_defection_total: float = 0.0
    first_defection_samples: int = 0
    echo_length_total: float = 0.0
    echo_length_samples: int = 0

    def add(self, score: float, complexity: float, cost: float, metrics: MatchMetrics) -> None:
        self.scores.append(score)
        if self.complexity is None:
            self.complexity = complexity
        if self.cost is None:
            self.cost = cost
        self.cooperation_total += metrics.cooperations
        self.round_total += metrics.rounds
        if metrics.first_defection is not None:
            self.first_defection_total += metrics.first_defection
            self.first_defection_samples += 1
        self.echo_length_total += metrics.echo_length_sum
        self.echo_length_samples += metrics.echo_samples

    def to_result(self, name: str, scb_enabled: bool) -> Result:
        mean_value = mean(self.scores)
        variance_value = variance(self.scores, mean_value)
        ci_low, ci_high = confidence_interval_95(self.scores, mean_value)
        cost = self.cost if self.cost is not None else 0.0
        return Result(
            strategy=name,
            mean=mean_value,
            variance=variance_value,
            stdev=math.sqrt(variance_value),
            ci_low=ci_low,
            ci_high=ci_high,
            coop_rate=self.cooperation_total / self.round_total if self.round_total > 0.0 else 0.0,
            first_defection=(
                self.first_defection_total / self.first_defection_samples
                if self.first_defection_samples > 0
                else None
            ),
            echo_length=(
                self.echo_length_total / self.echo_length_samples
                if self.echo_length_samples > 0
                else 0.0
            ),
            complexity=self.complexity if self.complexity is not None else 0.0,
            samples=len(self.scores),
            cost=cost,
            net_mean=mean_value - (cost if scb_enabled else 0.0),
        )


def generate_match_pairs(names: Sequence[str]) -> list[tuple[str, str]]:
    """Every ordered pairing of the names, self-play included."""
    return [(first, second) for first in names for second in names]


def compute_metrics(state: MatchState, player_index: int) -> MatchMetrics:
    """Cooperation, first defection and echo lengths of one player in a match.

    An echo starts when mutual cooperation breaks and lasts until it is restored;
    the restoring round counts towards its length.
    """
    metrics = MatchMetrics()
    history = state.history()
    metrics.rounds = float(len(history))

    last_mutual_coop = True
    in_echo = False
    current_echo = 0

    for number, round_ in enumerate(history, start=1):
        own = round_.first if player_index == 0 else round_.second
        opponent = round_.second if player_index == 0 else round_.first

        if own is Move.COOPERATE:
            metrics.cooperations += 1.0
        if metrics.first_defection is None and own is Move.DEFECT:
            metrics.first_defection = number

        mutual_coop = own is Move.COOPERATE and opponent is Move.COOPERATE

        if in_echo:
            current_echo += 1
        elif last_mutual_coop and not mutual_coop:
            in_echo = True
            current_echo = 1

        if mutual_coop:
            if in_echo:
                metrics.echo_length_sum += current_echo
                metrics.echo_samples += 1
                in_echo = False
                current_echo = 0
            last_mutual_coop = True
        else:
            last_mutual_coop = False

    if in_echo and current_echo > 0:
        metrics.echo_length_sum += current_echo
        metrics.echo_samples += 1

    return metrics


def _scb_cost(name: str, strategy: Strategy, config: Config) -> float:
    if not config.scb_enabled:
        return 0.0
    cost = config.scb_costs.get(name)
    return float(cost if cost is not None else strategy.complexity)


class TournamentManager:
    """Plays every pairing of the configured strategies and summarises the scores."""

    def __init__(self, factory: StrategyFactory | None = None) -> None:
        self.factory = factory if factory is not None else default_factory()

    def run(self, config: Config) -> list[Result]:
        """Play the tournament; results are ranked by (net) mean, best first."""
        if config.repeats <= 0 or config.rounds <= 0:
            return []
        pairs = generate_match_pairs(config.strategy_names)
        if not pairs:
            return []

        rng = Random()
        if config.use_seed:
            rng.reseed(config.seed)

        match = Match(config.payoffs, config.epsilon)
        aggregates: dict[str, _Aggregate] = {}

        for _ in range(config.repeats):
            for first_name, second_name in pairs:
                first = self.factory.create(first_name)
                second = self.factory.create(second_name)
                report = match.play(first, second, config.rounds, rng)

                for name, strategy, score, index in (
                    (first_name, first, report.score_first, 0),
                    (second_name, second, report.score_second, 1),
                ):
                    aggregates.setdefault(name, _Aggregate()).add(
                        score / config.rounds,
                        float(strategy.complexity),
                        _scb_cost(name, strategy, config),
                        compute_metrics(report.state, index),
                    )

        results = [
            aggregates[name].to_result(name, config.scb_enabled) for name in sorted(aggregates)
        ]
        if config.scb_enabled:
            results.sort(key=lambda result: result.net_mean, reverse=True)
        else:
            results.sort(key=lambda result: result.mean, reverse=True)
        return results