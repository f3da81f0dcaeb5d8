"""Playing one match between two strategies."""

from __future__ import annotations

from dataclasses import dataclass, field

from .move import MatchState, Move
from .payoff import Payoff
from .randomness import Random
from .strategies import Strategy


@dataclass
class MatchReport:
    """Total scores of both players and the rounds they played."""

    score_first: float = 0.0
    score_second: float = 0.0
    state: MatchState = field(default_factory=MatchState)


class Match:
    """Plays repeated rounds under a payoff matrix, with optional move noise."""

    def __init__(self, payoff: Payoff, epsilon: float) -> None:
        self.payoff = payoff
        self.epsilon = epsilon

    def play(self, first: Strategy, second: Strategy, rounds: int, rng: Random) -> MatchReport:
        """Reset both strategies, play the rounds and return the report."""
        report = MatchReport()
        first.reset()
        second.reset()

        for _ in range(rounds):
            move_first = first.next_move(report.state, 0, rng)
            move_second = second.next_move(report.state, 1, rng)

            if self.epsilon > 0.0:
                if rng.next_bool(self.epsilon):
                    move_first = move_first.flip()
                if rng.next_bool(self.epsilon):
                    move_second = move_second.flip()

            report.state.record_round(move_first, move_second)
            report.score_first += self.evaluate_round(move_first, move_second)
            report.score_second += self.evaluate_round(move_second, move_first)

        first.on_match_end(report.state, 0)
        second.on_match_end(report.state, 1)
        return report

    def evaluate_round(self, first: Move, second: Move) -> float:
        """Payoff earned by a player making `first` against `second`."""
        if first is Move.COOPERATE:
            return self.payoff.reward if second is Move.COOPERATE else self.payoff.sucker
        return self.payoff.temptation if second is Move.COOPERATE else self.payoff.punishment