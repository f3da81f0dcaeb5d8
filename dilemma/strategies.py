"""Strategies that choose moves in the iterated prisoner's dilemma."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .move import MatchState, Move
from .randomness import Random


def _split_last(state: MatchState, self_index: int) -> tuple[Move, Move]:
    """Return (own last move, opponent's last move)."""
    return state.last_move(self_index), state.last_opponent_move(self_index)


class Strategy(ABC):
    """A player that picks a move each round from the match history."""

    name: str = "Strategy"
    complexity: int = 1

    @abstractmethod
    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        """Choose the move for the coming round."""

    def on_match_end(self, state: MatchState, self_index: int) -> None:
        """Called once after the last round of a match."""

    def reset(self) -> None:
        """Forget anything remembered from a previous match."""


class AllC(Strategy):
    """Always cooperates."""

    name = "ALLC"
    complexity = 1

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        return Move.COOPERATE


class AllD(Strategy):
    """Always defects."""

    name = "ALLD"
    complexity = 1

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        return Move.DEFECT


class TitForTat(Strategy):
    """Cooperates first, then repeats the opponent's last move."""

    name = "TFT"
    complexity = 2

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        if not state.has_history():
            return Move.COOPERATE
        return state.last_opponent_move(self_index)


class Grim(Strategy):
    """Cooperates until the opponent defects once, then defects forever."""

    name = "GRIM"
    complexity = 2

    def __init__(self) -> None:
        self._triggered = False

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        if self._triggered:
            return Move.DEFECT
        if state.has_history() and state.last_opponent_move(self_index) is Move.DEFECT:
            self._triggered = True
            return Move.DEFECT
        return Move.COOPERATE

    def reset(self) -> None:
        self._triggered = False


class Pavlov(Strategy):
    """Win-stay, lose-shift: switches its move when the last round's moves differed."""

    name = "PAVLOV"
    complexity = 2

    def __init__(self) -> None:
        self._last_move = Move.COOPERATE

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        if not state.has_history():
            self._last_move = Move.COOPERATE
            return self._last_move
        last = state.last_round()
        if last.first is not last.second:
            self._last_move = self._last_move.flip()
        return self._last_move

    def reset(self) -> None:
        self._last_move = Move.COOPERATE


class RandomStrategy(Strategy):
    """Cooperates with a fixed probability each round."""

    complexity = 2

    def __init__(self, probability: float = 0.5) -> None:
        self.probability = min(max(probability, 0.0), 1.0)
        if abs(self.probability - 0.5) < 1e-9:
            self.name = "RND"
        else:
            self.name = f"RND({self.probability:.3f})"

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        return Move.COOPERATE if rng.next_bool(self.probability) else Move.DEFECT


class ContriteTitForTat(Strategy):
    """Tit-for-tat that makes amends after defecting on a cooperating opponent."""

    name = "CTFT"
    complexity = 3

    def __init__(self) -> None:
        self._contrite = False

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        if not state.has_history():
            self._contrite = False
            return Move.COOPERATE
        own_last, opponent_last = _split_last(state, self_index)
        if self._contrite:
            if opponent_last is Move.COOPERATE:
                self._contrite = False
            return Move.COOPERATE
        if own_last is Move.DEFECT and opponent_last is Move.COOPERATE:
            self._contrite = True
            return Move.COOPERATE
        return opponent_last

    def reset(self) -> None:
        self._contrite = False


class Prober(Strategy):
    """Opens D, C, C; exploits an opponent that cooperated twice, else plays tit-for-tat."""

    name = "PROBER"
    complexity = 3

    def __init__(self) -> None:
        self._round = 0
        self._exploit = False

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        if self._round == 0:
            self._round += 1
            return Move.DEFECT
        if self._round == 1:
            self._round += 1
            return Move.COOPERATE
        if self._round == 2:
            self._round += 1
            history = state.history()
            if len(history) >= 2:
                opening = [r.second if self_index == 0 else r.first for r in history[:2]]
                self._exploit = all(move is Move.COOPERATE for move in opening)
            return Move.COOPERATE
        if self._exploit:
            return Move.DEFECT
        if not state.has_history():
            return Move.COOPERATE
        return state.last_opponent_move(self_index)

    def reset(self) -> None:
        self._round = 0
        self._exploit = False


class Empath(Strategy):
    """Mirrors the opponent, but shows remorse after exploiting a cooperator."""

    name = "Empath"
    complexity = 3

    _REMORSE_ROUNDS = 2
    _REMORSE_COOPERATION = 0.8
    _POST_REMORSE_COOPERATION = 0.6

    def __init__(self) -> None:
        self._remorse_remaining = 0
        self._post_remorse_bias = False

    def reset(self) -> None:
        self._remorse_remaining = 0
        self._post_remorse_bias = False

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        if not state.has_history():
            self.reset()
            return Move.COOPERATE

        own_last, opponent_last = _split_last(state, self_index)

        if self._remorse_remaining > 0:
            if opponent_last is Move.COOPERATE:
                self._remorse_remaining = max(self._remorse_remaining, self._REMORSE_ROUNDS)
            else:
                self._remorse_remaining = 0
                self._post_remorse_bias = True

        if (
            self._remorse_remaining == 0
            and own_last is Move.DEFECT
            and opponent_last is Move.COOPERATE
        ):
            self._remorse_remaining = self._REMORSE_ROUNDS
            self._post_remorse_bias = False

        if self._remorse_remaining > 0:
            choice = (
                Move.COOPERATE if rng.next_bool(self._REMORSE_COOPERATION) else Move.DEFECT
            )
            self._remorse_remaining = max(0, self._remorse_remaining - 1)
            return choice

        if self._post_remorse_bias:
            self._post_remorse_bias = False
            return Move.COOPERATE if rng.next_bool(self._POST_REMORSE_COOPERATION) else Move.DEFECT

        return opponent_last


_ETA = 0.1
_ALPHA = 0.2
_BETA = 0.2
_TEMPTATION = 5.0
_REWARD = 3.0
_PUNISHMENT = 1.0
_SUCKER = 0.0


class Reflector(Strategy):
    """Learns how far to trust the opponent, learning faster in a good mood."""

    name = "Reflector"
    complexity = 3

    def __init__(self) -> None:
        self.trust = 0.5
        self.mood = 0.0
        self.expected_reward = _REWARD

    def reset(self) -> None:
        self.trust = 0.5
        self.mood = 0.0
        self.expected_reward = _REWARD

    def payoff_for(self, own: Move, opponent: Move) -> float:
        """Payoff of a round under the standard 5, 3, 1, 0 matrix."""
        if own is Move.COOPERATE:
            return _REWARD if opponent is Move.COOPERATE else _SUCKER
        return _TEMPTATION if opponent is Move.COOPERATE else _PUNISHMENT

    def next_move(self, state: MatchState, self_index: int, rng: Random) -> Move:
        if state.has_history():
            own_last, opponent_last = _split_last(state, self_index)
            last_payoff = self.payoff_for(own_last, opponent_last)

            step = _ALPHA if last_payoff > self.expected_reward else -_BETA
            self.mood = min(max(self.mood + step, -1.0), 1.0)

            learning_rate = max(_ETA * (1.0 + self.mood), 0.0)
            if opponent_last is Move.COOPERATE:
                self.trust += learning_rate * (1.0 - self.trust)
            else:
                self.trust -= learning_rate * self.trust
            self.trust = min(max(self.trust, 0.0), 1.0)

            self.expected_reward += _ETA * (last_payoff - self.expected_reward)
        else:
            self.reset()

        return Move.COOPERATE if rng.next_bool(self.trust) else Move.DEFECT