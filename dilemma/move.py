"""Moves of the iterated prisoner's dilemma and the per-match history."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

_NO_ROUNDS = "No rounds have been played yet"


class Move(Enum):
    """A single choice made by a player in one round."""

    COOPERATE = "C"
    DEFECT = "D"

    def flip(self) -> Move:
        """Return the opposite move."""
        return Move.DEFECT if self is Move.COOPERATE else Move.COOPERATE

    def __str__(self) -> str:
        return self.value


class Round(NamedTuple):
    """The moves of both players in one round."""

    first: Move
    second: Move


def _own(round_: Round, player_index: int) -> Move:
    return round_.first if player_index == 0 else round_.second


def _opponent(round_: Round, player_index: int) -> Move:
    return round_.second if player_index == 0 else round_.first


class MatchState:
    """The rounds played so far in a match."""

    def __init__(self) -> None:
        self._history: list[Round] = []

    def reset(self) -> None:
        """Forget every recorded round."""
        self._history.clear()

    def record_round(self, first: Move, second: Move) -> None:
        """Append the moves of one round."""
        self._history.append(Round(first, second))

    def rounds_played(self) -> int:
        return len(self._history)

    def has_history(self) -> bool:
        return bool(self._history)

    def last_round(self) -> Round:
        """Return the most recent round; raise IndexError if none was played."""
        if not self._history:
            raise IndexError(_NO_ROUNDS)
        return self._history[-1]

    def last_move(self, player_index: int) -> Move:
        """Return the last move of the given player (0 or 1)."""
        return _own(self.last_round(), player_index)

    def last_opponent_move(self, player_index: int) -> Move:
        """Return the last move of the given player's opponent."""
        return _opponent(self.last_round(), player_index)

    def defections(self, player_index: int) -> int:
        """Count the rounds in which the given player defected."""
        return sum(1 for round_ in self._history if _own(round_, player_index) is Move.DEFECT)

    def history(self) -> tuple[Round, ...]:
        """Return every recorded round, oldest first."""
        return tuple(self._history)