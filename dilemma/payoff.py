"""The payoff matrix of the prisoner's dilemma."""

from __future__ import annotations

from dataclasses import dataclass


class InvalidPayoffError(ValueError):
    """Raised when payoffs do not describe a prisoner's dilemma."""


@dataclass(frozen=True)
class Payoff:
    """Temptation, reward, punishment and sucker payoffs."""

    temptation: float = 5.0
    reward: float = 3.0
    punishment: float = 1.0
    sucker: float = 0.0

    def __post_init__(self) -> None:
        t, r, p, s = self.temptation, self.reward, self.punishment, self.sucker
        if not (t > r > p > s and 2.0 * r > t + s):
            raise InvalidPayoffError("invalid payoffs. Must satisfy T>R>P>S and 2R>T+S.")