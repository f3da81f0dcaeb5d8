import pytest

from dilemma.match import Match, MatchReport
from dilemma.move import MatchState, Move
from dilemma.payoff import Payoff
from dilemma.randomness import Random
from dilemma.strategies import AllC, AllD, Grim, RandomStrategy, Strategy, TitForTat

C = Move.COOPERATE
D = Move.DEFECT


class _Recorder(Strategy):
    name = "Recorder"

    def __init__(self):
        self.resets = 0
        self.ended = []

    def next_move(self, state, self_index, rng):
        return C

    def reset(self):
        self.resets += 1

    def on_match_end(self, state, self_index):
        self.ended.append((state.rounds_played(), self_index))


def test_evaluate_round_uses_payoff_matrix():
    payoff = Payoff()
    match = Match(payoff, 0.0)
    assert match.evaluate_round(C, C) == payoff.reward
    assert match.evaluate_round(C, D) == payoff.sucker
    assert match.evaluate_round(D, C) == payoff.temptation
    assert match.evaluate_round(D, D) == payoff.punishment


def test_cooperator_against_defector():
    payoff = Payoff()
    rounds = 10
    report = Match(payoff, 0.0).play(AllC(), AllD(), rounds, Random(1))
    assert report.score_first == rounds * payoff.sucker
    assert report.score_second == rounds * payoff.temptation
    assert report.state.rounds_played() == rounds
    assert report.state.defections(1) == rounds
    assert report.state.defections(0) == 0


def test_tft_pair_cooperates_throughout():
    payoff = Payoff(temptation=6.0, reward=4.0, punishment=2.0, sucker=1.0)
    report = Match(payoff, 0.0).play(TitForTat(), TitForTat(), 7, Random(2))
    assert report.score_first == report.score_second == 7 * payoff.reward


def test_full_noise_flips_every_move():
    payoff = Payoff()
    report = Match(payoff, 1.0).play(AllC(), AllC(), 5, Random(3))
    assert all(r == (D, D) for r in report.state.history())
    assert report.score_first == 5 * payoff.punishment


def test_zero_rounds_gives_empty_report():
    report = Match(Payoff(), 0.0).play(AllC(), AllD(), 0, Random(1))
    assert report.score_first == 0.0
    assert not report.state.has_history()


def test_strategies_are_reset_and_notified():
    first, second = _Recorder(), _Recorder()
    Match(Payoff(), 0.0).play(first, second, 4, Random(1))
    assert first.resets == 1 and second.resets == 1
    assert first.ended == [(4, 0)]
    assert second.ended == [(4, 1)]


def test_grim_state_does_not_leak_between_matches():
    grim = Grim()
    match = Match(Payoff(), 0.0)
    match.play(grim, AllD(), 3, Random(1))
    report = match.play(grim, AllC(), 3, Random(1))
    assert report.state.defections(0) == 0


def test_same_seed_reproduces_match():
    match = Match(Payoff(), 0.2)
    a = match.play(RandomStrategy(0.5), TitForTat(), 50, Random(42))
    b = match.play(RandomStrategy(0.5), TitForTat(), 50, Random(42))
    assert a.state.history() == b.state.history()
    assert a.score_first == b.score_first
    assert a.score_second == b.score_second


def test_scores_are_sum_of_round_payoffs():
    match = Match(Payoff(), 0.3)
    report = match.play(RandomStrategy(0.4), TitForTat(), 40, Random(9))
    expected_first = sum(match.evaluate_round(r.first, r.second) for r in report.state.history())
    expected_second = sum(match.evaluate_round(r.second, r.first) for r in report.state.history())
    assert report.score_first == pytest.approx(expected_first)
    assert report.score_second == pytest.approx(expected_second)


def test_default_report_is_empty():
    report = MatchReport()
    assert report.score_first == 0.0 and report.score_second == 0.0
    assert isinstance(report.state, MatchState)
    assert report.state.rounds_played() == 0