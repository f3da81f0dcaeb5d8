import pytest

from dilemma.move import MatchState, Move, Round


def test_flip_swaps_moves():
    assert Move.COOPERATE.flip() is Move.DEFECT
    assert Move.DEFECT.flip() is Move.COOPERATE


def test_flip_twice_is_identity():
    assert Move.COOPERATE.flip().flip() is Move.COOPERATE
    assert Move.DEFECT.flip().flip() is Move.DEFECT


def test_str_uses_single_letters():
    assert str(Move.COOPERATE.flip()) == "D"
    assert str(Move.DEFECT.flip()) == "C"
    assert f"{Move.COOPERATE}{Move.DEFECT}" == "CD"


def test_new_state_has_no_history():
    state = MatchState()
    assert not state.has_history()
    assert state.rounds_played() == 0
    assert state.history() == ()


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.last_round(),
        lambda s: s.last_move(0),
        lambda s: s.last_opponent_move(1),
    ],
)
def test_last_accessors_raise_without_history(call):
    with pytest.raises(IndexError, match="No rounds have been played yet"):
        call(MatchState())


def test_record_round_and_last_accessors():
    state = MatchState()
    state.record_round(Move.COOPERATE, Move.DEFECT)
    state.record_round(Move.DEFECT, Move.COOPERATE)
    assert state.rounds_played() == 2
    assert state.last_round() == Round(Move.DEFECT, Move.COOPERATE)
    assert state.last_move(0) is Move.DEFECT
    assert state.last_move(1) is Move.COOPERATE
    assert state.last_opponent_move(0) is Move.COOPERATE
    assert state.last_opponent_move(1) is Move.DEFECT


def test_defections_count_per_player():
    state = MatchState()
    moves = [
        (Move.DEFECT, Move.COOPERATE),
        (Move.DEFECT, Move.DEFECT),
        (Move.COOPERATE, Move.COOPERATE),
    ]
    for first, second in moves:
        state.record_round(first, second)
    assert state.defections(0) == 2
    assert state.defections(1) == 1


def test_history_preserves_order_and_is_a_snapshot():
    state = MatchState()
    state.record_round(Move.COOPERATE, Move.COOPERATE)
    snapshot = state.history()
    state.record_round(Move.DEFECT, Move.DEFECT)
    assert snapshot == (Round(Move.COOPERATE, Move.COOPERATE),)
    assert state.history()[-1] == Round(Move.DEFECT, Move.DEFECT)


def test_reset_clears_history():
    state = MatchState()
    state.record_round(Move.COOPERATE, Move.DEFECT)
    state.reset()
    assert not state.has_history()
    assert state.rounds_played() == 0