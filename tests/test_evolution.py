import pytest

from dilemma.config import Config
from dilemma.evolution import (
    EvolutionManager,
    GenerationShare,
    compute_probabilities,
    initial_counts,
    make_generation_share,
    write_evolution_shares_csv,
)
from dilemma.randomness import Random


def test_initial_counts_spread_remainder_first():
    assert initial_counts(["a", "b", "c"], 7) == [3, 2, 2]


@pytest.mark.parametrize("population", [1, 5, 10, 23])
def test_initial_counts_sum_and_balance(population):
    counts = initial_counts(["a", "b", "c", "d"], population)
    assert sum(counts) == population
    assert max(counts) - min(counts) <= 1


def test_initial_counts_degenerate():
    assert initial_counts([], 5) == []
    assert initial_counts(["a", "b"], 0) == [0, 0]


def test_probabilities_sum_to_one():
    probs = compute_probabilities([2, 3, 5], [1.0, 2.5, 0.5])
    assert sum(probs) == pytest.approx(1.0)
    assert all(p >= 0.0 for p in probs)


def test_equal_fitness_follows_counts():
    probs = compute_probabilities([1, 3], [2.0, 2.0])
    assert probs[1] == pytest.approx(3 * probs[0])


def test_higher_fitness_gets_more_weight():
    probs = compute_probabilities([5, 5], [1.0, 4.0])
    assert probs[1] > probs[0]
    assert probs[0] == pytest.approx(0.0, abs=1e-9)


def test_zero_counts_give_uniform_probabilities():
    assert compute_probabilities([0, 0, 0, 0], [1.0, 2.0, 3.0, 4.0]) == [0.25] * 4


def test_empty_counts():
    assert compute_probabilities([], []) == []


def test_generation_share_is_sorted_by_name():
    share = make_generation_share(2, ["TFT", "ALLD", "ALLC"], [1, 2, 1], 4)
    assert share.generation == 2
    assert share.counts == [("ALLC", 1), ("ALLD", 2), ("TFT", 1)]
    assert [name for name, _ in share.shares] == ["ALLC", "ALLD", "TFT"]
    assert sum(value for _, value in share.shares) == pytest.approx(1.0)


def test_generation_share_with_empty_population():
    share = make_generation_share(0, ["A", "B"], [0, 0], 0)
    assert share.shares == [("A", 0.0), ("B", 0.0)]


def test_sample_next_generation_keeps_population():
    manager = EvolutionManager(Random(3))
    counts = manager.sample_next_generation([0.2, 0.0, 0.8], 50)
    assert sum(counts) == 50
    assert counts[1] == 0


def test_sample_next_generation_degenerate():
    manager = EvolutionManager(Random(3))
    assert manager.sample_next_generation([0.5, 0.5], 0) == [0, 0]
    assert manager.sample_next_generation([], 10) == []


def test_mutation_zero_rate_is_identity():
    manager = EvolutionManager(Random(1))
    assert manager.mutate_counts([3, 4, 5], 0.0) == [3, 4, 5]


def test_mutation_single_strategy_is_identity():
    manager = EvolutionManager(Random(1))
    assert manager.mutate_counts([9], 0.5) == [9]


@pytest.mark.parametrize("rate", [0.1, 0.5, 1.0])
def test_mutation_preserves_population(rate):
    manager = EvolutionManager(Random(11))
    original = [6, 0, 4, 10]
    mutated = manager.mutate_counts(original, rate)
    assert sum(mutated) == sum(original)
    assert all(count >= 0 for count in mutated)
    assert original == [6, 0, 4, 10]


def test_mutation_moves_members_away():
    manager = EvolutionManager(Random(5))
    mutated = manager.mutate_counts([10, 0], 0.5)
    assert mutated[1] > 0


def _config(**kwargs):
    config = Config(**kwargs)
    config.ensure_defaults()
    return config


def test_no_evolution_requested_returns_empty_outcome():
    outcome = EvolutionManager(Random(1)).run(Config(strategy_names=["ALLC"], rounds=5))
    assert outcome.results == []
    assert outcome.history == []


def test_run_records_every_generation():
    config = _config(
        strategy_names=["ALLC", "ALLD", "TFT"],
        rounds=10,
        generations=3,
        population_size=12,
        mutation_rate=0.1,
        seed=9,
        use_seed=True,
    )
    outcome = EvolutionManager(Random(2)).run(config)
    assert [g.generation for g in outcome.history] == [0, 1, 2, 3]
    for entry in outcome.history:
        assert sum(count for _, count in entry.counts) == config.population_size
    final = dict(outcome.history[-1].shares)
    assert {r.strategy: r.extra for r in outcome.results} == pytest.approx(final)


def test_evolve_without_generations_still_reports_initial_shares():
    config = _config(strategy_names=["ALLC", "ALLD"], rounds=5, evolve=True, population_size=4)
    outcome = EvolutionManager(Random(4)).run(config)
    assert len(outcome.history) == 1
    assert {r.strategy for r in outcome.results} == {"ALLC", "ALLD"}
    assert all(r.extra == pytest.approx(0.5) for r in outcome.results)


def test_write_shares_csv_next_to_output(tmp_path):
    output = tmp_path / "nested" / "report.json"
    config = Config(output_file=str(output))
    history = [GenerationShare(generation=0, shares=[("ALLC", 0.5)], counts=[("ALLC", 1)])]
    path = write_evolution_shares_csv(config, history)
    assert path == output.parent / "evolution_shares.csv"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["generation,strategy,count,share", "0,ALLC,1,0.500000"]


def test_write_shares_csv_without_history_writes_nothing(tmp_path):
    config = Config(output_file=str(tmp_path / "out.csv"))
    assert write_evolution_shares_csv(config, []) is None
    assert not (tmp_path / "evolution_shares.csv").exists()


def test_write_shares_csv_rows_follow_history(tmp_path):
    config = Config(output_file=str(tmp_path / "out.txt"))
    history = [
        make_generation_share(0, ["B", "A"], [1, 3], 4),
        make_generation_share(1, ["B", "A"], [2, 2], 4),
    ]
    path = write_evolution_shares_csv(config, history)
    rows = path.read_text(encoding="utf-8").splitlines()[1:]
    assert [row.split(",")[:3] for row in rows] == [
        ["0", "A", "3"],
        ["0", "B", "1"],
        ["1", "A", "2"],
        ["1", "B", "2"],
    ]