import json

import pytest

from dilemma.app import main
from dilemma.config import Config


def test_help_prints_usage(capsys):
    assert main(["--help"]) == 0
    assert capsys.readouterr().out.startswith("Usage: ipd [options]")


def test_unknown_argument_fails(capsys):
    assert main(["--bogus"]) == 1
    assert capsys.readouterr().err.startswith("error: Unknown command line argument: --bogus")


def test_removed_option_fails(capsys):
    assert main(["--noise", "0.1"]) == 1
    assert "'--noise' has been removed" in capsys.readouterr().err


def test_invalid_payoffs_fail(capsys):
    assert main(["--payoffs", "1,2,3,4"]) == 1
    assert "invalid payoffs" in capsys.readouterr().err


def test_unknown_strategy_fails(capsys):
    assert main(["--strategies", "NOPE", "--rounds", "3"]) == 1
    assert "Unknown strategy: NOPE" in capsys.readouterr().err


def test_json_tournament_to_stdout(capsys):
    code = main(
        ["--rounds", "5", "--strategies", "ALLC,ALLD", "--seed", "1", "--format", "json"]
    )
    assert code == 0
    document = json.loads(capsys.readouterr().out)
    assert document["meta"]["rounds"] == 5
    assert document["meta"]["seed"] == 1
    names = [result["strategy"] for result in document["results"]]
    assert sorted(names) == ["ALLC", "ALLD"]
    assert names[0] == "ALLD"
    means = [result["mean"] for result in document["results"]]
    assert means == sorted(means, reverse=True)


def test_text_tournament_to_stdout(capsys):
    assert main(["--rounds", "4", "--strategies", "TFT,GRIM", "--seed", "2"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Seed=2,")
    assert "SCB=disabled" in out.splitlines()


def test_seeded_runs_are_reproducible(capsys):
    args = ["--rounds", "20", "--strategies", "RND,TFT", "--seed", "9", "--format", "csv"]
    assert main(args) == 0
    first = capsys.readouterr().out
    assert main(args) == 0
    assert capsys.readouterr().out == first


def test_save_writes_loadable_config(tmp_path, capsys):
    saved = tmp_path / "settings.json"
    code = main(
        ["--rounds", "6", "--strategies", "ALLC,TFT", "--format", "csv", "--save", str(saved)]
    )
    assert code == 0
    capsys.readouterr()
    loaded = Config()
    loaded.load_json(str(saved))
    assert loaded.rounds == 6
    assert loaded.strategy_names == ["ALLC", "TFT"]
    assert loaded.output_format == "csv"