# dilemma

Run iterated prisoner's dilemma tournaments between classic strategies and
watch how a population of them evolves over generations.

## Installation

```
pip install .
```

This installs the `ipd` command. It has no dependencies outside the standard
library.

## Running a tournament

Every strategy plays every strategy, itself included, for a number of rounds.
A strategy's score in a match is its average payoff per round. Results are
ranked by mean score, best first (by net mean when `--scb` is on):

```
ipd --rounds 200 --repeats 5 --strategies ALLC,ALLD,TFT,GRIM,PAVLOV --seed 42
```

Built-in strategies:

| Name | Behaviour |
| --- | --- |
| `ALLC` | always cooperates |
| `ALLD` | always defects |
| `TFT` | cooperates first, then copies the opponent's last move |
| `GRIM` | cooperates until the opponent defects once, then always defects |
| `PAVLOV` | win-stay, lose-shift |
| `RND`, `RND(p)` | cooperates with probability 0.5, or `p` (between 0 and 1) |
| `CTFT` (also `CONTRITE`) | tit-for-tat that makes amends after exploiting a cooperator |
| `PROBER` | opens D, C, C; exploits an opponent that cooperated twice, else plays tit-for-tat |
| `Empath` | mirrors the opponent, with randomised remorse after exploiting a cooperator |
| `Reflector` | cooperates with a learned level of trust in the opponent |

With no `--strategies`, all of them except `CONTRITE` play.

## Options

| Option | Meaning |
| --- | --- |
| `--rounds N` | rounds per match (default 200, at least 1) |
| `--repeats N` | how often each pairing is played (default 1, at least 1) |
| `--epsilon FLOAT` | probability that any single move is flipped by noise (clamped to 0..1) |
| `--payoffs T,R,P,S` | payoff matrix; must satisfy T>R>P>S and 2R>T+S (default 5,3,1,0) |
| `--strategies LIST` | comma-separated strategy names |
| `--seed N` | fixed random seed for reproducible runs |
| `--evolve 0/1` | switch evolutionary mode on or off |
| `--generations N` | number of generations to evolve; above 0 turns evolution on |
| `--population N` | population size (defaults to the number of strategies when evolving) |
| `--mutation FLOAT` | share of each group that mutates into other strategies (0..1) |
| `--penalty FLOAT` | fitness penalty per unit of strategy complexity during evolution |
| `--scb [MAP]` | subtract a cost from each strategy's mean; without a map the cost is the strategy's complexity, e.g. `--scb ALLC=1,TFT=2` |
| `--format {text,csv,json}` | output format |
| `--output FILE` | report destination |
| `--save FILE` | save the effective settings as JSON |
| `--load FILE` | load JSON settings; command-line options override them |
| `--verbose` | switch on the shared logger in `dilemma.log` |
| `--help` | show usage |

Options taking a value accept both `--rounds 50` and `--rounds=50`.

CSV and JSON reports go to the `--output` file, or to standard output without
one. The text report is always printed to standard output and, when `--output`
is given, also written to that file.

Invalid arguments, payoffs or settings files print an error to standard error
and the command exits with status 1.

## Evolution

```
ipd --generations 50 --population 100 --mutation 0.01 --seed 7
```

Each generation, a tournament is played. A strategy's fitness is its net mean
minus `--penalty` times its complexity; the next generation is drawn with
probabilities proportional to each strategy's count times its fitness above
the weakest. Then the given fraction of each group mutates into other
strategies. The final results carry each strategy's population share, and the
counts and shares of every generation are written to `evolution_shares.csv`
(in the directory of the `--output` file, or in the current directory).

## Using it from Python

```python
from dilemma.config import Config
from dilemma.tournament import TournamentManager
from dilemma.reporter import build_text_report

config = Config(rounds=100, strategy_names=["TFT", "ALLD", "PAVLOV"])
config.ensure_defaults()
results = TournamentManager().run(config)
print(build_text_report(config, results, []))
```

Other entry points:

- `dilemma.match.Match` plays a single match between two strategies.
- `dilemma.factory.default_factory()` builds strategies by name; register your
  own `dilemma.strategies.Strategy` subclasses on a `StrategyFactory`.
- `dilemma.evolution.EvolutionManager().run(config)` runs an evolution and
  returns the results and per-generation history.
- `dilemma.reporter.render_csv_report` and `render_json_report` return reports
  as strings.

## Limitations

- `--verbose` only enables the logger; the run itself writes no log messages.
- The settings-file reader understands the flat documents written by `--save`,
  not arbitrary JSON.
- Results are reported as tables and files only; there is no plotting.