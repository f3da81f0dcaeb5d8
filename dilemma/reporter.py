"""Rendering tournament and evolution results as text, CSV or JSON."""

from __future__ import annotations

import math
import sys
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from .config import Config
from .evolution import GenerationShare
from .payoff import Payoff
from .result import Result

_JSON_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"})


def _escape_json(text: str) -> str:
    return text.translate(_JSON_ESCAPES)


def _general(value: float) -> str:
    return format(value, "g")


def _fixed3(value: float) -> str:
    return f"{value:.3f}"


def _fixed6(value: float) -> str:
    return f"{value:.6f}"


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _format_payoffs(payoffs: Payoff) -> str:
    values = (payoffs.temptation, payoffs.reward, payoffs.punishment, payoffs.sucker)
    return "(" + ",".join(_general(v) for v in values) + ")"


def _format_share_list(shares: Sequence[tuple[str, float]]) -> str:
    return ", ".join(f"{name}={value:.3f}" for name, value in shares)


def _cost_entries(results: Sequence[Result]) -> list[tuple[str, float]]:
    return sorted(((r.strategy, r.cost) for r in results), key=lambda entry: entry[0])


def _format_cost_mapping(results: Sequence[Result]) -> str:
    return ", ".join(f"{name}={_round_half_away(cost)}" for name, cost in _cost_entries(results))


def _json_cost_object(results: Sequence[Result]) -> str:
    body = ",".join(
        f'"{_escape_json(name)}": {_round_half_away(cost)}' for name, cost in _cost_entries(results)
    )
    return "{" + body + "}"


@dataclass(frozen=True)
class _Column:
    header: str
    width: int
    left_align: bool
    render: Callable[[Result], str]

    def cell(self, value: str) -> str:
        return value.ljust(self.width) if self.left_align else value.rjust(self.width)


def _first_defection_cell(result: Result) -> str:
    return "NA" if result.first_defection is None else _fixed3(result.first_defection)


def _result_columns(config: Config) -> list[_Column]:
    columns = [
        _Column("Strategy", 18, True, lambda r: r.strategy),
        _Column("RawMean" if config.scb_enabled else "Mean", 12, False, lambda r: _fixed3(r.mean)),
    ]
    if config.scb_enabled:
        columns.append(_Column("NetMean", 12, False, lambda r: _fixed3(r.net_mean)))
        columns.append(_Column("Cost", 8, False, lambda r: str(_round_half_away(r.cost))))
    columns.extend(
        [
            _Column("StdDev", 12, False, lambda r: _fixed3(r.stdev)),
            _Column("CI Low", 12, False, lambda r: _fixed3(r.ci_low)),
            _Column("CI High", 12, False, lambda r: _fixed3(r.ci_high)),
            _Column("CoopRate", 12, False, lambda r: _fixed3(r.coop_rate)),
            _Column("FirstDef", 12, False, _first_defection_cell),
            _Column("EchoLen", 12, False, lambda r: _fixed3(r.echo_length)),
            _Column("Complexity", 12, False, lambda r: _fixed3(r.complexity)),
            _Column("Samples", 10, False, lambda r: str(r.samples) if r.samples else ""),
            _Column("Share", 10, False, lambda r: _fixed3(r.extra) if r.extra > 0.0 else ""),
        ]
    )
    return columns


def _table_width(columns: Sequence[_Column]) -> int:
    return 1 + sum(column.width + 3 for column in columns)


def _row(columns: Sequence[_Column], values: Sequence[str]) -> str:
    return "|" + "".join(f" {column.cell(value)} |" for column, value in zip(columns, values)) + "\n"


def build_text_report(
    config: Config, results: Sequence[Result], history: Sequence[GenerationShare]
) -> str:
    """A header describing the run, a results table and the first and last shares."""
    seed = str(config.seed) if config.use_seed else "random"
    parts = [
        f"Seed={seed}, Epsilon={config.epsilon:.3f}, Payoffs={_format_payoffs(config.payoffs)}\n"
    ]
    run_line = f"Rounds={config.rounds}, Repeats={config.repeats}"
    if config.evolve:
        run_line += f", Generations={config.generations}"
    parts.append(run_line + "\n")
    scb_line = "SCB=" + ("enabled" if config.scb_enabled else "disabled")
    if config.scb_enabled:
        mapping = _format_cost_mapping(results)
        if mapping:
            scb_line += f", Costs={mapping}"
    parts.append(scb_line + "\n")

    columns = _result_columns(config)
    separator = "-" * _table_width(columns) + "\n"
    parts.append(separator)
    parts.append(_row(columns, [column.header for column in columns]))
    parts.append(separator)
    parts.extend(_row(columns, [column.render(result) for column in columns]) for result in results)
    parts.append(separator)

    if history:
        first, last = history[0], history[-1]
        parts.append(f"Generation {first.generation}: {_format_share_list(first.shares)}\n")
        if last.generation != first.generation:
            parts.append(f"Generation {last.generation}: {_format_share_list(last.shares)}\n")
    return "".join(parts)


def render_csv_report(config: Config, results: Sequence[Result]) -> str:
    """One CSV row per result, with the run settings repeated on every row."""
    header = "strategy,mean"
    if config.scb_enabled:
        header += ",net_mean,cost"
    header += (
        ",stdev,ci95_low,ci95_high,coop_rate,first_defection,echo_length,"
        "repeats,seed,epsilon,payoffs,complexity,samples,share"
    )
    p = config.payoffs
    payoffs = ",".join(_fixed6(v) for v in (p.temptation, p.reward, p.punishment, p.sucker))
    seed = str(config.seed) if config.use_seed else ""
    lines = [header]
    for result in results:
        fields = [f'"{result.strategy}"', _fixed6(result.mean)]
        if config.scb_enabled:
            fields += [_fixed6(result.net_mean), _fixed6(result.cost)]
        fields += [
            _fixed6(result.stdev),
            _fixed6(result.ci_low),
            _fixed6(result.ci_high),
            _fixed6(result.coop_rate),
            "NA" if result.first_defection is None else _fixed6(result.first_defection),
            _fixed6(result.echo_length),
            str(config.repeats),
            seed,
            _fixed6(config.epsilon),
            f'"{payoffs}"',
            _fixed6(result.complexity),
            str(result.samples),
            _fixed6(result.extra),
        ]
        lines.append(",".join(fields))
    return "\n".join(lines) + "\n"


def _json_result(config: Config, result: Result) -> str:
    fields = [
        ("strategy", f'"{_escape_json(result.strategy)}"'),
        ("mean", _general(result.mean)),
    ]
    if config.scb_enabled:
        fields += [("net_mean", _general(result.net_mean)), ("cost", _general(result.cost))]
    fields += [
        ("stdev", _general(result.stdev)),
        ("ci95_low", _general(result.ci_low)),
        ("ci95_high", _general(result.ci_high)),
        ("coop_rate", _general(result.coop_rate)),
        (
            "first_defection",
            "null" if result.first_defection is None else _general(result.first_defection),
        ),
        ("echo_length", _general(result.echo_length)),
        ("complexity", _general(result.complexity)),
        ("samples", str(result.samples)),
        ("share", _general(result.extra)),
        ("repeats", str(config.repeats)),
    ]
    body = ",\n".join(f'      "{key}": {value}' for key, value in fields)
    return "    {\n" + body + "\n    }"


def _json_generation(entry: GenerationShare) -> str:
    shares = ",".join(
        f'{{"strategy":"{_escape_json(name)}","share": {_general(share)}}}'
        for name, share in entry.shares
    )
    return (
        "    {\n"
        f'      "generation": {entry.generation},\n'
        f'      "shares": [{shares}]\n'
        "    }"
    )


def render_json_report(
    config: Config, results: Sequence[Result], history: Sequence[GenerationShare]
) -> str:
    """A JSON document with run metadata, results and, if present, the evolution history."""
    p = config.payoffs
    payoffs = ",".join(_general(v) for v in (p.temptation, p.reward, p.punishment, p.sucker))
    strategies = ",".join(f'"{_escape_json(name)}"' for name in config.strategy_names)
    meta = [
        f'    "rounds": {config.rounds}',
        f'    "repeats": {config.repeats}',
        f'    "epsilon": {_general(config.epsilon)}',
        f'    "payoffs": [{payoffs}]',
        f'    "seed": {config.seed if config.use_seed else "null"}',
        f'    "strategies": [{strategies}]',
        f'    "scb_enabled": {"true" if config.scb_enabled else "false"}',
    ]
    if config.scb_enabled:
        meta.append(f'    "scb_costs": {_json_cost_object(results)}')

    parts = ["{\n", '  "meta": {\n', ",\n".join(meta), "\n  },\n", '  "results": [\n']
    if results:
        parts.append(",\n".join(_json_result(config, result) for result in results) + "\n")
    parts.append("  ]")
    if history:
        parts.append(',\n  "evolution": [\n')
        parts.append(",\n".join(_json_generation(entry) for entry in history))
        parts.append("\n  ]\n")
    else:
        parts.append("\n")
    parts.append("}\n")
    return "".join(parts)


@contextmanager
def _output_stream(config: Config) -> Iterator[TextIO]:
    if not config.output_file:
        yield sys.stdout
        return
    path = Path(config.output_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = path.open("w", encoding="utf-8")
    except OSError as exc:
        raise OSError(f"Unable to open output file: {path}") from exc
    with handle:
        yield handle


def report_results(
    config: Config, results: Sequence[Result], history: Sequence[GenerationShare]
) -> None:
    """Write the report in the configured format.

    CSV and JSON go to the output file or, without one, to standard output. Text
    always goes to standard output and is also written to the output file if set.
    """
    if config.output_format == "csv":
        with _output_stream(config) as stream:
            stream.write(render_csv_report(config, results))
        return
    if config.output_format == "json":
        with _output_stream(config) as stream:
            stream.write(render_json_report(config, results, history))
        return
    report = build_text_report(config, results, history)
    sys.stdout.write(report)
    sys.stdout.flush()
    if config.output_file:
        with _output_stream(config) as stream:
            stream.write(report)