"""Run settings: defaults, value parsing and the JSON settings file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from .payoff import Payoff

DEFAULT_STRATEGIES = (
    "ALLC",
    "ALLD",
    "TFT",
    "GRIM",
    "PAVLOV",
    "RND",
    "CTFT",
    "PROBER",
    "Empath",
    "Reflector",
)

OUTPUT_FORMATS = ("text", "csv", "json")

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_UINT_MASK = 0xFFFFFFFF

_INTEGER = re.compile(r"\s*[+-]?\d+")
_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NON_BLANK = re.compile(r"[^ \t\n\r]")
_SCALAR_END = re.compile(r"[,}\n\r]")


class ConfigError(ValueError):
    """Raised when a setting or a settings file is invalid."""


def parse_number(text: str, option_name: str, kind: type) -> int | float:
    """Parse the whole of `text` as an int or a float.

    Leading whitespace is accepted; anything left after the number is an error.
    """
    pattern = _INTEGER if kind is int else _FLOAT
    if not pattern.fullmatch(text):
        raise ConfigError(f"invalid value for '{option_name}'.")
    if kind is int:
        value = int(text)
        if not _INT_MIN <= value <= _INT_MAX:
            raise ConfigError(f"invalid value for '{option_name}'.")
        return value
    return float(text)


def parse_strategies(value: str) -> list[str]:
    """Split a comma-separated list of strategy names, dropping blank entries."""
    names = [token.strip() for token in value.split(",")]
    names = [name for name in names if name]
    if not names:
        raise ConfigError("'--strategies' requires at least one strategy.")
    return names


def parse_payoffs(value: str) -> Payoff:
    """Parse ``T,R,P,S`` into a validated payoff matrix."""
    parts = value.split(",")
    if len(parts) < 4 or (len(parts) == 4 and parts[3] == ""):
        raise ConfigError("'--payoffs' requires four comma-separated values.")
    if ",".join(parts[4:]):
        raise ConfigError("'--payoffs' requires exactly four values.")
    numbers = [parse_number(part.strip(), "--payoffs", float) for part in parts[:4]]
    return Payoff(*numbers)


def parse_scb_map(value: str) -> dict[str, int]:
    """Parse ``Name=Cost,Name=Cost`` into a cost mapping."""
    costs: dict[str, int] = {}
    for token in value.split(","):
        entry = token.strip()
        if not entry:
            continue
        key, separator, cost_text = entry.partition("=")
        if not separator:
            raise ConfigError("'--scb' mapping entries must use Strategy=Cost.")
        key, cost_text = key.strip(), cost_text.strip()
        if not key or not cost_text:
            raise ConfigError("'--scb' mapping entries require non-empty key and value.")
        costs[key] = parse_number(cost_text, "--scb", int)
    return costs


def _bracketed_end(text: str, start: int) -> int:
    """Index just past the bracket that closes the one opened at `start`."""
    opener = text[start]
    closer = "]" if opener == "[" else "}"
    depth = 1
    in_string = False
    escape = False
    for index, current in enumerate(text[start + 1 :], start=start + 1):
        if in_string:
            if current == '"' and not escape:
                in_string = False
            escape = not escape and current == "\\"
        elif current == '"':
            in_string = True
        elif current == opener:
            depth += 1
        elif current == closer:
            depth -= 1
        if depth == 0:
            return index + 1
    return len(text)


def extract_raw_value(text: str, key: str) -> str | None:
    """Return the raw text of a key's value in a flat JSON document.

    Strings come back without their quotes and unescaped-as-written; arrays and
    objects come back with their brackets; other values up to the next separator.
    """
    quoted_key = f'"{key}"'
    key_pos = text.find(quoted_key)
    if key_pos < 0:
        return None
    colon_pos = text.find(":", key_pos + len(quoted_key))
    if colon_pos < 0:
        return None
    found = _NON_BLANK.search(text, colon_pos + 1)
    if found is None:
        return None
    value_pos = found.start()
    first = text[value_pos]
    if first == '"':
        end = text.find('"', value_pos + 1)
        while end != -1 and text[end - 1] == "\\":
            end = text.find('"', end + 1)
        if end == -1:
            return None
        return text[value_pos + 1 : end]
    if first in "[{":
        return text[value_pos : _bracketed_end(text, value_pos)]
    scalar_end = _SCALAR_END.search(text, value_pos)
    end = scalar_end.start() if scalar_end else len(text)
    return text[value_pos:end]


def parse_int_map_field(text: str, key: str) -> dict[str, int] | None:
    """Parse an object of string keys to integers; None when the key is absent."""
    raw = extract_raw_value(text, key)
    if raw is None:
        return None
    trimmed = raw.strip()
    if not trimmed:
        return {}
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        raise ConfigError(f"invalid object for '{key}'.")
    costs: dict[str, int] = {}
    for token in trimmed[1:-1].split(","):
        entry = token.strip()
        if not entry:
            continue
        key_part, separator, value_part = entry.partition(":")
        if not separator:
            raise ConfigError(f"invalid entry in '{key}'.")
        key_part, value_part = key_part.strip(), value_part.strip()
        if key_part.startswith('"') and key_part.endswith('"'):
            key_part = key_part[1:-1]
        if not key_part or not value_part:
            raise ConfigError(f"invalid entry in '{key}'.")
        costs[key_part] = parse_number(value_part, key, int)
    return costs


def _int_field(text: str, key: str) -> int | None:
    raw = extract_raw_value(text, key)
    return None if raw is None else parse_number(raw.strip(), key, int)


def _float_field(text: str, key: str) -> float | None:
    raw = extract_raw_value(text, key)
    return None if raw is None else parse_number(raw.strip(), key, float)


def _bool_field(text: str, key: str) -> bool | None:
    raw = extract_raw_value(text, key)
    if raw is None:
        return None
    value = raw.strip()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ConfigError(f"invalid boolean value for '{key}'.")


def _strategies_field(text: str, key: str) -> list[str] | None:
    raw = extract_raw_value(text, key)
    if raw is None:
        return None
    if not (raw.startswith("[") and raw.endswith("]")):
        raise ConfigError("invalid strategies array in JSON config.")
    names = []
    for token in raw[1:-1].split(","):
        token = token.strip()
        if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
            names.append(token[1:-1])
    return names


_JSON_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"})


def _escape_json(text: str) -> str:
    return text.translate(_JSON_ESCAPES)


def _json_bool(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class Config:
    """Every setting of a tournament or evolution run."""

    rounds: int = 200
    repeats: int = 1
    epsilon: float = 0.0
    seed: int = 0
    use_seed: bool = False
    payoffs: Payoff = field(default_factory=Payoff)
    strategy_names: list[str] = field(default_factory=list)
    generations: int = 0
    population_size: int = 0
    mutation_rate: float = 0.0
    complexity_penalty: float = 0.0
    output_format: str = "text"
    output_file: str = ""
    verbose: bool = False
    evolve: bool = False
    save_file: str = ""
    load_file: str = ""
    scb_enabled: bool = False
    scb_costs: dict[str, int] = field(default_factory=dict)

    def ensure_defaults(self) -> None:
        """Clamp values into range and fill in what was left unset."""
        self.rounds = max(1, self.rounds)
        self.repeats = max(1, self.repeats)
        self.epsilon = min(max(self.epsilon, 0.0), 1.0)
        self.population_size = max(0, self.population_size)
        self.mutation_rate = min(max(self.mutation_rate, 0.0), 1.0)
        self.complexity_penalty = max(0.0, self.complexity_penalty)
        self.output_format = self.output_format.lower()
        if self.output_format not in OUTPUT_FORMATS:
            self.output_format = "text"
        if not self.strategy_names:
            self.strategy_names = list(DEFAULT_STRATEGIES)
        if self.population_size == 0 and self.generations > 0:
            self.population_size = len(self.strategy_names)
        self.evolve = self.evolve or self.generations > 0

    def save_json(self, path: str) -> None:
        """Write the settings as JSON; an empty path writes nothing."""
        if not path:
            return
        strategies = ", ".join(f'"{_escape_json(name)}"' for name in self.strategy_names)
        costs = ", ".join(f'"{_escape_json(name)}": {cost}' for name, cost in self.scb_costs.items())
        p = self.payoffs
        payoffs = f"{p.temptation:.6f},{p.reward:.6f},{p.punishment:.6f},{p.sucker:.6f}"
        lines = [
            f'  "rounds": {self.rounds}',
            f'  "repeats": {self.repeats}',
            f'  "epsilon": {self.epsilon:.6f}',
            f'  "payoffs": "{payoffs}"',
            f'  "strategies": [{strategies}]',
            f'  "generations": {self.generations}',
            f'  "population": {self.population_size}',
            f'  "mutation": {self.mutation_rate:.6f}',
            f'  "complexity_penalty": {self.complexity_penalty:.6f}',
            f'  "scb_enabled": {_json_bool(self.scb_enabled)}',
            f'  "scb_costs": {{{costs}}}',
            f'  "format": "{_escape_json(self.output_format)}"',
            f'  "output": "{_escape_json(self.output_file)}"',
            f'  "seed": {self.seed}',
            f'  "use_seed": {_json_bool(self.use_seed)}',
            f'  "evolve": {_json_bool(self.evolve)}',
            f'  "verbose": {_json_bool(self.verbose)}',
        ]
        document = "{\n" + ",\n".join(lines) + "\n}\n"
        try:
            Path(path).write_text(document, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to open file for writing: {path}") from exc

    def load_json(self, path: str) -> None:
        """Overwrite settings with those present in a JSON settings file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to open configuration file: {path}") from exc

        if (value := _int_field(text, "rounds")) is not None:
            self.rounds = value
        if (value := _int_field(text, "repeats")) is not None:
            self.repeats = value
        if (number := _float_field(text, "epsilon")) is not None:
            self.epsilon = number
        if (raw := extract_raw_value(text, "payoffs")) is not None:
            self.payoffs = parse_payoffs(raw)
        if (names := _strategies_field(text, "strategies")) is not None:
            self.strategy_names = names
        if (value := _int_field(text, "generations")) is not None:
            self.generations = value
        if (value := _int_field(text, "population")) is not None:
            self.population_size = value
        if (number := _float_field(text, "mutation")) is not None:
            self.mutation_rate = number
        if (number := _float_field(text, "complexity_penalty")) is not None:
            self.complexity_penalty = number
        if (raw := extract_raw_value(text, "format")) is not None:
            self.output_format = raw
        if (raw := extract_raw_value(text, "output")) is not None:
            self.output_file = raw
        if (value := _int_field(text, "seed")) is not None:
            self.seed = value & _UINT_MASK
            self.use_seed = True
        if (flag := _bool_field(text, "use_seed")) is not None:
            self.use_seed = flag
        if (flag := _bool_field(text, "evolve")) is not None:
            self.evolve = flag
        if (flag := _bool_field(text, "verbose")) is not None:
            self.verbose = flag
        if (flag := _bool_field(text, "scb_enabled")) is not None:
            self.scb_enabled = flag
        if (costs := parse_int_map_field(text, "scb_costs")) is not None:
            self.scb_costs = costs