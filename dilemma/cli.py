"""Building run settings from command-line arguments."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from .config import (
    OUTPUT_FORMATS,
    Config,
    ConfigError,
    parse_number,
    parse_payoffs,
    parse_scb_map,
    parse_strategies,
)

_UINT_MASK = 0xFFFFFFFF
_ULONG_LIMIT = 2**64
_UNSIGNED = re.compile(r"\s*[+-]?\d+")

_HELP = (
    "Usage: ipd [options]\n"
    "  --rounds N\n"
    "  --repeats N\n"
    "  --epsilon FLOAT             # noise probability per move (0..1)\n"
    "  --strategies LIST           # e.g. ALLC,ALLD,TFT,GRIM,PAVLOV,RND(0.3),CTFT,PROBER,Empath,Reflector\n"
    "  --payoffs T,R,P,S           # e.g. 5,3,1,0\n"
    "  --evolve 0/1\n"
    "  --generations N\n"
    "  --population N\n"
    "  --mutation FLOAT\n"
    "  --format {text|csv|json}   # output format only\n"
    "  --output FILE              # output destination only (defaults to stdout)\n"
    "  --seed N\n"
    "  --save FILE                 # save effective config to JSON (includes scb)\n"
    "  --load FILE                 # load config from JSON (command line overrides loaded values)\n"
    "  --scb [MAP]                # enable SCB; no MAP uses default complexity; MAP overrides provided entries.\n"
    "                             #   e.g. --scb ALLC=1,ALLD=1,TFT=2,GRIM=2,PAVLOV=2,CTFT=3,PROBER=3,Empath=3,Reflector=3\n"
    "  --verbose\n"
    "  --help\n"
)


class HelpRequested(Exception):
    """Raised when the arguments ask for the usage text."""

    def __init__(self, text: str) -> None:
        super().__init__("help requested")
        self.text = text


def help_text() -> str:
    """The usage text listing every option."""
    return _HELP


def _parse_seed(text: str) -> int:
    if not _UNSIGNED.fullmatch(text):
        raise ConfigError("invalid value for '--seed'.")
    value = int(text)
    if abs(value) >= _ULONG_LIMIT:
        raise ConfigError("invalid value for '--seed'.")
    return value & _UINT_MASK


def _parse_format(text: str) -> str:
    output_format = text.strip().lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError("'--format' must be one of text, csv, or json.")
    return output_format


def _parse_evolve(text: str) -> bool:
    flag = parse_number(text.strip(), "--evolve", int)
    if flag not in (0, 1):
        raise ConfigError("'--evolve' accepts only 0 or 1.")
    return flag == 1


def _int_option(name: str):
    return lambda text: parse_number(text.strip(), name, int)


def _float_option(name: str):
    return lambda text: parse_number(text.strip(), name, float)


def _trimmed(text: str) -> str:
    return text.strip()


# Option name -> (Config field, value parser), in the order options are tried.
_VALUE_OPTIONS = {
    "--rounds": ("rounds", _int_option("--rounds")),
    "--repeats": ("repeats", _int_option("--repeats")),
    "--epsilon": ("epsilon", _float_option("--epsilon")),
    "--seed": ("seed", _parse_seed),
    "--strategies": ("strategy_names", parse_strategies),
    "--payoffs": ("payoffs", parse_payoffs),
    "--generations": ("generations", _int_option("--generations")),
    "--population": ("population_size", _int_option("--population")),
    "--mutation": ("mutation_rate", _float_option("--mutation")),
    "--penalty": ("complexity_penalty", _float_option("--penalty")),
    "--format": ("output_format", _parse_format),
    "--output": ("output_file", _trimmed),
    "--evolve": ("evolve", _parse_evolve),
    "--save": ("save_file", _trimmed),
    "--load": ("load_file", _trimmed),
}


def config_from_args(argv: Sequence[str]) -> Config:
    """Build settings from arguments (without the program name).

    A ``--load`` file is read first; options given on the command line override it.
    Raises HelpRequested for ``--help`` and ConfigError for any invalid argument.
    """
    overrides: dict[str, Any] = {}
    arguments = iter(enumerate(argv))
    args = list(argv)

    for index, argument in arguments:
        if argument == "--help":
            raise HelpRequested(help_text())
        if argument == "--verbose":
            overrides["verbose"] = True
            continue
        if argument == "--noise" or argument.startswith("--noise="):
            raise ConfigError("'--noise' has been removed. Use '--epsilon'.")
        if argument == "--payoff" or argument.startswith("--payoff="):
            raise ConfigError("'--payoff' has been removed. Use '--payoffs T,R,P,S'.")

        if argument.startswith("--scb="):
            overrides["scb_enabled"] = True
            map_value = argument[len("--scb="):].strip()
            overrides["scb_costs"] = parse_scb_map(map_value) if map_value else {}
            continue
        if argument == "--scb":
            overrides["scb_enabled"] = True
            costs: dict[str, int] = {}
            if index + 1 < len(args):
                following = args[index + 1]
                if following and not following.startswith("-"):
                    next(arguments)
                    costs = parse_scb_map(following.strip())
            overrides["scb_costs"] = costs
            continue

        for option, (field_name, parse) in _VALUE_OPTIONS.items():
            if argument == option:
                try:
                    _, raw = next(arguments)
                except StopIteration:
                    raise ConfigError(f"missing value for '{option}'.") from None
            elif argument.startswith(option + "="):
                raw = argument[len(option) + 1:]
            else:
                continue
            overrides[field_name] = parse(raw)
            if field_name == "seed":
                overrides["use_seed"] = True
            break
        else:
            raise ConfigError(f"Unknown command line argument: {argument}")

    config = Config()
    load_file = overrides.get("load_file", "")
    if load_file:
        config.load_json(load_file)
        config.load_file = load_file

    for field_name, value in overrides.items():
        setattr(config, field_name, value)
    config.ensure_defaults()
    return config