"""The command that runs a tournament or an evolution and reports on it."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from .cli import HelpRequested, config_from_args
from .evolution import EvolutionManager, GenerationShare, write_evolution_shares_csv
from .log import get_logger
from .payoff import InvalidPayoffError
from .reporter import report_results
from .result import Result
from .tournament import TournamentManager


def main(argv: Sequence[str] | None = None) -> int:
    """Run the program with the given arguments; return the exit status."""
    arguments = list(sys.argv[1:] if argv is None else argv)
    try:
        config = config_from_args(arguments)

        if config.verbose:
            get_logger().enabled = True

        results: list[Result]
        history: list[GenerationShare] = []
        if config.evolve or config.generations > 0:
            outcome = EvolutionManager().run(config)
            results = outcome.results
            history = outcome.history
            write_evolution_shares_csv(config, history)
        else:
            results = TournamentManager().run(config)

        report_results(config, results, history)

        if config.save_file:
            config.save_json(config.save_file)
    except HelpRequested as request:
        sys.stdout.write(request.text)
        sys.stdout.flush()
        return 0
    except InvalidPayoffError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())