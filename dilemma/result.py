"""The per-strategy outcome of a tournament."""

from __future__ import annotations

from dataclasses import dataclass


def _general(value: float) -> str:
    return format(value, "g")


@dataclass
class Result:
    """Aggregated scores and behaviour metrics for one strategy."""

    strategy: str = ""
    mean: float = 0.0
    variance: float = 0.0
    stdev: float = 0.0
    ci_low: float = 0.0
    ci_high: float = 0.0
    coop_rate: float = 0.0
    first_defection: float | None = None
    echo_length: float = 0.0
    complexity: float = 0.0
    samples: int = 0
    cost: float = 0.0
    net_mean: float = 0.0
    extra: float = 0.0

    def __str__(self) -> str:
        first_defection = "NA" if self.first_defection is None else f"{self.first_defection:.3f}"
        parts = [
            f"{self.strategy}: mean={self.mean:.3f}",
            f"stdev={self.stdev:.3f}",
            f"CI95=[{self.ci_low:.3f}, {self.ci_high:.3f}]",
            f"coopRate={self.coop_rate:.3f}",
            f"firstDefection={first_defection}",
            f"echoLength={self.echo_length:.3f}",
            f"complexity={self.complexity:.3f}",
            f"cost={self.cost:.3f}",
            f"netMean={self.net_mean:.3f}",
        ]
        if self.samples > 0:
            parts.append(f"samples={self.samples}")
        if self.extra != 0.0:
            parts.append(f"extra={self.extra:.3f}")
        return ", ".join(parts)

    def to_csv(self) -> str:
        """One CSV line with every metric; an absent first defection is left empty."""
        first_defection = "" if self.first_defection is None else _general(self.first_defection)
        fields = [
            f'"{self.strategy}"',
            _general(self.mean),
            _general(self.net_mean),
            _general(self.cost),
            _general(self.stdev),
            _general(self.ci_low),
            _general(self.ci_high),
            _general(self.coop_rate),
            first_defection,
            _general(self.echo_length),
            _general(self.complexity),
            str(self.samples),
            _general(self.extra),
        ]
        return ",".join(fields)