"""Iterated prisoner's dilemma tournaments, evolutionary dynamics and reports."""

__version__ = "0.1.0"