"""Elapsed wall-clock time measured with a monotonic clock."""

from __future__ import annotations

import time


class Timer:
    """Measures seconds since creation or the last reset."""

    def __init__(self) -> None:
        self._start = time.monotonic()

    def reset(self) -> None:
        self._start = time.monotonic()

    def elapsed_seconds(self) -> float:
        return time.monotonic() - self._start