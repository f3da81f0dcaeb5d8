"""A small switchable logger writing timestamped lines to standard error."""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


_PREFIXES = {
    LogLevel.DEBUG: "[DEBUG]",
    LogLevel.INFO: "[INFO ]",
    LogLevel.WARNING: "[WARN ]",
    LogLevel.ERROR: "[ERROR]",
}


class Logger:
    """Writes messages at or above `level` while `enabled` is set."""

    def __init__(
        self,
        enabled: bool = False,
        level: LogLevel = LogLevel.INFO,
        stream: TextIO | None = None,
    ) -> None:
        self.enabled = enabled
        self.level = level
        self._stream = stream
        self._lock = threading.Lock()

    def log(self, level: LogLevel, message: str) -> None:
        if not self.enabled or level < self.level:
            return
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"{_PREFIXES[LogLevel(level)]} {stamp} - {message}\n"
        with self._lock:
            stream = self._stream if self._stream is not None else sys.stderr
            stream.write(line)


_shared_logger = Logger()


def get_logger() -> Logger:
    """Return the logger shared by the whole program."""
    return _shared_logger


def log_debug(message: str) -> None:
    _shared_logger.log(LogLevel.DEBUG, message)


def log_info(message: str) -> None:
    _shared_logger.log(LogLevel.INFO, message)


def log_warning(message: str) -> None:
    _shared_logger.log(LogLevel.WARNING, message)


def log_error(message: str) -> None:
    _shared_logger.log(LogLevel.ERROR, message)