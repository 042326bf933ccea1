"""Levelled logger writing to the console and/or a file."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import IO


class Level(IntEnum):
    INFO = 0
    WARN = 1
    ERROR = 2
    FATAL = 3


_PREFIXES = {
    Level.INFO: "\033[34mINFO:\033[0m ",
    Level.WARN: "\033[33mWARN:\033[0m ",
    Level.ERROR: "\033[31mERROR:\033[0m ",
    Level.FATAL: "\033[35mFATAL:\033[0m ",
}


@dataclass
class LoggerConfig:
    """Logger options."""

    log_file_path: str = ""
    min_level: Level = Level.INFO
    to_console: bool = False
    to_file: bool = False


class Logger:
    """Writes info and warnings to stdout, errors to stderr, optionally mirrored to a file."""

    def __init__(self, config: LoggerConfig | None = None) -> None:
        self.config = config or LoggerConfig()
        self._lock = threading.Lock()
        self._file: IO[str] | None = None
        if self.config.to_file and self.config.log_file_path:
            self._file = open(self.config.log_file_path, "a", encoding="utf-8")

    def _emit(self, level: Level, args: tuple) -> None:
        if self.config.min_level > level:
            return
        stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
        line = f"{_PREFIXES[level]}{stamp} {' '.join(str(a) for a in args)}\n"
        with self._lock:
            if self.config.to_console:
                console = sys.stdout if level <= Level.WARN else sys.stderr
                console.write(line)
                console.flush()
            if self.config.to_file and self._file is not None:
                self._file.write(line)
                self._file.flush()

    def info(self, *args) -> None:
        self._emit(Level.INFO, args)

    def warn(self, *args) -> None:
        self._emit(Level.WARN, args)

    def error(self, *args) -> None:
        self._emit(Level.ERROR, args)

    def fatal(self, *args) -> None:
        """Log the message and exit with status 1."""
        if self.config.min_level > Level.FATAL:
            return
        self._emit(Level.FATAL, args)
        raise SystemExit(1)

    def close(self) -> None:
        """Close the log file, if one is open."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()