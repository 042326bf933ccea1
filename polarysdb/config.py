"""Locations of database files."""

from __future__ import annotations

from pathlib import Path

STATE_SUBDIR = "state"
STATE_FILE = "state.rdb"


def _home_subdir(subdir: str, directory: str) -> Path:
    path = Path.home() / directory / subdir
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_state_db_path(directory: str) -> Path:
    """Return ``~/<directory>/state/state.rdb``, creating the folder if needed."""
    return _home_subdir(STATE_SUBDIR, directory) / STATE_FILE