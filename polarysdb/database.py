"""Encrypted, file-backed table store with external change detection."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any

from .common import Key, is_equal
from .config import get_state_db_path
from .crypto import decrypt, encrypt
from .logger import Level, Logger, LoggerConfig

WATCH_INTERVAL = 3.0

Tables = dict[str, dict[str, Any]]


class DatabaseError(Exception):
    """Raised for missing tables, bad keys and malformed contents."""


def _write_private(path: str | os.PathLike, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)


def _parse_tables(raw: bytes) -> dict[str, dict[str, Any] | None]:
    """Decode JSON holding an object of tables; a table may be null."""
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DatabaseError(f"invalid database contents: {exc}") from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise DatabaseError("database contents must be a JSON object of tables")
    for name, records in parsed.items():
        if records is not None and not isinstance(records, dict):
            raise DatabaseError(f"table {name} must be a JSON object")
    return parsed


def _validate_import(tables: dict[str, dict[str, Any] | None]) -> Tables:
    for name, records in tables.items():
        if name == "":
            raise DatabaseError("invalid table name in import file")
        if records is None:
            raise DatabaseError(f"invalid record data for table {name}")
    return tables  # type: ignore[return-value]


class Database:
    """Tables of JSON values kept in memory and saved encrypted after every change.

    A background thread polls the file and reloads it when it changes on disk.
    """

    def __init__(
        self,
        key: Key,
        path: str | os.PathLike,
        *,
        logger: Logger | None = None,
        watch: bool = True,
        watch_interval: float = WATCH_INTERVAL,
    ) -> None:
        self._path = Path(path)
        self._key = key
        self._data: Tables = {}
        self._lock = threading.RLock()
        self._last_loaded: int | None = None
        self._logger = logger or Logger(
            LoggerConfig(min_level=Level.INFO, to_console=True, to_file=False)
        )
        self._stop = threading.Event()
        self._watch_interval = watch_interval
        self._watcher: threading.Thread | None = None

        self._load()

        if watch:
            self._watcher = threading.Thread(target=self._watch_file, daemon=True)
            self._watcher.start()

    @property
    def path(self) -> Path:
        """Location of the encrypted database file."""
        return self._path

    def exists(self, table: str) -> bool:
        """Return True if ``table`` exists."""
        with self._lock:
            return table in self._data

    def create(self, table: str) -> None:
        """Create ``table`` if it is missing and save."""
        with self._lock:
            self._data.setdefault(table, {})
            self._save()

    def write(self, table: str, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` in an existing table and save."""
        with self._lock:
            records = self._table(table)
            records[key] = value
            self._save()

    def delete(self, table: str, key: str) -> None:
        """Remove ``key`` from an existing table (if present) and save."""
        with self._lock:
            records = self._table(table)
            records.pop(key, None)
            self._save()

    def read(self, table: str, key: str) -> Any:
        """Return the value stored under ``key``; raise KeyError if the table or key is missing."""
        with self._lock:
            records = self._data.get(table)
            if records is None or key not in records:
                raise KeyError(key)
            return records[key]

    def read_batch(self, table: str) -> list[Any]:
        """Return every value in ``table``."""
        with self._lock:
            return list(self._table(table).values())

    def export(self, key: Key, path: str | os.PathLike) -> None:
        """Write the tables to ``path`` as plain, indented JSON."""
        with self._lock:
            self._authorize(key)
            data = json.dumps(self._data, indent=2, sort_keys=True).encode()
            _write_private(path, data)

    def import_data(self, key: Key, path: str | os.PathLike) -> None:
        """Replace all tables with those in a plain JSON file and save."""
        raw = Path(path).read_bytes()
        self._authorize(key)
        tables = _validate_import(_parse_tables(raw))
        with self._lock:
            self._data = tables
            self._save()

    def export_encrypted(self, key: Key, path: str | os.PathLike) -> None:
        """Write the tables to ``path`` as encrypted, indented JSON."""
        with self._lock:
            self._authorize(key)
            data = json.dumps(self._data, indent=2, sort_keys=True).encode()
            _write_private(path, encrypt(data, self._key))

    def import_encrypted(self, key: Key, path: str | os.PathLike) -> None:
        """Replace all tables with those in an encrypted file and save."""
        raw = Path(path).read_bytes()
        self._authorize(key)
        tables = _validate_import(_parse_tables(decrypt(raw, self._key)))
        with self._lock:
            self._data = tables
            self._save()

    def change_key(self, old_key: Key, new_key: Key) -> None:
        """Re-encrypt the database with ``new_key`` if ``old_key`` matches."""
        with self._lock:
            if not is_equal(self._key, old_key):
                raise DatabaseError("old key does not match current database key")
            self._key = new_key
            self._save()

    def close(self) -> None:
        """Stop the file watcher."""
        self._stop.set()
        if self._watcher is not None and self._watcher is not threading.current_thread():
            self._watcher.join(timeout=self._watch_interval + 1.0)
            self._watcher = None

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _table(self, table: str) -> dict[str, Any]:
        records = self._data.get(table)
        if records is None:
            raise DatabaseError(f"table {table} does not exist")
        return records

    def _authorize(self, key: Key) -> None:
        if not is_equal(key, self._key):
            raise DatabaseError("unauthorized access to export database")

    def _save(self) -> None:
        data = json.dumps(self._data, separators=(",", ":"), sort_keys=True).encode()
        _write_private(self._path, encrypt(data, self._key))

    def _load(self) -> None:
        try:
            stat = self._path.stat()
        except FileNotFoundError:
            return
        raw = self._path.read_bytes()
        tables = _parse_tables(decrypt(raw, self._key))
        self._data = {name: records or {} for name, records in tables.items()}
        self._last_loaded = stat.st_mtime_ns

    def _watch_file(self) -> None:
        while not self._stop.wait(self._watch_interval):
            try:
                mtime = self._path.stat().st_mtime_ns
            except FileNotFoundError:
                continue
            except OSError as exc:
                self._logger.error("error stating database file for changes: ", exc)
                continue

            if self._last_loaded is not None and mtime == self._last_loaded:
                continue

            try:
                with self._lock:
                    self._load()
            except (OSError, ValueError, DatabaseError) as exc:
                self._logger.warn("Error reloading database from file: ", exc)
            else:
                self._logger.info("Database reloaded from file successfully.")


def init_database(key: Key, dir_path: str) -> Database:
    """Open the database stored under ``~/<dir_path>/state`` and start watching it."""
    path = get_state_db_path(dir_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return Database(key, path)