"""SQLite connection used by the repository layer, with schema setup and migrations."""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

SCHEMA_VERSION = 3
"""Value of ``PRAGMA user_version`` that this code expects."""

MEMORY_PATH = ":memory:"
"""Database path for an in-memory database."""

# (version the step belongs to, column label, statement)
_MIGRATIONS = (
    (2, "parent_edge_sensor_id",
     "ALTER TABLE logger_sensor ADD COLUMN parent_edge_sensor_id INTEGER"),
    (2, "di_type", "ALTER TABLE logger_sensor ADD COLUMN di_type TEXT"),
    (3, "all_parent_ids", "ALTER TABLE logger_sensor ADD COLUMN all_parent_ids TEXT"),
)


class DatabaseError(Exception):
    """Raised when the database cannot be opened, initialised or queried."""


def _split_statements(script: str) -> list[str]:
    return [part.strip() for part in script.split(";") if part.strip()]


class Database:
    """Owns the SQLite connection: opens it, applies the schema, migrates old files."""

    def __init__(self) -> None:
        self._conn: sqlite3.Connection | None = None
        self._path: str | None = None

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def default_path() -> Path:
        """``~/.central-logger/central-logger.db``"""
        return Path.home() / ".central-logger" / "central-logger.db"

    def open(self, database_path: str | os.PathLike | None = None,
             schema_path: str | os.PathLike | None = None) -> None:
        """Open or create the database at @database_path.

        Parent directories are created, foreign keys are enabled, and a new
        database gets the schema script at @schema_path. An existing database
        is migrated to SCHEMA_VERSION. Raises DatabaseError on failure.
        """
        if self._conn is not None:
            self.close()

        path = str(database_path) if database_path is not None else str(self.default_path())
        in_memory = path == MEMORY_PATH
        if not in_memory:
            self._ensure_parent_directory(path)
        fresh_before = in_memory or not os.path.exists(path)

        try:
            conn = sqlite3.connect(path, isolation_level=None)
        except sqlite3.Error as exc:
            raise DatabaseError(f"Cannot open database '{path}': {exc}") from exc
        self._conn = conn
        self._path = path

        try:
            try:
                conn.execute("PRAGMA foreign_keys = ON")
            except sqlite3.Error as exc:
                raise DatabaseError(f"PRAGMA foreign_keys failed: {exc}") from exc

            if fresh_before or self._is_fresh():
                self._apply_initial_schema(schema_path)
            else:
                self._ensure_current_schema()
        except BaseException:
            self.close()
            raise

    def close(self) -> None:
        """Close the connection; safe to call when already closed."""
        if self._conn is not None:
            self._conn.close()
        self._conn = None
        self._path = None

    def is_open(self) -> bool:
        return self._conn is not None

    def connection(self) -> sqlite3.Connection:
        """The live connection for repositories. Raises DatabaseError when closed."""
        if self._conn is None:
            raise DatabaseError("Database is not open")
        return self._conn

    @staticmethod
    def _ensure_parent_directory(path: str) -> None:
        parent = Path(path).absolute().parent
        if parent.exists():
            return
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DatabaseError(f"Cannot create directory: {parent}") from exc

    def _is_fresh(self) -> bool:
        try:
            row = self.connection().execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='app_settings'"
            ).fetchone()
        except sqlite3.Error:
            return True
        return row is None

    @contextmanager
    def _transaction(self, purpose: str) -> Iterator[sqlite3.Connection]:
        conn = self.connection()
        try:
            conn.execute("BEGIN")
        except sqlite3.Error as exc:
            raise DatabaseError(f"Cannot begin {purpose} transaction: {exc}") from exc
        try:
            yield conn
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        try:
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise DatabaseError(f"{purpose.capitalize()} commit failed: {exc}") from exc

    @staticmethod
    def _read_schema(schema_path: str | os.PathLike | None) -> str:
        if schema_path is None:
            raise DatabaseError("No schema script given for a new database")
        try:
            script = Path(schema_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise DatabaseError(f"Cannot open schema '{schema_path}': {exc}") from exc
        if not script:
            raise DatabaseError(f"Schema script '{schema_path}' is empty")
        return script

    def _apply_initial_schema(self, schema_path: str | os.PathLike | None) -> None:
        script = self._read_schema(schema_path)
        with self._transaction("schema") as conn:
            for statement in _split_statements(script):
                try:
                    conn.execute(statement)
                except sqlite3.Error as exc:
                    raise DatabaseError(
                        f"Schema statement failed: {exc} — {statement}"
                    ) from exc
        try:
            self.connection().execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        except sqlite3.Error as exc:
            raise DatabaseError(f"PRAGMA user_version failed: {exc}") from exc

    def _ensure_current_schema(self) -> None:
        try:
            row = self.connection().execute("PRAGMA user_version").fetchone()
        except sqlite3.Error as exc:
            raise DatabaseError(f"PRAGMA user_version read failed: {exc}") from exc
        if row is None:
            raise DatabaseError("PRAGMA user_version returned no rows")
        version = int(row[0])
        if version < SCHEMA_VERSION:
            self._migrate(version)
        elif version > SCHEMA_VERSION:
            raise DatabaseError(
                f"Incompatible database schema (user_version={version}, "
                f"expected {SCHEMA_VERSION}). Remove the file and restart: {self._path}"
            )

    def _migrate(self, current_version: int) -> None:
        with self._transaction("migration") as conn:
            for target, column, statement in _MIGRATIONS:
                if current_version >= target:
                    continue
                try:
                    conn.execute(statement)
                except sqlite3.Error as exc:
                    if "duplicate column" not in str(exc).lower():
                        raise DatabaseError(f"Migration v{target} {column}: {exc}") from exc
            try:
                conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            except sqlite3.Error as exc:
                raise DatabaseError(f"PRAGMA user_version update failed: {exc}") from exc