"""Repository for stored sensor samples (``sensor_reading``)."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Iterable

from centrallog.database import DatabaseError
from centrallog.datetimes import iso_utc
from centrallog.models import SensorReading

_INSERT_SQL = (
    "INSERT INTO sensor_reading ("
    "  sensor_id, value, valid, alarm, stale, logger_timestamp, recorded_at"
    ") VALUES (?, ?, ?, ?, ?, ?, ?)"
)


def _row_params(reading: SensorReading) -> tuple:
    when = reading.recorded_at or datetime.now(timezone.utc)
    return (
        reading.sensor_id,
        reading.value,
        1 if reading.valid else 0,
        1 if reading.alarm else 0,
        1 if reading.stale else 0,
        reading.logger_timestamp,
        iso_utc(when),
    )


class SensorReadingRepository:
    """Inserts, counts and purges sensor readings."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    def insert_batch(self, readings: Iterable[SensorReading],
                     manage_transaction: bool = True) -> None:
        """Insert every reading; a missing ``recorded_at`` becomes the current UTC time.

        With @manage_transaction the inserts run in their own transaction and
        are rolled back on failure. Pass False when the caller already holds
        a transaction on the connection. Raises DatabaseError on failure.
        """
        batch = list(readings)
        if not batch:
            return

        if manage_transaction:
            try:
                self._conn.execute("BEGIN")
            except sqlite3.Error as exc:
                raise DatabaseError(str(exc)) from exc

        try:
            for reading in batch:
                self._conn.execute(_INSERT_SQL, _row_params(reading))
        except sqlite3.Error as exc:
            if manage_transaction and self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            raise DatabaseError(str(exc)) from exc

        if manage_transaction:
            try:
                self._conn.execute("COMMIT")
            except sqlite3.Error as exc:
                if self._conn.in_transaction:
                    self._conn.execute("ROLLBACK")
                raise DatabaseError(str(exc)) from exc

    def purge_older_than(self, cutoff_utc: datetime) -> int:
        """Delete readings recorded before @cutoff_utc; returns the number deleted."""
        try:
            cursor = self._conn.execute(
                "DELETE FROM sensor_reading WHERE recorded_at < ?",
                (iso_utc(cutoff_utc),),
            )
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        return cursor.rowcount

    def count_for_sensor(self, sensor_id: int) -> int:
        """Number of stored readings for @sensor_id."""
        try:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM sensor_reading WHERE sensor_id = ?",
                (sensor_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        if row is None:
            raise DatabaseError("COUNT query returned no rows")
        return int(row[0])