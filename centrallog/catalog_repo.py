"""Repository for the per-logger sensor catalog (``logger_sensor``)."""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Iterable

from centrallog.database import DatabaseError
from centrallog.models import LoggerSensor

_ENSURE_SQL = (
    "INSERT INTO logger_sensor "
    "  (logger_id, edge_sensor_id, sensor_type, name, unit, active) "
    "VALUES (?, ?, ?, '', '', 1) "
    "ON CONFLICT(logger_id, sensor_type, edge_sensor_id) DO UPDATE SET active = 1"
)

_UPSERT_SQL = (
    "INSERT INTO logger_sensor ("
    "  logger_id, edge_sensor_id, sensor_type, name, unit,"
    "  min_threshold, max_threshold, active,"
    "  parent_edge_sensor_id, di_type, all_parent_ids"
    ") VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?) "
    "ON CONFLICT(logger_id, sensor_type, edge_sensor_id) DO UPDATE SET "
    "  name                  = excluded.name,"
    "  unit                  = excluded.unit,"
    "  min_threshold         = excluded.min_threshold,"
    "  max_threshold         = excluded.max_threshold,"
    "  active                = excluded.active,"
    "  parent_edge_sensor_id = excluded.parent_edge_sensor_id,"
    "  di_type               = excluded.di_type,"
    "  all_parent_ids        = excluded.all_parent_ids"
)

_DIGITAL_PRUNE_SQL = (
    "UPDATE logger_sensor SET active = 0 "
    "WHERE logger_id = ? AND sensor_type = ? AND edge_sensor_id >= ?"
    "  AND active != 0"
)


def _serialize_parent_ids(ids: list[int]) -> str | None:
    if not ids:
        return None
    return json.dumps(list(ids), separators=(",", ":"))


def _json_int(item: Any) -> int | None:
    if isinstance(item, bool) or not isinstance(item, (int, float)):
        return None
    if isinstance(item, float):
        return int(item) if item.is_integer() else 0
    return item


def _deserialize_parent_ids(value: Any) -> list[int]:
    if not value:
        return []
    try:
        doc = json.loads(str(value))
    except ValueError:
        return []
    if not isinstance(doc, list):
        return []
    return [n for n in (_json_int(item) for item in doc) if n is not None]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _opt_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _row_to_model(row: dict[str, Any]) -> LoggerSensor:
    parent = row.get("parent_edge_sensor_id")
    active = row.get("active")
    return LoggerSensor(
        id=int(row.get("id") or 0),
        logger_id=int(row.get("logger_id") or 0),
        edge_sensor_id=int(row.get("edge_sensor_id") or 0),
        sensor_type=_text(row.get("sensor_type")),
        name=_text(row.get("name")),
        unit=_text(row.get("unit")),
        min_threshold=_opt_float(row.get("min_threshold")),
        max_threshold=_opt_float(row.get("max_threshold")),
        active=active is not None and int(active) != 0,
        parent_edge_sensor_id=None if parent is None else int(parent),
        di_type=_text(row.get("di_type")),
        all_parent_ids=_deserialize_parent_ids(row.get("all_parent_ids")),
    )


class SensorCatalogRepository:
    """Creates, updates, lists and deactivates catalog sensors."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    def _execute(self, sql: str, params: Iterable[Any] = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, tuple(params))
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    def _fetch(self, sql: str, params: Iterable[Any]) -> list[LoggerSensor]:
        cursor = self._execute(sql, params)
        names = [column[0] for column in cursor.description]
        return [_row_to_model(dict(zip(names, values))) for values in cursor.fetchall()]

    def _require(self, logger_id: int, edge_sensor_id: int, sensor_type: str) -> int:
        found = self.find_by_logger_and_edge_id(logger_id, edge_sensor_id, sensor_type)
        if found is None:
            raise DatabaseError(
                f"Sensor {sensor_type}#{edge_sensor_id} of logger {logger_id} not found after write"
            )
        return found.id

    def ensure_exists(self, logger_id: int, edge_sensor_id: int, sensor_type: str) -> int:
        """Return the row id of the sensor, creating it when unseen.

        An existing row that had been deactivated is made active again.
        """
        self._execute(_ENSURE_SQL, (logger_id, edge_sensor_id, sensor_type))
        return self._require(logger_id, edge_sensor_id, sensor_type)

    def upsert(self, sensor: LoggerSensor) -> int:
        """Insert or update @sensor's metadata; sets and returns ``sensor.id``."""
        self._execute(
            _UPSERT_SQL,
            (
                sensor.logger_id,
                sensor.edge_sensor_id,
                sensor.sensor_type,
                sensor.name,
                sensor.unit,
                sensor.min_threshold,
                sensor.max_threshold,
                1 if sensor.active else 0,
                sensor.parent_edge_sensor_id,
                sensor.di_type or None,
                _serialize_parent_ids(sensor.all_parent_ids),
            ),
        )
        sensor.id = self._require(sensor.logger_id, sensor.edge_sensor_id, sensor.sensor_type)
        return sensor.id

    def find_by_logger_and_edge_id(
        self, logger_id: int, edge_sensor_id: int, sensor_type: str
    ) -> LoggerSensor | None:
        """The catalog row for the triple, or None."""
        rows = self._fetch(
            "SELECT * FROM logger_sensor "
            "WHERE logger_id = ? AND edge_sensor_id = ? AND sensor_type = ?",
            (logger_id, edge_sensor_id, sensor_type),
        )
        return rows[0] if rows else None

    def list_by_logger_id(self, logger_id: int) -> list[LoggerSensor]:
        """All catalog rows of a logger, ordered by edge sensor id."""
        return self._fetch(
            "SELECT * FROM logger_sensor WHERE logger_id = ? ORDER BY edge_sensor_id",
            (logger_id,),
        )

    def prune_orphan_sensors(
        self,
        logger_id: int,
        live_analog_edge_ids: Iterable[int],
        max_di: int,
        max_do: int,
    ) -> int:
        """Deactivate catalog rows no longer present on the wire.

        ANALOG rows whose edge id is not in @live_analog_edge_ids are
        deactivated; an empty list skips analog pruning. DI and DO rows with
        an edge id at or above @max_di / @max_do are deactivated; a limit of
        -1 or 0 skips that type. Rows are only marked inactive, never
        deleted. Returns the number of rows deactivated.
        """
        total = 0
        live = list(live_analog_edge_ids)
        if live:
            placeholders = ",".join("?" for _ in live)
            cursor = self._execute(
                "UPDATE logger_sensor SET active = 0 "
                "WHERE logger_id = ? AND sensor_type = 'ANALOG' AND active != 0 "
                f"AND edge_sensor_id NOT IN ({placeholders})",
                (logger_id, *live),
            )
            total += cursor.rowcount

        for sensor_type, limit in (("DI", max_di), ("DO", max_do)):
            if limit <= 0:
                continue
            cursor = self._execute(_DIGITAL_PRUNE_SQL, (logger_id, sensor_type, limit))
            total += cursor.rowcount
        return total