"""Repository for application and logger events (``system_event``)."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

from centrallog.database import DatabaseError
from centrallog.datetimes import parse_utc
from centrallog.models import SystemEvent

DEFAULT_LIMIT = 20

_INSERT_SQL = (
    "INSERT INTO system_event (logger_id, event_type, message, level) "
    "VALUES (?, ?, ?, ?)"
)

_LIST_SQL = "SELECT * FROM system_event ORDER BY created_at DESC, id DESC LIMIT ?"

_LIST_WITH_NAME_SQL = (
    "SELECT e.id AS id, e.logger_id AS logger_id, e.event_type AS event_type, "
    "       e.message AS message, e.level AS level, e.created_at AS created_at, "
    "       l.name AS logger_name "
    "FROM system_event e "
    "LEFT JOIN logger_info l ON l.id = e.logger_id "
    "ORDER BY e.created_at DESC, e.id DESC LIMIT ?"
)


@dataclass
class SystemEventListItem:
    """An event with the name of its logger.

    ``logger_name`` is empty for app-wide events and for events whose
    logger has been deleted.
    """

    event: SystemEvent = field(default_factory=SystemEvent)
    logger_name: str = ""


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _row_to_model(row: dict[str, Any]) -> SystemEvent:
    logger_id = row.get("logger_id")
    return SystemEvent(
        id=int(row.get("id") or 0),
        logger_id=None if logger_id is None else int(logger_id),
        event_type=_text(row.get("event_type")),
        message=_text(row.get("message")),
        level=_text(row.get("level")),
        created_at=parse_utc(_text(row.get("created_at"))),
    )


def _rows(cursor: sqlite3.Cursor) -> list[dict[str, Any]]:
    names = [column[0] for column in cursor.description]
    return [dict(zip(names, values)) for values in cursor.fetchall()]


class EventRepository:
    """Stores events and lists the most recent ones."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    def _query(self, sql: str, params: tuple) -> list[dict[str, Any]]:
        try:
            return _rows(self._conn.execute(sql, params))
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    def insert(self, event: SystemEvent) -> SystemEvent:
        """Store @event, filling in its id and the database-generated ``created_at``.

        Returns the same event. Raises DatabaseError on failure.
        """
        try:
            cursor = self._conn.execute(
                _INSERT_SQL,
                (event.logger_id, event.event_type, event.message, event.level),
            )
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        event.id = int(cursor.lastrowid or 0)

        try:
            row = self._conn.execute(
                "SELECT created_at FROM system_event WHERE id = ?", (event.id,)
            ).fetchone()
        except sqlite3.Error:
            row = None
        if row is not None:
            event.created_at = parse_utc(_text(row[0]))
        return event

    def list_recent(self, limit: int = DEFAULT_LIMIT) -> list[SystemEvent]:
        """Newest events first, at most @limit of them."""
        return [_row_to_model(row) for row in self._query(_LIST_SQL, (limit,))]

    def list_recent_with_logger_name(self, limit: int = DEFAULT_LIMIT) -> list[SystemEventListItem]:
        """Like list_recent(), with each event's logger name joined in."""
        return [
            SystemEventListItem(event=_row_to_model(row), logger_name=_text(row.get("logger_name")))
            for row in self._query(_LIST_WITH_NAME_SQL, (limit,))
        ]