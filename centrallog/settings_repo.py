"""Repository for the single ``app_settings`` row (id = 1)."""

from __future__ import annotations

import sqlite3

from centrallog.database import DatabaseError
from centrallog.models import AppSettings


class SettingsRepository:
    """Reads and writes the application settings row."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    def get(self) -> AppSettings:
        """The stored settings, or the defaults when the row is missing."""
        try:
            row = self._conn.execute(
                "SELECT theme, system_timezone, data_retention_days, maintenance_mode "
                "FROM app_settings WHERE id = 1"
            ).fetchone()
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        if row is None:
            return AppSettings()
        theme, timezone_name, retention, maintenance = row
        return AppSettings(
            theme="" if theme is None else str(theme),
            system_timezone="" if timezone_name is None else str(timezone_name),
            data_retention_days=0 if retention is None else int(retention),
            maintenance_mode=maintenance is not None and int(maintenance) != 0,
        )

    def update(self, settings: AppSettings) -> bool:
        """Write @settings; True when the row existed and was updated."""
        try:
            cursor = self._conn.execute(
                "UPDATE app_settings SET "
                "  theme = ?,"
                "  system_timezone = ?,"
                "  data_retention_days = ?,"
                "  maintenance_mode = ? "
                "WHERE id = 1",
                (
                    settings.theme,
                    settings.system_timezone,
                    settings.data_retention_days,
                    1 if settings.maintenance_mode else 0,
                ),
            )
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        return cursor.rowcount > 0