"""Plain data records stored by the repositories."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class AppSettings:
    """The single application settings row."""

    theme: str = "dark"
    system_timezone: str = "Asia/Ho_Chi_Minh"
    data_retention_days: int = 30
    maintenance_mode: bool = False


@dataclass
class LoggerInfo:
    """A registered data logger and its connection settings."""

    id: int = 0
    station_code: str = ""
    name: str = ""
    host: str = ""
    modbus_port: int = 5020
    modbus_unit_id: int = 1
    central_poll_interval_s: int = 2
    timeout_s: float = 2.0
    enabled: bool = True
    api_port: int = 8080
    api_token: str = ""
    last_revision: int = -1
    status: str = "offline"
    last_seen: datetime | None = None
    note: str = ""
    created_at: datetime | None = None


@dataclass
class LoggerSensor:
    """One catalog sensor of a logger (ANALOG, DI, DO or UNKNOWN)."""

    id: int = 0
    logger_id: int = 0
    edge_sensor_id: int = 0
    sensor_type: str = "UNKNOWN"
    name: str = ""
    unit: str = ""
    min_threshold: float | None = None
    max_threshold: float | None = None
    active: bool = True
    parent_edge_sensor_id: int | None = None
    di_type: str = ""
    all_parent_ids: list[int] = field(default_factory=list)


@dataclass
class SensorReading:
    """One stored sample of a sensor."""

    id: int = 0
    sensor_id: int = 0
    value: float = 0.0
    valid: bool = True
    alarm: bool = False
    stale: bool = False
    logger_timestamp: int = 0
    recorded_at: datetime | None = None


@dataclass
class SystemEvent:
    """An application or logger event shown in the event list."""

    id: int = 0
    logger_id: int | None = None
    event_type: str = ""
    message: str = ""
    level: str = "info"
    created_at: datetime | None = None