from dataclasses import replace

from centrallog.models import (
    AppSettings,
    LoggerInfo,
    LoggerSensor,
    SensorReading,
    SystemEvent,
)


def test_app_settings_defaults():
    settings = AppSettings()
    assert settings.theme == "dark"
    assert settings.system_timezone == "Asia/Ho_Chi_Minh"
    assert settings.data_retention_days == 30
    assert settings.maintenance_mode is False


def test_app_settings_equality_and_replace():
    settings = AppSettings()
    changed = replace(settings, theme="light")
    assert changed != settings
    assert replace(changed, theme="dark") == settings


def test_logger_info_defaults():
    info = LoggerInfo(station_code="ST1", host="localhost")
    assert info.modbus_port == 5020
    assert info.api_port == 8080
    assert info.status == "offline"
    assert info.last_revision == -1
    assert info.last_seen is None
    assert info.created_at is None


def test_logger_sensor_defaults():
    sensor = LoggerSensor()
    assert sensor.sensor_type == "UNKNOWN"
    assert sensor.active is True
    assert sensor.parent_edge_sensor_id is None
    assert sensor.all_parent_ids == []


def test_logger_sensor_parent_lists_are_independent():
    first = LoggerSensor()
    second = LoggerSensor()
    first.all_parent_ids.append(3)
    assert second.all_parent_ids == []
    assert first.all_parent_ids == [3]


def test_sensor_reading_defaults():
    reading = SensorReading(sensor_id=7, value=1.5)
    assert reading.valid is True
    assert reading.alarm is False
    assert reading.stale is False
    assert reading.recorded_at is None
    assert (reading.sensor_id, reading.value) == (7, 1.5)


def test_system_event_defaults():
    event = SystemEvent(event_type="Info", message="started")
    assert event.level == "info"
    assert event.logger_id is None
    assert event.created_at is None