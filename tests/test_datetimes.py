from datetime import datetime, timedelta, timezone

import pytest

from centrallog.datetimes import iso_utc, iso_utc_or_none, parse_utc


@pytest.mark.parametrize("text", ["", None, "not a date", "2024-13-45T99:00:00"])
def test_parse_invalid_returns_none(text):
    assert parse_utc(text) is None


def test_parse_with_milliseconds_round_trips():
    text = "2024-01-02T03:04:05.678Z"
    assert iso_utc(parse_utc(text)) == text


def test_parse_without_zone_is_utc():
    parsed = parse_utc("2024-01-02T03:04:05")
    assert parsed.tzinfo is not None
    assert parsed.utcoffset() == timedelta(0)
    assert parsed == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_parse_without_milliseconds_formats_zero_millis():
    assert iso_utc(parse_utc("2024-01-02T03:04:05Z")) == "2024-01-02T03:04:05.000Z"


def test_parse_sqlite_style_timestamp():
    parsed = parse_utc("2024-01-02 03:04:05")
    assert parsed == parse_utc("2024-01-02T03:04:05Z")


def test_parse_short_fraction():
    parsed = parse_utc("2024-01-02T03:04:05.5Z")
    assert parsed.microsecond == 500000


def test_iso_utc_converts_offset_to_utc():
    plus_seven = timezone(timedelta(hours=7))
    local = datetime(2024, 1, 2, 10, 0, 0, tzinfo=plus_seven)
    text = iso_utc(local)
    assert text.endswith("Z")
    assert parse_utc(text) == local


def test_iso_utc_none_is_empty():
    assert iso_utc(None) == ""


def test_iso_utc_or_none():
    assert iso_utc_or_none(None) is None
    dt = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
    assert iso_utc_or_none(dt) == iso_utc(dt)


def test_iso_utc_truncates_to_milliseconds():
    dt = datetime(2024, 1, 2, 3, 4, 5, 678999, tzinfo=timezone.utc)
    assert parse_utc(iso_utc(dt)) == dt.replace(microsecond=678000)