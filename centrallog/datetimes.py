"""UTC timestamp helpers shared by the data and network layers."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_FRACTION_RE = re.compile(r"(T|\s)(\d{2}:\d{2}:\d{2})\.(\d+)")


def _normalise_fraction(match: re.Match) -> str:
    digits = match.group(3)[:6].ljust(6, "0")
    return f"{match.group(1)}{match.group(2)}.{digits}"


def parse_utc(iso: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp, with or without milliseconds.

    A timestamp without a zone designator is taken to be UTC. Returns None
    for an empty or unparsable string.
    """
    if not iso:
        return None
    text = iso.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(_normalise_fraction, text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def iso_utc(dt: datetime | None) -> str:
    """Format @dt as ISO 8601 with milliseconds in UTC, e.g. ``...T12:00:00.000Z``.

    A naive datetime is taken as local time. None gives an empty string.
    """
    if dt is None:
        return ""
    utc = dt.astimezone(timezone.utc)
    millis = utc.microsecond // 1000
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


def iso_utc_or_none(dt: datetime | None) -> str | None:
    """Like iso_utc() but returns None for a missing timestamp (nullable column)."""
    return None if dt is None else iso_utc(dt)