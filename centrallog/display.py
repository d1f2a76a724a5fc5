"""Display helpers: event severity normalisation and chart limits."""

from __future__ import annotations

CHART_DISPLAY_POINT_COUNT = 20
"""Points shown on the dashboard ingestion chart and logger trending chart."""

READINGS_CHART_REFRESH_MS = 30_000
"""Dashboard readings chart refresh interval in milliseconds."""

_TOKEN_LEVELS = {
    "warning": "warning",
    "offline": "warning",
    "alarm": "critical",
    "critical": "critical",
    "error": "critical",
    "info": "info",
    "online": "info",
}


def display_level_for_event(event_type: str, level: str) -> str:
    """Return the UI severity (critical, warning or info) for an event.

    The event type is preferred; the stored level is the fallback.
    """
    for token in (event_type, level):
        mapped = _TOKEN_LEVELS.get(token.strip().lower())
        if mapped:
            return mapped
    return "info"