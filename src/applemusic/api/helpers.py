"""Helper functions for API clients.

Provides the calendar-date parser and the date-aware JSON decoder used for
every catalog response body.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, date, datetime
from typing import Any

CALENDAR_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INSTANT_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


def parse_calendar_date(date_str: str | None) -> date | None:
    """Parse a calendar date string (YYYY-MM-DD).

    Args:
        date_str: Date string such as "2023-05-19", or None.

    Returns:
        Parsed date object, or None if the string is empty, has another
        shape, or does not name a real day.
    """
    if not date_str or not CALENDAR_DATE_PATTERN.match(date_str):
        return None
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        return None


def parse_instant(value: str) -> datetime | None:
    """Parse a UTC timestamp of the form YYYY-MM-DDTHH:MM:SSZ.

    Offsets other than ``Z`` and fractional seconds are not recognized.
    """
    if not INSTANT_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=UTC)
    except ValueError:
        return None


def revive_date(value: str) -> date | datetime | str:
    """Convert a single string to a date, an instant, or leave it alone."""
    calendar_date = parse_calendar_date(value)
    if calendar_date is not None:
        return calendar_date

    instant = parse_instant(value)
    if instant is not None:
        return instant

    return value


def _revive(value: Any) -> Any:
    # Children first, then the node itself; keys are never touched
    if isinstance(value, str):
        return revive_date(value)
    if isinstance(value, dict):
        return {key: _revive(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_revive(item) for item in value]
    return value


def parse_json_with_dates(text: str | bytes) -> Any:
    """Parse JSON text, coercing date-like strings.

    Behaves like :func:`json.loads` except every string value (object
    values, array items and a bare top-level string) is passed through
    :func:`revive_date`.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
    """
    return _revive(json.loads(text))


def to_jsonable(value: Any) -> Any:
    """Inverse of the date coercion, for re-serializing decoded bodies.

    Calendar dates become ``YYYY-MM-DD`` and instants become
    ``YYYY-MM-DDTHH:MM:SSZ`` so the output decodes to an equal tree.
    """
    if isinstance(value, datetime):
        return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    return value
