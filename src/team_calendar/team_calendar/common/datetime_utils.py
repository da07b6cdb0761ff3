from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from ..core.exceptions import ValidationError

_ISO_DAY = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string into a calendar day.

    ISO date-time strings are cut to their calendar-day part, so
    ``2025-06-02T00:00:00.000Z`` and ``2025-06-02`` match the same stored day.
    """

    v = (value or "").strip()
    if len(v) > 10 and v[10] in ("T", " "):
        v = v[:10]
    if not _ISO_DAY.fullmatch(v):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    return parse_iso_date(str(value))


def to_calendar_day(value: date | datetime) -> date:
    """Drop the time component; stored and resolved days are plain dates."""
    if isinstance(value, datetime):
        return value.date()
    return value


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day in [start, end]; nothing when end < start."""
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def format_iso(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def today_local() -> date:
    """Current local day.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()
