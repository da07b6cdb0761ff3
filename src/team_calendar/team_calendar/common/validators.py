from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.constants import MAX_RANGE_DAYS
from ..core.enums import CalendarView, LocationKind, ViewMode
from ..core.exceptions import ValidationError


def require_location(value: LocationKind | str | None) -> LocationKind:
    if isinstance(value, LocationKind):
        return value
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"Invalid location {value!r}")
    try:
        return LocationKind((value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(k.value for k in LocationKind)
        raise ValidationError(f"Invalid location {value!r} (allowed: {allowed})")


def optional_location(value: LocationKind | str | None) -> Optional[LocationKind]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return require_location(value)


def clean_notes(value: Optional[str]) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError("notes must be text")
    return (value.strip() or None) if value else None


def require_range(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("End date must be on or after start date")
    if (end - start).days + 1 > MAX_RANGE_DAYS:
        raise ValidationError(f"Date range is limited to {MAX_RANGE_DAYS} days")


def require_owner_id(value: int) -> int:
    if isinstance(value, bool):
        raise ValidationError("Invalid owner")
    try:
        owner_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid owner")
    if owner_id <= 0:
        raise ValidationError("Invalid owner")
    return owner_id


def require_view(value: CalendarView | str | None) -> CalendarView:
    if isinstance(value, CalendarView):
        return value
    try:
        return CalendarView((value or CalendarView.MONTH.value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid view {value!r} (allowed: month, week, day)")


def require_mode(value: ViewMode | str | None) -> ViewMode:
    if isinstance(value, ViewMode):
        return value
    try:
        return ViewMode((value or ViewMode.PERSONAL.value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid mode {value!r} (allowed: personal, team)")


def require_read_range(start: date, end: date) -> None:
    """Span limit for resolved reads; a reversed range stays valid (empty)."""
    if end >= start and (end - start).days + 1 > MAX_RANGE_DAYS:
        raise ValidationError(f"Date range is limited to {MAX_RANGE_DAYS} days")
