from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ..core.enums import LocationKind, SourceKind


@dataclass(frozen=True)
class ResolvedDayEntry:
    """Display-ready outcome for one (owner, day); recomputed on every query.

    ``source_id`` is the one-time entry id or recurring rule id; holidays
    have none.
    """

    owner_id: int
    work_date: date
    location: LocationKind
    notes: Optional[str]
    source_kind: SourceKind
    source_id: Optional[int] = None


@dataclass(frozen=True)
class CalendarDay:
    """One cell of a month/week/day grid."""

    work_date: date
    is_today: bool
    is_current_month: bool
    entries: List[ResolvedDayEntry] = field(default_factory=list)


@dataclass(frozen=True)
class TeamEntry:
    """Resolved entry with the owner's display details for team views."""

    entry: ResolvedDayEntry
    display_name: str
    avatar_url: Optional[str] = None
