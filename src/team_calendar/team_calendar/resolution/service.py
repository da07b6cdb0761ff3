from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import optional_location, require_mode, require_read_range, require_view
from ..core.constants import SYSTEM_OWNER_ID, SYSTEM_OWNER_NAME
from ..core.enums import CalendarView, LocationKind, ViewMode
from ..holidays.calculator import HolidayCalculator
from ..holidays.model import Holiday
from ..users.service import UserService
from .engine import ResolutionEngine
from .model import CalendarDay, ResolvedDayEntry, TeamEntry
from .views import build_calendar_days, visible_range


class CalendarService:
    """Read-side use cases: personal and team schedules, calendar grids."""

    def __init__(self, engine: ResolutionEngine, users: UserService, holidays: HolidayCalculator):
        self._engine = engine
        self._users = users
        self._holidays = holidays

    def personal(
        self,
        *,
        owner_id: int,
        start: date,
        end: date,
        location: LocationKind | str | None = None,
    ) -> List[ResolvedDayEntry]:
        require_read_range(start, end)
        return self._engine.resolve_personal(int(owner_id), start, end, optional_location(location))

    def team(
        self,
        *,
        start: date,
        end: date,
        location: LocationKind | str | None = None,
    ) -> List[TeamEntry]:
        require_read_range(start, end)
        members = self._users.directory()
        entries = self._engine.resolve_team(members.keys(), start, end, optional_location(location))

        out: List[TeamEntry] = []
        for e in entries:
            if e.owner_id == SYSTEM_OWNER_ID:
                out.append(TeamEntry(entry=e, display_name=SYSTEM_OWNER_NAME))
                continue
            user = members[e.owner_id]
            out.append(TeamEntry(entry=e, display_name=user.display_name, avatar_url=user.avatar_url))
        return out

    def calendar(
        self,
        *,
        owner_id: int,
        view: CalendarView | str,
        anchor: date,
        mode: ViewMode | str = ViewMode.PERSONAL,
        location: LocationKind | str | None = None,
        today: Optional[date] = None,
    ) -> List[CalendarDay]:
        start, end = visible_range(require_view(view), anchor)
        if require_mode(mode) == ViewMode.TEAM:
            entries = [t.entry for t in self.team(start=start, end=end, location=location)]
        else:
            entries = self.personal(owner_id=owner_id, start=start, end=end, location=location)

        return build_calendar_days(entries, start, end, anchor=anchor, today=today or today_local())

    def holidays(self, *, start: date, end: date) -> Sequence[Holiday]:
        require_read_range(start, end)
        return self._holidays.holidays_in_range(start, end)
