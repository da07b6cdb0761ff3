from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..common.datetime_utils import iter_days
from ..core.constants import SYSTEM_OWNER_ID
from ..core.enums import LocationKind, SourceKind, ViewMode
from ..holidays.calculator import HolidayCalculator
from ..holidays.model import Holiday
from ..patterns.model import OneTimeEntry, RecurringRule
from ..patterns.repository import PatternRepository
from .model import ResolvedDayEntry

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Turns stored entries, recurring rules and holidays into per-day entries.

    Precedence per (owner, day), first match wins:
    1. computed public holiday, unless the owner stored an explicit
       ``public_holiday`` entry that day
    2. the owner's one-time entry
    3. the owner's recurring rule for that weekday (lowest rule_id wins)
    4. nothing

    Read-only: conflicting stored entries are hidden, never deleted.
    """

    def __init__(self, patterns: PatternRepository, holidays: HolidayCalculator):
        self._patterns = patterns
        self._holidays = holidays

    def resolve(
        self,
        owner_ids: Iterable[int],
        start: date,
        end: date,
        location_filter: Optional[LocationKind] = None,
        *,
        mode: ViewMode = ViewMode.PERSONAL,
    ) -> List[ResolvedDayEntry]:
        """Resolve [start, end] for every owner, ordered by date then owner.

        In team mode each holiday is emitted once per date under
        SYSTEM_OWNER_ID instead of once per owner.
        """

        if end < start:
            return []

        owners = sorted({int(o) for o in owner_ids if int(o) != SYSTEM_OWNER_ID})
        one_time = self._one_time_index(owners, start, end)
        rules = self._rules_by_owner(owners)

        out: List[ResolvedDayEntry] = []
        for day in iter_days(start, end):
            holiday = self._holidays.holiday_for(day)
            if holiday and mode == ViewMode.TEAM:
                out.append(self._holiday_entry(SYSTEM_OWNER_ID, holiday))

            for owner_id in owners:
                entry = self._resolve_day(
                    owner_id,
                    day,
                    holiday=holiday,
                    stored=one_time.get((owner_id, day)),
                    rules=rules.get(owner_id, ()),
                    mode=mode,
                )
                if entry is not None:
                    out.append(entry)

        if location_filter is not None:
            out = [e for e in out if e.location == location_filter]
        return out

    def resolve_personal(
        self,
        owner_id: int,
        start: date,
        end: date,
        location_filter: Optional[LocationKind] = None,
    ) -> List[ResolvedDayEntry]:
        return self.resolve([owner_id], start, end, location_filter, mode=ViewMode.PERSONAL)

    def resolve_team(
        self,
        owner_ids: Iterable[int],
        start: date,
        end: date,
        location_filter: Optional[LocationKind] = None,
    ) -> List[ResolvedDayEntry]:
        return self.resolve(owner_ids, start, end, location_filter, mode=ViewMode.TEAM)

    def _resolve_day(
        self,
        owner_id: int,
        day: date,
        *,
        holiday: Optional[Holiday],
        stored: Optional[OneTimeEntry],
        rules: Sequence[RecurringRule],
        mode: ViewMode,
    ) -> Optional[ResolvedDayEntry]:
        explicit_holiday = stored is not None and stored.location == LocationKind.PUBLIC_HOLIDAY
        if holiday and not explicit_holiday:
            # Team view already carries the holiday once under the system owner.
            if mode == ViewMode.TEAM:
                return None
            return self._holiday_entry(owner_id, holiday)

        if stored is not None:
            return ResolvedDayEntry(
                owner_id=owner_id,
                work_date=day,
                location=stored.location,
                notes=stored.notes,
                source_kind=SourceKind.ONE_TIME,
                source_id=stored.entry_id,
            )

        for rule in rules:
            if rule.applies_to(day):
                return ResolvedDayEntry(
                    owner_id=owner_id,
                    work_date=day,
                    location=rule.location,
                    notes=rule.notes,
                    source_kind=SourceKind.RECURRING,
                    source_id=rule.rule_id,
                )

        return None

    @staticmethod
    def _holiday_entry(owner_id: int, holiday: Holiday) -> ResolvedDayEntry:
        return ResolvedDayEntry(
            owner_id=owner_id,
            work_date=holiday.work_date,
            location=LocationKind.PUBLIC_HOLIDAY,
            notes=holiday.name,
            source_kind=SourceKind.HOLIDAY,
        )

    def _one_time_index(self, owners: Sequence[int], start: date, end: date) -> Dict[Tuple[int, date], OneTimeEntry]:
        if not owners:
            return {}

        if len(owners) == 1:
            rows = self._patterns.list_one_time_for_owner_in_range(owner_id=owners[0], start=start, end=end)
        else:
            wanted = set(owners)
            rows = [
                e for e in self._patterns.list_one_time_in_range(start=start, end=end) if e.owner_id in wanted
            ]

        index: Dict[Tuple[int, date], OneTimeEntry] = {}
        for entry in sorted(rows, key=lambda e: e.entry_id):
            key = (entry.owner_id, entry.work_date)
            if key in index:
                logger.warning("Duplicate entries for owner=%s on %s; keeping %s", key[0], key[1], index[key].entry_id)
                continue
            index[key] = entry
        return index

    def _rules_by_owner(self, owners: Sequence[int]) -> Dict[int, List[RecurringRule]]:
        if not owners:
            return {}

        if len(owners) == 1:
            rows = self._patterns.list_recurring_for_owner(owner_id=owners[0])
        else:
            rows = self._patterns.list_recurring_for_owners(owner_ids=owners)

        by_owner: Dict[int, List[RecurringRule]] = {}
        for rule in sorted(rows, key=lambda r: r.rule_id):
            by_owner.setdefault(rule.owner_id, []).append(rule)
        return by_owner
