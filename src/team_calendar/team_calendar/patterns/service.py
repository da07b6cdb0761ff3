from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..common.datetime_utils import iter_days, to_calendar_day, today_local
from ..common.validators import clean_notes, require_location, require_owner_id, require_range
from ..core.constants import HOLIDAY_REFRESH_DAYS
from ..core.enums import LocationKind, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..holidays.calculator import HolidayCalculator
from .model import OneTimeEntry, RangeUpsert, RecurringRule, Weekday, WeekdaySet
from .repository import PatternRepository

logger = logging.getLogger(__name__)

DaysInput = Union[WeekdaySet, Mapping[str, object], Iterable[Union[Weekday, int, str]]]


def _require_days(days_of_week: DaysInput) -> WeekdaySet:
    if isinstance(days_of_week, WeekdaySet):
        days = days_of_week
    elif isinstance(days_of_week, Mapping):
        days = WeekdaySet.from_flags(days_of_week)
    elif isinstance(days_of_week, (str, bytes)):
        raise ValidationError("daysOfWeek must be a list of weekdays")
    else:
        days = WeekdaySet.of(days_of_week or [])

    if not days:
        raise ValidationError("A recurring rule needs at least one weekday")
    return days


class PatternService:
    """Mutation coordinator for one-time entries and recurring rules.

    Collision policy, applied on every write path:
    - A new explicit entry replaces the owner's existing entry for that day.
    - On a computed public holiday, a non-holiday write clears the owner's
      stored entry for the day and stores nothing (the holiday wins
      physically, not only on display).
    - A stored ``public_holiday`` entry is kept when something else is
      written over it.
    - Explicit ``public_holiday`` writes are stored like any other entry.
    """

    def __init__(self, patterns: PatternRepository, holidays: HolidayCalculator):
        self._patterns = patterns
        self._holidays = holidays

    def _upsert_day(
        self,
        repo: PatternRepository,
        *,
        owner_id: int,
        work_date: date,
        location: LocationKind,
        notes: Optional[str],
    ) -> Tuple[Optional[OneTimeEntry], bool]:
        """Apply the collision policy for one day.

        Returns (entry now on that day, whether the new data was stored).
        """

        if location != LocationKind.PUBLIC_HOLIDAY:
            existing = repo.get_one_time_for_owner_and_date(owner_id=owner_id, work_date=work_date)
            if existing and existing.location == LocationKind.PUBLIC_HOLIDAY:
                return existing, False

            holiday = self._holidays.holiday_for(work_date)
            if holiday:
                if existing and repo.delete_one_time_for_owner_and_date(owner_id=owner_id, work_date=work_date):
                    logger.info("Cleared entry of owner=%s on %s (%s)", owner_id, work_date, holiday.name)
                return None, False

        entry = repo.upsert_one_time(owner_id=owner_id, work_date=work_date, location=location, notes=notes)
        return entry, True

    def _require_own_entry(self, *, entry_id: int, requesting_owner_id: int) -> OneTimeEntry:
        entry = self._patterns.get_one_time(entry_id=int(entry_id))
        if not entry:
            raise NotFoundError("Work pattern not found")
        if entry.owner_id != int(requesting_owner_id):
            raise AuthorizationError("Not authorized to change this pattern")
        return entry

    def _require_own_rule(self, *, rule_id: int, requesting_owner_id: int) -> RecurringRule:
        rule = self._patterns.get_recurring(rule_id=int(rule_id))
        if not rule:
            raise NotFoundError("Recurring pattern not found")
        if rule.owner_id != int(requesting_owner_id):
            raise AuthorizationError("Not authorized to change this pattern")
        return rule

    # One-time entries
    def list_one_time(self, *, owner_id: int) -> Sequence[OneTimeEntry]:
        return self._patterns.list_one_time_for_owner(owner_id=int(owner_id))

    def upsert_one_time(
        self,
        *,
        owner_id: int,
        work_date: date,
        location: LocationKind | str,
        notes: Optional[str] = None,
    ) -> Optional[OneTimeEntry]:
        """Create or update the owner's entry for one day.

        Returns None when a public holiday owns the day and nothing was
        stored. When a stored holiday entry is kept, that entry is returned
        unchanged.
        """

        owner_id = require_owner_id(owner_id)
        location = require_location(location)
        work_date = to_calendar_day(work_date)

        with self._patterns.transaction() as tx:
            entry, stored = self._upsert_day(
                tx, owner_id=owner_id, work_date=work_date, location=location, notes=clean_notes(notes)
            )

        if stored:
            logger.info("Stored %s for owner=%s on %s", location.value, owner_id, work_date)
        return entry

    def upsert_range(
        self,
        *,
        owner_id: int,
        start: date,
        end: date,
        location: LocationKind | str,
        notes: Optional[str] = None,
    ) -> RangeUpsert:
        """Upsert every day in [start, end] as one transaction.

        Holiday days are skipped by the collision policy and reported in
        ``skipped``; any error rolls the whole range back.
        """

        owner_id = require_owner_id(owner_id)
        location = require_location(location)
        start, end = to_calendar_day(start), to_calendar_day(end)
        require_range(start, end)
        notes = clean_notes(notes)

        entries: List[OneTimeEntry] = []
        skipped: List[date] = []
        with self._patterns.transaction() as tx:
            for day in iter_days(start, end):
                entry, stored = self._upsert_day(tx, owner_id=owner_id, work_date=day, location=location, notes=notes)
                if stored and entry is not None:
                    entries.append(entry)
                else:
                    skipped.append(day)

        logger.info(
            "Stored %s for owner=%s from %s to %s (%d days, %d skipped)",
            location.value,
            owner_id,
            start,
            end,
            len(entries),
            len(skipped),
        )
        return RangeUpsert(entries=entries, skipped=skipped)

    def update_one_time(
        self,
        *,
        entry_id: int,
        requesting_owner_id: int,
        location: LocationKind | str | None = None,
        notes: Optional[str] = None,
        work_date: Optional[date] = None,
    ) -> OneTimeEntry:
        """Edit an entry; fields left as None keep their value.

        Raises ConflictError, leaving everything unchanged, when a public
        holiday refuses the (possibly new) day.
        """

        entry = self._require_own_entry(entry_id=entry_id, requesting_owner_id=requesting_owner_id)
        new_location = require_location(location) if location is not None else entry.location
        new_notes = clean_notes(notes) if notes is not None else entry.notes
        target = to_calendar_day(work_date) if work_date is not None else entry.work_date

        with self._patterns.transaction() as tx:
            if target == entry.work_date:
                if new_location != LocationKind.PUBLIC_HOLIDAY and self._holidays.holiday_for(target):
                    raise ConflictError(f"{target.isoformat()} is a public holiday")
                tx.update_one_time(entry_id=entry.entry_id, location=new_location, notes=new_notes)
                result = tx.get_one_time(entry_id=entry.entry_id)
            else:
                result, stored = self._upsert_day(
                    tx, owner_id=entry.owner_id, work_date=target, location=new_location, notes=new_notes
                )
                if not stored:
                    raise ConflictError(f"{target.isoformat()} is a public holiday")
                tx.delete_one_time(entry_id=entry.entry_id)

        if result is None:
            raise NotFoundError("Work pattern not found")
        logger.info("Updated work pattern %s (owner=%s) on %s", entry.entry_id, entry.owner_id, target)
        return result

    def delete_one_time(self, *, entry_id: int, requesting_owner_id: int) -> bool:
        self._require_own_entry(entry_id=entry_id, requesting_owner_id=requesting_owner_id)
        ok = self._patterns.delete_one_time(entry_id=int(entry_id))
        logger.info("Deleted work pattern %s (owner=%s): %s", entry_id, requesting_owner_id, ok)
        return ok

    def admin_upsert_one_time(
        self,
        *,
        current_role: Role,
        owner_id: int,
        work_date: date,
        location: LocationKind | str,
        notes: Optional[str] = None,
    ) -> Optional[OneTimeEntry]:
        """Same as upsert_one_time, on behalf of another owner."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        return self.upsert_one_time(owner_id=owner_id, work_date=work_date, location=location, notes=notes)

    def admin_upsert_range(
        self,
        *,
        current_role: Role,
        owner_id: int,
        start: date,
        end: date,
        location: LocationKind | str,
        notes: Optional[str] = None,
    ) -> RangeUpsert:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        return self.upsert_range(owner_id=owner_id, start=start, end=end, location=location, notes=notes)

    def admin_delete_one_time(self, *, current_role: Role, entry_id: int) -> bool:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        if not self._patterns.get_one_time(entry_id=int(entry_id)):
            raise NotFoundError("Work pattern not found")
        return self._patterns.delete_one_time(entry_id=int(entry_id))

    def refresh_holidays(self, *, owner_id: int, today: Optional[date] = None) -> int:
        """Replace the owner's stored holiday entries for the coming year.

        Stored ``public_holiday`` entries in the window are removed, then an
        explicit entry is written for each computed holiday.
        """

        owner_id = require_owner_id(owner_id)
        start = today or today_local()
        end = start + timedelta(days=HOLIDAY_REFRESH_DAYS)
        holidays = self._holidays.holidays_in_range(start, end)

        with self._patterns.transaction() as tx:
            for entry in tx.list_one_time_for_owner_in_range(owner_id=owner_id, start=start, end=end):
                if entry.location == LocationKind.PUBLIC_HOLIDAY:
                    tx.delete_one_time(entry_id=entry.entry_id)
            for holiday in holidays:
                tx.upsert_one_time(
                    owner_id=owner_id,
                    work_date=holiday.work_date,
                    location=LocationKind.PUBLIC_HOLIDAY,
                    notes=holiday.name,
                )

        logger.info("Refreshed %d public holidays for owner=%s", len(holidays), owner_id)
        return len(holidays)

    # Recurring rules
    def list_recurring(self, *, owner_id: int) -> Sequence[RecurringRule]:
        return self._patterns.list_recurring_for_owner(owner_id=int(owner_id))

    def upsert_recurring(
        self,
        *,
        owner_id: int,
        location: LocationKind | str,
        days_of_week: DaysInput,
        notes: Optional[str] = None,
    ) -> RecurringRule:
        owner_id = require_owner_id(owner_id)
        location = require_location(location)
        days = _require_days(days_of_week)

        rule = self._patterns.insert_recurring(owner_id=owner_id, location=location, days=days, notes=clean_notes(notes))
        logger.info("Created recurring rule %s for owner=%s (%s)", rule.rule_id, owner_id, ",".join(days.names()))
        return rule

    def update_recurring(
        self,
        *,
        rule_id: int,
        requesting_owner_id: int,
        location: LocationKind | str | None = None,
        days_of_week: Optional[DaysInput] = None,
        notes: Optional[str] = None,
    ) -> RecurringRule:
        rule = self._require_own_rule(rule_id=rule_id, requesting_owner_id=requesting_owner_id)
        new_location = require_location(location) if location is not None else rule.location
        new_days = _require_days(days_of_week) if days_of_week is not None else rule.days
        new_notes = clean_notes(notes) if notes is not None else rule.notes

        if not self._patterns.update_recurring(rule_id=rule.rule_id, location=new_location, days=new_days, notes=new_notes):
            raise NotFoundError("Recurring pattern not found")

        return RecurringRule(
            rule_id=rule.rule_id,
            owner_id=rule.owner_id,
            location=new_location,
            days=new_days,
            notes=new_notes,
            created_at=rule.created_at,
        )

    def delete_recurring(self, *, rule_id: int, requesting_owner_id: int) -> bool:
        self._require_own_rule(rule_id=rule_id, requesting_owner_id=requesting_owner_id)
        return self._patterns.delete_recurring(rule_id=int(rule_id))

    def admin_delete_recurring(self, *, current_role: Role, rule_id: int) -> bool:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin only")
        if not self._patterns.get_recurring(rule_id=int(rule_id)):
            raise NotFoundError("Recurring pattern not found")
        return self._patterns.delete_recurring(rule_id=int(rule_id))
