from __future__ import annotations

from datetime import date
from typing import ContextManager, Iterable, Optional, Protocol, Sequence

from ..core.enums import LocationKind
from .model import OneTimeEntry, RecurringRule, WeekdaySet


class PatternRepository(Protocol):
    """Pattern store: one-time entries and recurring rules.

    Note: (owner_id, work_date) is unique for one-time entries. Implementations
    enforce it in storage and expose ``upsert_one_time`` as a single atomic
    statement, never as check-then-insert.
    """

    def transaction(self) -> ContextManager["PatternRepository"]:
        """Scope in which every call commits or rolls back together.

        Yields a repository bound to that scope.
        """

        raise NotImplementedError

    # One-time entries
    def get_one_time(self, *, entry_id: int) -> Optional[OneTimeEntry]:
        raise NotImplementedError

    def get_one_time_for_owner_and_date(self, *, owner_id: int, work_date: date) -> Optional[OneTimeEntry]:
        raise NotImplementedError

    def list_one_time_for_owner(self, *, owner_id: int) -> Sequence[OneTimeEntry]:
        raise NotImplementedError

    def list_one_time_for_owner_in_range(self, *, owner_id: int, start: date, end: date) -> Sequence[OneTimeEntry]:
        raise NotImplementedError

    def list_one_time_in_range(self, *, start: date, end: date) -> Sequence[OneTimeEntry]:
        """All owners, ordered by work_date then owner_id."""

        raise NotImplementedError

    def upsert_one_time(
        self,
        *,
        owner_id: int,
        work_date: date,
        location: LocationKind,
        notes: Optional[str] = None,
    ) -> OneTimeEntry:
        """Create or update the entry for (owner_id, work_date)."""

        raise NotImplementedError

    def update_one_time(
        self,
        *,
        entry_id: int,
        location: LocationKind,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_one_time(self, *, entry_id: int) -> bool:
        raise NotImplementedError

    def delete_one_time_for_owner_and_date(self, *, owner_id: int, work_date: date) -> bool:
        raise NotImplementedError

    # Recurring rules
    def get_recurring(self, *, rule_id: int) -> Optional[RecurringRule]:
        raise NotImplementedError

    def list_recurring_for_owner(self, *, owner_id: int) -> Sequence[RecurringRule]:
        """Ordered by rule_id."""

        raise NotImplementedError

    def list_recurring_for_owners(self, *, owner_ids: Iterable[int]) -> Sequence[RecurringRule]:
        raise NotImplementedError

    def insert_recurring(
        self,
        *,
        owner_id: int,
        location: LocationKind,
        days: WeekdaySet,
        notes: Optional[str] = None,
    ) -> RecurringRule:
        raise NotImplementedError

    def update_recurring(
        self,
        *,
        rule_id: int,
        location: LocationKind,
        days: WeekdaySet,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_recurring(self, *, rule_id: int) -> bool:
        raise NotImplementedError
