from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from src.team_calendar.team_calendar.core.enums import LocationKind, Role
from src.team_calendar.team_calendar.patterns.model import OneTimeEntry, RecurringRule, WeekdaySet
from src.team_calendar.team_calendar.users.model import User


class InMemoryPatterns:
    """Pattern store held in dicts.

    ``transaction()`` snapshots the state and restores it if the block
    raises, like a database rollback. ``fail_on`` makes upserts on that day
    raise, to exercise rollback paths.
    """

    def __init__(self):
        self.entries: dict[int, OneTimeEntry] = {}
        self.rules: dict[int, RecurringRule] = {}
        self._next_entry = 0
        self._next_rule = 0
        self.fail_on: Optional[date] = None
        self.transactions = 0

    @contextmanager
    def transaction(self):
        snapshot = (copy.copy(self.entries), copy.copy(self.rules), self._next_entry, self._next_rule)
        self.transactions += 1
        try:
            yield self
        except Exception:
            self.entries, self.rules, self._next_entry, self._next_rule = snapshot
            raise

    # helpers for arranging tests
    def add_entry(self, owner_id: int, work_date: date, location: LocationKind, notes=None) -> OneTimeEntry:
        return self.upsert_one_time(owner_id=owner_id, work_date=work_date, location=location, notes=notes)

    def add_rule(self, owner_id: int, location: LocationKind, days: Iterable, notes=None) -> RecurringRule:
        return self.insert_recurring(owner_id=owner_id, location=location, days=WeekdaySet.of(days), notes=notes)

    # One-time entries
    def get_one_time(self, *, entry_id: int) -> Optional[OneTimeEntry]:
        return self.entries.get(entry_id)

    def get_one_time_for_owner_and_date(self, *, owner_id: int, work_date: date) -> Optional[OneTimeEntry]:
        for e in self.entries.values():
            if e.owner_id == owner_id and e.work_date == work_date:
                return e
        return None

    def list_one_time_for_owner(self, *, owner_id: int):
        items = [e for e in self.entries.values() if e.owner_id == owner_id]
        return sorted(items, key=lambda e: e.work_date, reverse=True)

    def list_one_time_for_owner_in_range(self, *, owner_id: int, start: date, end: date):
        items = [e for e in self.entries.values() if e.owner_id == owner_id and start <= e.work_date <= end]
        return sorted(items, key=lambda e: e.work_date)

    def list_one_time_in_range(self, *, start: date, end: date):
        items = [e for e in self.entries.values() if start <= e.work_date <= end]
        return sorted(items, key=lambda e: (e.work_date, e.owner_id))

    def upsert_one_time(self, *, owner_id: int, work_date: date, location: LocationKind, notes=None) -> OneTimeEntry:
        if self.fail_on == work_date:
            raise RuntimeError("store failure")

        existing = self.get_one_time_for_owner_and_date(owner_id=owner_id, work_date=work_date)
        if existing:
            updated = replace(existing, location=location, notes=notes)
            self.entries[existing.entry_id] = updated
            return updated

        self._next_entry += 1
        entry = OneTimeEntry(
            entry_id=self._next_entry, owner_id=owner_id, work_date=work_date, location=location, notes=notes
        )
        self.entries[entry.entry_id] = entry
        return entry

    def update_one_time(self, *, entry_id: int, location: LocationKind, notes=None) -> bool:
        if entry_id not in self.entries:
            return False
        self.entries[entry_id] = replace(self.entries[entry_id], location=location, notes=notes)
        return True

    def delete_one_time(self, *, entry_id: int) -> bool:
        return self.entries.pop(entry_id, None) is not None

    def delete_one_time_for_owner_and_date(self, *, owner_id: int, work_date: date) -> bool:
        existing = self.get_one_time_for_owner_and_date(owner_id=owner_id, work_date=work_date)
        if not existing:
            return False
        del self.entries[existing.entry_id]
        return True

    # Recurring rules
    def get_recurring(self, *, rule_id: int) -> Optional[RecurringRule]:
        return self.rules.get(rule_id)

    def list_recurring_for_owner(self, *, owner_id: int):
        return sorted((r for r in self.rules.values() if r.owner_id == owner_id), key=lambda r: r.rule_id)

    def list_recurring_for_owners(self, *, owner_ids):
        wanted = set(owner_ids)
        return sorted((r for r in self.rules.values() if r.owner_id in wanted), key=lambda r: (r.owner_id, r.rule_id))

    def insert_recurring(self, *, owner_id: int, location: LocationKind, days: WeekdaySet, notes=None) -> RecurringRule:
        self._next_rule += 1
        rule = RecurringRule(rule_id=self._next_rule, owner_id=owner_id, location=location, days=days, notes=notes)
        self.rules[rule.rule_id] = rule
        return rule

    def update_recurring(self, *, rule_id: int, location: LocationKind, days: WeekdaySet, notes=None) -> bool:
        if rule_id not in self.rules:
            return False
        self.rules[rule_id] = replace(self.rules[rule_id], location=location, days=days, notes=notes)
        return True

    def delete_recurring(self, *, rule_id: int) -> bool:
        return self.rules.pop(rule_id, None) is not None


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def list_all(self):
        return sorted(self.users_by_id.values(), key=lambda u: (u.display_name, u.user_id))


def demo_users() -> list[User]:
    return [
        User(user_id=1, username="admin", display_name="Admin User", email="admin@example.com", role=Role.ADMIN),
        User(user_id=2, username="sarah", display_name="Sarah Johnson", email=None, role=Role.USER),
        User(
            user_id=3,
            username="michael",
            display_name="Michael Chen",
            email=None,
            role=Role.USER,
            avatar_url="https://example.com/m.png",
        ),
    ]
