from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, Optional, Sequence

from ..core.enums import LocationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import OneTimeEntry, RecurringRule, WeekdaySet
from .repository import PatternRepository

_ENTRY_COLUMNS = "entry_id, owner_id, work_date, location, notes, created_at"
_RULE_COLUMNS = "rule_id, owner_id, location, days_mask, notes, created_at"


def _to_entry(r: dict) -> OneTimeEntry:
    return OneTimeEntry(
        entry_id=int(r["entry_id"]),
        owner_id=int(r["owner_id"]),
        work_date=normalize_mysql_date(r["work_date"]),
        location=LocationKind(r["location"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


def _to_rule(r: dict) -> RecurringRule:
    return RecurringRule(
        rule_id=int(r["rule_id"]),
        owner_id=int(r["owner_id"]),
        location=LocationKind(r["location"]),
        days=WeekdaySet(int(r["days_mask"])),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


class MySQLPatternRepository(PatternRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, cursor=None):
        self._conn_factory = conn_factory
        # Set when this instance lives inside a transaction() scope.
        self._bound_cur = cursor

    @contextmanager
    def _cursor(self) -> Iterator:
        if self._bound_cur is not None:
            yield self._bound_cur
            return
        with db_cursor(self._conn_factory) as (_, cur):
            yield cur

    @contextmanager
    def transaction(self) -> Iterator["MySQLPatternRepository"]:
        if self._bound_cur is not None:
            yield self
            return
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLPatternRepository(self._conn_factory, cursor=cur)

    # One-time entries
    def get_one_time(self, *, entry_id: int) -> Optional[OneTimeEntry]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM one_time_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_one_time_for_owner_and_date(self, *, owner_id: int, work_date: date) -> Optional[OneTimeEntry]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM one_time_entries WHERE owner_id=%s AND work_date=%s",
                (int(owner_id), work_date),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_one_time_for_owner(self, *, owner_id: int) -> Sequence[OneTimeEntry]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM one_time_entries
                WHERE owner_id=%s
                ORDER BY work_date DESC
                """,
                (int(owner_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_one_time_for_owner_in_range(self, *, owner_id: int, start: date, end: date) -> Sequence[OneTimeEntry]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM one_time_entries
                WHERE owner_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(owner_id), start, end),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_one_time_in_range(self, *, start: date, end: date) -> Sequence[OneTimeEntry]:
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM one_time_entries
                WHERE work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, owner_id ASC
                """,
                (start, end),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def upsert_one_time(
        self,
        *,
        owner_id: int,
        work_date: date,
        location: LocationKind,
        notes: Optional[str] = None,
    ) -> OneTimeEntry:
        with self._cursor() as cur:
            # uq_owner_date makes this a single atomic create-or-update.
            cur.execute(
                """
                INSERT INTO one_time_entries(owner_id, work_date, location, notes)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE location=VALUES(location), notes=VALUES(notes)
                """,
                (int(owner_id), work_date, location.value, notes),
            )
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM one_time_entries WHERE owner_id=%s AND work_date=%s",
                (int(owner_id), work_date),
            )
            return _to_entry(fetchone(cur))

    def update_one_time(self, *, entry_id: int, location: LocationKind, notes: Optional[str] = None) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE one_time_entries SET location=%s, notes=%s WHERE entry_id=%s",
                (location.value, notes, int(entry_id)),
            )
            # MySQL reports 0 affected rows when values are unchanged.
            cur.execute("SELECT 1 AS ok FROM one_time_entries WHERE entry_id=%s", (int(entry_id),))
            return fetchone(cur) is not None

    def delete_one_time(self, *, entry_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute("DELETE FROM one_time_entries WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0

    def delete_one_time_for_owner_and_date(self, *, owner_id: int, work_date: date) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "DELETE FROM one_time_entries WHERE owner_id=%s AND work_date=%s",
                (int(owner_id), work_date),
            )
            return cur.rowcount > 0

    # Recurring rules
    def get_recurring(self, *, rule_id: int) -> Optional[RecurringRule]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_RULE_COLUMNS} FROM recurring_rules WHERE rule_id=%s", (int(rule_id),))
            r = fetchone(cur)
            return _to_rule(r) if r else None

    def list_recurring_for_owner(self, *, owner_id: int) -> Sequence[RecurringRule]:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT {_RULE_COLUMNS} FROM recurring_rules WHERE owner_id=%s ORDER BY rule_id ASC",
                (int(owner_id),),
            )
            return [_to_rule(r) for r in fetchall(cur)]

    def list_recurring_for_owners(self, *, owner_ids: Iterable[int]) -> Sequence[RecurringRule]:
        ids = sorted({int(o) for o in owner_ids})
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        with self._cursor() as cur:
            cur.execute(
                f"""
                SELECT {_RULE_COLUMNS}
                FROM recurring_rules
                WHERE owner_id IN ({placeholders})
                ORDER BY owner_id ASC, rule_id ASC
                """,
                tuple(ids),
            )
            return [_to_rule(r) for r in fetchall(cur)]

    def insert_recurring(
        self,
        *,
        owner_id: int,
        location: LocationKind,
        days: WeekdaySet,
        notes: Optional[str] = None,
    ) -> RecurringRule:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO recurring_rules(owner_id, location, days_mask, notes)
                VALUES(%s,%s,%s,%s)
                """,
                (int(owner_id), location.value, int(days.mask), notes),
            )
            rule_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_RULE_COLUMNS} FROM recurring_rules WHERE rule_id=%s", (rule_id,))
            return _to_rule(fetchone(cur))

    def update_recurring(
        self,
        *,
        rule_id: int,
        location: LocationKind,
        days: WeekdaySet,
        notes: Optional[str] = None,
    ) -> bool:
        with self._cursor() as cur:
            cur.execute(
                "UPDATE recurring_rules SET location=%s, days_mask=%s, notes=%s WHERE rule_id=%s",
                (location.value, int(days.mask), notes, int(rule_id)),
            )
            cur.execute("SELECT 1 AS ok FROM recurring_rules WHERE rule_id=%s", (int(rule_id),))
            return fetchone(cur) is not None

    def delete_recurring(self, *, rule_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute("DELETE FROM recurring_rules WHERE rule_id=%s", (int(rule_id),))
            return cur.rowcount > 0
