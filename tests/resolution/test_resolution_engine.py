from __future__ import annotations

from collections import Counter
from datetime import date

from src.team_calendar.team_calendar.core.constants import SYSTEM_OWNER_ID
from src.team_calendar.team_calendar.core.enums import LocationKind, SourceKind
from src.team_calendar.team_calendar.holidays.calculator import HolidayCalculator
from src.team_calendar.team_calendar.resolution.engine import ResolutionEngine
from tests.fakes import InMemoryPatterns

SARAH = 2
MICHAEL = 3


def _engine(store=None):
    store = store or InMemoryPatterns()
    return ResolutionEngine(store, HolidayCalculator()), store


def test_recurring_rule_covers_only_its_weekdays():
    engine, store = _engine()
    store.add_rule(SARAH, LocationKind.OFFICE, ["monday", "wednesday"])

    got = engine.resolve_personal(SARAH, date(2025, 6, 2), date(2025, 6, 8))

    assert [(e.work_date, e.location) for e in got] == [
        (date(2025, 6, 2), LocationKind.OFFICE),
        (date(2025, 6, 4), LocationKind.OFFICE),
    ]
    assert all(e.source_kind == SourceKind.RECURRING for e in got)


def test_one_time_entry_beats_recurring_rule():
    engine, store = _engine()
    store.add_rule(SARAH, LocationKind.OFFICE, ["monday"])
    entry = store.add_entry(SARAH, date(2025, 6, 2), LocationKind.ANNUAL_LEAVE, notes="trip")

    [got] = engine.resolve_personal(SARAH, date(2025, 6, 2), date(2025, 6, 2))

    assert got.location == LocationKind.ANNUAL_LEAVE
    assert got.source_kind == SourceKind.ONE_TIME
    assert got.source_id == entry.entry_id
    assert got.notes == "trip"


def test_holiday_beats_stored_office_entry():
    engine, store = _engine()
    store.add_entry(SARAH, date(2025, 12, 25), LocationKind.OFFICE)

    [got] = engine.resolve_personal(SARAH, date(2025, 12, 25), date(2025, 12, 25))

    assert got.location == LocationKind.PUBLIC_HOLIDAY
    assert got.source_kind == SourceKind.HOLIDAY
    assert got.notes == "Christmas Day"
    assert got.owner_id == SARAH
    # read-only: the hidden entry is still stored
    assert len(store.entries) == 1


def test_explicit_holiday_entry_wins_on_holiday():
    engine, store = _engine()
    entry = store.add_entry(SARAH, date(2025, 12, 25), LocationKind.PUBLIC_HOLIDAY, notes="Xmas")

    [got] = engine.resolve_personal(SARAH, date(2025, 12, 25), date(2025, 12, 25))

    assert got.source_kind == SourceKind.ONE_TIME
    assert got.source_id == entry.entry_id


def test_lowest_rule_id_wins_when_rules_overlap():
    engine, store = _engine()
    first = store.add_rule(SARAH, LocationKind.HOME, ["monday", "tuesday"])
    store.add_rule(SARAH, LocationKind.OFFICE, ["monday"])

    [got] = engine.resolve_personal(SARAH, date(2025, 6, 2), date(2025, 6, 2))

    assert got.location == LocationKind.HOME
    assert got.source_id == first.rule_id


def test_at_most_one_entry_per_owner_and_day():
    engine, store = _engine()
    for owner in (SARAH, MICHAEL):
        store.add_rule(owner, LocationKind.HOME, ["monday", "tuesday", "wednesday", "thursday", "friday"])
        store.add_rule(owner, LocationKind.OFFICE, ["monday"])
    store.add_entry(SARAH, date(2025, 4, 23), LocationKind.OFFICE)
    store.add_entry(MICHAEL, date(2025, 4, 25), LocationKind.OFFICE)

    got = engine.resolve_personal(SARAH, date(2025, 4, 14), date(2025, 5, 9))
    got += engine.resolve_personal(MICHAEL, date(2025, 4, 14), date(2025, 5, 9))

    counts = Counter((e.owner_id, e.work_date) for e in got)
    assert counts and max(counts.values()) == 1


def test_team_view_emits_each_holiday_once_under_system_owner():
    engine, store = _engine()
    store.add_rule(SARAH, LocationKind.OFFICE, ["friday"])
    store.add_rule(MICHAEL, LocationKind.HOME, ["thursday", "friday"])

    got = engine.resolve_team([SARAH, MICHAEL], date(2025, 12, 25), date(2025, 12, 26))

    assert [(e.owner_id, e.work_date) for e in got] == [
        (SYSTEM_OWNER_ID, date(2025, 12, 25)),
        (SYSTEM_OWNER_ID, date(2025, 12, 26)),
    ]
    assert all(e.location == LocationKind.PUBLIC_HOLIDAY for e in got)


def test_team_view_orders_by_date_then_owner():
    engine, store = _engine()
    store.add_entry(MICHAEL, date(2025, 6, 2), LocationKind.HOME)
    store.add_entry(SARAH, date(2025, 6, 2), LocationKind.OFFICE)
    store.add_entry(SARAH, date(2025, 6, 3), LocationKind.HOME)

    got = engine.resolve_team([MICHAEL, SARAH], date(2025, 6, 2), date(2025, 6, 3))

    assert [(e.work_date.day, e.owner_id) for e in got] == [(2, SARAH), (2, MICHAEL), (3, SARAH)]


def test_location_filter_applies_after_resolution():
    engine, store = _engine()
    store.add_rule(SARAH, LocationKind.OFFICE, ["monday", "tuesday", "wednesday", "thursday", "friday"])
    store.add_entry(SARAH, date(2025, 6, 3), LocationKind.HOME)

    got = engine.resolve_personal(SARAH, date(2025, 6, 2), date(2025, 6, 6), LocationKind.HOME)

    assert [e.work_date for e in got] == [date(2025, 6, 3)]


def test_reversed_range_and_no_owners_resolve_to_nothing():
    engine, store = _engine()
    store.add_rule(SARAH, LocationKind.OFFICE, ["monday"])

    assert engine.resolve_personal(SARAH, date(2025, 6, 9), date(2025, 6, 2)) == []
    assert engine.resolve_team([], date(2025, 6, 2), date(2025, 6, 9)) == []


def test_empty_team_still_sees_holidays():
    engine, _ = _engine()
    got = engine.resolve_team([], date(2025, 4, 25), date(2025, 4, 25))
    assert [(e.owner_id, e.notes) for e in got] == [(SYSTEM_OWNER_ID, "Anzac Day")]


def test_last_representable_day_resolves_without_error():
    engine, store = _engine()
    assert engine.resolve_personal(SARAH, date(9999, 12, 31), date(9999, 12, 31)) == []

    store.add_rule(SARAH, LocationKind.HOME, ["friday"])
    got = engine.resolve_personal(SARAH, date(9999, 12, 31), date(9999, 12, 31))
    assert [(e.work_date, e.location) for e in got] == [(date(9999, 12, 31), LocationKind.HOME)]
