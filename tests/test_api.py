from __future__ import annotations

from datetime import date

import pytest

from src.team_calendar.team_calendar.container import wire
from src.team_calendar.team_calendar.core.enums import LocationKind
from src.team_calendar.team_calendar.main import create_app
from tests.fakes import InMemoryPatterns, InMemoryUsers, demo_users

ADMIN = 1
SARAH = 2
MICHAEL = 3


@pytest.fixture()
def container():
    return wire(patterns_repo=InMemoryPatterns(), users_repo=InMemoryUsers(demo_users()))


@pytest.fixture()
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def _login(client, user_id: int, role: str = "user"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_requests_without_session_get_401(client):
    res = client.get("/api/team")
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_team_lists_users_by_display_name(client):
    _login(client, SARAH)
    res = client.get("/api/team")
    assert res.status_code == 200
    assert [u["displayName"] for u in res.get_json()["users"]] == ["Admin User", "Michael Chen", "Sarah Johnson"]


def test_users_listing_is_admin_only(client):
    _login(client, SARAH)
    assert client.get("/api/users").status_code == 403

    _login(client, ADMIN, "admin")
    assert client.get("/api/users").status_code == 200


def test_create_single_day_accepts_datetime_string(client, container):
    _login(client, SARAH)
    res = client.post(
        "/api/work-patterns",
        json={"date": "2025-06-03T00:00:00.000Z", "location": "office", "notes": "standup"},
    )

    assert res.status_code == 201
    body = res.get_json()["pattern"]
    assert body["date"] == "2025-06-03"
    assert body["userId"] == SARAH
    assert len(container.patterns_repo.entries) == 1


def test_create_on_holiday_returns_409(client, container):
    _login(client, SARAH)
    res = client.post("/api/work-patterns", json={"date": "2025-12-25", "location": "office"})
    assert res.status_code == 409
    assert container.patterns_repo.entries == {}


def test_create_range_reports_skipped_holidays(client):
    _login(client, SARAH)
    res = client.post(
        "/api/work-patterns",
        json={"startDate": "2025-04-23", "endDate": "2025-04-25", "location": "home"},
    )

    assert res.status_code == 201
    body = res.get_json()
    assert [p["date"] for p in body["patterns"]] == ["2025-04-23", "2025-04-24"]
    assert body["skipped"] == ["2025-04-25"]


@pytest.mark.parametrize(
    "payload",
    [
        {"date": "2025-06-03", "location": "beach"},
        {"date": "not-a-date", "location": "office"},
        {"location": "office"},
        {"startDate": "2025-06-03", "location": "office"},
    ],
)
def test_bad_input_returns_400(client, payload):
    _login(client, SARAH)
    assert client.post("/api/work-patterns", json=payload).status_code == 400


def test_resolved_personal_range(client, container):
    container.patterns_repo.add_rule(SARAH, LocationKind.OFFICE, ["monday", "wednesday"])
    _login(client, SARAH)

    res = client.get("/api/work-patterns?startDate=2025-06-02&endDate=2025-06-08")

    got = [(p["date"], p["location"], p["source"]) for p in res.get_json()["patterns"]]
    assert got == [("2025-06-02", "office", "recurring"), ("2025-06-04", "office", "recurring")]


def test_update_and_delete_are_owner_only(client, container):
    entry = container.patterns_repo.add_entry(SARAH, date(2025, 6, 3), LocationKind.OFFICE)

    _login(client, MICHAEL)
    assert client.put(f"/api/work-patterns/{entry.entry_id}", json={"location": "home"}).status_code == 403
    assert client.delete(f"/api/work-patterns/{entry.entry_id}").status_code == 403

    _login(client, SARAH)
    res = client.put(f"/api/work-patterns/{entry.entry_id}", json={"location": "home"})
    assert res.status_code == 200
    assert res.get_json()["pattern"]["location"] == "home"

    assert client.delete(f"/api/work-patterns/{entry.entry_id}").status_code == 204
    assert client.delete(f"/api/work-patterns/{entry.entry_id}").status_code == 404


def test_move_onto_holiday_returns_409(client, container):
    entry = container.patterns_repo.add_entry(SARAH, date(2025, 12, 24), LocationKind.OFFICE)
    _login(client, SARAH)

    res = client.put(f"/api/work-patterns/{entry.entry_id}", json={"date": "2025-12-25"})

    assert res.status_code == 409
    assert container.patterns_repo.get_one_time(entry_id=entry.entry_id) == entry


def test_recurring_patterns_accept_day_flags(client):
    _login(client, SARAH)
    res = client.post(
        "/api/recurring-patterns",
        json={"location": "office", "monday": True, "wednesday": True, "friday": False},
    )

    assert res.status_code == 201
    rule = res.get_json()["pattern"]
    assert rule["daysOfWeek"] == ["monday", "wednesday"]
    assert rule["friday"] is False

    res = client.put(f"/api/recurring-patterns/{rule['id']}", json={"daysOfWeek": ["fri"]})
    assert res.get_json()["pattern"]["daysOfWeek"] == ["friday"]

    assert [r["id"] for r in client.get("/api/recurring-patterns").get_json()["patterns"]] == [rule["id"]]


def test_recurring_pattern_without_days_is_400(client):
    _login(client, SARAH)
    res = client.post("/api/recurring-patterns", json={"location": "office", "daysOfWeek": []})
    assert res.status_code == 400


def test_team_work_patterns_show_holiday_once(client, container):
    container.patterns_repo.add_rule(SARAH, LocationKind.OFFICE, ["thursday"])
    container.patterns_repo.add_rule(MICHAEL, LocationKind.HOME, ["thursday"])
    _login(client, SARAH)

    res = client.get("/api/team/work-patterns?startDate=2025-12-25&endDate=2025-12-25")

    patterns = res.get_json()["patterns"]
    assert len(patterns) == 1
    assert patterns[0]["userId"] == 0
    assert patterns[0]["user"]["displayName"] == "Public Holiday"
    assert patterns[0]["location"] == "public_holiday"


def test_calendar_month_grid(client):
    _login(client, SARAH)
    res = client.get("/api/calendar?view=month&date=2025-06-18&mode=team")

    body = res.get_json()
    assert res.status_code == 200
    assert len(body["days"]) == 42
    assert body["days"][0]["date"] == "2025-06-01"


def test_calendar_rejects_unknown_view(client):
    _login(client, SARAH)
    assert client.get("/api/calendar?view=year").status_code == 400


def test_holidays_endpoint(client):
    _login(client, SARAH)
    res = client.get("/api/holidays?startDate=2025-12-24&endDate=2026-01-02")
    assert [h["name"] for h in res.get_json()["holidays"]] == ["Christmas Day", "Boxing Day", "New Year's Day"]


def test_refresh_holidays(client, container, monkeypatch):
    import src.team_calendar.team_calendar.patterns.service as service_module

    monkeypatch.setattr(service_module, "today_local", lambda: date(2025, 11, 1))
    _login(client, SARAH)

    res = client.post("/api/refresh-holidays")

    assert res.status_code == 200
    stored = sorted(e.work_date for e in container.patterns_repo.entries.values())
    assert stored[0] == date(2025, 12, 25)
    assert res.get_json()["count"] == len(stored)


def test_admin_endpoints(client, container):
    _login(client, SARAH)
    assert client.post("/api/admin/work-patterns", json={"userId": MICHAEL}).status_code == 403

    _login(client, ADMIN, "admin")
    res = client.post("/api/admin/work-patterns", json={"userId": MICHAEL, "date": "2025-06-03", "location": "home"})
    assert res.status_code == 201
    entry_id = res.get_json()["pattern"]["id"]
    assert container.patterns_repo.get_one_time(entry_id=entry_id).owner_id == MICHAEL

    assert client.delete(f"/api/admin/work-patterns/{entry_id}").status_code == 204
    assert client.delete(f"/api/admin/work-patterns/{entry_id}").status_code == 404

    rule = container.patterns_repo.add_rule(MICHAEL, LocationKind.HOME, ["monday"])
    assert client.delete(f"/api/admin/recurring-patterns/{rule.rule_id}").status_code == 204


def test_admin_create_for_unknown_user_is_404(client, container):
    _login(client, ADMIN, "admin")
    res = client.post("/api/admin/work-patterns", json={"userId": 99, "date": "2025-06-03", "location": "home"})

    assert res.status_code == 404
    assert res.get_json()["success"] is False
    assert container.patterns_repo.entries == {}


def test_unbounded_reads_are_rejected(client):
    _login(client, SARAH)
    assert client.get("/api/work-patterns?startDate=0001-01-01&endDate=9999-12-31").status_code == 400
    assert client.get("/api/team/work-patterns?startDate=0001-01-01&endDate=9999-12-31").status_code == 400
    assert client.get("/api/work-patterns?startDate=9999-12-31&endDate=9999-12-31").status_code == 200


def test_unexpected_errors_become_500(client, container):
    container.patterns_repo.fail_on = date(2025, 6, 3)
    _login(client, SARAH)

    res = client.post("/api/work-patterns", json={"date": "2025-06-03", "location": "office"})

    assert res.status_code == 500
    assert res.get_json()["message"] == "Internal server error"
