from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify

from ..common.datetime_utils import format_iso, parse_iso_date, parse_optional_date, today_local
from ..common.http import api_error_handler, arg, current_owner_id, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from ..holidays.model import Holiday
from .model import CalendarDay, ResolvedDayEntry, TeamEntry


def resolved_to_dict(e: ResolvedDayEntry) -> Dict[str, Any]:
    return {
        "id": e.source_id,
        "userId": e.owner_id,
        "date": format_iso(e.work_date),
        "location": e.location.value,
        "notes": e.notes,
        "source": e.source_kind.value,
    }


def team_entry_to_dict(t: TeamEntry) -> Dict[str, Any]:
    out = resolved_to_dict(t.entry)
    out["user"] = {"id": t.entry.owner_id, "displayName": t.display_name, "avatarUrl": t.avatar_url}
    return out


def holiday_to_dict(h: Holiday) -> Dict[str, Any]:
    return {"date": format_iso(h.work_date), "name": h.name}


def calendar_day_to_dict(d: CalendarDay) -> Dict[str, Any]:
    return {
        "date": format_iso(d.work_date),
        "isToday": d.is_today,
        "isCurrentMonth": d.is_current_month,
        "entries": [resolved_to_dict(e) for e in d.entries],
    }


def _required_range():
    start_s, end_s = arg("startDate"), arg("endDate")
    if not start_s or not end_s:
        raise ValidationError("startDate and endDate are required")
    return parse_iso_date(start_s), parse_iso_date(end_s)


def register(app: Flask, container: Container) -> None:
    calendar = container.calendar_service

    @app.route("/api/team/work-patterns", methods=["GET"], endpoint="api_team_work_patterns")
    @login_required
    @api_error_handler
    def api_team_work_patterns():
        start, end = _required_range()
        entries = calendar.team(start=start, end=end, location=arg("location"))
        return jsonify({"success": True, "patterns": [team_entry_to_dict(t) for t in entries]})

    @app.route("/api/calendar", methods=["GET"], endpoint="api_calendar")
    @login_required
    @api_error_handler
    def api_calendar():
        today = today_local()
        anchor = parse_optional_date(arg("date")) or today
        days = calendar.calendar(
            owner_id=current_owner_id(),
            view=arg("view"),
            anchor=anchor,
            mode=arg("mode"),
            location=arg("location"),
            today=today,
        )
        return jsonify(
            {
                "success": True,
                "date": format_iso(anchor),
                "days": [calendar_day_to_dict(d) for d in days],
            }
        )

    @app.route("/api/holidays", methods=["GET"], endpoint="api_holidays")
    @login_required
    @api_error_handler
    def api_holidays():
        start, end = _required_range()
        return jsonify({"success": True, "holidays": [holiday_to_dict(h) for h in calendar.holidays(start=start, end=end)]})
