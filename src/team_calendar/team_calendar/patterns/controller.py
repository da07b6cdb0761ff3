from __future__ import annotations

from functools import partial
from typing import Any, Dict, Optional

from flask import Flask, jsonify

from ..common.datetime_utils import format_iso, parse_iso_date, parse_optional_date
from ..common.http import (
    admin_required,
    api_error_handler,
    arg,
    current_owner_id,
    current_role,
    json_error,
    login_required,
    request_json,
    require_int,
)
from ..container import Container
from ..core.exceptions import ValidationError
from ..resolution.controller import resolved_to_dict
from .model import OneTimeEntry, RecurringRule, Weekday

HOLIDAY_MESSAGE = "That day is a public holiday; nothing was stored"


def entry_to_dict(e: OneTimeEntry) -> Dict[str, Any]:
    return {
        "id": e.entry_id,
        "userId": e.owner_id,
        "date": format_iso(e.work_date),
        "location": e.location.value,
        "notes": e.notes,
    }


def rule_to_dict(r: RecurringRule) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": r.rule_id,
        "userId": r.owner_id,
        "location": r.location.value,
        "daysOfWeek": r.days.names(),
        "notes": r.notes,
    }
    for wd in Weekday:
        out[wd.name.lower()] = wd in r.days
    return out


def _days_from_body(data: Dict[str, Any]) -> Optional[Any]:
    """``daysOfWeek`` list, or per-day booleans (``monday``..``sunday``)."""

    if "daysOfWeek" in data:
        days = data["daysOfWeek"]
        if not isinstance(days, list):
            raise ValidationError("daysOfWeek must be a list of weekdays")
        return days
    flags = {wd.name.lower(): data[wd.name.lower()] for wd in Weekday if wd.name.lower() in data}
    return flags or None


def _body_date(data: Dict[str, Any], key: str):
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a YYYY-MM-DD string")
    return parse_optional_date(value)


def register(app: Flask, container: Container) -> None:
    patterns = container.pattern_service

    def _store(owner_id: int, data: Dict[str, Any], *, upsert_one, upsert_range):
        location = data.get("location")
        notes = data.get("notes")
        start = _body_date(data, "startDate")
        end = _body_date(data, "endDate")

        if start is not None or end is not None:
            if start is None or end is None:
                raise ValidationError("startDate and endDate are both required for a range")
            result = upsert_range(owner_id=owner_id, start=start, end=end, location=location, notes=notes)
            return (
                jsonify(
                    {
                        "success": True,
                        "patterns": [entry_to_dict(e) for e in result.entries],
                        "skipped": [format_iso(d) for d in result.skipped],
                    }
                ),
                201,
            )

        work_date = _body_date(data, "date")
        if work_date is None:
            raise ValidationError("date is required")
        entry = upsert_one(owner_id=owner_id, work_date=work_date, location=location, notes=notes)
        if entry is None:
            return json_error(HOLIDAY_MESSAGE, 409)
        return jsonify({"success": True, "pattern": entry_to_dict(entry)}), 201

    # One-time entries
    @app.route("/api/work-patterns", methods=["GET"], endpoint="api_work_patterns")
    @login_required
    @api_error_handler
    def api_work_patterns():
        owner_id = current_owner_id()
        start_s, end_s = arg("startDate"), arg("endDate")
        if start_s and end_s:
            entries = container.calendar_service.personal(
                owner_id=owner_id,
                start=parse_iso_date(start_s),
                end=parse_iso_date(end_s),
                location=arg("location"),
            )
            return jsonify({"success": True, "patterns": [resolved_to_dict(e) for e in entries]})

        stored = patterns.list_one_time(owner_id=owner_id)
        return jsonify({"success": True, "patterns": [entry_to_dict(e) for e in stored]})

    @app.route("/api/work-patterns", methods=["POST"], endpoint="api_work_patterns_create")
    @login_required
    @api_error_handler
    def api_work_patterns_create():
        return _store(
            current_owner_id(),
            request_json(),
            upsert_one=patterns.upsert_one_time,
            upsert_range=patterns.upsert_range,
        )

    @app.route("/api/work-patterns/<int:entry_id>", methods=["PUT"], endpoint="api_work_patterns_update")
    @login_required
    @api_error_handler
    def api_work_patterns_update(entry_id: int):
        data = request_json()
        entry = patterns.update_one_time(
            entry_id=entry_id,
            requesting_owner_id=current_owner_id(),
            location=data.get("location"),
            notes=data.get("notes"),
            work_date=_body_date(data, "date"),
        )
        return jsonify({"success": True, "pattern": entry_to_dict(entry)})

    @app.route("/api/work-patterns/<int:entry_id>", methods=["DELETE"], endpoint="api_work_patterns_delete")
    @login_required
    @api_error_handler
    def api_work_patterns_delete(entry_id: int):
        if not patterns.delete_one_time(entry_id=entry_id, requesting_owner_id=current_owner_id()):
            return json_error("Failed to delete work pattern", 500)
        return "", 204

    @app.route("/api/refresh-holidays", methods=["POST"], endpoint="api_refresh_holidays")
    @login_required
    @api_error_handler
    def api_refresh_holidays():
        count = patterns.refresh_holidays(owner_id=current_owner_id())
        return jsonify({"success": True, "message": f"Refreshed {count} public holidays", "count": count})

    # Recurring rules
    @app.route("/api/recurring-patterns", methods=["GET"], endpoint="api_recurring_patterns")
    @login_required
    @api_error_handler
    def api_recurring_patterns():
        rules = patterns.list_recurring(owner_id=current_owner_id())
        return jsonify({"success": True, "patterns": [rule_to_dict(r) for r in rules]})

    @app.route("/api/recurring-patterns", methods=["POST"], endpoint="api_recurring_patterns_create")
    @login_required
    @api_error_handler
    def api_recurring_patterns_create():
        data = request_json()
        rule = patterns.upsert_recurring(
            owner_id=current_owner_id(),
            location=data.get("location"),
            days_of_week=_days_from_body(data) or [],
            notes=data.get("notes"),
        )
        return jsonify({"success": True, "pattern": rule_to_dict(rule)}), 201

    @app.route("/api/recurring-patterns/<int:rule_id>", methods=["PUT"], endpoint="api_recurring_patterns_update")
    @login_required
    @api_error_handler
    def api_recurring_patterns_update(rule_id: int):
        data = request_json()
        rule = patterns.update_recurring(
            rule_id=rule_id,
            requesting_owner_id=current_owner_id(),
            location=data.get("location"),
            days_of_week=_days_from_body(data),
            notes=data.get("notes"),
        )
        return jsonify({"success": True, "pattern": rule_to_dict(rule)})

    @app.route("/api/recurring-patterns/<int:rule_id>", methods=["DELETE"], endpoint="api_recurring_patterns_delete")
    @login_required
    @api_error_handler
    def api_recurring_patterns_delete(rule_id: int):
        if not patterns.delete_recurring(rule_id=rule_id, requesting_owner_id=current_owner_id()):
            return json_error("Failed to delete recurring pattern", 500)
        return "", 204

    # Admin, on behalf of owners
    @app.route("/api/admin/work-patterns", methods=["POST"], endpoint="api_admin_work_patterns_create")
    @admin_required
    @api_error_handler
    def api_admin_work_patterns_create():
        data = request_json()
        owner_id = require_int(data.get("userId"), "userId")
        container.user_service.get(owner_id)
        role = current_role()
        return _store(
            owner_id,
            data,
            upsert_one=partial(patterns.admin_upsert_one_time, current_role=role),
            upsert_range=partial(patterns.admin_upsert_range, current_role=role),
        )

    @app.route("/api/admin/work-patterns/<int:entry_id>", methods=["DELETE"], endpoint="api_admin_work_patterns_delete")
    @admin_required
    @api_error_handler
    def api_admin_work_patterns_delete(entry_id: int):
        patterns.admin_delete_one_time(current_role=current_role(), entry_id=entry_id)
        return "", 204

    @app.route(
        "/api/admin/recurring-patterns/<int:rule_id>",
        methods=["DELETE"],
        endpoint="api_admin_recurring_patterns_delete",
    )
    @admin_required
    @api_error_handler
    def api_admin_recurring_patterns_delete(rule_id: int):
        patterns.admin_delete_recurring(current_role=current_role(), rule_id=rule_id)
        return "", 204
