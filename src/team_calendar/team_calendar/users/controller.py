from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify

from ..common.http import admin_required, api_error_handler, current_role, login_required
from ..container import Container
from .model import User


def user_to_dict(u: User) -> Dict[str, Any]:
    return {
        "id": u.user_id,
        "username": u.username,
        "displayName": u.display_name,
        "email": u.email,
        "role": u.role.value,
        "avatarUrl": u.avatar_url,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/team", methods=["GET"], endpoint="api_team")
    @login_required
    @api_error_handler
    def api_team():
        users = container.user_service.list_team()
        return jsonify({"success": True, "users": [user_to_dict(u) for u in users]})

    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    @admin_required
    @api_error_handler
    def api_users():
        users = container.user_service.list_admin_view(current_role=current_role())
        return jsonify({"success": True, "users": [user_to_dict(u) for u in users]})
