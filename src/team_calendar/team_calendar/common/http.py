from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def api_error_handler(view):
    """Translate domain errors raised by services into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except (ValidationError, AuthorizationError, NotFoundError, ConflictError) as e:
            for kind, status in _STATUS_BY_ERROR:
                if isinstance(e, kind):
                    return json_error(str(e), status)
            raise
        except Exception:
            logger.exception("Unhandled error in endpoint %s", view.__name__)
            return json_error("Internal server error", 500)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Login required", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Login required", 401)
        if session.get("role") != Role.ADMIN.value:
            return json_error("Admin only", 403)
        return view(*args, **kwargs)

    return wrapper


def current_owner_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role") or Role.USER.value)
    except ValueError:
        raise AuthorizationError("Unknown role")


def request_json() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def arg(name: str) -> Optional[str]:
    value = request.args.get(name)
    return value if value and value.strip() else None
