from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Please log in to continue", 401)
            if session.get("role") != role.value:
                return json_error("You do not have permission", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


employee_required = role_required(Role.EMPLOYEE)
supervisor_required = role_required(Role.SUPERVISOR)


def handle_domain_errors(view):
    """Translate domain exceptions raised by services into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except AuthenticationError as e:
            return json_error(str(e), 401)
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("unexpected error in %s %s", request.method, request.path)
            return json_error("Internal server error", 500)

    return wrapper


def arg_date(name: str, default: Optional[date] = None) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid date for {name} (YYYY-MM-DD)")


def current_user_id() -> str:
    return str(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def current_work_centers() -> list[str]:
    return list(session.get("work_centers") or [])
