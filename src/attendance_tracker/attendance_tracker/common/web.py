from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, Optional

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def current_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def current_user_id() -> Optional[int]:
    value = session.get("user_id")
    return int(value) if value is not None else None


def current_student_id() -> Optional[int]:
    value = session.get("student_id")
    return int(value) if value is not None else None


def success(data=None, *, message: Optional[str] = None, status: int = 200):
    body = {"status": "success"}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def error(message: str, status: int):
    return jsonify({"status": "error", "message": message}), status


def role_required(allowed: Callable[[Role], bool], message: str = "Access denied"):
    """JSON flavour of the login/role guard: 401 without a session, 403 on role."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error("Authentication required", 401)
            role = current_role()
            if role is None or not allowed(role):
                return error(message, 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_errors(view):
    """Translate domain errors raised by services into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error(str(e), e.status_code)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return error("Server error", 500)

    return wrapper


def any_user(role: Role) -> bool:
    return True


def faculty_or_above(role: Role) -> bool:
    return role.is_faculty_or_above


def hod_or_above(role: Role) -> bool:
    return role.is_hod_or_above
