from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CollaboratorUnavailable,
    DomainError,
    InvalidState,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_FOR_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFound, 404),
    (InvalidState, 409),
    (CollaboratorUnavailable, 503),
)


def to_json(value: Any) -> Any:
    """Convert dataclasses, enums and datetimes into JSON-ready values."""

    if is_dataclass(value) and not isinstance(value, type):
        return to_json(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def ok(payload: Any = None, status: int = 200, **extra):
    body = {"success": True}
    if payload is not None:
        body["data"] = to_json(payload)
    body.update({k: to_json(v) for k, v in extra.items()})
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def api_view(view):
    """Translate domain errors into the JSON error envelope."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            for error_cls, status in _STATUS_FOR_ERROR:
                if isinstance(e, error_cls):
                    return fail(str(e), status)
            return fail(str(e), 400)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return fail("Internal server error", 500)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("You do not have permission for this action", 403)
        return view(*args, **kwargs)

    return wrapper
