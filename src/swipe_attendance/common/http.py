"""JSON response helpers shared by the feature controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateKeyError,
    NotFoundError,
    OutOfRangeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (DuplicateKeyError, 409),
    (OutOfRangeError, 409),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def domain_error_response(error: DomainError):
    return error_response(str(error), status_for(error))


def server_error_response(action: str):
    logger.exception("Unexpected error while %s", action)
    return error_response(f"Server error while {action}", 500)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "teacher_id" not in session:
            return error_response("Login required", 401)
        return view(*args, **kwargs)

    return wrapper


def current_teacher_id() -> int:
    return int(session["teacher_id"])
