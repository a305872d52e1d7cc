from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ClassLocationMissingError,
    DomainError,
    FaceNotRecognizedError,
    NoFaceDetectedError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# (exception type, http status, machine-readable code); first match wins.
_ERROR_MAP = (
    (NoFaceDetectedError, 422, "no_face"),
    (FaceNotRecognizedError, 404, "not_recognized"),
    (ClassLocationMissingError, 409, "class_location_missing"),
    (NotFoundError, 404, "not_found"),
    (AuthenticationError, 401, "unauthenticated"),
    (AuthorizationError, 403, "forbidden"),
    (ValidationError, 400, "invalid"),
)


def ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def fail(message: str, *, status: int = 400, code: str = "invalid", **extra: Any):
    return jsonify({"success": False, "code": code, "message": message, **extra}), status


def domain_error_response(e: DomainError):
    for exc_type, status, code in _ERROR_MAP:
        if isinstance(e, exc_type):
            extra: dict[str, Any] = {}
            if isinstance(e, FaceNotRecognizedError) and e.distance is not None:
                extra["distance"] = round(float(e.distance), 4)
            return fail(str(e), status=status, code=code, **extra)
    return fail(str(e))


def server_error_response(action: str):
    logger.exception("Unexpected failure while %s", action)
    return fail(f"Server error while {action}", status=500, code="server_error")


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", status=401, code="unauthenticated")
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Please log in to continue", status=401, code="unauthenticated")
            if session.get("role") not in allowed:
                return fail("You do not have permission for this action", status=403, code="forbidden")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def request_payload() -> dict:
    """JSON body, or the form fields of a multipart upload."""

    if request.files or request.form:
        return request.form.to_dict()
    return json_body()
