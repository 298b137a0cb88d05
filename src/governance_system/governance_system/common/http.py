"""JSON helpers shared by the Flask controllers."""

from __future__ import annotations

import dataclasses
import logging
import re
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

from flask import Flask, jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateRequestError,
    InvalidTransitionError,
    NotFoundError,
    TransientError,
    ValidationError,
)
from ..core.policy import Operation, can_access_user_data, require
from ..identity.model import Principal
from ..identity.service import IdentityGateway
from .datetime_utils import parse_hhmm, parse_iso_date

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")

# Most specific first: the first isinstance match wins.
_ERROR_CODES: tuple[tuple[type[DomainError], str, int], ...] = (
    (NotFoundError, "not_found", 404),
    (DuplicateRequestError, "duplicate_request", 409),
    (InvalidTransitionError, "invalid_transition", 409),
    (ValidationError, "validation_error", 400),
    (AuthenticationError, "unauthenticated", 401),
    (AuthorizationError, "forbidden", 403),
    (TransientError, "transient", 503),
)


def error_payload(exc: DomainError) -> tuple[dict, int]:
    for exc_type, code, status in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return {"error": code, "message": str(exc)}, status
    return {"error": "domain_error", "message": str(exc)}, 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        body, status = error_payload(exc)
        if status >= 500:
            logger.warning("Request %s %s failed: %s", request.method, request.path, exc)
        return jsonify(body), status


def to_json(value: Any) -> Any:
    """Convert domain objects (dataclasses, enums, dates) into JSON-ready values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: dict, key: str) -> Any:
    value = data.get(key)
    if value is None or value == "":
        raise ValidationError(f"'{key}' is required")
    return value


def int_field(data: dict, key: str) -> int:
    value = require_field(data, key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # Floats are rejected rather than truncated.
    if isinstance(value, str) and _INT_RE.fullmatch(value.strip()):
        return int(value.strip())
    raise ValidationError(f"'{key}' must be an integer")


def date_field(data: dict, key: str) -> date:
    try:
        return parse_iso_date(str(require_field(data, key)))
    except ValueError:
        raise ValidationError(f"'{key}' must be a date (YYYY-MM-DD)")


def time_field(data: dict, key: str) -> time:
    try:
        return parse_hhmm(str(require_field(data, key)))
    except ValueError:
        raise ValidationError(f"'{key}' must be a time (HH:MM)")


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing bearer token")
    return token.strip()


def auth_required(gateway: IdentityGateway, operation: Optional[Operation] = None) -> Callable:
    """Resolve the bearer token and pass the caller to the view as `principal`."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = gateway.authenticate(bearer_token())
            if operation is not None:
                require(principal.role, operation)
            return view(*args, principal=principal, **kwargs)

        return wrapper

    return decorator


def require_owner_or_admin(principal: Principal, owner_id: int) -> None:
    if not can_access_user_data(principal.role, actor_id=principal.user_id, owner_id=owner_id):
        raise AuthorizationError("You may only access your own records")
