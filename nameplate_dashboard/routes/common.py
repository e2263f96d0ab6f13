# nameplate_dashboard/routes/common.py
from flask import jsonify, request

from nameplate_dashboard.errors import (
    AuthenticationError,
    ConflictError,
    NameplateValidationError,
    NotFoundError,
    StorageConfigurationError,
    StorageError,
    StorageUnavailableError,
)

# service exception -> HTTP status
STATUS_BY_ERROR = (
    (NameplateValidationError, 400),
    (AuthenticationError, 401),
    (PermissionError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageConfigurationError, 503),
    (StorageUnavailableError, 503),
    (StorageError, 502),
)


def error_response(message: str, status: int, **extra):
    body = {"success": False, "error": message}
    body.update(extra)
    return jsonify(body), status


def service_error_response(exc: Exception):
    """Translate a known service exception into the JSON error envelope."""
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            extra = {}
            if isinstance(exc, NameplateValidationError):
                extra = {"missing": exc.missing, "errors": exc.errors}
            return error_response(str(exc), status, **extra)
    return error_response(str(exc) or "Internal server error", 500)


KNOWN_ERRORS = tuple(error_type for error_type, _ in STATUS_BY_ERROR)


def parse_bool_arg(name: str):
    """``?verified=true|false`` -> bool, absent -> None."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() in ("1", "true", "yes")


def parse_int_arg(name: str, default: int) -> int:
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default
