# nameplate_dashboard/errors.py
"""
Error taxonomy shared by services and blueprints.

Services raise these; blueprints translate them into the JSON envelope
``{"success": false, "error": ...}`` at the route boundary.
"""
from typing import List, Optional


class NameplateValidationError(ValueError):
    """
    Missing or malformed input.

    :param missing: names of required fields that were absent or empty
    :param errors: every human readable violation, missing fields included
    """

    def __init__(self, message: str, *, missing: Optional[List[str]] = None, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])
        self.errors = list(errors or [message])


class NotFoundError(LookupError):
    """Unknown user, officer, RMO, lot or nameplate."""


class ConflictError(Exception):
    """The request collides with current state (already verified, already printed, taken officer number)."""


class AuthenticationError(Exception):
    """Missing, expired or invalid session token, or bad credentials."""


# =========
# Object storage
# =========
class StorageError(Exception):
    """Generic object-storage failure."""


class StorageConfigurationError(StorageError):
    """Storage is not configured (bucket / keys missing)."""


class StorageUnavailableError(StorageError):
    """Storage endpoint unreachable or timing out."""
