"""Application error taxonomy.

Repositories and services raise these; ``backend.main`` renders every one of
them as ``{"message": ...}`` with the matching status code. There is no
"forbidden" kind: a resource owned by someone else is reported as missing.
"""
from typing import Dict, Optional


class AppError(Exception):
    """Base class for errors that map to a client-facing HTTP status."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(AppError):
    """Missing or malformed input."""
    status_code = 400


class Unauthenticated(AppError):
    """Missing, invalid or expired credential, or a failed password check."""
    status_code = 401

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class NotFound(AppError):
    """Resource absent or not owned by the caller."""
    status_code = 404


class Conflict(AppError):
    """Uniqueness violation."""
    status_code = 409
