"""Domain exceptions.

Services raise these for CRUD plumbing (events, teams, users). The scan
flows never raise for precondition failures; they return typed outcomes and
only let `PersistenceUnavailable` escape. `festgate.main` maps each class to
an HTTP status.
"""
from typing import Optional


class FestgateError(Exception):
    """Base class for all domain errors."""

    status_code = 400

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(FestgateError):
    """Input is well-formed but violates a business rule."""

    status_code = 400


class NotFoundError(FestgateError):
    """Referenced resource does not exist (or is not visible)."""

    status_code = 404


class ConflictError(FestgateError):
    """Uniqueness constraint would be violated."""

    status_code = 409


class PermissionDenied(FestgateError):
    """Caller is authenticated but may not act on this resource."""

    status_code = 403


class PersistenceUnavailable(FestgateError):
    """Storage layer failed; the caller should retry the request."""

    status_code = 503
