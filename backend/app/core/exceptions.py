"""
Typed service errors.

Services raise these instead of HTTPException so the same code paths can be
driven from routes, scripts and tests. The handler registered in app.main
turns them into JSON responses using ``status_code``.
"""
from fastapi import status


class ServiceError(Exception):
    """Base class for errors reported back to the caller."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ServiceError):
    """Malformed or out-of-range input."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ServiceError):
    """Referenced entity does not exist (or vanished mid-operation)."""
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    """Acting user's role is insufficient."""
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    """Duplicate unique key, e.g. an email already in use."""
    status_code = status.HTTP_409_CONFLICT


class NotificationError(Exception):
    """Invite email could not be delivered. Never rolls back the caller."""
