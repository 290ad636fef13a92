from typing import Any, Optional

from fastapi import status


class LeaveTrackerError(Exception):
    """Base class for errors raised by the leave tracker services."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(LeaveTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST


class QuotaExceededError(ValidationError):
    pass


class StateTransitionError(LeaveTrackerError):
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(LeaveTrackerError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthenticationError(LeaveTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(LeaveTrackerError):
    status_code = status.HTTP_403_FORBIDDEN


class CollaboratorError(LeaveTrackerError):
    """An external service (Google Drive, the database) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
