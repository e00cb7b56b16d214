"""Custom application exceptions.

Every booking lifecycle failure maps to one of these. ``retryable`` tells the
caller whether the same request may succeed later without changes.
"""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code: str = "internal_error"
    retryable: bool = False

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return str(self.detail)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        self.resource = resource
        self.identifier = identifier
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidTransition(AppException):
    """Requested status is not reachable from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Invalid booking transition: {current} → {requested}",
        )


class ConflictError(AppException):
    """Booking was changed by a concurrent writer."""

    code = "conflict"
    retryable = True

    def __init__(self, booking_id: str, detail: str | None = None) -> None:
        self.booking_id = booking_id
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail or f"Booking '{booking_id}' was modified concurrently. Reload and retry.",
        )


class PartialUpdateError(AppException):
    """Status was written but the audit entry could not be appended."""

    code = "partial_update"

    def __init__(self, booking_id: str, status_value: str, reason: str | None = None) -> None:
        self.booking_id = booking_id
        self.status_value = status_value
        message = (
            f"Booking '{booking_id}' moved to '{status_value}' but its history entry "
            "was not recorded"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


class RepositoryUnavailable(AppException):
    """Booking storage timed out or is unreachable."""

    code = "repository_unavailable"
    retryable = True

    def __init__(self, detail: str | None = None) -> None:
        message = "Booking storage is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)


class NotificationFailed(AppException):
    """Notification sender rejected the request or timed out."""

    code = "notification_failed"
    retryable = True

    def __init__(self, reason: str, notification: Any | None = None) -> None:
        self.reason = reason
        self.notification = notification
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Notification could not be queued: {reason}",
        )
