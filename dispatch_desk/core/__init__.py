"""Core utilities: exceptions, middleware and audit trail protection."""

from dispatch_desk.core.exceptions import (
    AppException,
    ConflictError,
    InvalidTransition,
    NotFoundError,
    NotificationFailed,
    PartialUpdateError,
    RepositoryUnavailable,
    ValidationError,
)

__all__ = [
    "AppException",
    "ConflictError",
    "InvalidTransition",
    "NotFoundError",
    "NotificationFailed",
    "PartialUpdateError",
    "RepositoryUnavailable",
    "ValidationError",
]
