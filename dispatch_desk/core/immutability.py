"""Immutability enforcement for the booking audit trail using SQLAlchemy events."""

import logging
from datetime import UTC, datetime

from sqlalchemy import event

from dispatch_desk.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_registered = False


class ImmutabilityViolationError(ValidationError):
    """Raised when attempting to modify an append-only record."""

    code = "immutability_violation"

    def __init__(self, model_name: str, operation: str, record_id: str):
        self.model_name = model_name
        self.operation = operation
        self.record_id = record_id
        super().__init__(
            f"Immutability violation: Cannot {operation} {model_name} record {record_id}. "
            "Status history is append-only."
        )


def _log_immutability_violation(model_name: str, operation: str, record_id: str) -> None:
    logger.error(
        f"IMMUTABILITY_VIOLATION: Attempted to {operation} {model_name} "
        f"record_id={record_id} at {datetime.now(UTC).isoformat()}"
    )


def register_immutability_enforcement() -> None:
    """Register SQLAlchemy event listeners for the status history table.

    Must be called after models are imported but before session use.
    Safe to call more than once.
    """
    global _registered
    if _registered:
        return

    from dispatch_desk.models.booking import BookingStatusHistory

    @event.listens_for(BookingStatusHistory, "before_update")
    def prevent_history_update(mapper, connection, target):
        """Prevent updates to BookingStatusHistory (append-only)."""
        _log_immutability_violation("BookingStatusHistory", "UPDATE", str(target.id))
        raise ImmutabilityViolationError("BookingStatusHistory", "UPDATE", str(target.id))

    @event.listens_for(BookingStatusHistory, "before_delete")
    def prevent_history_delete(mapper, connection, target):
        """Prevent deletion of BookingStatusHistory (append-only)."""
        _log_immutability_violation("BookingStatusHistory", "DELETE", str(target.id))
        raise ImmutabilityViolationError("BookingStatusHistory", "DELETE", str(target.id))

    _registered = True
    logger.info("Immutability enforcement registered for booking status history")
