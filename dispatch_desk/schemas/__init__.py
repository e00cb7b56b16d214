"""Pydantic schemas for API validation."""

from dispatch_desk.schemas.booking import (
    AllowedTransitionsResponse,
    BookingListResponse,
    BookingResponse,
    StatusHistoryResponse,
    StatusOption,
    StatusTransitionRequest,
)
from dispatch_desk.schemas.notification import NotificationResponse

__all__ = [
    # Booking
    "AllowedTransitionsResponse",
    "BookingListResponse",
    "BookingResponse",
    "StatusHistoryResponse",
    "StatusOption",
    "StatusTransitionRequest",
    # Notification
    "NotificationResponse",
]
