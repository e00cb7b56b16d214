"""Database models."""

from dispatch_desk.models.booking import Booking, BookingStatusHistory
from dispatch_desk.models.message import MessageLog

__all__ = [
    # Booking
    "Booking",
    "BookingStatusHistory",
    # Messaging
    "MessageLog",
]
