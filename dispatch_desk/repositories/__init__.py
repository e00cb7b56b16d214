"""Booking storage adapters."""

from dispatch_desk.repositories.base import BookingRepository
from dispatch_desk.repositories.memory import InMemoryBookingRepository
from dispatch_desk.repositories.sqlalchemy_repository import SQLAlchemyBookingRepository

__all__ = [
    "BookingRepository",
    "InMemoryBookingRepository",
    "SQLAlchemyBookingRepository",
]
