"""In-memory booking repository.

Used by tests and local runs. State lives on the instance, so each repository
is an isolated store.
"""

import asyncio
from datetime import datetime
from uuid import UUID

from dispatch_desk.core.exceptions import ConflictError, NotFoundError, ValidationError
from dispatch_desk.domain.booking import Booking, RiderAssignment, StatusHistoryEntry
from dispatch_desk.domain.booking_state import BookingStatus
from dispatch_desk.repositories.base import BookingRepository


class InMemoryBookingRepository(BookingRepository):
    """Booking store kept in process memory."""

    def __init__(self) -> None:
        self._bookings: dict[UUID, Booking] = {}
        self._history: dict[UUID, list[StatusHistoryEntry]] = {}
        self._lock = asyncio.Lock()

    async def get(self, booking_id: UUID) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def update_status_and_rider(
        self,
        booking_id: UUID,
        *,
        expected_status: BookingStatus,
        expected_version: int,
        status: BookingStatus,
        rider: RiderAssignment,
        changed_at: datetime,
    ) -> Booking:
        async with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                raise NotFoundError("Booking", str(booking_id))
            if current.status != expected_status or current.version != expected_version:
                raise ConflictError(str(booking_id))
            self._bookings[booking_id] = current.with_status(status, rider, changed_at)
        return await self.get(booking_id)

    async def append_history(self, entry: StatusHistoryEntry) -> StatusHistoryEntry:
        if entry.booking_id not in self._bookings:
            raise NotFoundError("Booking", str(entry.booking_id))
        self._history.setdefault(entry.booking_id, []).append(entry)
        return entry

    async def list_history(self, booking_id: UUID) -> list[StatusHistoryEntry]:
        return sorted(self._history.get(booking_id, []), key=lambda e: (e.created_at, e.version))

    async def add(self, booking: Booking) -> Booking:
        if booking.id in self._bookings:
            raise ValidationError(f"Booking '{booking.id}' already exists")
        if any(b.tracking_id == booking.tracking_id for b in self._bookings.values()):
            raise ValidationError(f"Tracking ID '{booking.tracking_id}' is already in use")
        self._bookings[booking.id] = booking
        return booking

    async def list_bookings(self) -> list[Booking]:
        return sorted(self._bookings.values(), key=lambda b: b.created_at, reverse=True)
