"""Booking repository interface.

All storage adapters must implement this interface.
Lifecycle rules should NOT live in adapters - only storage access.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from dispatch_desk.domain.booking import Booking, RiderAssignment, StatusHistoryEntry
from dispatch_desk.domain.booking_state import BookingStatus


class BookingRepository(ABC):
    """Abstract base class for booking storage."""

    @abstractmethod
    async def get(self, booking_id: UUID) -> Booking:
        """Load a booking.

        Raises:
            NotFoundError: booking does not exist
            RepositoryUnavailable: storage could not be reached
        """

    @abstractmethod
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
        """Compare-and-swap the status and rider of a booking.

        The write only applies while the stored booking still has
        ``expected_status`` and ``expected_version``. A successful write bumps
        the version and stores ``changed_at`` as ``updated_at``.

        Args:
            booking_id: Booking to update
            expected_status: Status the caller validated against
            expected_version: Version the caller read
            status: New status
            rider: New rider assignment (empty clears it)
            changed_at: Time of the change, later than the current ``updated_at``

        Returns:
            The updated booking

        Raises:
            NotFoundError: booking does not exist
            ConflictError: booking changed since it was read
            RepositoryUnavailable: storage could not be reached
        """

    @abstractmethod
    async def append_history(self, entry: StatusHistoryEntry) -> StatusHistoryEntry:
        """Append an entry to the booking's status history."""

    @abstractmethod
    async def list_history(self, booking_id: UUID) -> list[StatusHistoryEntry]:
        """Status history of a booking, oldest first (by ``created_at``, then ``version``)."""

    @abstractmethod
    async def add(self, booking: Booking) -> Booking:
        """Store a newly created booking."""

    @abstractmethod
    async def list_bookings(self) -> list[Booking]:
        """All bookings, newest first."""
