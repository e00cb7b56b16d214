"""Booking status audit trail service."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID

from dispatch_desk.domain.booking import StatusHistoryEntry
from dispatch_desk.domain.booking_state import BookingStatus
from dispatch_desk.repositories.base import BookingRepository

# Smallest step used to keep entries strictly ordered per booking
_TICK = timedelta(microseconds=1)


class AuditService:
    """Service for the append-only booking status history.

    The recorder does not validate transitions; it only guarantees that each
    booking's entries are appended in strictly increasing ``created_at`` order.
    """

    def __init__(
        self,
        repository: BookingRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self._clock = clock or (lambda: datetime.now(UTC))

    def stamp_after(self, previous: datetime | None) -> datetime:
        """Current time, moved past ``previous`` when the clock lags behind it."""
        now = self._clock()
        if previous is not None and now <= previous:
            return previous + _TICK
        return now

    async def record_transition(
        self,
        booking_id: UUID,
        resulting_status: BookingStatus | str,
        note: str,
        actor: str,
        *,
        version: int | None = None,
        created_at: datetime | None = None,
    ) -> StatusHistoryEntry:
        """Append a status history entry (immutable).

        The transition service passes the ``version`` and ``created_at`` of the
        status write it just made, so entries follow the order of the writes.
        Without them the entry is stamped after the latest one on record.

        Args:
            booking_id: Booking the entry belongs to
            resulting_status: Status after the transition
            note: Human-readable description of the change
            actor: Who performed the change
            version: Booking version the change produced
            created_at: Time of the change

        Returns:
            Created history entry
        """
        if version is None or created_at is None:
            history = await self.repository.list_history(booking_id)
            last = history[-1] if history else None
            if version is None:
                version = last.version + 1 if last else 1
            if created_at is None:
                created_at = self.stamp_after(last.created_at if last else None)

        entry = StatusHistoryEntry(
            booking_id=booking_id,
            status=BookingStatus(resulting_status),
            note=note,
            created_by=actor,
            version=version,
            created_at=created_at,
        )
        return await self.repository.append_history(entry)

    async def list_history(self, booking_id: UUID) -> list[StatusHistoryEntry]:
        """Status history for a booking, oldest first."""
        return await self.repository.list_history(booking_id)
