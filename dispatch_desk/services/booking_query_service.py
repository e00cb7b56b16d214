"""Booking listing and search for the dispatch desk."""

from collections import Counter
from collections.abc import Iterable

from dispatch_desk.domain.booking import Booking
from dispatch_desk.domain.booking_state import BookingStatus
from dispatch_desk.repositories.base import BookingRepository


def filter_bookings(
    bookings: Iterable[Booking],
    status: BookingStatus | str | None = None,
    search: str | None = None,
) -> list[Booking]:
    """Filter by status and by a case-insensitive search term.

    The term matches a substring of the tracking ID, sender name or sender phone.
    """
    filtered = list(bookings)

    if status is not None:
        status = BookingStatus(status)
        filtered = [b for b in filtered if b.status == status]

    term = (search or "").strip().lower()
    if term:
        filtered = [
            b
            for b in filtered
            if term in b.tracking_id.lower()
            or term in b.sender.name.lower()
            or term in b.sender.phone.lower()
        ]

    return filtered


def count_by_status(bookings: Iterable[Booking]) -> dict[str, int]:
    """Booking totals per status plus ``all``, every status present."""
    bookings = list(bookings)
    counts = Counter(b.status.value for b in bookings)
    return {"all": len(bookings), **{s.value: counts.get(s.value, 0) for s in BookingStatus}}


class BookingQueryService:
    """Read-only listing over the booking repository."""

    def __init__(self, repository: BookingRepository) -> None:
        self.repository = repository

    async def list_bookings(
        self,
        status: BookingStatus | str | None = None,
        search: str | None = None,
    ) -> list[Booking]:
        """Bookings newest first, filtered by status and search term."""
        return filter_bookings(await self.repository.list_bookings(), status, search)

    async def status_counts(self) -> dict[str, int]:
        return count_by_status(await self.repository.list_bookings())

    async def list_with_counts(
        self,
        status: BookingStatus | str | None = None,
        search: str | None = None,
    ) -> tuple[list[Booking], dict[str, int]]:
        """Filtered bookings plus the unfiltered per-status totals."""
        bookings = await self.repository.list_bookings()
        return filter_bookings(bookings, status, search), count_by_status(bookings)
