"""Booking state machine.

States: pending → confirmed → in_progress → delivered
Side exits: not_accepted, cancelled (both can re-open to pending)
"""

from enum import Enum

from dispatch_desk.core.exceptions import InvalidTransition


class BookingStatus(str, Enum):
    """Delivery booking statuses. Values and labels are a fixed external contract."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    NOT_ACCEPTED = "not_accepted"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[BookingStatus, str] = {
    BookingStatus.PENDING: "Pending",
    BookingStatus.CONFIRMED: "Confirmed",
    BookingStatus.IN_PROGRESS: "In Progress",
    BookingStatus.DELIVERED: "Delivered",
    BookingStatus.NOT_ACCEPTED: "Not Accepted",
    BookingStatus.CANCELLED: "Cancelled",
}

# Targets are listed in the order the dispatch desk offers them
BOOKING_TRANSITIONS: dict[BookingStatus, tuple[BookingStatus, ...]] = {
    BookingStatus.PENDING: (
        BookingStatus.CONFIRMED,
        BookingStatus.NOT_ACCEPTED,
        BookingStatus.CANCELLED,
    ),
    BookingStatus.CONFIRMED: (
        BookingStatus.IN_PROGRESS,
        BookingStatus.NOT_ACCEPTED,
        BookingStatus.CANCELLED,
    ),
    BookingStatus.IN_PROGRESS: (BookingStatus.DELIVERED, BookingStatus.CANCELLED),
    BookingStatus.DELIVERED: (),  # Terminal state
    BookingStatus.NOT_ACCEPTED: (BookingStatus.CANCELLED, BookingStatus.PENDING),
    BookingStatus.CANCELLED: (BookingStatus.PENDING,),
}


def allowed_next_statuses(current: BookingStatus | str) -> frozenset[BookingStatus]:
    """Statuses reachable from ``current`` in one transition (rider updates excluded)."""
    return frozenset(BOOKING_TRANSITIONS[BookingStatus(current)])


def is_rider_update(current: BookingStatus | str, target: BookingStatus | str) -> bool:
    """A same-status request only changes the rider assignment."""
    return BookingStatus(current) == BookingStatus(target)


def is_terminal(status: BookingStatus | str) -> bool:
    return not BOOKING_TRANSITIONS[BookingStatus(status)]


def is_reopen(current: BookingStatus | str, target: BookingStatus | str) -> bool:
    """Moving a cancelled or not-accepted booking back to pending."""
    return BookingStatus(target) == BookingStatus.PENDING and BookingStatus(current) in (
        BookingStatus.CANCELLED,
        BookingStatus.NOT_ACCEPTED,
    )


def selectable_statuses(current: BookingStatus | str) -> list[BookingStatus]:
    """Current status (rider update) followed by the allowed next statuses."""
    current = BookingStatus(current)
    return [current, *BOOKING_TRANSITIONS[current]]


def assert_booking_transition(current: BookingStatus | str, target: BookingStatus | str) -> None:
    current = BookingStatus(current)
    target = BookingStatus(target)
    if is_rider_update(current, target):
        return
    if target not in allowed_next_statuses(current):
        raise InvalidTransition(current.value, target.value)
