"""Booking domain types.

These are plain immutable values passed between the repository, the services
and the API layer. Persistence models live in ``dispatch_desk.models``.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from dispatch_desk.core.exceptions import ValidationError
from dispatch_desk.domain.booking_state import BookingStatus


@dataclass(frozen=True)
class Party:
    """Sender or receiver contact."""

    name: str
    phone: str
    whatsapp: str | None = None


@dataclass(frozen=True)
class Location:
    address: str
    landmark: str | None = None


@dataclass(frozen=True)
class Item:
    category_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Pricing:
    """Booking price. The total is checked once, when the value is created."""

    base: Decimal
    addons: Decimal
    total: Decimal

    def __post_init__(self) -> None:
        if Decimal(self.base) + Decimal(self.addons) != Decimal(self.total):
            raise ValidationError(
                f"Price total {self.total} does not equal base {self.base} + add-ons {self.addons}"
            )


@dataclass(frozen=True)
class RiderAssignment:
    """Rider attached during a transition. Blank values normalise to ``None``."""

    name: str | None = None
    phone: str | None = None

    @classmethod
    def from_input(cls, name: str | None, phone: str | None) -> "RiderAssignment":
        return cls(name=(name or "").strip() or None, phone=(phone or "").strip() or None)


NO_RIDER = RiderAssignment()


@dataclass(frozen=True)
class Booking:
    """A single delivery order between a sender and a receiver."""

    tracking_id: str
    sender: Party
    receiver: Party
    pickup: Location
    dropoff: Location
    pricing: Pricing
    item: Item = field(default_factory=Item)
    status: BookingStatus = BookingStatus.PENDING
    rider: RiderAssignment = NO_RIDER
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    # Stamp of the last status write, shared with its history entry
    updated_at: datetime | None = None
    version: int = 0

    def with_status(
        self,
        status: BookingStatus,
        rider: RiderAssignment,
        changed_at: datetime,
    ) -> "Booking":
        """Copy carrying a new status and rider, with the version bumped."""
        return replace(
            self,
            status=status,
            rider=rider,
            updated_at=changed_at,
            version=self.version + 1,
        )


@dataclass(frozen=True)
class StatusHistoryEntry:
    """Immutable audit record of one status transition.

    ``version`` is the booking version the transition produced; entries of a
    booking are ordered by ``created_at`` and ``version`` alike.
    """

    booking_id: UUID
    status: BookingStatus
    note: str
    created_by: str
    version: int = 0
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
