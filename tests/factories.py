"""Builders for domain objects used across tests."""

from decimal import Decimal

from dispatch_desk.domain.booking import (
    Booking,
    Item,
    Location,
    Party,
    Pricing,
    RiderAssignment,
)
from dispatch_desk.domain.booking_state import BookingStatus


def build_booking(
    tracking_id: str = "PCL-000001",
    status: BookingStatus = BookingStatus.PENDING,
    sender_name: str = "Ama Mensah",
    sender_phone: str = "+233201234567",
    rider: RiderAssignment | None = None,
) -> Booking:
    return Booking(
        tracking_id=tracking_id,
        sender=Party(name=sender_name, phone=sender_phone),
        receiver=Party(name="Kofi Boateng", phone="+233241112233"),
        pickup=Location(address="12 Oxford Street", landmark="Near the mall"),
        dropoff=Location(address="4 Spintex Road"),
        pricing=Pricing(base=Decimal("35.00"), addons=Decimal("5.00"), total=Decimal("40.00")),
        item=Item(category_id="documents"),
        status=status,
        rider=rider or RiderAssignment(),
    )
