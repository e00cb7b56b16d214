#!/usr/bin/env python3
"""Seed the database with demo bookings."""

import asyncio
from decimal import Decimal

from dispatch_desk.core.exceptions import ValidationError
from dispatch_desk.database import get_db_context
from dispatch_desk.domain.booking import Booking, Item, Location, Party, Pricing
from dispatch_desk.repositories import SQLAlchemyBookingRepository

DEMO_BOOKINGS = [
    Booking(
        tracking_id="PCL-000101",
        sender=Party(name="Ama Mensah", phone="+233201234567", whatsapp="+233201234567"),
        receiver=Party(name="Kofi Boateng", phone="+233241112233"),
        pickup=Location(address="12 Oxford Street, Osu", landmark="Near the mall"),
        dropoff=Location(address="4 Spintex Road", landmark="Opposite the filling station"),
        pricing=Pricing(base=Decimal("35.00"), addons=Decimal("5.00"), total=Decimal("40.00")),
        item=Item(category_id="documents", notes="Envelope, handle with care"),
    ),
    Booking(
        tracking_id="PCL-000102",
        sender=Party(name="Jane Doe", phone="+233209998877"),
        receiver=Party(name="John Doe", phone="+233205554433"),
        pickup=Location(address="7 Ring Road Central"),
        dropoff=Location(address="22 Liberation Road", landmark="Airport residential"),
        pricing=Pricing(base=Decimal("50.00"), addons=Decimal("0.00"), total=Decimal("50.00")),
        item=Item(category_id="parcel"),
    ),
    Booking(
        tracking_id="PCL-000103",
        sender=Party(name="Yaw Owusu", phone="+233547776655"),
        receiver=Party(name="Efua Asante", phone="+233501239876", whatsapp="+233501239876"),
        pickup=Location(address="3 Achimota Mall Road"),
        dropoff=Location(address="15 Tema Motorway Exit"),
        pricing=Pricing(base=Decimal("80.00"), addons=Decimal("20.00"), total=Decimal("100.00")),
        item=Item(category_id="food", notes="Keep upright"),
    ),
]


async def seed_bookings() -> None:
    """Insert the demo bookings, skipping any that already exist."""
    async with get_db_context() as session:
        repository = SQLAlchemyBookingRepository(session)
        for booking in DEMO_BOOKINGS:
            try:
                stored = await repository.add(booking)
            except ValidationError as e:
                print(f"Skipped {booking.tracking_id}: {e}")
                continue
            print(f"Created booking {stored.tracking_id} ({stored.id})")


if __name__ == "__main__":
    asyncio.run(seed_bookings())
