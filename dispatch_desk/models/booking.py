"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from dispatch_desk.database import Base


class Booking(Base):
    """Delivery booking model."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    tracking_id: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False, index=True
    )

    # Sender
    sender_name: Mapped[str] = mapped_column(String(200), nullable=False)
    sender_phone: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    sender_whatsapp: Mapped[str | None] = mapped_column(String(30))

    # Receiver
    receiver_name: Mapped[str] = mapped_column(String(200), nullable=False)
    receiver_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    receiver_whatsapp: Mapped[str | None] = mapped_column(String(30))

    # Locations
    pickup_address: Mapped[str] = mapped_column(Text, nullable=False)
    pickup_landmark: Mapped[str | None] = mapped_column(Text)
    dropoff_address: Mapped[str] = mapped_column(Text, nullable=False)
    dropoff_landmark: Mapped[str | None] = mapped_column(Text)

    # Item
    item_category_id: Mapped[str | None] = mapped_column(String(50))
    item_notes: Mapped[str | None] = mapped_column(Text)

    # Pricing (price_total = price_base + price_addons, checked at creation)
    price_base: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    price_addons: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    price_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, confirmed, in_progress, delivered, not_accepted, cancelled
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Rider assignment
    rider_name: Mapped[str | None] = mapped_column(String(200))
    rider_phone: Mapped[str | None] = mapped_column(String(30))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    # Set by each status write, same stamp as the matching history entry
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    status_history: Mapped[list["BookingStatusHistory"]] = relationship(
        "BookingStatusHistory",
        back_populates="booking",
        order_by="BookingStatusHistory.created_at",
    )


class BookingStatusHistory(Base):
    """Append-only audit trail of booking status changes."""

    __tablename__ = "booking_status_history"
    __table_args__ = (
        UniqueConstraint("booking_id", "version", name="uq_history_booking_version"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="status_history")
