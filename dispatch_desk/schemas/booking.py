"""Booking-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from dispatch_desk.domain.booking import RiderAssignment
from dispatch_desk.domain.booking_state import BookingStatus


class PartyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    phone: str
    whatsapp: str | None


class LocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    landmark: str | None


class ItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category_id: str | None
    notes: str | None


class PricingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    base: Decimal
    addons: Decimal
    total: Decimal


class RiderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str | None
    phone: str | None


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tracking_id: str
    status: BookingStatus

    # Parties
    sender: PartyResponse
    receiver: PartyResponse

    # Locations
    pickup: LocationResponse
    dropoff: LocationResponse

    # Item & pricing
    item: ItemResponse
    pricing: PricingResponse

    # Rider
    rider: RiderResponse

    # Timestamps
    created_at: datetime
    updated_at: datetime | None
    version: int

    @computed_field
    @property
    def status_label(self) -> str:
        return self.status.label


class BookingListResponse(BaseModel):
    """Schema for filtered booking list with per-status counts."""

    bookings: list[BookingResponse]
    total: int
    counts: dict[str, int]


class StatusHistoryResponse(BaseModel):
    """Schema for one status history entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    status: BookingStatus
    note: str
    created_by: str
    created_at: datetime

    @computed_field
    @property
    def status_label(self) -> str:
        return self.status.label


class StatusOption(BaseModel):
    value: BookingStatus
    label: str

    @classmethod
    def of(cls, status: BookingStatus) -> "StatusOption":
        return cls(value=status, label=status.label)


class AllowedTransitionsResponse(BaseModel):
    """Statuses the desk may move a booking to."""

    current_status: StatusOption
    rider_update: StatusOption
    next_statuses: list[StatusOption]
    is_terminal: bool


class StatusTransitionRequest(BaseModel):
    """Schema for changing a booking's status and rider."""

    status: BookingStatus
    rider_name: str | None = Field(None, max_length=200)
    rider_phone: str | None = Field(None, max_length=30)
    note: str | None = Field(None, max_length=1000)
    # Queue the tracking SMS once the transition is stored
    notify: bool = False

    def rider(self) -> RiderAssignment:
        return RiderAssignment.from_input(self.rider_name, self.rider_phone)
