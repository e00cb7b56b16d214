"""Booking status catalogue endpoint."""

from fastapi import APIRouter

from dispatch_desk.domain.booking_state import BOOKING_TRANSITIONS, BookingStatus
from dispatch_desk.schemas.booking import StatusOption

router = APIRouter()


@router.get("/", response_model=list[StatusOption])
async def list_statuses() -> list[StatusOption]:
    """All booking statuses with their display labels."""
    return [StatusOption.of(s) for s in BookingStatus]


@router.get("/transitions", response_model=dict[str, list[BookingStatus]])
async def get_transition_table() -> dict[str, list[BookingStatus]]:
    """The full status transition table."""
    return {s.value: list(targets) for s, targets in BOOKING_TRANSITIONS.items()}
