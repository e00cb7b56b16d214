"""Booking endpoints for the dispatch desk."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from dispatch_desk.api.deps import (
    get_actor,
    get_audit_service,
    get_booking_repository,
    get_notification_service,
    get_query_service,
    get_transition_service,
)
from dispatch_desk.domain.booking_state import (
    BookingStatus,
    is_terminal,
    selectable_statuses,
)
from dispatch_desk.repositories.base import BookingRepository
from dispatch_desk.schemas.booking import (
    AllowedTransitionsResponse,
    BookingListResponse,
    BookingResponse,
    StatusHistoryResponse,
    StatusOption,
    StatusTransitionRequest,
)
from dispatch_desk.schemas.notification import NotificationResponse
from dispatch_desk.services.audit_service import AuditService
from dispatch_desk.services.booking_query_service import BookingQueryService
from dispatch_desk.services.notification_service import NotificationService
from dispatch_desk.services.transition_service import TransitionService

router = APIRouter()


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    query_service: Annotated[BookingQueryService, Depends(get_query_service)],
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=100),
) -> BookingListResponse:
    """List bookings, newest first, with totals per status."""
    bookings, counts = await query_service.list_with_counts(status_filter, search)

    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
        counts=counts,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
) -> BookingResponse:
    """Get a booking by ID."""
    booking = await repository.get(booking_id)
    return BookingResponse.model_validate(booking)


@router.get("/{booking_id}/history", response_model=list[StatusHistoryResponse])
async def get_booking_history(
    booking_id: UUID,
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> list[StatusHistoryResponse]:
    """Status history of a booking, oldest first."""
    await repository.get(booking_id)
    history = await audit.list_history(booking_id)
    return [StatusHistoryResponse.model_validate(entry) for entry in history]


@router.get("/{booking_id}/transitions", response_model=AllowedTransitionsResponse)
async def get_allowed_transitions(
    booking_id: UUID,
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
) -> AllowedTransitionsResponse:
    """Statuses the booking can move to, plus the rider-only update."""
    booking = await repository.get(booking_id)
    current, *next_statuses = selectable_statuses(booking.status)

    return AllowedTransitionsResponse(
        current_status=StatusOption.of(current),
        rider_update=StatusOption.of(current),
        next_statuses=[StatusOption.of(s) for s in next_statuses],
        is_terminal=is_terminal(current),
    )


@router.post("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    request: StatusTransitionRequest,
    background_tasks: BackgroundTasks,
    actor: Annotated[str, Depends(get_actor)],
    transitions: Annotated[TransitionService, Depends(get_transition_service)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
) -> BookingResponse:
    """Change a booking's status and rider assignment.

    Sending the same status only updates the rider; it is still recorded in
    the history.
    """
    booking = await transitions.apply_transition(
        booking_id,
        request.status,
        rider=request.rider(),
        note=request.note,
        actor=actor,
    )

    if request.notify:
        background_tasks.add_task(notifications.dispatch_quietly, booking.id, booking, actor)

    return BookingResponse.model_validate(booking)


@router.post(
    "/{booking_id}/notifications",
    response_model=NotificationResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def send_tracking_notification(
    booking_id: UUID,
    actor: Annotated[str, Depends(get_actor)],
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
) -> NotificationResponse:
    """Queue the tracking SMS for the booking's sender."""
    booking = await repository.get(booking_id)
    notification = await notifications.dispatch(booking.id, booking, actor)
    return NotificationResponse.model_validate(notification)
