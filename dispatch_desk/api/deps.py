"""API dependencies for storage, services and the acting user."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_desk.config import settings
from dispatch_desk.database import get_db
from dispatch_desk.gateways import NotificationSender, get_sender
from dispatch_desk.repositories import BookingRepository, SQLAlchemyBookingRepository
from dispatch_desk.services.audit_service import AuditService
from dispatch_desk.services.booking_query_service import BookingQueryService
from dispatch_desk.services.notification_service import NotificationService
from dispatch_desk.services.transition_service import TransitionService


async def get_booking_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingRepository:
    """Booking repository bound to the request session."""
    return SQLAlchemyBookingRepository(db)


async def get_notification_sender(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NotificationSender:
    """Configured notification sender."""
    return get_sender(db)


async def get_actor(
    x_actor: Annotated[str | None, Header(max_length=100)] = None,
) -> str:
    """Identifier recorded as the author of changes.

    Authentication is handled upstream; the gateway forwards the operator in
    ``X-Actor``.
    """
    return (x_actor or "").strip() or settings.default_actor


def get_audit_service(
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
) -> AuditService:
    return AuditService(repository)


def get_transition_service(
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> TransitionService:
    return TransitionService(repository, audit)


def get_notification_service(
    sender: Annotated[NotificationSender, Depends(get_notification_sender)],
) -> NotificationService:
    return NotificationService(sender)


def get_query_service(
    repository: Annotated[BookingRepository, Depends(get_booking_repository)],
) -> BookingQueryService:
    return BookingQueryService(repository)
