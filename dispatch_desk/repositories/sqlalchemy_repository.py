"""PostgreSQL booking repository using async SQLAlchemy.

Each write commits on its own, so a status update stays written even if the
following history append fails. The transition service reports that case.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_desk.core.exceptions import (
    ConflictError,
    NotFoundError,
    RepositoryUnavailable,
    ValidationError,
)
from dispatch_desk.domain.booking import (
    Booking,
    Item,
    Location,
    Party,
    Pricing,
    RiderAssignment,
    StatusHistoryEntry,
)
from dispatch_desk.domain.booking_state import BookingStatus
from dispatch_desk.models.booking import Booking as BookingModel
from dispatch_desk.models.booking import BookingStatusHistory
from dispatch_desk.repositories.base import BookingRepository

logger = logging.getLogger(__name__)


def booking_from_row(row: BookingModel) -> Booking:
    return Booking(
        id=row.id,
        tracking_id=row.tracking_id,
        sender=Party(row.sender_name, row.sender_phone, row.sender_whatsapp),
        receiver=Party(row.receiver_name, row.receiver_phone, row.receiver_whatsapp),
        pickup=Location(row.pickup_address, row.pickup_landmark),
        dropoff=Location(row.dropoff_address, row.dropoff_landmark),
        item=Item(row.item_category_id, row.item_notes),
        pricing=Pricing(row.price_base, row.price_addons, row.price_total),
        status=BookingStatus(row.status),
        rider=RiderAssignment(row.rider_name, row.rider_phone),
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
    )


def booking_to_row(booking: Booking) -> BookingModel:
    return BookingModel(
        id=booking.id,
        tracking_id=booking.tracking_id,
        sender_name=booking.sender.name,
        sender_phone=booking.sender.phone,
        sender_whatsapp=booking.sender.whatsapp,
        receiver_name=booking.receiver.name,
        receiver_phone=booking.receiver.phone,
        receiver_whatsapp=booking.receiver.whatsapp,
        pickup_address=booking.pickup.address,
        pickup_landmark=booking.pickup.landmark,
        dropoff_address=booking.dropoff.address,
        dropoff_landmark=booking.dropoff.landmark,
        item_category_id=booking.item.category_id,
        item_notes=booking.item.notes,
        price_base=booking.pricing.base,
        price_addons=booking.pricing.addons,
        price_total=booking.pricing.total,
        status=booking.status.value,
        version=booking.version,
        rider_name=booking.rider.name,
        rider_phone=booking.rider.phone,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )


def entry_from_row(row: BookingStatusHistory) -> StatusHistoryEntry:
    return StatusHistoryEntry(
        id=row.id,
        booking_id=row.booking_id,
        status=BookingStatus(row.status),
        note=row.note,
        created_by=row.created_by,
        version=row.version,
        created_at=row.created_at,
    )


class SQLAlchemyBookingRepository(BookingRepository):
    """Booking repository backed by an ``AsyncSession``."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _rollback_unavailable(self, exc: SQLAlchemyError) -> RepositoryUnavailable:
        await self.db.rollback()
        logger.warning(f"Booking storage error: {exc}")
        return RepositoryUnavailable(exc.__class__.__name__)

    async def get(self, booking_id: UUID) -> Booking:
        try:
            result = await self.db.execute(
                select(BookingModel)
                .where(BookingModel.id == booking_id)
                .execution_options(populate_existing=True)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise await self._rollback_unavailable(exc) from exc
        if not row:
            raise NotFoundError("Booking", str(booking_id))
        return booking_from_row(row)

    async def update_status_and_rider(
        self,
        booking_id: UUID,
        *,
        expected_status: BookingStatus,
        expected_version: int,
        status: BookingStatus,
        rider: RiderAssignment,
        changed_at: datetime,
    ) -> Booking:
        stmt = (
            update(BookingModel)
            .where(
                BookingModel.id == booking_id,
                BookingModel.status == expected_status.value,
                BookingModel.version == expected_version,
            )
            .values(
                status=status.value,
                rider_name=rider.name,
                rider_phone=rider.phone,
                updated_at=changed_at,
                version=BookingModel.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                exists = await self.db.scalar(
                    select(BookingModel.id).where(BookingModel.id == booking_id)
                )
                if exists is None:
                    raise NotFoundError("Booking", str(booking_id))
                raise ConflictError(str(booking_id))
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise await self._rollback_unavailable(exc) from exc
        return await self.get(booking_id)

    async def append_history(self, entry: StatusHistoryEntry) -> StatusHistoryEntry:
        self.db.add(
            BookingStatusHistory(
                id=entry.id,
                booking_id=entry.booking_id,
                status=entry.status.value,
                note=entry.note,
                created_by=entry.created_by,
                version=entry.version,
                created_at=entry.created_at,
            )
        )
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            raise await self._rollback_unavailable(exc) from exc
        return entry

    async def list_history(self, booking_id: UUID) -> list[StatusHistoryEntry]:
        try:
            result = await self.db.execute(
                select(BookingStatusHistory)
                .where(BookingStatusHistory.booking_id == booking_id)
                .order_by(
                    BookingStatusHistory.created_at.asc(),
                    BookingStatusHistory.version.asc(),
                )
            )
        except SQLAlchemyError as exc:
            raise await self._rollback_unavailable(exc) from exc
        return [entry_from_row(row) for row in result.scalars().all()]

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking_to_row(booking))
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ValidationError(
                f"Tracking ID '{booking.tracking_id}' is already in use"
            ) from exc
        except SQLAlchemyError as exc:
            raise await self._rollback_unavailable(exc) from exc
        return booking

    async def list_bookings(self) -> list[Booking]:
        try:
            result = await self.db.execute(
                select(BookingModel).order_by(BookingModel.created_at.desc())
            )
        except SQLAlchemyError as exc:
            raise await self._rollback_unavailable(exc) from exc
        return [booking_from_row(row) for row in result.scalars().all()]
