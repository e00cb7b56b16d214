"""Booking status transition service.

Validates a requested status against the booking state machine, writes the
new status and rider through the repository and records the audit entry.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar
from uuid import UUID

from dispatch_desk.config import settings
from dispatch_desk.core.exceptions import (
    ConflictError,
    PartialUpdateError,
    RepositoryUnavailable,
    ValidationError,
)
from dispatch_desk.domain.booking import NO_RIDER, Booking, RiderAssignment
from dispatch_desk.domain.booking_state import (
    BookingStatus,
    assert_booking_transition,
    is_reopen,
)
from dispatch_desk.repositories.base import BookingRepository
from dispatch_desk.services.audit_service import AuditService

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compose_status_note(status: BookingStatus, rider_name: str | None = None) -> str:
    """Default history note for a transition without an explicit note."""
    note = f"Status changed to {status.label}"
    if rider_name:
        note = f"{note} and assigned to {rider_name}"
    return note


class TransitionService:
    """Applies booking status transitions as a single logical unit."""

    def __init__(
        self,
        repository: BookingRepository,
        audit: AuditService | None = None,
        *,
        repository_timeout: float | None = None,
        write_retries: int | None = None,
        reset_rider_on_reopen: bool | None = None,
    ) -> None:
        self.repository = repository
        self.audit = audit or AuditService(repository)
        self.repository_timeout = (
            repository_timeout if repository_timeout is not None else settings.repository_timeout_seconds
        )
        self.write_retries = (
            write_retries if write_retries is not None else settings.transition_write_retries
        )
        self.reset_rider_on_reopen = (
            reset_rider_on_reopen if reset_rider_on_reopen is not None else settings.reset_rider_on_reopen
        )

    async def _call(self, operation: Awaitable[T], timeout: float) -> T:
        try:
            return await asyncio.wait_for(operation, timeout)
        except TimeoutError as exc:
            raise RepositoryUnavailable(f"timed out after {timeout}s") from exc

    def _resolve_rider(
        self,
        current: BookingStatus,
        target: BookingStatus,
        rider: RiderAssignment | None,
    ) -> RiderAssignment:
        if self.reset_rider_on_reopen and is_reopen(current, target):
            return NO_RIDER
        if rider is None:
            return NO_RIDER
        return RiderAssignment.from_input(rider.name, rider.phone)

    async def apply_transition(
        self,
        booking_id: UUID,
        requested_status: BookingStatus | str,
        rider: RiderAssignment | None = None,
        note: str | None = None,
        actor: str | None = None,
        timeout: float | None = None,
    ) -> Booking:
        """Move a booking to ``requested_status``.

        A request for the current status is a rider update: the status stays,
        the rider changes and a history entry is still recorded.

        Args:
            booking_id: Booking to update
            requested_status: Target status
            rider: Rider assignment; absent or blank fields clear the rider
            note: History note; a default note is composed when blank
            actor: Who performs the change (defaults to the configured actor)
            timeout: Per-call repository timeout in seconds

        Returns:
            The updated booking

        Raises:
            NotFoundError: booking does not exist
            InvalidTransition: target not reachable from the current status
            ConflictError: concurrent write detected twice
            PartialUpdateError: status written, history entry not recorded
            RepositoryUnavailable: storage failed twice or timed out
        """
        try:
            requested_status = BookingStatus(requested_status)
        except ValueError as exc:
            raise ValidationError(f"Unknown booking status: {requested_status}") from exc

        actor = actor or settings.default_actor
        timeout = timeout if timeout is not None else self.repository_timeout
        attempts = self.write_retries + 1

        attempt = 0
        while True:
            attempt += 1
            booking = await self._call(self.repository.get(booking_id), timeout)
            assert_booking_transition(booking.status, requested_status)
            assignment = self._resolve_rider(booking.status, requested_status, rider)

            try:
                # Once the write is issued the audit append must follow it,
                # even if the caller goes away.
                updated = await asyncio.shield(
                    self._write_and_record(booking, requested_status, assignment, note, actor, timeout)
                )
            except (ConflictError, RepositoryUnavailable) as exc:
                if attempt == attempts:
                    logger.warning(
                        f"Transition {booking.status.value} → {requested_status.value} for booking "
                        f"{booking_id} failed after {attempt} attempt(s): {exc.detail}"
                    )
                    raise
                logger.info(
                    f"Retrying transition for booking {booking_id} after {exc.code}: {exc.detail}"
                )
                continue

            logger.info(
                f"Booking {booking.tracking_id} moved {booking.status.value} → "
                f"{updated.status.value} by {actor}"
            )
            return updated

    async def _write_and_record(
        self,
        booking: Booking,
        status: BookingStatus,
        rider: RiderAssignment,
        note: str | None,
        actor: str,
        timeout: float,
    ) -> Booking:
        # The stamp follows the one stored with the version we read, and the
        # compare-and-swap on that version orders it against other writers.
        changed_at = self.audit.stamp_after(booking.updated_at)
        updated = await self._call(
            self.repository.update_status_and_rider(
                booking.id,
                expected_status=booking.status,
                expected_version=booking.version,
                status=status,
                rider=rider,
                changed_at=changed_at,
            ),
            timeout,
        )

        note = (note or "").strip() or compose_status_note(status, rider.name)
        try:
            await self._call(
                self.audit.record_transition(
                    booking.id,
                    status,
                    note,
                    actor,
                    version=updated.version,
                    created_at=changed_at,
                ),
                timeout,
            )
        except Exception as exc:
            logger.error(
                f"PARTIAL_UPDATE: booking {booking.id} is '{status.value}' but its history "
                f"entry was not recorded: {exc}"
            )
            raise PartialUpdateError(str(booking.id), status.value, str(exc)) from exc

        return updated
