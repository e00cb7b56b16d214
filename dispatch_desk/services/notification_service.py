"""Notification Service for booking tracking messages.

Dispatch is a best-effort side channel: it runs independently of status
transitions and a failed send never affects booking state. Each call makes at
most one delivery attempt.
"""

import asyncio
import logging
from dataclasses import replace
from uuid import UUID

from dispatch_desk.config import settings
from dispatch_desk.core.exceptions import NotificationFailed
from dispatch_desk.domain.booking import Booking
from dispatch_desk.domain.notification import (
    TRACKING_NOTIFICATION,
    MessageType,
    NotificationRequest,
)
from dispatch_desk.gateways.base import NotificationSender

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for sending booking notifications through a sender adapter."""

    def __init__(
        self,
        sender: NotificationSender,
        timeout: float | None = None,
        tracking_template: str | None = None,
    ) -> None:
        self.sender = sender
        self.timeout = timeout if timeout is not None else settings.notification_timeout_seconds
        self.tracking_template = tracking_template or settings.tracking_message_template

    def build_tracking_request(
        self,
        booking_id: UUID,
        booking: Booking,
        actor: str,
    ) -> NotificationRequest:
        """Tracking SMS addressed to the booking's sender."""
        return NotificationRequest(
            message_type=MessageType.SMS,
            recipient=booking.sender.phone,
            booking_id=booking_id,
            template_code=TRACKING_NOTIFICATION,
            body=self.tracking_template.format(tracking_id=booking.tracking_id),
            triggered_by=actor,
        )

    async def dispatch(
        self,
        booking_id: UUID,
        booking: Booking,
        actor: str | None = None,
        timeout: float | None = None,
    ) -> NotificationRequest:
        """Queue a tracking notification for a booking.

        Args:
            booking_id: Booking the message is about
            booking: Booking snapshot used to render the message
            actor: Who triggered the message
            timeout: Sender timeout in seconds

        Returns:
            NotificationRequest: the queued request, in ``pending`` state

        Raises:
            NotificationFailed: sender rejected the request, raised or timed out.
                The failed request is available as ``exc.notification``.
        """
        actor = actor or settings.default_actor
        timeout = timeout if timeout is not None else self.timeout
        request = self.build_tracking_request(booking_id, booking, actor)

        logger.info(
            f"Queueing {request.template_code} {request.message_type.value} for booking "
            f"{booking.tracking_id} to {request.recipient} via {self.sender.sender_type.value} "
            f"(triggered by {actor})"
        )

        try:
            result = await asyncio.wait_for(self.sender.send(request), timeout)
        except TimeoutError:
            reason = f"sender timed out after {timeout}s"
        except Exception as exc:
            reason = f"sender error: {exc}"
        else:
            if result.accepted:
                return replace(request, provider_message_id=result.provider_message_id)
            reason = result.reason or "rejected by sender"

        failed = request.mark_failed()
        logger.warning(
            f"Notification {request.id} for booking {booking.tracking_id} failed: {reason}"
        )
        raise NotificationFailed(reason, failed)

    async def dispatch_quietly(
        self,
        booking_id: UUID,
        booking: Booking,
        actor: str | None = None,
    ) -> NotificationRequest | None:
        """Dispatch from a background task; failures are logged, not raised."""
        try:
            return await self.dispatch(booking_id, booking, actor)
        except NotificationFailed as exc:
            logger.warning(f"Background notification for booking {booking_id} dropped: {exc.reason}")
            return None
