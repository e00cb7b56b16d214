import asyncio

import pytest

from dispatch_desk.core.exceptions import InvalidTransition, NotificationFailed
from dispatch_desk.domain.booking_state import BookingStatus
from dispatch_desk.domain.notification import (
    TRACKING_NOTIFICATION,
    MessageType,
    NotificationRequest,
    NotificationStatus,
)
from dispatch_desk.gateways import InMemorySender, NotificationSender, SenderType, SendResult
from dispatch_desk.services.notification_service import NotificationService
from dispatch_desk.services.transition_service import TransitionService

from tests.factories import build_booking


class SlowSender(NotificationSender):
    @property
    def sender_type(self) -> SenderType:
        return SenderType.MEMORY

    async def send(self, request: NotificationRequest) -> SendResult:
        await asyncio.sleep(1)
        return SendResult(accepted=True)


class ExplodingSender(NotificationSender):
    @property
    def sender_type(self) -> SenderType:
        return SenderType.MEMORY

    async def send(self, request: NotificationRequest) -> SendResult:
        raise ConnectionError("gateway down")


@pytest.mark.anyio
async def test_dispatch_queues_pending_tracking_sms(sender) -> None:
    booking = build_booking(tracking_id="PCL-777")
    service = NotificationService(sender)

    request = await service.dispatch(booking.id, booking, "desk-1")

    assert request.status == NotificationStatus.PENDING
    assert request.message_type == MessageType.SMS
    assert request.template_code == TRACKING_NOTIFICATION
    assert request.recipient == booking.sender.phone
    assert request.booking_id == booking.id
    assert request.triggered_by == "desk-1"
    assert "PCL-777" in request.body
    assert request.provider_message_id.startswith("mem-")
    assert [r.id for r in sender.sent] == [request.id]


@pytest.mark.anyio
async def test_custom_template(sender) -> None:
    booking = build_booking(tracking_id="PCL-9")
    service = NotificationService(sender, tracking_template="Track {tracking_id}")

    request = await service.dispatch(booking.id, booking)

    assert request.body == "Track PCL-9"
    assert request.triggered_by == "admin"


@pytest.mark.anyio
async def test_rejection_raises_notification_failed() -> None:
    booking = build_booking()
    sender = InMemorySender(accept=False, reason="invalid number")

    with pytest.raises(NotificationFailed) as exc:
        await NotificationService(sender).dispatch(booking.id, booking)

    assert exc.value.retryable
    assert exc.value.status_code == 502
    assert exc.value.reason == "invalid number"
    assert exc.value.notification.status == NotificationStatus.FAILED
    assert sender.sent == []


@pytest.mark.anyio
async def test_sender_timeout_raises_notification_failed() -> None:
    booking = build_booking()

    with pytest.raises(NotificationFailed) as exc:
        await NotificationService(SlowSender()).dispatch(booking.id, booking, timeout=0.01)

    assert "timed out" in exc.value.reason


@pytest.mark.anyio
async def test_sender_error_raises_notification_failed() -> None:
    booking = build_booking()

    with pytest.raises(NotificationFailed) as exc:
        await NotificationService(ExplodingSender()).dispatch(booking.id, booking)

    assert "gateway down" in exc.value.reason


@pytest.mark.anyio
async def test_dispatch_quietly_swallows_failures() -> None:
    booking = build_booking()
    service = NotificationService(InMemorySender(accept=False))

    assert await service.dispatch_quietly(booking.id, booking, "admin") is None


@pytest.mark.anyio
async def test_dispatch_is_independent_of_transition_outcome(repository, make_booking, sender) -> None:
    booking = await make_booking(status=BookingStatus.DELIVERED)

    with pytest.raises(InvalidTransition):
        await TransitionService(repository).apply_transition(booking.id, BookingStatus.PENDING)

    request = await NotificationService(sender).dispatch(booking.id, booking)

    assert request.status == NotificationStatus.PENDING
    assert (await repository.get(booking.id)).status == BookingStatus.DELIVERED
