"""Notification request value passed to notification senders."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4


class MessageType(str, Enum):
    SMS = "sms"


class NotificationStatus(str, Enum):
    """Lifecycle of a queued message."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


TRACKING_NOTIFICATION = "tracking_notification"


@dataclass(frozen=True)
class NotificationRequest:
    """A message about a booking, handed to a notification sender."""

    recipient: str
    booking_id: UUID
    body: str
    triggered_by: str
    message_type: MessageType = MessageType.SMS
    template_code: str = TRACKING_NOTIFICATION
    subject: str | None = None
    status: NotificationStatus = NotificationStatus.PENDING
    cost: Decimal = Decimal("0")
    provider_message_id: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def mark_failed(self) -> "NotificationRequest":
        return replace(self, status=NotificationStatus.FAILED)
