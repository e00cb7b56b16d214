"""Notification-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from dispatch_desk.domain.notification import MessageType, NotificationStatus


class NotificationResponse(BaseModel):
    """Schema for a queued notification."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    message_type: MessageType
    recipient: str
    booking_id: UUID
    template_code: str
    subject: str | None
    body: str
    status: NotificationStatus
    triggered_by: str
    cost: Decimal
    provider_message_id: str | None
    created_at: datetime
