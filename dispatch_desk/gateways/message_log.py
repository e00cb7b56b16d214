"""Message log sender - queues notifications in the ``message_logs`` table.

A separate messaging worker picks pending rows up and delivers them.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_desk.domain.notification import NotificationRequest
from dispatch_desk.gateways.base import NotificationSender, SenderType, SendResult
from dispatch_desk.models.message import MessageLog


class MessageLogSender(NotificationSender):
    """Queue messages by inserting them into the message log."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @property
    def sender_type(self) -> SenderType:
        return SenderType.MESSAGE_LOG

    async def send(self, request: NotificationRequest) -> SendResult:
        log = MessageLog(
            id=request.id,
            message_type=request.message_type.value,
            recipient=request.recipient,
            booking_id=request.booking_id,
            template_code=request.template_code,
            subject=request.subject,
            body=request.body,
            status=request.status.value,
            triggered_by=request.triggered_by,
            cost=request.cost,
        )
        self.db.add(log)
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            return SendResult.rejected(f"Message log write failed: {exc.__class__.__name__}")
        return SendResult(accepted=True, provider_message_id=str(log.id))
