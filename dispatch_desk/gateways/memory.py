"""In-memory notification sender - records requests for tests and local runs."""

from dispatch_desk.domain.notification import NotificationRequest
from dispatch_desk.gateways.base import NotificationSender, SenderType, SendResult


class InMemorySender(NotificationSender):
    """Sender that keeps accepted requests in a list."""

    def __init__(self, accept: bool = True, reason: str = "Delivery channel rejected the message"):
        self.sent: list[NotificationRequest] = []
        self.accept = accept
        self.reason = reason

    @property
    def sender_type(self) -> SenderType:
        return SenderType.MEMORY

    async def send(self, request: NotificationRequest) -> SendResult:
        if not self.accept:
            return SendResult.rejected(self.reason)
        self.sent.append(request)
        return SendResult(accepted=True, provider_message_id=f"mem-{request.id.hex[:12]}")
