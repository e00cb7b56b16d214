"""Notification sender adapters.

``get_sender`` picks the adapter named by ``settings.notification_channel``.
The message log sender is per-session; the others are shared singletons.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_desk.config import settings
from dispatch_desk.gateways.base import NotificationSender, SenderType, SendResult
from dispatch_desk.gateways.memory import InMemorySender
from dispatch_desk.gateways.message_log import MessageLogSender
from dispatch_desk.gateways.twilio_sms import TwilioSMSSender

_sender_instances: dict[str, NotificationSender] = {}


def get_sender(db: AsyncSession, channel: str | None = None) -> NotificationSender:
    """Return the notification sender for ``channel`` (defaults to settings)."""
    channel = SenderType(channel or settings.notification_channel)
    if channel == SenderType.MESSAGE_LOG:
        return MessageLogSender(db)
    if channel.value not in _sender_instances:
        if channel == SenderType.TWILIO:
            _sender_instances[channel.value] = TwilioSMSSender()
        else:
            _sender_instances[channel.value] = InMemorySender()
    return _sender_instances[channel.value]


async def close_senders() -> None:
    """Release HTTP clients held by shared senders."""
    for sender in _sender_instances.values():
        if isinstance(sender, TwilioSMSSender):
            await sender.close()
    _sender_instances.clear()


__all__ = [
    "InMemorySender",
    "MessageLogSender",
    "NotificationSender",
    "SenderType",
    "SendResult",
    "TwilioSMSSender",
    "close_senders",
    "get_sender",
]
