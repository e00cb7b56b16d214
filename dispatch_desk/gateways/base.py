"""Base notification sender interface.

All sender adapters must implement this interface.
Business logic should NOT live in adapters - only channel communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from dispatch_desk.domain.notification import NotificationRequest


class SenderType(str, Enum):
    """Supported notification channels."""

    MESSAGE_LOG = "message_log"
    TWILIO = "twilio"
    MEMORY = "memory"


@dataclass
class SendResult:
    """Result of handing a request to a sender."""

    accepted: bool
    reason: str | None = None
    provider_message_id: str | None = None
    raw_response: dict | None = None

    @classmethod
    def rejected(cls, reason: str, raw_response: dict | None = None) -> "SendResult":
        return cls(accepted=False, reason=reason, raw_response=raw_response)


class NotificationSender(ABC):
    """Abstract base class for notification senders."""

    @property
    @abstractmethod
    def sender_type(self) -> SenderType:
        """Return the sender type."""

    @abstractmethod
    async def send(self, request: NotificationRequest) -> SendResult:
        """Queue or deliver a notification.

        Args:
            request: Message to send, in ``pending`` state

        Returns:
            SendResult, accepted or rejected with a reason
        """
