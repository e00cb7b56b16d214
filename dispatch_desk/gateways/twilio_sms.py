"""Twilio SMS sender adapter."""

import httpx

from dispatch_desk.config import settings
from dispatch_desk.domain.notification import NotificationRequest
from dispatch_desk.gateways.base import NotificationSender, SenderType, SendResult

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSMSSender(NotificationSender):
    """Send SMS through the Twilio Messages API."""

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._http_client = http_client

    @property
    def sender_type(self) -> SenderType:
        return SenderType.TWILIO

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=settings.notification_timeout_seconds)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()

    async def send(self, request: NotificationRequest) -> SendResult:
        """Send an SMS via Twilio.

        Args:
            request: SMS to send; ``recipient`` in international format

        Returns:
            SendResult: accepted when Twilio answers 201 Created
        """
        if not (
            settings.twilio_account_sid
            and settings.twilio_auth_token
            and settings.twilio_sms_number
        ):
            return SendResult.rejected("Twilio is not configured")

        url = f"{TWILIO_API_BASE}/Accounts/{settings.twilio_account_sid}/Messages.json"
        auth = (settings.twilio_account_sid, settings.twilio_auth_token)
        data = {
            "To": request.recipient,
            "From": settings.twilio_sms_number,
            "Body": request.body,
        }

        try:
            response = await self.http_client.post(url, auth=auth, data=data)
        except httpx.HTTPError as exc:
            return SendResult.rejected(f"Twilio request failed: {exc.__class__.__name__}")

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.status_code != 201:
            return SendResult.rejected(
                payload.get("message") or f"Twilio answered {response.status_code}",
                raw_response=payload,
            )
        return SendResult(accepted=True, provider_message_id=payload.get("sid"), raw_response=payload)
