import httpx
import pytest

from dispatch_desk.config import settings
from dispatch_desk.domain.notification import NotificationRequest
from dispatch_desk.gateways import (
    InMemorySender,
    MessageLogSender,
    SenderType,
    TwilioSMSSender,
    get_sender,
)

from tests.factories import build_booking


def _request() -> NotificationRequest:
    return NotificationRequest(
        recipient="+233201234567",
        booking_id=build_booking().id,
        body="Your parcel tracking ID: PCL-1.",
        triggered_by="admin",
    )


@pytest.fixture
def twilio_configured(monkeypatch):
    monkeypatch.setattr(settings, "twilio_account_sid", "AC123")
    monkeypatch.setattr(settings, "twilio_auth_token", "secret")
    monkeypatch.setattr(settings, "twilio_sms_number", "+15550001111")


def test_get_sender_by_channel() -> None:
    assert isinstance(get_sender(None, "message_log"), MessageLogSender)
    assert isinstance(get_sender(None, "memory"), InMemorySender)
    assert get_sender(None, "memory") is get_sender(None, SenderType.MEMORY)


def test_get_sender_rejects_unknown_channel() -> None:
    with pytest.raises(ValueError):
        get_sender(None, "pigeon")


@pytest.mark.anyio
async def test_twilio_accepts_on_created(twilio_configured) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = request.content.decode()
        return httpx.Response(201, json={"sid": "SM42"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        result = await TwilioSMSSender(http_client).send(_request())

    assert result.accepted
    assert result.provider_message_id == "SM42"
    assert seen["url"].endswith("/Accounts/AC123/Messages.json")
    assert "To=%2B233201234567" in seen["body"]


@pytest.mark.anyio
async def test_twilio_rejection_carries_message(twilio_configured) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Invalid 'To' Phone Number"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        result = await TwilioSMSSender(http_client).send(_request())

    assert not result.accepted
    assert result.reason == "Invalid 'To' Phone Number"


@pytest.mark.anyio
async def test_twilio_unconfigured_is_rejected(monkeypatch) -> None:
    monkeypatch.setattr(settings, "twilio_account_sid", None)

    result = await TwilioSMSSender().send(_request())

    assert not result.accepted
    assert result.reason == "Twilio is not configured"
