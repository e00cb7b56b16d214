"""Shared fixtures for dispatch desk tests.

- Storage is the in-memory repository; no database is needed.
- HTTP tests go through the local ASGI app with httpx.AsyncClient.
- AnyIO runs async tests (@pytest.mark.anyio) on the asyncio backend.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable

import httpx
import pytest
from httpx import ASGITransport

from dispatch_desk.api.deps import get_booking_repository, get_notification_sender
from dispatch_desk.domain.booking import Booking
from dispatch_desk.gateways import InMemorySender
from dispatch_desk.main import app
from dispatch_desk.repositories import InMemoryBookingRepository
from tests.factories import build_booking


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def repository() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def sender() -> InMemorySender:
    return InMemorySender()


@pytest.fixture
def make_booking(
    repository: InMemoryBookingRepository,
) -> Callable[..., Awaitable[Booking]]:
    """Factory storing a booking in the test repository."""

    async def _make(**kwargs) -> Booking:
        return await repository.add(build_booking(**kwargs))

    return _make


@pytest.fixture
async def client(
    repository: InMemoryBookingRepository,
    sender: InMemorySender,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the app, storage and sender swapped for in-memory ones."""
    app.dependency_overrides[get_booking_repository] = lambda: repository
    app.dependency_overrides[get_notification_sender] = lambda: sender

    transport = ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
