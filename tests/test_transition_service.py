"""Status transitions: validation, rider handling, audit and concurrency."""

import asyncio
from uuid import uuid4

import pytest

from dispatch_desk.core.exceptions import (
    ConflictError,
    InvalidTransition,
    NotFoundError,
    PartialUpdateError,
    RepositoryUnavailable,
    ValidationError,
)
from dispatch_desk.domain.booking import NO_RIDER, RiderAssignment
from dispatch_desk.domain.booking_state import BookingStatus
from dispatch_desk.repositories import InMemoryBookingRepository
from dispatch_desk.services.transition_service import TransitionService, compose_status_note
from tests.factories import build_booking

S = BookingStatus


class FlakyWriteRepository(InMemoryBookingRepository):
    """Fails the first ``failures`` status writes with ``error``."""

    def __init__(self, failures: int, error: Exception) -> None:
        super().__init__()
        self.failures = failures
        self.error = error
        self.write_calls = 0

    async def update_status_and_rider(self, booking_id, **kwargs):
        self.write_calls += 1
        if self.write_calls <= self.failures:
            raise self.error
        return await super().update_status_and_rider(booking_id, **kwargs)


class BrokenHistoryRepository(InMemoryBookingRepository):
    async def append_history(self, entry):
        raise RuntimeError("history table is read-only")


class SlowRepository(InMemoryBookingRepository):
    async def get(self, booking_id):
        await asyncio.sleep(1)
        return await super().get(booking_id)


class SlowFirstHistoryRepository(InMemoryBookingRepository):
    """Holds back the first history write so a later transition overtakes it."""

    def __init__(self) -> None:
        super().__init__()
        self.history_calls = 0

    async def append_history(self, entry):
        self.history_calls += 1
        if self.history_calls == 1:
            await asyncio.sleep(0.05)
        return await super().append_history(entry)


def test_compose_status_note() -> None:
    assert compose_status_note(S.IN_PROGRESS) == "Status changed to In Progress"
    assert (
        compose_status_note(S.CONFIRMED, "Jane Doe")
        == "Status changed to Confirmed and assigned to Jane Doe"
    )


@pytest.mark.anyio
async def test_confirm_with_rider_records_auto_note(repository, make_booking) -> None:
    booking = await make_booking()
    service = TransitionService(repository)

    updated = await service.apply_transition(
        booking.id,
        "confirmed",
        rider=RiderAssignment(name="Jane Doe", phone="0800123456"),
        actor="desk-1",
    )

    assert updated.status == S.CONFIRMED
    assert updated.rider == RiderAssignment(name="Jane Doe", phone="0800123456")
    assert updated.version == booking.version + 1

    history = await repository.list_history(booking.id)
    assert len(history) == 1
    assert history[0].status == S.CONFIRMED
    assert history[0].note == "Status changed to Confirmed and assigned to Jane Doe"
    assert history[0].created_by == "desk-1"
    assert updated.updated_at == history[0].created_at


@pytest.mark.anyio
async def test_history_tracks_every_transition_in_order(repository, make_booking) -> None:
    booking = await make_booking()
    service = TransitionService(repository)
    path = [S.CONFIRMED, S.IN_PROGRESS, S.CANCELLED, S.PENDING, S.CONFIRMED]

    for target in path:
        await service.apply_transition(booking.id, target)

    history = await repository.list_history(booking.id)
    assert [e.status for e in history] == path
    assert [e.created_at for e in history] == sorted(e.created_at for e in history)
    assert len({e.created_at for e in history}) == len(path)
    assert (await repository.get(booking.id)).status == history[-1].status


@pytest.mark.anyio
async def test_invalid_transition_changes_nothing(repository, make_booking) -> None:
    booking = await make_booking(status=S.DELIVERED)
    service = TransitionService(repository)

    with pytest.raises(InvalidTransition):
        await service.apply_transition(booking.id, S.PENDING, rider=RiderAssignment(name="X"))

    stored = await repository.get(booking.id)
    assert stored.status == S.DELIVERED
    assert stored.version == booking.version
    assert await repository.list_history(booking.id) == []


@pytest.mark.anyio
async def test_unknown_status_is_a_validation_error(repository, make_booking) -> None:
    booking = await make_booking()

    with pytest.raises(ValidationError):
        await TransitionService(repository).apply_transition(booking.id, "lost")


@pytest.mark.anyio
async def test_unknown_booking_is_not_found(repository) -> None:
    with pytest.raises(NotFoundError):
        await TransitionService(repository).apply_transition(uuid4(), S.CONFIRMED)


@pytest.mark.anyio
async def test_same_status_updates_rider_and_is_recorded(repository, make_booking) -> None:
    booking = await make_booking(status=S.CONFIRMED, rider=RiderAssignment(name="Old Rider"))
    service = TransitionService(repository)

    updated = await service.apply_transition(
        booking.id, S.CONFIRMED, rider=RiderAssignment(name="New Rider", phone="0800")
    )

    assert updated.status == S.CONFIRMED
    assert updated.rider.name == "New Rider"
    history = await repository.list_history(booking.id)
    assert [e.note for e in history] == ["Status changed to Confirmed and assigned to New Rider"]


@pytest.mark.anyio
async def test_missing_rider_fields_clear_the_assignment(repository, make_booking) -> None:
    booking = await make_booking(status=S.CONFIRMED, rider=RiderAssignment(name="Kwame", phone="0800"))

    updated = await TransitionService(repository).apply_transition(
        booking.id, S.IN_PROGRESS, rider=RiderAssignment(name="  ", phone=None)
    )

    assert updated.rider == NO_RIDER


@pytest.mark.anyio
async def test_explicit_note_is_kept_and_blank_note_composed(repository, make_booking) -> None:
    booking = await make_booking()
    service = TransitionService(repository)

    await service.apply_transition(booking.id, S.CONFIRMED, note="  Customer called  ")
    await service.apply_transition(booking.id, S.IN_PROGRESS, note="   ")

    notes = [e.note for e in await repository.list_history(booking.id)]
    assert notes == ["Customer called", "Status changed to In Progress"]


@pytest.mark.anyio
async def test_default_actor_is_recorded(repository, make_booking) -> None:
    booking = await make_booking()

    await TransitionService(repository).apply_transition(booking.id, S.CONFIRMED)

    history = await repository.list_history(booking.id)
    assert history[0].created_by == "admin"


@pytest.mark.anyio
@pytest.mark.parametrize("reset, expected", [(True, NO_RIDER), (False, RiderAssignment(name="Kwame"))])
async def test_reopen_rider_policy(repository, make_booking, reset, expected) -> None:
    booking = await make_booking(status=S.CANCELLED, rider=RiderAssignment(name="Old"))
    service = TransitionService(repository, reset_rider_on_reopen=reset)

    updated = await service.apply_transition(booking.id, S.PENDING, rider=RiderAssignment(name="Kwame"))

    assert updated.status == S.PENDING
    assert updated.rider == expected


@pytest.mark.anyio
async def test_conflict_is_retried_once() -> None:
    repository = FlakyWriteRepository(failures=1, error=ConflictError("x"))
    booking = await repository.add(build_booking())

    updated = await TransitionService(repository, write_retries=1).apply_transition(
        booking.id, S.CONFIRMED
    )

    assert updated.status == S.CONFIRMED
    assert repository.write_calls == 2
    assert len(await repository.list_history(booking.id)) == 1


@pytest.mark.anyio
async def test_second_conflict_surfaces_as_retryable() -> None:
    repository = FlakyWriteRepository(failures=2, error=ConflictError("x"))
    booking = await repository.add(build_booking())

    with pytest.raises(ConflictError) as exc:
        await TransitionService(repository, write_retries=1).apply_transition(booking.id, S.CONFIRMED)

    assert exc.value.retryable
    assert repository.write_calls == 2
    assert (await repository.get(booking.id)).status == S.PENDING
    assert await repository.list_history(booking.id) == []


@pytest.mark.anyio
async def test_repository_failure_is_retried_once() -> None:
    repository = FlakyWriteRepository(failures=1, error=RepositoryUnavailable("connection reset"))
    booking = await repository.add(build_booking())

    updated = await TransitionService(repository).apply_transition(booking.id, S.CANCELLED)

    assert updated.status == S.CANCELLED
    assert repository.write_calls == 2


@pytest.mark.anyio
async def test_concurrent_exclusive_transitions_one_wins(repository, make_booking) -> None:
    booking = await make_booking(status=S.CONFIRMED)
    service = TransitionService(repository)

    # in_progress then not_accepted is invalid, and vice versa
    results = await asyncio.gather(
        service.apply_transition(booking.id, S.IN_PROGRESS),
        service.apply_transition(booking.id, S.NOT_ACCEPTED),
        return_exceptions=True,
    )

    succeeded = [r for r in results if not isinstance(r, Exception)]
    failed = [r for r in results if isinstance(r, Exception)]
    assert len(succeeded) == 1
    assert len(failed) == 1
    assert isinstance(failed[0], (InvalidTransition, ConflictError))

    history = await repository.list_history(booking.id)
    assert len(history) == 1
    assert (await repository.get(booking.id)).status == succeeded[0].status == history[0].status


@pytest.mark.anyio
async def test_history_failure_is_a_partial_update() -> None:
    repository = BrokenHistoryRepository()
    booking = await repository.add(build_booking())

    with pytest.raises(PartialUpdateError) as exc:
        await TransitionService(repository).apply_transition(booking.id, S.CONFIRMED)

    assert exc.value.status_value == "confirmed"
    assert exc.value.booking_id == str(booking.id)
    assert not exc.value.retryable
    assert (await repository.get(booking.id)).status == S.CONFIRMED


@pytest.mark.anyio
async def test_repository_timeout_is_unavailable() -> None:
    repository = SlowRepository()
    booking = await repository.add(build_booking())

    with pytest.raises(RepositoryUnavailable) as exc:
        await TransitionService(repository).apply_transition(booking.id, S.CONFIRMED, timeout=0.01)

    assert exc.value.status_code == 503


@pytest.mark.anyio
async def test_overlapping_transitions_keep_history_in_write_order() -> None:
    repository = SlowFirstHistoryRepository()
    booking = await repository.add(build_booking())
    service = TransitionService(repository)

    confirming = asyncio.create_task(service.apply_transition(booking.id, S.CONFIRMED))
    await asyncio.sleep(0.01)
    started = await service.apply_transition(booking.id, S.IN_PROGRESS)
    confirmed = await confirming

    history = await repository.list_history(booking.id)
    current = await repository.get(booking.id)
    assert [e.status for e in history] == [S.CONFIRMED, S.IN_PROGRESS]
    assert [e.version for e in history] == [confirmed.version, started.version] == [1, 2]
    assert history[0].created_at < history[1].created_at
    assert history[-1].status == current.status == S.IN_PROGRESS
    assert current.updated_at == history[-1].created_at
