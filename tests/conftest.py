"""Shared fixtures: in-memory storage, a deterministic clock and one user per role."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from janvani.models import ComplaintDraft, DiscussionDraft, Role, User
from janvani.services.complaints import ComplaintStore
from janvani.services.discussions import DiscussionStore
from janvani.services.storage import InMemoryStorageBackend, SnapshotStorage


class FakeClock:
    """Returns a strictly increasing UTC time, one minute per call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(minutes=1)) -> None:
        self.current = start or datetime(2025, 1, 1, 9, 0, tzinfo=UTC)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


class FailingWritesBackend(InMemoryStorageBackend):
    """In-memory backend whose writes raise ``OSError`` once ``fail_writes`` is set."""

    __slots__ = ("fail_writes",)

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        super().set(key, value)


def make_user(user_id: str, role: Role = Role.VOTER, name: str | None = None) -> User:
    return User(
        id=user_id,
        name=name or user_id.upper(),
        email=f"{user_id}@example.org",
        voter_reference=f"V-{user_id}",
        role=role,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> SnapshotStorage:
    return SnapshotStorage.in_memory()


@pytest.fixture
def failing_backend() -> FailingWritesBackend:
    return FailingWritesBackend()


@pytest.fixture
def voter() -> User:
    return make_user("v1", Role.VOTER, name="Asha Voter")


@pytest.fixture
def other_voter() -> User:
    return make_user("u9", Role.VOTER, name="Ravi Neighbour")


@pytest.fixture
def mla() -> User:
    return make_user("m1", Role.MLA, name="MLA Representative")


@pytest.fixture
def district() -> User:
    return make_user("d1", Role.DISTRICT, name="District Officer")


@pytest.fixture
def central() -> User:
    return make_user("c1", Role.CENTRAL, name="Central Desk")


@pytest.fixture
def complaint_store(storage: SnapshotStorage, clock: FakeClock) -> ComplaintStore:
    return ComplaintStore(storage, seed=False, clock=clock)


@pytest.fixture
def discussion_store(storage: SnapshotStorage, clock: FakeClock) -> DiscussionStore:
    return DiscussionStore(storage, seed=False, clock=clock)


@pytest.fixture
def pothole() -> ComplaintDraft:
    return ComplaintDraft(
        title="Pothole on Main St",
        description="A deep pothole outside the market has damaged two scooters this week.",
        category="Infrastructure",
        location="Main St, Ward 4",
    )


@pytest.fixture
def park_proposal() -> DiscussionDraft:
    return DiscussionDraft(
        title="New park proposal for city center",
        content="The empty lot behind the bus stand could become a children's park.",
        category="Parks & Recreation",
    )
