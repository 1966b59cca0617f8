"""Tests for RematchSearch."""

from __future__ import annotations

import pytest

from matchengine.adapters.persistence.repositories import RecordStoreAssignmentRepository
from matchengine.application.ports.provider_directory import ProviderDirectory
from matchengine.application.use_cases.rematch_search import RematchSearch
from matchengine.domain.entities.provider import ProviderMatch
from matchengine.domain.entities.work import WorkRecord
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.value_objects.enums import AssignmentStatus, WorkStatus
from matchengine.domain.value_objects.work_ref import WorkRef


class FakeDirectory(ProviderDirectory):
    def __init__(self, providers):
        self._providers = providers
        self.calls = 0

    async def candidates_for(self, work):
        self.calls += 1
        return list(self._providers)


CANDIDATES = [
    ProviderMatch(id="P1", rating=4.9, active_clients=3),
    ProviderMatch(id="P2", rating=4.7, active_clients=1),
    ProviderMatch(id="P4", rating=4.7, active_clients=0),
]


def _work(ref: WorkRef) -> WorkRecord:
    return WorkRecord(ref=ref, status=WorkStatus.REQUESTED, city="Utrecht", hours=3.0)


@pytest.mark.asyncio
async def test_find_replacement_skips_excluded(store, clock):
    search = RematchSearch(FakeDirectory(CANDIDATES), RecordStoreAssignmentRepository(store, clock=clock))
    match = await search.find_replacement(_work(WorkRef.request("R1")), frozenset({"P1"}))
    # P2 and P4 share the rating; P4 has fewer clients
    assert match.id == "P4"


@pytest.mark.asyncio
async def test_find_replacement_exhausted(store, clock):
    search = RematchSearch(FakeDirectory(CANDIDATES), RecordStoreAssignmentRepository(store, clock=clock))
    assert await search.find_replacement(_work(WorkRef.request("R1")), frozenset({"P1", "P2", "P4"})) is None


@pytest.mark.asyncio
async def test_rematch_opens_assignment(store, clock, id_factory):
    await store.update("assignments", {"id": "AJ1"}, {"status": "rejected"})
    repo = RecordStoreAssignmentRepository(store, id_factory=id_factory, clock=clock)
    search = RematchSearch(FakeDirectory(CANDIDATES), repo)

    assignment, provider = await search.rematch(_work(WorkRef.job("J1")), frozenset({"P1"}))

    assert provider.id == "P4"
    assert assignment.id == "A-new-1"
    assert assignment.status is AssignmentStatus.OPEN
    assert assignment.work_ref == WorkRef.job("J1")
    history = await repo.history(WorkRef.job("J1"))
    assert [a.id for a in history] == ["A-new-1", "AJ1"]


@pytest.mark.asyncio
async def test_rematch_refuses_second_open_assignment(store, clock):
    """AJ1 is still open → a concurrent rematch already won."""
    search = RematchSearch(FakeDirectory(CANDIDATES), RecordStoreAssignmentRepository(store, clock=clock))

    with pytest.raises(EngineError) as exc:
        await search.rematch(_work(WorkRef.job("J1")), frozenset({"P1"}))

    assert exc.value.kind is ErrorKind.INVALID_TRANSITION
    assert len([r for r in store.dump("assignments") if r.get("job_id") == "J1"]) == 1


@pytest.mark.asyncio
async def test_rematch_exhausted_creates_nothing(store, clock):
    search = RematchSearch(FakeDirectory([]), RecordStoreAssignmentRepository(store, clock=clock))
    assert await search.rematch(_work(WorkRef.job("J1")), frozenset({"P1"})) is None
    assert len(store.dump("assignments")) == 2
