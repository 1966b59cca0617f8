"""Tests for InMemoryRecordStore."""

import pytest

from matchengine.adapters.persistence.memory_store import InMemoryRecordStore
from matchengine.application.ports.record_store import Op, Predicate, eq, gte, in_


def _store():
    return InMemoryRecordStore(
        {
            "providers": [
                {"id": "P1", "city": "Utrecht", "rating": 4.9, "available_hours": 20.0},
                {"id": "P2", "city": "Utrecht", "rating": None, "available_hours": 4.0},
                {"id": "P3", "city": "Delft", "rating": 4.2, "available_hours": 8.0},
            ]
        }
    )


@pytest.mark.asyncio
async def test_find_with_equality_mapping():
    rows = await _store().find("providers", {"city": "Utrecht"})
    assert [r["id"] for r in rows] == ["P1", "P2"]


@pytest.mark.asyncio
async def test_find_with_predicates():
    store = _store()
    assert [r["id"] for r in await store.find("providers", [gte("available_hours", 8)])] == ["P1", "P3"]
    assert [r["id"] for r in await store.find("providers", [in_("id", ["P2", "P3"])])] == ["P2", "P3"]
    assert [r["id"] for r in await store.find("providers", [Predicate("city", Op.NEQ, "Utrecht")])] == ["P3"]
    assert [r["id"] for r in await store.find("providers", [Predicate("rating", Op.LT, 4.5)])] == ["P3"]


@pytest.mark.asyncio
async def test_find_order_and_limit():
    store = _store()
    rows = await store.find("providers", order_by="available_hours", descending=True, limit=2)
    assert [r["id"] for r in rows] == ["P1", "P3"]


@pytest.mark.asyncio
async def test_descending_ties_return_newest_first():
    store = InMemoryRecordStore()
    await store.insert("assignments", {"id": "A1", "created_at": "2026-03-02T09:00:00+00:00"})
    await store.insert("assignments", {"id": "A2", "created_at": "2026-03-02T09:00:00+00:00"})
    rows = await store.find("assignments", order_by="created_at", descending=True)
    assert [r["id"] for r in rows] == ["A2", "A1"]


@pytest.mark.asyncio
async def test_conditional_update_counts_matches():
    store = _store()
    assert await store.update("providers", {"id": "P1", "city": "Utrecht"}, {"city": "Zeist"}) == 1
    assert await store.update("providers", {"id": "P1", "city": "Utrecht"}, {"city": "Bunnik"}) == 0
    assert (await store.find("providers", {"id": "P1"}))[0]["city"] == "Zeist"


@pytest.mark.asyncio
async def test_returned_records_are_copies():
    store = _store()
    row = (await store.find("providers", {"id": "P1"}))[0]
    row["city"] = "Mutated"
    assert (await store.find("providers", {"id": "P1"}))[0]["city"] == "Utrecht"


@pytest.mark.asyncio
async def test_unknown_collection_is_empty():
    assert await InMemoryRecordStore().find("nothing", [eq("id", 1)]) == []
