"""Tests for SqlRecordStore on SQLite (aiosqlite)."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from matchengine.adapters.persistence.database import Base
from matchengine.adapters.persistence.repositories import RecordStoreAssignmentRepository
from matchengine.adapters.persistence.sql_store import SqlRecordStore
from matchengine.application.ports.record_store import gte, in_
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.value_objects.enums import AssignmentStatus
from matchengine.domain.value_objects.work_ref import WorkRef


async def _make_store(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'records.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine, SqlRecordStore(async_sessionmaker(engine, expire_on_commit=False))


def _assignment(aid, provider_id, status="open", created_at="2026-03-02T09:00:00+00:00", **ref):
    return {
        "id": aid, "provider_id": provider_id, "status": status,
        "created_at": created_at, "updated_at": created_at, **ref,
    }


@pytest.mark.asyncio
async def test_insert_and_find_providers(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        await store.insert("providers", {"id": "P1", "city": "Utrecht", "active": True, "available_hours": 20.0})
        await store.insert("providers", {"id": "P2", "city": "Utrecht", "active": False, "available_hours": 10.0})
        await store.insert("providers", {"id": "P3", "city": "Utrecht", "active": True, "available_hours": 2.0})

        rows = await store.find("providers", [gte("available_hours", 3)], order_by="id")
        assert [r["id"] for r in rows] == ["P1", "P2"]

        active = await store.find("providers", {"city": "Utrecht", "active": True}, order_by="id")
        assert [r["id"] for r in active] == ["P1", "P3"]

        picked = await store.find("providers", [in_("id", ["P2", "P3"])], order_by="id", descending=True, limit=1)
        assert [r["id"] for r in picked] == ["P3"]
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_conditional_update_and_null_filter(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        await store.insert("assignments", _assignment("A1", "P1", request_id="R1"))
        await store.insert("assignments", _assignment("AJ1", "P1", job_id="J1"))

        patch = {"status": "accepted", "updated_at": "2026-03-02T10:00:00+00:00"}
        assert await store.update("assignments", {"id": "A1", "status": "open"}, patch) == 1
        assert await store.update("assignments", {"id": "A1", "status": "open"}, patch) == 0

        request_only = await store.find("assignments", {"job_id": None})
        assert [r["id"] for r in request_only] == ["A1"]
        assert request_only[0]["status"] == "accepted"
        assert isinstance(request_only[0]["updated_at"], str)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_assignment_repository_on_sql(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        await store.insert(
            "assignments", _assignment("A1", "P1", status="rejected", request_id="R1")
        )
        await store.insert(
            "assignments",
            _assignment("A2", "P2", created_at="2026-03-02T11:00:00+00:00", request_id="R1"),
        )
        repo = RecordStoreAssignmentRepository(store, clock=lambda: None)

        history = await repo.history(WorkRef.request("R1"))

        assert [a.id for a in history] == ["A2", "A1"]
        assert history[0].status is AssignmentStatus.OPEN
        assert history[1].work_ref == WorkRef.request("R1")
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_schema_allows_one_open_assignment_per_work(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        await store.insert("assignments", _assignment("A1", "P1", request_id="R1"))
        with pytest.raises(EngineError) as exc:
            await store.insert("assignments", _assignment("A2", "P2", request_id="R1"))
        assert exc.value.kind is ErrorKind.DEPENDENCY_FAILURE
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_unknown_collection(tmp_path):
    engine, store = await _make_store(tmp_path)
    try:
        with pytest.raises(ValueError):
            await store.find("invoices")
    finally:
        await engine.dispose()
