"""Record-store repository implementations."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from matchengine.application.ports.assignment_repo import AssignmentRepository
from matchengine.application.ports.record_store import RecordStore
from matchengine.application.ports.work_repo import SubscriptionRepository, WorkRepository
from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.work import Subscription, WorkRecord
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.value_objects.enums import (
    AssignmentStatus,
    Frequency,
    SubscriptionStatus,
    WorkKind,
    WorkStatus,
)
from matchengine.domain.value_objects.work_ref import WorkRef

ASSIGNMENTS = "assignments"
RECURRING_REQUESTS = "recurring_requests"
SUBSCRIPTIONS = "subscriptions"
JOBS = "jobs"


def new_id() -> str:
    return str(uuid.uuid4())


# ─── Mappers ─────────────────────────────────────────────────────────


def _parse_ts(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _assignment_to_domain(r: dict[str, Any]) -> Assignment:
    return Assignment(
        id=r["id"],
        work_ref=WorkRef.from_record(r),
        provider_id=r["provider_id"],
        status=AssignmentStatus(r["status"]),
        created_at=_parse_ts(r["created_at"]),
        updated_at=_parse_ts(r.get("updated_at") or r["created_at"]),
        rejection_reason=r.get("rejection_reason"),
    )


def _subscription_to_domain(r: dict[str, Any]) -> Subscription:
    return Subscription(
        id=r["id"],
        request_id=r.get("request_id"),
        provider_id=r.get("provider_id"),
        status=SubscriptionStatus(r.get("status") or "pending"),
        hours=r["hours"],
        frequency=Frequency(r["frequency"]),
        minimum_hours=r.get("minimum_hours"),
        price_per_session=r.get("price_per_session"),
        sessions_per_cycle=r.get("sessions_per_cycle"),
        bundle_amount_cents=r.get("bundle_amount_cents"),
        customer_email=r.get("customer_email"),
    )


def _request_to_domain(r: dict[str, Any], subscription: Subscription | None) -> WorkRecord:
    return WorkRecord(
        ref=WorkRef.request(r["id"]),
        status=WorkStatus(r["status"]),
        customer_name=r.get("customer_name"),
        customer_email=r.get("customer_email"),
        city=r.get("city"),
        hours=r.get("hours"),
        provider_id=subscription.provider_id if subscription else None,
        preferred_date=r.get("start_week"),
        subscription=subscription,
    )


def _job_to_domain(r: dict[str, Any]) -> WorkRecord:
    return WorkRecord(
        ref=WorkRef.job(r["id"]),
        status=WorkStatus(r["status"]),
        customer_name=r.get("customer_name"),
        customer_email=r.get("customer_email"),
        city=r.get("city"),
        hours=r.get("hours"),
        provider_id=r.get("provider_id"),
        preferred_date=r.get("preferred_date"),
    )


def _not_found(work_ref: WorkRef) -> EngineError:
    return EngineError(
        ErrorKind.NOT_FOUND,
        f"{work_ref.kind.value.capitalize()} not found",
        {"work_ref": str(work_ref)},
    )


# ─── Repositories ────────────────────────────────────────────────────


class RecordStoreAssignmentRepository(AssignmentRepository):
    def __init__(
        self,
        store: RecordStore,
        *,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime],
    ):
        self._store = store
        self._new_id = id_factory
        self._clock = clock

    async def get(self, assignment_id: str) -> Assignment | None:
        rows = await self._store.find(ASSIGNMENTS, {"id": assignment_id}, limit=1)
        return _assignment_to_domain(rows[0]) if rows else None

    async def history(self, work_ref: WorkRef) -> list[Assignment]:
        rows = await self._store.find(
            ASSIGNMENTS,
            {work_ref.column: work_ref.id},
            order_by="created_at",
            descending=True,
        )
        return [_assignment_to_domain(r) for r in rows]

    async def open(self, work_ref: WorkRef, provider_id: str) -> Assignment:
        now = self._clock().isoformat()
        row = await self._store.insert(
            ASSIGNMENTS,
            {
                "id": self._new_id(),
                work_ref.column: work_ref.id,
                "provider_id": provider_id,
                "status": AssignmentStatus.OPEN.value,
                "created_at": now,
                "updated_at": now,
            },
        )
        return _assignment_to_domain(row)

    async def compare_and_set(self, previous: Assignment, updated: Assignment) -> bool:
        matched = await self._store.update(
            ASSIGNMENTS,
            {"id": previous.id, "status": previous.status.value},
            {
                "status": updated.status.value,
                "rejection_reason": updated.rejection_reason,
                "updated_at": updated.updated_at.isoformat(),
            },
        )
        return matched > 0


class RecurringRequestRepository(WorkRepository):
    """Recurring requests; acceptance activates the linked subscription."""

    kind = WorkKind.REQUEST

    def __init__(self, store: RecordStore):
        self._store = store

    async def _subscription(self, request_id: str) -> Subscription | None:
        rows = await self._store.find(SUBSCRIPTIONS, {"request_id": request_id}, limit=1)
        return _subscription_to_domain(rows[0]) if rows else None

    async def load(self, work_id: str) -> WorkRecord | None:
        rows = await self._store.find(RECURRING_REQUESTS, {"id": work_id}, limit=1)
        if not rows:
            return None
        return _request_to_domain(rows[0], await self._subscription(work_id))

    async def mark_accepted(self, work: WorkRecord, provider_id: str) -> WorkRecord:
        await self._store.update(
            SUBSCRIPTIONS,
            {"request_id": work.ref.id},
            {"status": SubscriptionStatus.ACTIVE.value, "provider_id": provider_id},
        )
        matched = await self._store.update(
            RECURRING_REQUESTS, {"id": work.ref.id}, {"status": WorkStatus.ACCEPTED.value}
        )
        if not matched:
            raise _not_found(work.ref)
        return await self.load(work.ref.id)

    async def mark_needs_manual_assignment(self, work: WorkRecord) -> WorkRecord:
        matched = await self._store.update(
            RECURRING_REQUESTS,
            {"id": work.ref.id},
            {"status": WorkStatus.REJECTED_NEEDS_MANUAL.value},
        )
        if not matched:
            raise _not_found(work.ref)
        return await self.load(work.ref.id)


class JobOrderRepository(WorkRepository):
    """One-time jobs; acceptance plans the job with the provider."""

    kind = WorkKind.JOB

    def __init__(self, store: RecordStore):
        self._store = store

    async def load(self, work_id: str) -> WorkRecord | None:
        rows = await self._store.find(JOBS, {"id": work_id}, limit=1)
        return _job_to_domain(rows[0]) if rows else None

    async def _patch(self, work: WorkRecord, patch: dict[str, Any]) -> WorkRecord:
        matched = await self._store.update(JOBS, {"id": work.ref.id}, patch)
        if not matched:
            raise _not_found(work.ref)
        return await self.load(work.ref.id)

    async def mark_accepted(self, work: WorkRecord, provider_id: str) -> WorkRecord:
        return await self._patch(
            work, {"status": WorkStatus.PLANNED.value, "provider_id": provider_id}
        )

    async def mark_needs_manual_assignment(self, work: WorkRecord) -> WorkRecord:
        return await self._patch(work, {"status": WorkStatus.REJECTED_NEEDS_MANUAL.value})


class RecordStoreSubscriptionRepository(SubscriptionRepository):
    def __init__(self, store: RecordStore, *, clock: Callable[[], datetime]):
        self._store = store
        self._clock = clock

    async def get(self, subscription_id: str) -> Subscription | None:
        rows = await self._store.find(SUBSCRIPTIONS, {"id": subscription_id}, limit=1)
        return _subscription_to_domain(rows[0]) if rows else None

    async def save_pricing(self, subscription: Subscription) -> Subscription:
        matched = await self._store.update(
            SUBSCRIPTIONS,
            {"id": subscription.id},
            {
                "hours": subscription.hours,
                "frequency": subscription.frequency.value,
                "price_per_session": subscription.price_per_session,
                "sessions_per_cycle": subscription.sessions_per_cycle,
                "bundle_amount_cents": subscription.bundle_amount_cents,
                "updated_at": self._clock().isoformat(),
            },
        )
        if not matched:
            raise EngineError(
                ErrorKind.NOT_FOUND, "Subscription not found", {"subscription_id": subscription.id}
            )
        return subscription
