"""Assignment endpoints — provider decisions on offered work."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel, Field

from matchengine.adapters.persistence.repositories import RecordStoreAssignmentRepository
from matchengine.application.ports.work_repo import WorkGateway
from matchengine.application.use_cases.approve_assignment import (
    ApprovalResult,
    ApproveAssignmentUseCase,
)
from matchengine.application.use_cases.dispatch_notifications import NotificationDispatcher
from matchengine.application.use_cases.reject_assignment import (
    RejectAssignmentUseCase,
    RejectionResult,
)
from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.work import WorkRecord
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.value_objects.work_ref import WorkRef
from matchengine.infrastructure.api.dependencies import (
    get_approve_uc,
    get_assignment_repo,
    get_correlation_id,
    get_dispatcher,
    get_reject_uc,
    get_work_gateway,
)
from matchengine.infrastructure.api.errors import error_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assignments"])


class DecisionBody(BaseModel):
    provider_id: str = Field(min_length=1)
    reason: str | None = None


# ─── Recurring requests ──────────────────────────────────────────────


@router.post("/requests/{request_id}/approve")
async def approve_request(
    request_id: str,
    body: DecisionBody,
    background_tasks: BackgroundTasks,
    cid: str = Depends(get_correlation_id),
    uc: ApproveAssignmentUseCase = Depends(get_approve_uc),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Provider accepts a recurring request; the subscription becomes active."""
    result = await uc.execute(WorkRef.request(request_id), body.provider_id, correlation_id=cid)
    if not result.ok:
        return error_response(result.error, cid)
    background_tasks.add_task(dispatcher.dispatch, result.value.notifications, cid)
    return _serialize_approval(result.value, cid)


@router.post("/requests/{request_id}/reject")
async def reject_request(
    request_id: str,
    body: DecisionBody,
    background_tasks: BackgroundTasks,
    cid: str = Depends(get_correlation_id),
    uc: RejectAssignmentUseCase = Depends(get_reject_uc),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Provider declines a recurring request; a replacement is searched."""
    result = await uc.execute(
        WorkRef.request(request_id), body.provider_id, body.reason, correlation_id=cid
    )
    if not result.ok:
        return error_response(result.error, cid)
    background_tasks.add_task(dispatcher.dispatch, result.value.notifications, cid)
    return _serialize_rejection(result.value, cid)


# ─── Job orders ──────────────────────────────────────────────────────


@router.post("/jobs/{job_id}/approve")
async def approve_job(
    job_id: str,
    body: DecisionBody,
    background_tasks: BackgroundTasks,
    cid: str = Depends(get_correlation_id),
    uc: ApproveAssignmentUseCase = Depends(get_approve_uc),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Provider accepts a one-time job; the job is planned."""
    result = await uc.execute(WorkRef.job(job_id), body.provider_id, correlation_id=cid)
    if not result.ok:
        return error_response(result.error, cid)
    background_tasks.add_task(dispatcher.dispatch, result.value.notifications, cid)
    return _serialize_approval(result.value, cid)


@router.post("/jobs/{job_id}/reject")
async def reject_job(
    job_id: str,
    body: DecisionBody,
    background_tasks: BackgroundTasks,
    cid: str = Depends(get_correlation_id),
    uc: RejectAssignmentUseCase = Depends(get_reject_uc),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    result = await uc.execute(WorkRef.job(job_id), body.provider_id, body.reason, correlation_id=cid)
    if not result.ok:
        return error_response(result.error, cid)
    background_tasks.add_task(dispatcher.dispatch, result.value.notifications, cid)
    return _serialize_rejection(result.value, cid)


# ─── Assignments ─────────────────────────────────────────────────────


@router.post("/assignments/{assignment_id}/approve")
async def approve_assignment(
    assignment_id: str,
    background_tasks: BackgroundTasks,
    cid: str = Depends(get_correlation_id),
    uc: ApproveAssignmentUseCase = Depends(get_approve_uc),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Approve through the direct link sent to the provider."""
    result = await uc.execute_by_assignment_id(assignment_id, correlation_id=cid)
    if not result.ok:
        return error_response(result.error, cid)
    background_tasks.add_task(dispatcher.dispatch, result.value.notifications, cid)
    return _serialize_approval(result.value, cid)


@router.get("/assignments/{assignment_id}")
async def get_assignment(
    assignment_id: str,
    cid: str = Depends(get_correlation_id),
    assignments: RecordStoreAssignmentRepository = Depends(get_assignment_repo),
    works: WorkGateway = Depends(get_work_gateway),
):
    """Assignment with the work record it belongs to."""
    try:
        assignment = await assignments.get(assignment_id)
        if assignment is None:
            raise EngineError(
                ErrorKind.NOT_FOUND, "Assignment not found", {"assignment_id": assignment_id}
            )
        work = await works.load(assignment.work_ref)
    except EngineError as e:
        return error_response(e, cid)

    data = _serialize_assignment(assignment)
    data["work"] = _serialize_work(work) if work else None
    return data


# ─── Serializers ─────────────────────────────────────────────────────


def _serialize_assignment(a: Assignment) -> dict:
    return {
        "id": a.id,
        "work_ref": {"kind": a.work_ref.kind.value, "id": a.work_ref.id},
        "provider_id": a.provider_id,
        "status": a.status.value,
        "rejection_reason": a.rejection_reason,
        "created_at": a.created_at.isoformat(),
        "updated_at": a.updated_at.isoformat(),
    }


def _serialize_work(w: WorkRecord) -> dict:
    data = {
        "kind": w.ref.kind.value,
        "id": w.ref.id,
        "status": w.status.value,
        "provider_id": w.provider_id,
        **w.summary(),
    }
    if w.subscription:
        s = w.subscription
        data["subscription"] = {
            "id": s.id,
            "status": s.status.value,
            "provider_id": s.provider_id,
            "hours": s.hours,
            "frequency": s.frequency.value,
            "bundle_amount_cents": s.bundle_amount_cents,
        }
    return data


def _serialize_approval(r: ApprovalResult, cid: str) -> dict:
    return {
        "status": "ok",
        "correlation_id": cid,
        "provider_id": r.provider_id,
        "assignment": _serialize_assignment(r.assignment),
        "work": _serialize_work(r.work),
        "notifications": len(r.notifications),
    }


def _serialize_rejection(r: RejectionResult, cid: str) -> dict:
    return {
        "status": "ok",
        "correlation_id": cid,
        "new_match_found": not r.requires_manual_assignment,
        "rejected_assignment": _serialize_assignment(r.rejected_assignment),
        "new_assignment": _serialize_assignment(r.new_assignment) if r.new_assignment else None,
        "excluded_provider_ids": sorted(r.excluded_provider_ids),
        "work": _serialize_work(r.work),
        "notifications": len(r.notifications),
    }
