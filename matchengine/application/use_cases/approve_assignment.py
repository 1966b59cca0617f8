"""ApproveAssignmentUseCase — a provider accepts the work offered to them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from matchengine.application.deadlines import bounded
from matchengine.application.result import Result
from matchengine.application.use_cases.assignment_workflow import AssignmentWorkflow
from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.audit import AuditEntry
from matchengine.domain.entities.notification import NotificationIntent
from matchengine.domain.entities.work import WorkRecord
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.policies import assignment_transitions
from matchengine.domain.policies.notification_rules import approval_intents
from matchengine.domain.value_objects.enums import AssignmentStatus, WorkStatus
from matchengine.domain.value_objects.work_ref import WorkRef

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    work: WorkRecord
    assignment: Assignment
    provider_id: str
    notifications: list[NotificationIntent] = field(default_factory=list)


class ApproveAssignmentUseCase(AssignmentWorkflow):
    async def execute(
        self,
        work_ref: WorkRef,
        provider_id: str,
        *,
        timeout: float | None = None,
        correlation_id: str | None = None,
    ) -> Result[ApprovalResult]:
        """Accept the open assignment for *work_ref* on behalf of *provider_id*.

        Pipeline:
        1. Load the work record and its most recent assignment
        2. Run the approve guard and commit open → accepted
           (an accepted assignment whose hand-over failed earlier is resumed)
        3. Hand the work to the provider (subscription active / job planned)
        4. Audit entry (best-effort)
        5. Return customer, provider and admin notification intents
        """
        cid = correlation_id or "-"
        timeout = self._timeout(timeout)
        logger.info("[%s] Approve %s by provider %s", cid, work_ref, provider_id)

        try:
            result = await self._approve(work_ref, provider_id, timeout, cid)
        except EngineError as e:
            logger.warning("[%s] Approve %s failed: %s (%s)", cid, work_ref, e.kind.value, e.message)
            return Result(error=e)

        logger.info("[%s] %s accepted by provider %s", cid, work_ref, provider_id)
        return Result(value=result)

    async def execute_by_assignment_id(
        self,
        assignment_id: str,
        *,
        timeout: float | None = None,
        correlation_id: str | None = None,
    ) -> Result[ApprovalResult]:
        """Approve through a direct link that names only the assignment."""
        cid = correlation_id or "-"
        bound = self._timeout(timeout)
        try:
            assignment = await bounded(self._assignments.get(assignment_id), bound, "load assignment")
            if assignment is None:
                raise EngineError(
                    ErrorKind.NOT_FOUND, "Assignment not found", {"assignment_id": assignment_id}
                )
            if assignment.status is AssignmentStatus.REJECTED:
                # Rejected links report on their own assignment, not the latest one
                assignment_transitions.approve(assignment, assignment.provider_id, self._clock())
        except EngineError as e:
            logger.warning("[%s] Approve assignment %s failed: %s", cid, assignment_id, e.kind.value)
            return Result(error=e)

        return await self.execute(
            assignment.work_ref,
            assignment.provider_id,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    async def _approve(
        self, work_ref: WorkRef, provider_id: str, timeout: float | None, cid: str
    ) -> ApprovalResult:
        work = await self._load_work(work_ref, timeout)
        now = self._clock()

        try:
            _, before, accepted = await self._transition(
                work_ref,
                lambda a: assignment_transitions.approve(a, provider_id, now),
                timeout,
                cid,
            )
        except EngineError as e:
            if e.kind is not ErrorKind.ALREADY_PROCESSED:
                raise
            work = await self._load_work(work_ref, timeout)
            accepted = await self._unfinished_acceptance(work, provider_id, timeout, e)
            logger.warning(
                "[%s] %s: assignment %s accepted but work not handed over, finishing",
                cid, work_ref, accepted.id,
            )
            return await self._hand_over(work, accepted, accepted, provider_id, now, timeout, cid)

        return await self._hand_over(work, before, accepted, provider_id, now, timeout, cid)

    async def _unfinished_acceptance(
        self,
        work: WorkRecord,
        provider_id: str,
        timeout: float | None,
        error: EngineError,
    ) -> Assignment:
        """The accepted assignment whose hand-over never completed, else re-raise *error*.

        Handing work over is idempotent, so an acceptance committed by an
        earlier attempt that failed afterwards can be finished by a retry.
        """
        if work.status is not WorkStatus.REQUESTED:
            raise error
        history = await bounded(self._assignments.history(work.ref), timeout, "load assignments")
        latest = history[0] if history else None
        if latest is None or latest.status is not AssignmentStatus.ACCEPTED or latest.provider_id != provider_id:
            raise error
        return latest

    async def _hand_over(
        self,
        work: WorkRecord,
        before: Assignment,
        accepted: Assignment,
        provider_id: str,
        now: datetime,
        timeout: float | None,
        cid: str,
    ) -> ApprovalResult:
        repo = self._works.for_ref(work.ref)
        updated_work = await bounded(repo.mark_accepted(work, provider_id), timeout, "update work")

        await self._record_audit(
            AuditEntry(
                module=f"{work.ref.kind.value}_assignment",
                entity_id=work.ref.id,
                action="approved",
                performed_by=provider_id,
                timestamp=now,
                details={
                    "assignment_id": accepted.id,
                    "resumed": before.status is AssignmentStatus.ACCEPTED,
                    "before": {
                        "assignment_status": before.status.value,
                        "work_status": work.status.value,
                        "provider_id": work.provider_id,
                    },
                    "after": {
                        "assignment_status": accepted.status.value,
                        "work_status": updated_work.status.value,
                        "provider_id": provider_id,
                    },
                },
            ),
            timeout,
            cid,
        )

        return ApprovalResult(
            work=updated_work,
            assignment=accepted,
            provider_id=provider_id,
            notifications=approval_intents(updated_work, accepted),
        )
