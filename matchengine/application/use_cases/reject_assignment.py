"""RejectAssignmentUseCase — a provider declines; look for someone else."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from matchengine.application.deadlines import bounded
from matchengine.application.ports.assignment_repo import AssignmentRepository
from matchengine.application.ports.audit_log import AuditLog
from matchengine.application.ports.work_repo import WorkGateway
from matchengine.application.result import Result
from matchengine.application.use_cases.assignment_workflow import AssignmentWorkflow, utcnow
from matchengine.application.use_cases.rematch_search import RematchSearch
from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.audit import AuditEntry
from matchengine.domain.entities.notification import NotificationIntent
from matchengine.domain.entities.provider import ProviderMatch
from matchengine.domain.entities.work import WorkRecord
from matchengine.domain.errors import EngineError
from matchengine.domain.policies import assignment_transitions
from matchengine.domain.policies.notification_rules import exhausted_intents, rematch_intents
from matchengine.domain.policies.replacement import exclusion_set
from matchengine.domain.value_objects.work_ref import WorkRef

logger = logging.getLogger(__name__)


@dataclass
class RejectionResult:
    work: WorkRecord
    rejected_assignment: Assignment
    new_assignment: Assignment | None
    excluded_provider_ids: frozenset[str]
    new_provider: ProviderMatch | None = None
    notifications: list[NotificationIntent] = field(default_factory=list)

    @property
    def requires_manual_assignment(self) -> bool:
        return self.new_assignment is None


class RejectAssignmentUseCase(AssignmentWorkflow):
    def __init__(
        self,
        work_gateway: WorkGateway,
        assignment_repo: AssignmentRepository,
        audit_log: AuditLog,
        rematch: RematchSearch,
        *,
        clock: Callable[[], datetime] = utcnow,
        store_timeout: float | None = None,
        rematch_timeout: float | None = None,
        transition_retries: int = 3,
    ):
        super().__init__(
            work_gateway,
            assignment_repo,
            audit_log,
            clock=clock,
            store_timeout=store_timeout,
            transition_retries=transition_retries,
        )
        self._rematch = rematch
        self._rematch_timeout = rematch_timeout

    async def execute(
        self,
        work_ref: WorkRef,
        provider_id: str,
        reason: str | None = None,
        *,
        timeout: float | None = None,
        rematch_timeout: float | None = None,
        correlation_id: str | None = None,
    ) -> Result[RejectionResult]:
        """Reject the open assignment for *work_ref* and try to rematch.

        Pipeline:
        1. Load the work record and its assignment history
        2. Run the reject guard and commit open → rejected (with reason)
        3. Exclude every provider who ever rejected this work
        4. Search for a replacement:
           found → open a new assignment, work stays pending
           exhausted (or search failed) → work needs manual assignment
        5. Audit entry (best-effort) and notification intents
        """
        cid = correlation_id or "-"
        timeout = self._timeout(timeout)
        if rematch_timeout is None:
            rematch_timeout = self._rematch_timeout
        logger.info(
            "[%s] Reject %s by provider %s (reason: %s)",
            cid, work_ref, provider_id, reason or "none given",
        )

        try:
            result = await self._reject(work_ref, provider_id, reason, timeout, rematch_timeout, cid)
        except EngineError as e:
            logger.warning("[%s] Reject %s failed: %s (%s)", cid, work_ref, e.kind.value, e.message)
            return Result(error=e)

        return Result(value=result)

    async def _reject(
        self,
        work_ref: WorkRef,
        provider_id: str,
        reason: str | None,
        timeout: float | None,
        rematch_timeout: float | None,
        cid: str,
    ) -> RejectionResult:
        repo = self._works.for_ref(work_ref)
        work = await self._load_work(work_ref, timeout)
        now = self._clock()

        history, _, rejected = await self._transition(
            work_ref,
            lambda a: assignment_transitions.reject(a, provider_id, reason, now),
            timeout,
            cid,
        )

        excluded = exclusion_set(history, provider_id)
        logger.info("[%s] %s: excluding %d provider(s)", cid, work_ref, len(excluded))

        replacement = await self._search(work, excluded, rematch_timeout, timeout, cid)
        if replacement is not None:
            new_assignment, new_provider = replacement
            notifications = rematch_intents(work, rejected, new_assignment)
            logger.info("[%s] %s rematched to provider %s", cid, work_ref, new_assignment.provider_id)
        else:
            new_assignment, new_provider = None, None
            work = await bounded(repo.mark_needs_manual_assignment(work), timeout, "update work")
            notifications = exhausted_intents(work, rejected, excluded)
            logger.warning("[%s] %s: no replacement found, manual assignment required", cid, work_ref)

        await self._record_audit(
            AuditEntry(
                module=f"{work_ref.kind.value}_assignment",
                entity_id=work_ref.id,
                action="rejected",
                performed_by=provider_id,
                timestamp=now,
                details={
                    "rejected_assignment_id": rejected.id,
                    "reason": rejected.rejection_reason,
                    "new_match_found": new_assignment is not None,
                    "new_assignment_id": new_assignment.id if new_assignment else None,
                    "new_provider_id": new_assignment.provider_id if new_assignment else None,
                    "excluded_providers": sorted(excluded),
                },
            ),
            timeout,
            cid,
        )

        return RejectionResult(
            work=work,
            rejected_assignment=rejected,
            new_assignment=new_assignment,
            excluded_provider_ids=excluded,
            new_provider=new_provider,
            notifications=notifications,
        )

    async def _search(
        self,
        work: WorkRecord,
        excluded: frozenset[str],
        rematch_timeout: float | None,
        timeout: float | None,
        cid: str,
    ) -> tuple[Assignment, ProviderMatch | None] | None:
        # The rejection is already committed; a failing search only means "exhausted"
        try:
            return await bounded(self._rematch.rematch(work, excluded), rematch_timeout, "rematch search")
        except Exception:
            logger.exception("[%s] Rematch search for %s failed, treating as exhausted", cid, work.ref)
        return await self._committed_offer(work, timeout, cid)

    async def _committed_offer(
        self, work: WorkRecord, timeout: float | None, cid: str
    ) -> tuple[Assignment, None] | None:
        """An offer the interrupted search had already written, if any."""
        try:
            history = await bounded(self._assignments.history(work.ref), timeout, "load assignments")
        except Exception:
            logger.exception("[%s] Could not re-read assignments for %s", cid, work.ref)
            return None
        offer = next((a for a in history if a.is_open()), None)
        if offer is None:
            return None
        logger.warning(
            "[%s] %s: search was interrupted after offering provider %s (assignment %s)",
            cid, work.ref, offer.provider_id, offer.id,
        )
        return offer, None
