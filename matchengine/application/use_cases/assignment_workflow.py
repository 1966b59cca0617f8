"""Shared plumbing for the approve / reject orchestrators."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from matchengine.application.deadlines import bounded
from matchengine.application.ports.assignment_repo import AssignmentRepository
from matchengine.application.ports.audit_log import AuditLog
from matchengine.application.ports.work_repo import WorkGateway
from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.audit import AuditEntry
from matchengine.domain.entities.work import WorkRecord
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.value_objects.work_ref import WorkRef

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignmentWorkflow:
    """Loads work, commits guarded transitions and writes the audit trail.

    A transition is written with a compare-and-set on the status that was
    read. When another writer changed the assignment in between, the
    assignment is reloaded and the guard evaluated again, so a lost race
    ends in ALREADY_PROCESSED / INVALID_TRANSITION rather than a double write.
    """

    def __init__(
        self,
        work_gateway: WorkGateway,
        assignment_repo: AssignmentRepository,
        audit_log: AuditLog,
        *,
        clock: Callable[[], datetime] = utcnow,
        store_timeout: float | None = None,
        transition_retries: int = 3,
    ):
        self._works = work_gateway
        self._assignments = assignment_repo
        self._audit = audit_log
        self._clock = clock
        self._store_timeout = store_timeout
        self._retries = max(transition_retries, 1)

    def _timeout(self, timeout: float | None) -> float | None:
        return timeout if timeout is not None else self._store_timeout

    async def _load_work(self, work_ref: WorkRef, timeout: float | None) -> WorkRecord:
        work = await bounded(self._works.load(work_ref), timeout, "load work")
        if work is None:
            raise EngineError(
                ErrorKind.NOT_FOUND,
                f"{work_ref.kind.value.capitalize()} not found",
                {"work_ref": str(work_ref)},
            )
        return work

    async def _transition(
        self,
        work_ref: WorkRef,
        apply: Callable[[Assignment], Assignment],
        timeout: float | None,
        correlation_id: str,
    ) -> tuple[list[Assignment], Assignment, Assignment]:
        """Apply *apply* to the most recent assignment and persist it.

        Returns the history read for the winning attempt, the assignment as
        it was and as it is now.
        """
        for attempt in range(1, self._retries + 1):
            history = await bounded(self._assignments.history(work_ref), timeout, "load assignments")
            if not history:
                raise EngineError(
                    ErrorKind.NOT_FOUND,
                    "No assignment found for this work",
                    {"work_ref": str(work_ref)},
                )
            current = history[0]
            updated = apply(current)

            committed = await bounded(
                self._assignments.compare_and_set(current, updated), timeout, "update assignment"
            )
            if committed:
                return history, current, updated

            logger.warning(
                "[%s] Assignment %s changed concurrently (attempt %d/%d), reloading",
                correlation_id, current.id, attempt, self._retries,
            )

        raise EngineError(
            ErrorKind.DEPENDENCY_FAILURE,
            "Could not commit the assignment transition",
            {"work_ref": str(work_ref), "attempts": self._retries},
        )

    async def _record_audit(self, entry: AuditEntry, timeout: float | None, correlation_id: str) -> None:
        try:
            await bounded(self._audit.append(entry), timeout, "write audit entry")
        except Exception:
            logger.warning(
                "[%s] Audit entry %s/%s for %s could not be written",
                correlation_id, entry.module, entry.action, entry.entity_id,
                exc_info=True,
            )
