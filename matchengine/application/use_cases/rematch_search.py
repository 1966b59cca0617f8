"""RematchSearch — find the next provider for rejected work and offer it."""

from __future__ import annotations

import logging

from matchengine.application.ports.assignment_repo import AssignmentRepository
from matchengine.application.ports.provider_directory import ProviderDirectory
from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.entities.provider import ProviderMatch
from matchengine.domain.entities.work import WorkRecord
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.policies.replacement import select_replacement

logger = logging.getLogger(__name__)


class RematchSearch:
    def __init__(self, directory: ProviderDirectory, assignment_repo: AssignmentRepository):
        self._directory = directory
        self._assignments = assignment_repo

    async def find_replacement(
        self, work: WorkRecord, excluded_provider_ids: frozenset[str]
    ) -> ProviderMatch | None:
        """Best eligible provider outside the exclusion set, or None when exhausted."""
        candidates = await self._directory.candidates_for(work)
        match = select_replacement(candidates, excluded_provider_ids)
        logger.info(
            "Work %s: %d candidate(s), %d excluded → %s",
            work.ref, len(candidates), len(excluded_provider_ids),
            match.id if match else "none",
        )
        return match

    async def rematch(
        self, work: WorkRecord, excluded_provider_ids: frozenset[str]
    ) -> tuple[Assignment, ProviderMatch] | None:
        """Find a replacement and open a new assignment for it.

        Raises:
            EngineError: INVALID_TRANSITION if the work already has an open
                assignment (a concurrent rematch won).
        """
        match = await self.find_replacement(work, excluded_provider_ids)
        if match is None:
            return None

        history = await self._assignments.history(work.ref)
        already_open = [a for a in history if a.is_open()]
        if already_open:
            raise EngineError(
                ErrorKind.INVALID_TRANSITION,
                "Work already has an open assignment",
                {"assignment_id": already_open[0].id},
            )

        assignment = await self._assignments.open(work.ref, match.id)
        logger.info("Work %s offered to provider %s (assignment %s)", work.ref, match.id, assignment.id)
        return assignment, match
