"""Assignment state machine — open → accepted | rejected.

Both terminal states are final. Guards run in a fixed order: the acting
provider must be the assigned one (FORBIDDEN) before the current status
is looked at at all.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.value_objects.enums import AssignmentStatus


def _check_provider(assignment: Assignment, acting_provider_id: str) -> None:
    if not assignment.is_offered_to(acting_provider_id):
        raise EngineError(
            ErrorKind.FORBIDDEN,
            "This provider is not assigned to this work",
            {
                "assignment_id": assignment.id,
                "acting_provider_id": acting_provider_id,
            },
        )


def approve(assignment: Assignment, acting_provider_id: str, now: datetime) -> Assignment:
    """Return the accepted version of *assignment*.

    Raises:
        EngineError: FORBIDDEN, ALREADY_PROCESSED (already accepted) or
            INVALID_TRANSITION (previously rejected).
    """
    _check_provider(assignment, acting_provider_id)

    if assignment.status is AssignmentStatus.ACCEPTED:
        raise EngineError(
            ErrorKind.ALREADY_PROCESSED,
            "Assignment already accepted",
            {"assignment_id": assignment.id},
        )
    if assignment.status is AssignmentStatus.REJECTED:
        raise EngineError(
            ErrorKind.INVALID_TRANSITION,
            "Cannot approve a previously rejected assignment",
            {"assignment_id": assignment.id},
        )

    return replace(assignment, status=AssignmentStatus.ACCEPTED, updated_at=now)


def reject(
    assignment: Assignment,
    acting_provider_id: str,
    reason: str | None,
    now: datetime,
) -> Assignment:
    """Return the rejected version of *assignment* carrying *reason*.

    Raises:
        EngineError: FORBIDDEN, ALREADY_PROCESSED (already rejected) or
            INVALID_TRANSITION (already accepted).
    """
    _check_provider(assignment, acting_provider_id)

    if assignment.status is AssignmentStatus.REJECTED:
        raise EngineError(
            ErrorKind.ALREADY_PROCESSED,
            "Assignment already rejected",
            {"assignment_id": assignment.id},
        )
    if assignment.status is AssignmentStatus.ACCEPTED:
        raise EngineError(
            ErrorKind.INVALID_TRANSITION,
            "Cannot reject an accepted assignment",
            {"assignment_id": assignment.id},
        )

    return replace(
        assignment,
        status=AssignmentStatus.REJECTED,
        rejection_reason=reason or None,
        updated_at=now,
    )
