"""Assignment entity — the offer of one unit of work to one provider."""

from dataclasses import dataclass
from datetime import datetime

from matchengine.domain.value_objects.enums import AssignmentStatus
from matchengine.domain.value_objects.work_ref import WorkRef


@dataclass(frozen=True)
class Assignment:
    id: str
    work_ref: WorkRef
    provider_id: str
    status: AssignmentStatus
    created_at: datetime
    updated_at: datetime
    rejection_reason: str | None = None

    def is_open(self) -> bool:
        return self.status is AssignmentStatus.OPEN

    def is_offered_to(self, provider_id: str) -> bool:
        return self.provider_id == provider_id
