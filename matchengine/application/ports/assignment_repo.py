"""Port interface for assignment persistence."""

from abc import ABC, abstractmethod

from matchengine.domain.entities.assignment import Assignment
from matchengine.domain.value_objects.work_ref import WorkRef


class AssignmentRepository(ABC):
    @abstractmethod
    async def get(self, assignment_id: str) -> Assignment | None:
        ...

    @abstractmethod
    async def history(self, work_ref: WorkRef) -> list[Assignment]:
        """All assignments for the work, most recent first."""
        ...

    @abstractmethod
    async def open(self, work_ref: WorkRef, provider_id: str) -> Assignment:
        ...

    @abstractmethod
    async def compare_and_set(self, previous: Assignment, updated: Assignment) -> bool:
        """Write *updated* only if the stored status still equals ``previous.status``.

        Returns False when another writer got there first.
        """
        ...
