"""Port interfaces for the parent work records (requests, jobs, subscriptions)."""

from abc import ABC, abstractmethod

from matchengine.domain.entities.work import Subscription, WorkRecord
from matchengine.domain.value_objects.enums import WorkKind
from matchengine.domain.value_objects.work_ref import WorkRef


class WorkRepository(ABC):
    """Loads and patches one variant of work record."""

    kind: WorkKind

    @abstractmethod
    async def load(self, work_id: str) -> WorkRecord | None:
        ...

    @abstractmethod
    async def mark_accepted(self, work: WorkRecord, provider_id: str) -> WorkRecord:
        ...

    @abstractmethod
    async def mark_needs_manual_assignment(self, work: WorkRecord) -> WorkRecord:
        ...


class WorkGateway:
    """Routes a WorkRef to the repository for its variant."""

    def __init__(self, *repositories: WorkRepository):
        self._by_kind = {r.kind: r for r in repositories}

    def for_ref(self, work_ref: WorkRef) -> WorkRepository:
        return self._by_kind[work_ref.kind]

    async def load(self, work_ref: WorkRef) -> WorkRecord | None:
        return await self.for_ref(work_ref).load(work_ref.id)


class SubscriptionRepository(ABC):
    @abstractmethod
    async def get(self, subscription_id: str) -> Subscription | None:
        ...

    @abstractmethod
    async def save_pricing(self, subscription: Subscription) -> Subscription:
        ...
