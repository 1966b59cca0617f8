"""Port interface for provider eligibility (capacity, geography, skill)."""

from abc import ABC, abstractmethod

from matchengine.domain.entities.provider import ProviderMatch
from matchengine.domain.entities.work import WorkRecord


class ProviderDirectory(ABC):
    @abstractmethod
    async def candidates_for(self, work: WorkRecord) -> list[ProviderMatch]:
        """Providers able to take on *work*, in no particular order."""
        ...
