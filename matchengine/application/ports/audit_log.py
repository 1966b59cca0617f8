"""Port interface for the append-only audit trail."""

from abc import ABC, abstractmethod

from matchengine.domain.entities.audit import AuditEntry


class AuditLog(ABC):
    @abstractmethod
    async def append(self, entry: AuditEntry) -> None:
        ...
