"""Audit log backed by the record store."""

from __future__ import annotations

from collections.abc import Callable

from matchengine.adapters.persistence.repositories import new_id
from matchengine.application.ports.audit_log import AuditLog
from matchengine.application.ports.record_store import RecordStore
from matchengine.domain.entities.audit import AuditEntry

AUDIT_LOGS = "audit_logs"


class RecordStoreAuditLog(AuditLog):
    def __init__(self, store: RecordStore, *, id_factory: Callable[[], str] = new_id):
        self._store = store
        self._new_id = id_factory

    async def append(self, entry: AuditEntry) -> None:
        await self._store.insert(
            AUDIT_LOGS,
            {
                "id": self._new_id(),
                "module": entry.module,
                "entity_id": entry.entity_id,
                "action": entry.action,
                "performed_by": entry.performed_by,
                "details": entry.details,
                "created_at": entry.timestamp.isoformat(),
            },
        )
